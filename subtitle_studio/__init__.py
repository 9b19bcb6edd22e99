"""Subtitle Studio — word timestamps to display-ready subtitles.

WHY: Speech-to-text services (Gemini in this project) return a flat list
of words with start/end times. Those timings are often noisy: overlapping
words, zero-length words, stray newlines. Nothing downstream (video
editors, players, transcript tools) can use them directly.

HOW: A five-stage pipeline — sanitize tokens, segment into lines, compose
one- or two-line blocks, post-process block timing, render an export
format. The stages are pure functions in ``subtitle_studio.core``; the
CLI, HTTP API and Gemini client are thin layers around them.

RULES:
- Every formatter consumes the same SubtitleDocument
- The pipeline is re-run from scratch whenever words or settings change
- Adding an export format = one new formatter module, no core changes
"""

__version__ = "0.1.0"
