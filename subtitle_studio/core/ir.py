"""Intermediate representation dataclasses for the subtitle pipeline.

WHY: Transcription returns a flat word array with no structure. The
pipeline turns it into lines, then blocks, then export text — and every
stage needs a precise, shared vocabulary for what it consumes and
produces. The IR decouples the stages from each other and from the
formatters.

HOW: Four dataclasses, leaves first:
  WordToken        — one transcribed word with start/end time
  LinePhrase       — one display line built from consecutive words
  SubtitleBlock    — one exportable subtitle entry (one or two lines)
  SubtitleDocument — sanitized words + finished blocks, handed to formatters

RULES:
- All times are float seconds
- Tokens, phrases and blocks are frozen — stages return new objects
  (dataclasses.replace) instead of mutating in place
- SubtitleBlock.index is the 1-based position in emission order
- SubtitleBlock.text holds one line or two lines joined by "\\n"
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from subtitle_studio.core.settings import PipelineConfig


@dataclass(frozen=True)
class WordToken:
    """A single transcribed word with its timing.

    RULES:
    - text: the word as displayed; non-empty after sanitization
    - start_s / end_s: seconds, 0 <= start_s <= end_s after sanitization
    """

    text: str
    start_s: float
    end_s: float

    @property
    def duration_s(self) -> float:
        return self.end_s - self.start_s


@dataclass(frozen=True)
class LinePhrase:
    """One display line: consecutive word texts joined by single spaces.

    ``word_count`` is kept so callers can tell the sanctioned overflow case
    (a single word longer than the character budget) from a real overflow.
    """

    text: str
    start_s: float
    end_s: float
    word_count: int = 1


@dataclass(frozen=True)
class SubtitleBlock:
    """One exportable subtitle entry.

    WHY: Subtitle-timed formats number their entries and show one or two
    lines at a time. The block is that unit, with final timing.

    RULES:
    - index: 1-based ordinal, strictly increasing across a block list
    - text: one line, or two lines joined by "\\n"; never empty
    - start_s is never moved by post-processing, only end_s
    """

    index: int
    text: str
    start_s: float
    end_s: float

    @property
    def duration_s(self) -> float:
        return self.end_s - self.start_s

    @property
    def lines(self) -> list[str]:
        return self.text.split("\n")


@dataclass
class SubtitleDocument:
    """Complete pipeline output that every formatter receives.

    WHY: Timed formats (SRT) need the finished blocks, untimed and
    word-level formats (plain text, CSV, JSON) need the word list. Bundling
    both with the settings that produced them lets a formatter pick what it
    needs without re-running anything.

    RULES:
    - words: sanitized tokens, in transcript order
    - blocks: timing-corrected blocks derived from ``words`` and ``config``
    - source_filename: original input name (for output naming), may be ""
    """

    words: list[WordToken]
    blocks: list[SubtitleBlock]
    config: PipelineConfig
    source_filename: str = ""
