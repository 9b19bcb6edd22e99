"""SubRip (.srt) subtitle formatter.

WHY: SRT is the lingua franca of subtitle-timed text — every player and
video editor imports it. It is the only export that uses the finished
blocks (and therefore the full segmentation/timing pipeline).

HOW: Each block becomes ``index``, ``start --> end`` and its text (one or
two lines). Blocks are separated by one blank line. Timestamps use
``HH:MM:SS,mmm`` with a comma before the milliseconds.

RULES:
- Sequence numbers come from SubtitleBlock.index (1-based)
- Negative or NaN times are clamped to zero before formatting
- Milliseconds are rounded, not truncated (0.9 s → 00:00:00,900)
- LF line endings; file ends with a single newline
- Media type: "application/x-subrip"
"""

from __future__ import annotations

import math
from typing import List

from subtitle_studio.core.ir import SubtitleDocument
from subtitle_studio.formatters.base import BaseFormatter


def seconds_to_srt_time(seconds: float) -> str:
    """Convert seconds to SRT timestamp format: HH:MM:SS,mmm"""
    if seconds is None or not math.isfinite(seconds) or seconds < 0:
        seconds = 0.0
    total_ms = int(round(seconds * 1000))
    hours, rem = divmod(total_ms, 3_600_000)
    minutes, rem = divmod(rem, 60_000)
    secs, millis = divmod(rem, 1000)
    return "{:02d}:{:02d}:{:02d},{:03d}".format(hours, minutes, secs, millis)


class SRTFormatter(BaseFormatter):
    """Formatter that produces a SubRip subtitle file from the blocks."""

    suffix = ".srt"
    media_type = "application/x-subrip"

    @property
    def name(self) -> str:
        return "SubRip Subtitles"

    def render(self, document: SubtitleDocument) -> str:
        entries: List[str] = []
        for block in document.blocks:
            entries.append("{}\n{} --> {}\n{}\n".format(
                block.index,
                seconds_to_srt_time(block.start_s),
                seconds_to_srt_time(block.end_s),
                block.text,
            ))
        return "\n".join(entries)
