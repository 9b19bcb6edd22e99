"""SubRip (.srt) importer: reconstructs word tokens from subtitle blocks.

WHY: Users often already have an SRT file (exported earlier, or from
another tool) and want to re-segment it with different settings or export
it in another format. SRT only carries block-level timing, so word
timings have to be reconstructed.

HOW: Line endings are normalized and the file is split into blocks on
blank lines. In each block the first line containing ``-->`` is the
timing line; everything after it is text. Markup tags are stripped, the
text lines are joined with spaces and split into words, and the block's
duration is divided evenly across those words.

RULES:
- Timestamps accept ``,`` or ``.`` before the milliseconds
- Blocks without a timing line, with unparsable times, or with no text
  are skipped silently
- Returned tokens are raw — they still go through the sanitizer
"""

from __future__ import annotations

import re
from typing import List, Optional

from subtitle_studio.core.ir import WordToken

TIME_RE = re.compile(r"(\d{2}):(\d{2}):(\d{2})[,.](\d{3})")
TAG_RE = re.compile(r"<[^>]*>")
BLOCK_SPLIT_RE = re.compile(r"\n\s*\n")


def parse_srt_time(value: str) -> Optional[float]:
    """Parse ``HH:MM:SS,mmm`` into seconds, or None if it does not match."""
    if not value:
        return None
    match = TIME_RE.search(value)
    if not match:
        return None
    h, m, s, ms = match.groups()
    return int(h) * 3600 + int(m) * 60 + int(s) + int(ms) / 1000


def _parse_block(block: str) -> List[WordToken]:
    lines = block.split("\n")
    if len(lines) < 2:
        return []

    time_idx = next((i for i, line in enumerate(lines) if "-->" in line), None)
    if time_idx is None:
        return []

    start_str, _, end_str = lines[time_idx].partition("-->")
    start = parse_srt_time(start_str)
    end = parse_srt_time(end_str)
    if start is None or end is None:
        return []

    text = TAG_RE.sub("", " ".join(lines[time_idx + 1:])).strip()
    words = text.split()
    if not words:
        return []

    step = (end - start) / len(words)
    return [
        WordToken(text=word, start_s=start + i * step, end_s=start + (i + 1) * step)
        for i, word in enumerate(words)
    ]


def parse_srt(text: str) -> List[WordToken]:
    """Parse SRT file content into evenly-timed word tokens."""
    if not text:
        return []

    normalized = text.replace("\r\n", "\n").replace("\r", "\n").lstrip("\ufeff").strip()
    words: List[WordToken] = []
    for block in BLOCK_SPLIT_RE.split(normalized):
        words.extend(_parse_block(block))
    return words
