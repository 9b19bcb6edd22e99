"""Timing post-processor: minimum duration and inter-block gap.

WHY: Blocks built straight from word timings are often too short to read
(a two-word block can last 300 ms) and may sit flush against the next
block, which makes players and editors merge or flicker them. Two rules
fix that — a minimum on-screen duration and a minimum gap (in frames) —
and when both cannot hold at once a fixed floor keeps the block visible.

HOW: For each block, in order:
  1. Duration extend — if end - start < min_duration, end = start + min_duration.
  2. Gap clamp — if a next block exists and end > next.start - gap_seconds,
     end = next.start - gap_seconds.
  3. Fallback floor — if end <= start, or the clamp left less than 0.05 s
     on screen, end = start + 0.05.

RULES:
- The step order is fixed: extending after clamping would let the
  duration rule silently break the gap
- Only end_s is ever changed; start times are authoritative
- gap_seconds = gap_frames / frame_rate (30 fps)
- Returns new blocks; the input list is untouched
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import List, Sequence

from subtitle_studio.core.ir import SubtitleBlock
from subtitle_studio.core.settings import FALLBACK_DURATION_S, FRAME_RATE

logger = logging.getLogger(__name__)


def apply_timing(
    blocks: Sequence[SubtitleBlock],
    min_duration: float,
    gap_frames: int,
    frame_rate: int = FRAME_RATE,
) -> List[SubtitleBlock]:
    """Enforce minimum duration and inter-block gap on composed blocks.

    Args:
        blocks: Composed blocks in index order.
        min_duration: Minimum block duration in seconds.
        gap_frames: Minimum gap between blocks, in frames.
        frame_rate: Frames per second used to convert the gap.

    Returns:
        New list of blocks with adjusted end times.
    """
    gap_seconds = gap_frames / frame_rate
    result: List[SubtitleBlock] = []
    fallbacks = 0

    for i, block in enumerate(blocks):
        start = block.start_s
        end = block.end_s

        if block.duration_s < min_duration:
            end = start + min_duration

        clamped = False
        if i + 1 < len(blocks):
            required_end = blocks[i + 1].start_s - gap_seconds
            if end > required_end:
                end = required_end
                clamped = True

        if end <= start or (clamped and end - start < FALLBACK_DURATION_S):
            end = start + FALLBACK_DURATION_S
            fallbacks += 1

        result.append(replace(block, end_s=end))

    if fallbacks:
        logger.debug(
            "Applied %.2fs fallback duration to %d of %d blocks",
            FALLBACK_DURATION_S, fallbacks, len(result),
        )

    return result
