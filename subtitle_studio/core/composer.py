"""Block composer: turns display lines into numbered subtitle blocks.

WHY: Depending on the target, a subtitle shows one line or two lines at a
time. The composer applies that line-count policy and assigns the 1-based
sequence numbers that subtitle-timed formats require.

HOW: "single" maps each line to its own block. "double" pairs lines in
order (line 1 + line 2, line 3 + line 4, ...), joining the texts with a
newline and spanning from the first line's start to the second line's
end. An odd trailing line becomes a single-line block.

RULES:
- Block indices start at 1 and follow emission order
- Timing is copied as-is; duration/gap rules are applied later
"""

from __future__ import annotations

from typing import List, Sequence

from subtitle_studio.core.ir import LinePhrase, SubtitleBlock
from subtitle_studio.core.settings import InvalidConfiguration, LINE_MODES


def compose_blocks(phrases: Sequence[LinePhrase], lines: str = "single") -> List[SubtitleBlock]:
    """Group line phrases into SubtitleBlock objects per the line policy.

    Raises:
        InvalidConfiguration: If ``lines`` is not "single" or "double".
    """
    if lines not in LINE_MODES:
        raise InvalidConfiguration(
            "lines must be one of {}, got {!r}".format(", ".join(LINE_MODES), lines)
        )

    step = 2 if lines == "double" else 1
    blocks: List[SubtitleBlock] = []

    for offset in range(0, len(phrases), step):
        group = phrases[offset:offset + step]
        blocks.append(SubtitleBlock(
            index=len(blocks) + 1,
            text="\n".join(p.text for p in group),
            start_s=group[0].start_s,
            end_s=group[-1].end_s,
        ))

    return blocks
