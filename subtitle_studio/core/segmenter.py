"""Phrase segmenter: groups sanitized words into display lines.

WHY: A subtitle line has a fixed display budget. Splitting purely on
pauses lets fast speech overflow the screen; splitting purely on length
ignores natural breath groups. The segmenter combines both: length-based
splitting guarantees the budget, pause-based splitting breaks at silences
even when the line still has room.

HOW: Greedy left-to-right accumulation. The line buffer is seeded with the
first word. For each following word:
  - if the silence since the previous word exceeds pause_threshold,
    close the line;
  - else if buffer + " " + word would exceed max_chars, close the line;
  - otherwise append the word and extend the line's end time.
A closed line ends at the previous word's end; the current word seeds the
next line. The final open buffer is emitted as the last line.

RULES:
- A single word longer than max_chars forms its own line, never split
- pause_threshold=None disables pause-based breaks
- Input must already be sanitized (non-empty text, monotonic times)
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from subtitle_studio.core.ir import LinePhrase, WordToken
from subtitle_studio.core.settings import DEFAULT_PAUSE_THRESHOLD_S


def segment_phrases(
    tokens: Sequence[WordToken],
    max_chars: int,
    pause_threshold: Optional[float] = DEFAULT_PAUSE_THRESHOLD_S,
) -> List[LinePhrase]:
    """Split a sanitized word sequence into LinePhrase objects.

    Args:
        tokens: Sanitized words in transcript order.
        max_chars: Character budget per line.
        pause_threshold: Silence in seconds that forces a break, or None.

    Returns:
        Ordered list of lines; empty if there are no tokens.
    """
    if not tokens:
        return []

    phrases: List[LinePhrase] = []
    first = tokens[0]
    text = first.text
    start = first.start_s
    end = first.end_s
    count = 1

    for prev, token in zip(tokens, tokens[1:]):
        pause = token.start_s - prev.end_s
        candidate = "{} {}".format(text, token.text)

        pause_break = pause_threshold is not None and pause > pause_threshold
        length_break = len(candidate) > max_chars

        if pause_break or length_break:
            phrases.append(LinePhrase(text=text, start_s=start, end_s=end, word_count=count))
            text = token.text
            start = token.start_s
            end = token.end_s
            count = 1
        else:
            text = candidate
            end = token.end_s
            count += 1

    phrases.append(LinePhrase(text=text, start_s=start, end_s=end, word_count=count))
    return phrases
