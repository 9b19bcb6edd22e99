"""Timestamp sanitizer: repairs a raw word sequence before segmentation.

WHY: Word timings from a language model are not guaranteed to be
consistent. Words overlap, arrive with end < start, carry NaN or negative
values, contain stray newlines, or are blank. Segmentation and timing
post-processing assume a clean, monotonic sequence — so every repair
happens here, once.

HOW: One left-to-right pass. For each token:
  1. Strip newline characters and surrounding whitespace; drop it if empty.
  2. Clamp malformed times (NaN, inf, negative, non-numeric) to 0.
  3. Treat an inverted pair (end < start) as zero duration.
  4. Shift start forward to the previous kept token's end on overlap.
  5. Extend end so the word lasts at least min_word_duration.

RULES:
- Never reorders tokens, never raises
- Dropped tokens do not influence the timing of later tokens
- Output is idempotent: sanitizing twice gives the same result
"""

from __future__ import annotations

import logging
import math
from dataclasses import replace
from typing import Any, Iterable, List, Optional

from subtitle_studio.core.ir import WordToken
from subtitle_studio.core.settings import MIN_WORD_DURATION_S

logger = logging.getLogger(__name__)


def clean_time(value: Any) -> float:
    """Coerce a timing value to a finite, non-negative float (else 0.0)."""
    if isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(number) or number < 0:
        return 0.0
    return number


def clean_text(text: Any) -> str:
    if text is None:
        return ""
    return str(text).replace("\r", "").replace("\n", "").strip()


def sanitize_tokens(
    tokens: Iterable[WordToken],
    min_word_duration: float = MIN_WORD_DURATION_S,
) -> List[WordToken]:
    """Return a monotonic, non-overlapping copy of ``tokens``.

    Args:
        tokens: Raw word tokens, in transcript order.
        min_word_duration: Floor for each word's duration, in seconds.

    Returns:
        New list of WordToken; blank tokens removed, timings repaired.
    """
    result: List[WordToken] = []
    prev_end: Optional[float] = None
    dropped = 0
    shifted = 0
    extended = 0

    for token in tokens:
        text = clean_text(token.text)
        if not text:
            dropped += 1
            continue

        start = clean_time(token.start_s)
        end = clean_time(token.end_s)
        if end < start:
            end = start

        if prev_end is not None and start < prev_end:
            start = prev_end
            if end < start:
                end = start
            shifted += 1

        word = WordToken(text=text, start_s=start, end_s=end)
        if word.duration_s < min_word_duration:
            word = replace(word, end_s=start + min_word_duration)
            extended += 1

        result.append(word)
        prev_end = word.end_s

    if dropped or shifted or extended:
        logger.debug(
            "Sanitized %d tokens: %d dropped, %d shifted, %d extended",
            len(result) + dropped, dropped, shifted, extended,
        )

    return result
