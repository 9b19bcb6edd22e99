"""Delimited table (CSV) formatter with one row per word.

WHY: Spreadsheet users and data tools want word timings as a table they
can sort, filter and chart without parsing JSON.

HOW: A ``word,startTime,endTime`` header row, then one row per sanitized
word. The word field is always quoted with embedded quotes doubled
(RFC 4180); times are fixed to three decimals.

RULES:
- Header row is exactly "word,startTime,endTime"
- Word field always quote-wrapped, '"' doubled inside
- Times formatted with 3 decimal places
- LF row separators, no trailing newline
- Output suffix: ".csv", media type "text/csv"
"""

from __future__ import annotations

from typing import List

from subtitle_studio.core.ir import SubtitleDocument, WordToken
from subtitle_studio.formatters.base import BaseFormatter

CSV_HEADER = "word,startTime,endTime"


def _quote(text: str) -> str:
    return '"{}"'.format(text.replace('"', '""'))


def _row(word: WordToken) -> str:
    return "{},{:.3f},{:.3f}".format(_quote(word.text), word.start_s, word.end_s)


class CSVFormatter(BaseFormatter):
    """Formatter that produces a word-level CSV table."""

    suffix = ".csv"
    media_type = "text/csv"

    @property
    def name(self) -> str:
        return "CSV Table"

    def render(self, document: SubtitleDocument) -> str:
        rows: List[str] = [CSV_HEADER]
        rows.extend(_row(word) for word in document.words)
        return "\n".join(rows)
