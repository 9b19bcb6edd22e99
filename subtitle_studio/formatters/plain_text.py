"""Plain text transcript formatter.

WHY: The simplest export — the words alone, for review, search and
archival. No timing, no line breaks.

HOW: Joins the sanitized words with single spaces.

RULES:
- Single line, words space-joined, no trailing newline
- Uses document.words, ignores blocks and timing
- Output suffix: ".txt"
"""

from __future__ import annotations

from subtitle_studio.core.ir import SubtitleDocument
from subtitle_studio.formatters.base import BaseFormatter


class PlainTextFormatter(BaseFormatter):
    """Formatter that produces the transcript as one line of text."""

    suffix = ".txt"
    media_type = "text/plain"

    @property
    def name(self) -> str:
        return "Plain Text"

    def render(self, document: SubtitleDocument) -> str:
        return " ".join(word.text for word in document.words)
