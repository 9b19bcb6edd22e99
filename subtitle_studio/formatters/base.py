"""Abstract base formatter, export format enum, and output container.

WHY: Every export format consumes the same SubtitleDocument but produces
different file content. This base class enforces a consistent interface
so the CLI and the HTTP API can work with any formatter generically.

HOW: ExportFormat is the closed set of format keys. BaseFormatter is an
ABC requiring a ``name``, a ``suffix``, a ``media_type`` and a
``render()`` method; ``format()`` wraps the rendered string in a
FormatterOutput for callers that save or serve files.

RULES:
- Subclasses MUST implement ``name`` and ``render()``
- ``render()`` is a pure function of the document — never mutates it,
  and rendering twice yields identical text
- ``suffix`` is appended to the source stem, e.g. ``".srt"``
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum

from subtitle_studio.core.ir import SubtitleDocument


class ExportFormat(str, Enum):
    """Available export format identifiers.

    RULES:
    - Values match keys in subtitle_studio.formatters.FORMATTERS exactly
    - Values double as the file extension of the exported file
    """

    srt = "srt"
    txt = "txt"
    csv = "csv"
    json = "json"
    prtranscript = "prtranscript"


@dataclass
class FormatterOutput:
    """One output file produced by a formatter.

    Attributes:
        suffix: File suffix appended to the source stem,
                e.g. ``".srt"`` → ``"interview.srt"``.
        content: The file content as a string.
        media_type: MIME type for the content, e.g. ``"text/csv"``.
    """

    suffix: str
    content: str
    media_type: str


class BaseFormatter(ABC):
    """Abstract base for all export formatters.

    To add a new export format:
    1. Create a new file in formatters/
    2. Subclass BaseFormatter, implement ``name`` and ``render()``
    3. Add a member to ExportFormat
    4. Register the class in FORMATTERS in formatters/__init__.py
    """

    suffix: str = ""
    media_type: str = "text/plain"

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable format name, e.g. 'SubRip Subtitles'."""

    @abstractmethod
    def render(self, document: SubtitleDocument) -> str:
        """Render the document into this format's file content."""

    def format(self, document: SubtitleDocument) -> list[FormatterOutput]:
        """Render the document and wrap it as a single output file."""
        return [
            FormatterOutput(
                suffix=self.suffix,
                content=self.render(document),
                media_type=self.media_type,
            )
        ]
