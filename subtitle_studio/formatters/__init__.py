"""Export formatter registry — one formatter per ExportFormat.

WHY: The CLI and the HTTP API need a single lookup to find the right
formatter by key. A central dict makes it trivial to add new formats:
create the formatter class, import it here, add one line.

HOW: FORMATTERS maps ExportFormat members to formatter *classes* (not
instances). render() is the convenience dispatch used by callers that
just want the text: ``render(document, ExportFormat.srt)``.

RULES:
- Every ExportFormat member has exactly one entry
- Values are BaseFormatter subclasses (not instances)
- Every formatter listed here must be importable without side effects
"""

from __future__ import annotations

from typing import Dict, Type, Union

from subtitle_studio.core.ir import SubtitleDocument
from subtitle_studio.formatters.base import BaseFormatter, ExportFormat, FormatterOutput
from subtitle_studio.formatters.csv_table import CSVFormatter
from subtitle_studio.formatters.plain_text import PlainTextFormatter
from subtitle_studio.formatters.prtranscript import PrTranscriptFormatter
from subtitle_studio.formatters.srt import SRTFormatter
from subtitle_studio.formatters.word_json import WordJSONFormatter

FORMATTERS: Dict[ExportFormat, Type[BaseFormatter]] = {
    ExportFormat.srt: SRTFormatter,
    ExportFormat.txt: PlainTextFormatter,
    ExportFormat.csv: CSVFormatter,
    ExportFormat.json: WordJSONFormatter,
    ExportFormat.prtranscript: PrTranscriptFormatter,
}


def get_formatter(fmt: Union[ExportFormat, str]) -> BaseFormatter:
    """Instantiate the formatter for a format key.

    Raises:
        ValueError: If ``fmt`` is not a known export format.
    """
    try:
        key = ExportFormat(fmt)
    except ValueError:
        available = ", ".join(f.value for f in ExportFormat)
        raise ValueError("Unknown format '{}'. Available formats: {}".format(fmt, available))
    return FORMATTERS[key]()


def render(document: SubtitleDocument, fmt: Union[ExportFormat, str]) -> str:
    """Render ``document`` in the given export format."""
    return get_formatter(fmt).render(document)


__all__ = [
    "FORMATTERS",
    "BaseFormatter",
    "ExportFormat",
    "FormatterOutput",
    "get_formatter",
    "render",
]
