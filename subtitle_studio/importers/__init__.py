"""Importers: turn previously exported files back into word tokens.

WHY: Besides fresh transcription, the pipeline can start from a file the
user already has — an SRT, a word-list JSON, or a transcript-record file.
Each importer yields raw WordTokens that then go through the same
pipeline as transcribed words.

HOW: srt.py reconstructs evenly-timed words from SRT blocks;
word_records.py validates and converts the two JSON shapes. load_words()
and loads_words() dispatch by file extension.

RULES:
- Importers are pure data transformations — only load_words() reads disk
- Unsupported extensions raise ImportFormatError
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Union

from subtitle_studio.core.ir import WordToken
from subtitle_studio.importers.srt import parse_srt
from subtitle_studio.importers.word_records import (
    ImportFormatError,
    loads_word_records,
    parse_word_records,
)


def loads_words(content: str, filename: str) -> List[WordToken]:
    """Parse file content into words, choosing the importer by extension.

    Raises:
        ImportFormatError: For unsupported extensions or malformed content.
    """
    ext = Path(filename).suffix.lower()
    if ext == ".srt":
        return parse_srt(content)
    if ext in (".json", ".prtranscript"):
        return loads_word_records(content)
    raise ImportFormatError(
        "Unsupported import file type '{}'. Supported: .json, .prtranscript, .srt".format(ext)
    )


def load_words(path: Union[str, Path]) -> List[WordToken]:
    """Read a subtitle or word-list file from disk and parse it."""
    path = Path(path)
    content = path.read_text(encoding="utf-8-sig")
    return loads_words(content, path.name)


__all__ = [
    "ImportFormatError",
    "load_words",
    "loads_words",
    "parse_srt",
    "parse_word_records",
]
