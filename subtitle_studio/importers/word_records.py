"""Word-record importer for the JSON word list and transcript-record files.

WHY: The two JSON exports are designed to round-trip — a user saves a
transcript, edits it elsewhere or keeps it for later, and loads it back
to re-segment. Malformed files should fail with a clear message, not a
KeyError deep in the pipeline.

HOW: parse_word_records() accepts the parsed JSON of either shape:
  1. the word-list array  ``[{"word", "startTime", "endTime"}, ...]``
  2. the transcript wrapper ``{"version", "records": [{"start-time",
     "end-time", "word"}, ...]}`` (older files use the key
     ``"word-level-transcript"`` instead of ``"records"``)
The data is validated with jsonschema against the lenient import schemas
(``word_list``, ``prtranscript_import``), then converted to WordToken
objects.

RULES:
- Raises ImportFormatError (a ValueError) on any shape mismatch
- Null or negative times and blank words are accepted here; the
  sanitizer clamps and drops them, as it does for fresh transcriptions
- Returned tokens are raw — they still go through the sanitizer
"""

from __future__ import annotations

import json
from typing import Any, List

import jsonschema

from subtitle_studio.core.ir import WordToken
from subtitle_studio.core.sanitizer import clean_time
from subtitle_studio.schemas import load_schema

_LEGACY_RECORDS_KEY = "word-level-transcript"


class ImportFormatError(ValueError):
    """Raised when an imported file does not match a supported shape."""


def record_to_word(record: dict[str, Any]) -> WordToken:
    """Convert one ``{word, startTime, endTime}`` record to a WordToken."""
    return WordToken(
        text=str(record.get("word", "")),
        start_s=clean_time(record.get("startTime")),
        end_s=clean_time(record.get("endTime")),
    )


def _validate(instance: Any, schema_name: str, label: str) -> None:
    try:
        jsonschema.validate(instance=instance, schema=load_schema(schema_name))
    except jsonschema.ValidationError as exc:
        raise ImportFormatError(
            "Invalid {} data: {}".format(label, exc.message)
        ) from exc


def parse_word_records(data: Any) -> List[WordToken]:
    """Convert parsed word-list or transcript-record JSON into WordTokens.

    Raises:
        ImportFormatError: If ``data`` matches neither supported shape.
    """
    if isinstance(data, list):
        _validate(data, "word_list", "word list")
        return [record_to_word(r) for r in data]

    if isinstance(data, dict):
        if "records" not in data and _LEGACY_RECORDS_KEY in data:
            data = dict(data)
            data["records"] = data.pop(_LEGACY_RECORDS_KEY)
        _validate(data, "prtranscript_import", "prtranscript")
        return [
            WordToken(
                text=r["word"],
                start_s=clean_time(r["start-time"]),
                end_s=clean_time(r["end-time"]),
            )
            for r in data["records"]
        ]

    raise ImportFormatError(
        "Expected a word list array or a transcript object, got {}".format(
            type(data).__name__
        )
    )


def loads_word_records(raw: str) -> List[WordToken]:
    """Parse JSON text and convert it with parse_word_records().

    Raises:
        ImportFormatError: If the text is not valid JSON or has the wrong shape.
    """
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ImportFormatError("Could not parse JSON: {}".format(exc)) from exc
    return parse_word_records(data)
