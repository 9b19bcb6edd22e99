"""Transcript-record (.prtranscript) formatter.

WHY: Transcript-aware editing tools import word-level records wrapped in
a small versioned envelope with hyphenated field names. Exporting that
shape lets a transcript round-trip into that ecosystem.

HOW: Wraps the sanitized words as ``{"version": "1.0", "records":
[{"start-time", "end-time", "word"}, ...]}``. The output is validated with
jsonschema against the bundled prtranscript schema before returning.

RULES:
- version is always "1.0"
- Record keys: "start-time", "end-time", "word" (same data as the JSON export)
- Validate against schemas/prtranscript.schema.json; raise on failure
- Output suffix: ".prtranscript", media type "application/json"
"""

from __future__ import annotations

import json
from typing import Any

import jsonschema

from subtitle_studio.core.ir import SubtitleDocument, WordToken
from subtitle_studio.formatters.base import BaseFormatter
from subtitle_studio.schemas import load_schema

TRANSCRIPT_VERSION = "1.0"


def _word_to_record(word: WordToken) -> dict[str, Any]:
    return {
        "start-time": word.start_s,
        "end-time": word.end_s,
        "word": word.text,
    }


class PrTranscriptFormatter(BaseFormatter):
    """Formatter that produces versioned transcript records."""

    suffix = ".prtranscript"
    media_type = "application/json"

    @property
    def name(self) -> str:
        return "Transcript Records"

    def render(self, document: SubtitleDocument) -> str:
        """Render the transcript-record wrapper.

        Raises:
            jsonschema.ValidationError: If the generated structure does not
                conform to the bundled transcript-record schema.
        """
        output: dict[str, Any] = {
            "version": TRANSCRIPT_VERSION,
            "records": [_word_to_record(w) for w in document.words],
        }

        jsonschema.validate(instance=output, schema=load_schema("prtranscript"))

        return json.dumps(output, indent=2, ensure_ascii=False)
