"""Structured word-list (JSON) formatter.

WHY: The word list is the pipeline's input contract. Exporting it as-is
lets users save an edited transcript and load it back later — re-running
the pipeline with the same settings reproduces the same blocks.

HOW: Serializes each sanitized word as ``{"word", "startTime",
"endTime"}`` in transcript order, pretty-printed with two-space indent.

RULES:
- Field names and order: word, startTime, endTime
- UTF-8 text, non-ASCII kept as-is (ensure_ascii=False)
- Output suffix: ".json", media type "application/json"
"""

from __future__ import annotations

import json
from typing import Any

from subtitle_studio.core.ir import SubtitleDocument, WordToken
from subtitle_studio.formatters.base import BaseFormatter


def word_to_record(word: WordToken) -> dict[str, Any]:
    return {
        "word": word.text,
        "startTime": word.start_s,
        "endTime": word.end_s,
    }


class WordJSONFormatter(BaseFormatter):
    """Formatter that produces the word list as a JSON array."""

    suffix = ".json"
    media_type = "application/json"

    @property
    def name(self) -> str:
        return "Word List JSON"

    def render(self, document: SubtitleDocument) -> str:
        records = [word_to_record(w) for w in document.words]
        return json.dumps(records, indent=2, ensure_ascii=False)
