"""Gemini request/response helpers and the word-list response schema.

WHY: Gemini's generateContent endpoint wraps the model's answer in a
candidates → content → parts envelope, and the answer itself is JSON
text that may or may not match what the prompt asked for. Parsing both
layers in one place keeps the client methods short and makes the
failure modes explicit.

HOW: WORD_LIST_RESPONSE_SCHEMA is the structured-output schema sent with
every request. extract_response_text() digs the text part out of the
envelope. TranscribedWord.from_dict() validates one returned record.
parse_word_list() ties them together.

RULES:
- Any shape mismatch raises TranscriptionError with a readable message
- Numeric fields must be numbers (bool is rejected)
- The word list may be empty (silent audio)
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from subtitle_studio.core.ir import WordToken

WORD_LIST_RESPONSE_SCHEMA: dict[str, Any] = {
    "type": "ARRAY",
    "items": {
        "type": "OBJECT",
        "properties": {
            "word": {"type": "STRING"},
            "startTime": {"type": "NUMBER"},
            "endTime": {"type": "NUMBER"},
        },
        "required": ["word", "startTime", "endTime"],
    },
}


class TranscriptionError(Exception):
    """Raised when Gemini answers, but not with a usable word list."""


@dataclass
class TranscribedWord:
    """One ``{word, startTime, endTime}`` record returned by the model."""

    word: str
    start_time: float
    end_time: float

    @classmethod
    def from_dict(cls, data: Any) -> TranscribedWord:
        if not isinstance(data, dict):
            raise TranscriptionError("Expected a word object, got {}".format(type(data).__name__))
        for key in ("word", "startTime", "endTime"):
            if key not in data:
                raise TranscriptionError("Word object is missing '{}'".format(key))
        for key in ("startTime", "endTime"):
            value = data[key]
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise TranscriptionError("'{}' must be a number, got {!r}".format(key, value))
        return cls(
            word=str(data["word"]),
            start_time=float(data["startTime"]),
            end_time=float(data["endTime"]),
        )

    def to_token(self) -> WordToken:
        return WordToken(text=self.word, start_s=self.start_time, end_s=self.end_time)


def extract_response_text(payload: dict[str, Any]) -> str:
    """Return the text of the first candidate's first text part.

    Raises:
        TranscriptionError: If the response carries no candidate text
            (e.g. the prompt was blocked).
    """
    candidates = payload.get("candidates") or []
    if not candidates:
        reason = (payload.get("promptFeedback") or {}).get("blockReason")
        if reason:
            raise TranscriptionError("Request was blocked by Gemini: {}".format(reason))
        raise TranscriptionError("Gemini returned no candidates.")

    parts = (candidates[0].get("content") or {}).get("parts") or []
    texts = [p["text"] for p in parts if isinstance(p, dict) and "text" in p]
    if not texts:
        finish = candidates[0].get("finishReason", "unknown")
        raise TranscriptionError(
            "Gemini returned no text (finish reason: {}).".format(finish)
        )
    return "".join(texts)


def parse_word_list(payload: dict[str, Any]) -> list[TranscribedWord]:
    """Parse a generateContent response into TranscribedWord records.

    Raises:
        TranscriptionError: If the text is not a JSON array of word objects.
    """
    text = extract_response_text(payload)
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise TranscriptionError(
            "The AI returned an invalid response format: {}".format(exc)
        ) from exc

    if not isinstance(data, list):
        raise TranscriptionError(
            "Expected a JSON array of words, got {}".format(type(data).__name__)
        )
    return [TranscribedWord.from_dict(item) for item in data]
