"""Async HTTP client for Gemini transcription and transliteration.

WHY: The pipeline starts from a word list with timestamps, and that list
comes from a single external call: Gemini transcribes the audio and
returns ``{word, startTime, endTime}`` objects. A second call can
romanize non-Latin transcripts while keeping the timings. This module
hides the HTTP and envelope details behind one client class so the CLI,
the HTTP API and tests don't need to know them.

HOW: Uses httpx.AsyncClient for non-blocking HTTP. GeminiClient is an
async context manager — enter it to get an authenticated client, exit to
close the connection pool. Requests go to
``models/{model}:generateContent`` with a structured-output schema so
the model answers with a bare JSON array.

RULES:
- Always use the async context manager (async with GeminiClient() as client:)
- Audio is sent inline as base64; the MIME type comes from config.AUDIO_MIME_TYPES
- Non-2xx responses raise GeminiAPIError; unusable answers raise TranscriptionError
- Transliteration must return exactly one word per input word; timings are kept
- Status callback (on_status) is optional; when provided, called with status strings
"""

from __future__ import annotations

import base64
import json
import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any

import httpx

from subtitle_studio.api.models import (
    WORD_LIST_RESPONSE_SCHEMA,
    TranscriptionError,
    parse_word_list,
)
from subtitle_studio.config import (
    AUDIO_MIME_TYPES,
    GEMINI_BASE_URL,
    GEMINI_MODEL,
    language_name,
    load_api_key,
)
from subtitle_studio.core.ir import WordToken

logger = logging.getLogger(__name__)

_TRANSCRIBE_PROMPT = """You are an expert audio transcription service. Transcribe the provided audio file.
The language is {language}.
Your task is to provide a word-for-word transcript with precise start and end timestamps for each word.
The output MUST be a valid JSON array of objects. Each object in the array should represent a single word and have three properties:
- "word" (the transcribed word as a string)
- "startTime" (the start time of the word in seconds, as a floating-point number)
- "endTime" (the end time of the word in seconds, as a floating-point number).
Your entire response must be ONLY the raw JSON array. Do not include any introductory text, explanations, or code block formatting."""

_TRANSLITERATE_PROMPT = """You are an expert transliteration service.
Convert every word in the JSON array below into Latin script (romanization), keeping the pronunciation.
Return a JSON array with exactly the same number of objects, in the same order, with the same "startTime" and "endTime" values. Only the "word" value changes.
Your entire response must be ONLY the raw JSON array.

{words}"""


class GeminiAPIError(Exception):
    """Raised when the Gemini API returns an error response.

    RULES:
    - Always include status_code and message
    - message is the API's error message when present, else the body text
    """

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(f"Gemini API error {status_code}: {message}")


def _error_message(resp: httpx.Response) -> str:
    try:
        return resp.json()["error"]["message"]
    except (ValueError, KeyError, TypeError):
        return resp.text


class GeminiClient:
    """Async client for Gemini word-level transcription.

    HOW: Wraps httpx.AsyncClient with the ``x-goog-api-key`` header.
    ``transport`` is passed through to httpx, which lets tests plug in an
    ``httpx.MockTransport``.

    RULES:
    - Use as: async with GeminiClient() as client: ...
    - api_key defaults to load_api_key() from .env
    - base_url / model default to GEMINI_BASE_URL / GEMINI_MODEL from config
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        model: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key or load_api_key()
        self._base_url = (base_url or GEMINI_BASE_URL).rstrip("/")
        self._model = model or GEMINI_MODEL
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> GeminiClient:
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers={"x-goog-api-key": self._api_key},
            timeout=httpx.Timeout(600.0, connect=30.0),
            transport=self._transport,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        if self._client:
            await self._client.aclose()
            self._client = None

    def _ensure_client(self) -> httpx.AsyncClient:
        """Return the active httpx client, raising if not in context manager."""
        if self._client is None:
            raise RuntimeError(
                "GeminiClient must be used as an async context manager: "
                "async with GeminiClient() as client: ..."
            )
        return self._client

    async def _generate(self, parts: list[dict[str, Any]]) -> dict[str, Any]:
        client = self._ensure_client()
        body = {
            "contents": [{"parts": parts}],
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": WORD_LIST_RESPONSE_SCHEMA,
            },
        }
        resp = await client.post(f"/models/{self._model}:generateContent", json=body)
        if resp.status_code != 200:
            raise GeminiAPIError(resp.status_code, _error_message(resp))
        return resp.json()

    # ------------------------------------------------------------------
    # Transcription
    # ------------------------------------------------------------------

    async def transcribe_audio(
        self,
        file_path: Path,
        language: str,
        on_status: Callable[[str], None] | None = None,
    ) -> list[WordToken]:
        """Transcribe an audio file into timestamped word tokens.

        Args:
            file_path: Path to the audio file (see config.AUDIO_MIME_TYPES).
            language: BCP-47 language code, e.g. "en-US".
            on_status: Optional callback for status updates.

        Returns:
            Raw (unsanitized) word tokens in transcript order.

        Raises:
            ValueError: If the file extension is not a supported audio type.
            GeminiAPIError: On a non-2xx response.
            TranscriptionError: If the answer is not a valid word list.
        """
        file_path = Path(file_path)
        mime_type = AUDIO_MIME_TYPES.get(file_path.suffix.lower())
        if mime_type is None:
            raise ValueError(
                "Unsupported audio file type '{}'. Supported formats: {}".format(
                    file_path.suffix, ", ".join(sorted(AUDIO_MIME_TYPES))
                )
            )

        if on_status:
            on_status("Uploading {} ({})...".format(file_path.name, mime_type))
        audio_b64 = base64.b64encode(file_path.read_bytes()).decode("ascii")

        parts = [
            {"inline_data": {"mime_type": mime_type, "data": audio_b64}},
            {"text": _TRANSCRIBE_PROMPT.format(language=language_name(language))},
        ]

        if on_status:
            on_status("Transcribing with {}...".format(self._model))
        payload = await self._generate(parts)

        try:
            records = parse_word_list(payload)
        except TranscriptionError:
            logger.error("Failed to parse Gemini transcription response: %s", payload)
            raise

        words = [r.to_token() for r in records]
        if on_status:
            on_status("  Received {} words".format(len(words)))
        return words

    # ------------------------------------------------------------------
    # Transliteration
    # ------------------------------------------------------------------

    async def transliterate_words(
        self,
        words: list[WordToken],
        on_status: Callable[[str], None] | None = None,
    ) -> list[WordToken]:
        """Romanize word texts while keeping their original timings.

        Raises:
            GeminiAPIError: On a non-2xx response.
            TranscriptionError: If the answer is invalid or has a different
                number of words than the input.
        """
        if not words:
            return []

        if on_status:
            on_status("Romanizing {} words...".format(len(words)))

        records = [
            {"word": w.text, "startTime": w.start_s, "endTime": w.end_s}
            for w in words
        ]
        prompt = _TRANSLITERATE_PROMPT.format(
            words=json.dumps(records, ensure_ascii=False)
        )
        payload = await self._generate([{"text": prompt}])
        result = parse_word_list(payload)

        if len(result) != len(words):
            raise TranscriptionError(
                "Transliteration returned {} words for {} input words.".format(
                    len(result), len(words)
                )
            )

        return [
            WordToken(text=r.word, start_s=w.start_s, end_s=w.end_s)
            for w, r in zip(words, result)
        ]
