"""Tests for the Gemini client and response parsing.

WHY: Transcription is the only network call in the system. These tests
pin down the request shape (endpoint, auth header, inline audio, schema)
and every failure mode of the response without touching the network.

HOW: httpx.MockTransport stands in for the Gemini API. Async client
methods are driven with asyncio.run() so the tests stay plain pytest.
"""

import asyncio
import base64
import json

import httpx
import pytest

from subtitle_studio.api.client import GeminiAPIError, GeminiClient
from subtitle_studio.api.models import (
    WORD_LIST_RESPONSE_SCHEMA,
    TranscribedWord,
    TranscriptionError,
    extract_response_text,
    parse_word_list,
)
from subtitle_studio.core.ir import WordToken


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _gemini_payload(words) -> dict:
    """Wrap a word list the way generateContent returns it."""
    return {
        "candidates": [{
            "content": {"parts": [{"text": json.dumps(words)}]},
            "finishReason": "STOP",
        }],
    }


def _mock_transport(handler, calls=None):
    def _handle(request: httpx.Request) -> httpx.Response:
        if calls is not None:
            calls.append(request)
        return handler(request)
    return httpx.MockTransport(_handle)


def _run(coro):
    return asyncio.run(coro)


# ---------------------------------------------------------------------------
# Response parsing
# ---------------------------------------------------------------------------


class TestResponseParsing:

    def test_parse_word_list(self):
        payload = _gemini_payload([{"word": "hi", "startTime": 0, "endTime": 0.5}])
        words = parse_word_list(payload)
        assert words == [TranscribedWord("hi", 0.0, 0.5)]
        assert words[0].to_token() == WordToken("hi", 0.0, 0.5)

    def test_empty_list_allowed(self):
        assert parse_word_list(_gemini_payload([])) == []

    def test_blocked_prompt(self):
        with pytest.raises(TranscriptionError, match="SAFETY"):
            extract_response_text({"promptFeedback": {"blockReason": "SAFETY"}})

    def test_no_candidates(self):
        with pytest.raises(TranscriptionError, match="no candidates"):
            extract_response_text({})

    def test_candidate_without_text(self):
        payload = {"candidates": [{"content": {"parts": []}, "finishReason": "MAX_TOKENS"}]}
        with pytest.raises(TranscriptionError, match="MAX_TOKENS"):
            extract_response_text(payload)

    def test_invalid_json_text(self):
        payload = {"candidates": [{"content": {"parts": [{"text": "Sure! Here:"}]}}]}
        with pytest.raises(TranscriptionError, match="invalid response format"):
            parse_word_list(payload)

    def test_not_an_array(self):
        payload = {"candidates": [{"content": {"parts": [{"text": "{\"word\": \"x\"}"}]}}]}
        with pytest.raises(TranscriptionError, match="JSON array"):
            parse_word_list(payload)

    @pytest.mark.parametrize("record", [
        {"startTime": 0, "endTime": 1},
        {"word": "x", "startTime": "0", "endTime": 1},
        {"word": "x", "startTime": 0, "endTime": True},
        "x",
    ])
    def test_bad_records(self, record):
        with pytest.raises(TranscriptionError):
            TranscribedWord.from_dict(record)


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------


class TestTranscribeAudio:

    def test_request_shape(self, tmp_path):
        audio = tmp_path / "clip.mp3"
        audio.write_bytes(b"ID3 fake audio")
        calls = []
        transport = _mock_transport(
            lambda req: httpx.Response(200, json=_gemini_payload([
                {"word": "Hello", "startTime": 0.1, "endTime": 0.4},
                {"word": "world", "startTime": 0.5, "endTime": 0.9},
            ])),
            calls,
        )

        async def go():
            async with GeminiClient(api_key="k-123", model="test-model", transport=transport) as client:
                return await client.transcribe_audio(audio, "sv-SE")

        words = _run(go())
        assert words == [WordToken("Hello", 0.1, 0.4), WordToken("world", 0.5, 0.9)]

        request = calls[0]
        assert request.method == "POST"
        assert request.url.path.endswith("/models/test-model:generateContent")
        assert request.headers["x-goog-api-key"] == "k-123"

        body = json.loads(request.content)
        parts = body["contents"][0]["parts"]
        assert parts[0]["inline_data"]["mime_type"] == "audio/mpeg"
        assert base64.b64decode(parts[0]["inline_data"]["data"]) == b"ID3 fake audio"
        assert "Swedish" in parts[1]["text"]
        assert body["generationConfig"]["responseSchema"] == WORD_LIST_RESPONSE_SCHEMA
        assert body["generationConfig"]["responseMimeType"] == "application/json"

    def test_status_callback(self, tmp_path):
        audio = tmp_path / "clip.wav"
        audio.write_bytes(b"RIFF")
        transport = _mock_transport(lambda req: httpx.Response(200, json=_gemini_payload([])))
        messages = []

        async def go():
            async with GeminiClient(api_key="k", transport=transport) as client:
                return await client.transcribe_audio(audio, "en-US", on_status=messages.append)

        assert _run(go()) == []
        assert any("Transcribing" in m for m in messages)

    def test_unsupported_extension(self, tmp_path):
        video = tmp_path / "clip.mov"
        video.write_bytes(b"")
        transport = _mock_transport(lambda req: httpx.Response(500))

        async def go():
            async with GeminiClient(api_key="k", transport=transport) as client:
                await client.transcribe_audio(video, "en-US")

        with pytest.raises(ValueError, match="Unsupported audio file type"):
            _run(go())

    def test_http_error(self, tmp_path):
        audio = tmp_path / "clip.mp3"
        audio.write_bytes(b"x")
        transport = _mock_transport(
            lambda req: httpx.Response(403, json={"error": {"message": "API key not valid"}})
        )

        async def go():
            async with GeminiClient(api_key="bad", transport=transport) as client:
                await client.transcribe_audio(audio, "en-US")

        with pytest.raises(GeminiAPIError) as exc_info:
            _run(go())
        assert exc_info.value.status_code == 403
        assert exc_info.value.message == "API key not valid"

    def test_http_error_plain_body(self, tmp_path):
        audio = tmp_path / "clip.mp3"
        audio.write_bytes(b"x")
        transport = _mock_transport(lambda req: httpx.Response(502, text="Bad Gateway"))

        async def go():
            async with GeminiClient(api_key="k", transport=transport) as client:
                await client.transcribe_audio(audio, "en-US")

        with pytest.raises(GeminiAPIError, match="Bad Gateway"):
            _run(go())

    def test_requires_context_manager(self, tmp_path):
        audio = tmp_path / "clip.mp3"
        audio.write_bytes(b"x")
        client = GeminiClient(api_key="k")
        with pytest.raises(RuntimeError, match="async context manager"):
            _run(client.transcribe_audio(audio, "en-US"))

    def test_missing_api_key(self, monkeypatch):
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        monkeypatch.delenv("API_KEY", raising=False)
        with pytest.raises(ValueError, match="API key not configured"):
            GeminiClient()


class TestTransliterate:

    def test_keeps_original_timings(self):
        words = [WordToken("こんにちは", 0.0, 0.8), WordToken("世界", 0.9, 1.4)]
        calls = []
        transport = _mock_transport(
            lambda req: httpx.Response(200, json=_gemini_payload([
                {"word": "konnichiwa", "startTime": 9, "endTime": 9},
                {"word": "sekai", "startTime": 9, "endTime": 9},
            ])),
            calls,
        )

        async def go():
            async with GeminiClient(api_key="k", transport=transport) as client:
                return await client.transliterate_words(words)

        result = _run(go())
        assert result == [WordToken("konnichiwa", 0.0, 0.8), WordToken("sekai", 0.9, 1.4)]
        prompt = json.loads(calls[0].content)["contents"][0]["parts"][0]["text"]
        assert "こんにちは" in prompt

    def test_word_count_mismatch(self):
        words = [WordToken("a", 0, 1), WordToken("b", 1, 2)]
        transport = _mock_transport(
            lambda req: httpx.Response(200, json=_gemini_payload([
                {"word": "ab", "startTime": 0, "endTime": 2},
            ]))
        )

        async def go():
            async with GeminiClient(api_key="k", transport=transport) as client:
                return await client.transliterate_words(words)

        with pytest.raises(TranscriptionError, match="1 words for 2 input words"):
            _run(go())

    def test_empty_input_skips_request(self):
        transport = _mock_transport(lambda req: httpx.Response(500))

        async def go():
            async with GeminiClient(api_key="k", transport=transport) as client:
                return await client.transliterate_words([])

        assert _run(go()) == []
