"""Gemini API client package — async HTTP interface to the transcription model.

WHY: The pipeline needs a word list with timestamps, and transcription is
the one step delegated to an external service. This package keeps all
Gemini communication behind an async client class.

HOW: Uses httpx.AsyncClient for non-blocking HTTP. GeminiClient provides
transcribe_audio() and transliterate_words(); response parsing and
validation live in models.py.

RULES:
- All HTTP calls go through GeminiClient (no direct httpx usage elsewhere)
- Authentication is via the x-goog-api-key header from config
"""

from subtitle_studio.api.client import GeminiAPIError, GeminiClient
from subtitle_studio.api.models import TranscriptionError

__all__ = ["GeminiAPIError", "GeminiClient", "TranscriptionError"]
