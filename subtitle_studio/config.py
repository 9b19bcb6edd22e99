"""Configuration constants, language names, and .env loading.

WHY: Centralizes all environment-dependent values so they are easy to
find, update, and override. Supported audio formats and language names
are plain data structures — not buried in logic — so they can be changed
without touching the client or the CLI.

HOW: python-dotenv loads the .env file on import. Constants are defined
as module-level dicts and strings. The load_api_key() function provides a
clear error when the key is missing.

RULES:
- API key is loaded from .env via python-dotenv, never hardcoded
- GEMINI_API_KEY wins; API_KEY is accepted as a fallback name
- All defaults can be overridden via environment variables
- Pipeline settings (max chars, gap, ...) live in core.settings, not here
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

# Load .env from the project root (where the script is run from)
load_dotenv()

# ---------------------------------------------------------------------------
# Supported audio files: extension → MIME type sent to Gemini
# ---------------------------------------------------------------------------

AUDIO_MIME_TYPES: dict[str, str] = {
    ".mp3": "audio/mpeg",
    ".wav": "audio/wav",
    ".m4a": "audio/mp4",
    ".aac": "audio/aac",
    ".flac": "audio/flac",
    ".ogg": "audio/ogg",
}

SUPPORTED_AUDIO_FORMATS: set[str] = set(AUDIO_MIME_TYPES)
"""Audio file extensions accepted for transcription (lowercase, with dot)."""

SUPPORTED_IMPORT_FORMATS: set[str] = {".srt", ".json", ".prtranscript"}
"""Subtitle/word-list file extensions accepted by the importers."""

# ---------------------------------------------------------------------------
# Languages offered for transcription (BCP-47 → display name)
# ---------------------------------------------------------------------------

LANGUAGE_NAMES: dict[str, str] = {
    "en-US": "English (US)",
    "en-GB": "English (UK)",
    "es-ES": "Spanish",
    "fr-FR": "French",
    "de-DE": "German",
    "it-IT": "Italian",
    "pt-BR": "Portuguese (Brazil)",
    "hi-IN": "Hindi",
    "ja-JP": "Japanese",
    "ko-KR": "Korean",
    "zh-CN": "Chinese (Mandarin)",
    "ar-SA": "Arabic",
    "ru-RU": "Russian",
    "sv-SE": "Swedish",
}


def language_name(code: str) -> str:
    """Map a BCP-47 code to the name used in prompts, falling back to the code."""
    return LANGUAGE_NAMES.get(code, code)


def needs_romanization(code: str) -> bool:
    """True when the language is not English, so a Latin-script pass may help."""
    return not code.lower().startswith("en-")


# ---------------------------------------------------------------------------
# API configuration defaults
# ---------------------------------------------------------------------------

GEMINI_BASE_URL = os.getenv(
    "GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta"
)
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-pro")
DEFAULT_LANGUAGE = os.getenv("DEFAULT_LANGUAGE", "en-US")
DEFAULT_PRESET = os.getenv("DEFAULT_PRESET", "broadcast")


def load_api_key() -> str:
    """Load the Gemini API key from the environment.

    Raises:
        ValueError: If neither GEMINI_API_KEY nor API_KEY is set.
    """
    key = (os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY") or "").strip()
    if not key:
        raise ValueError(
            "Gemini API key not configured. "
            "Add GEMINI_API_KEY to the .env file in the app folder."
        )
    return key
