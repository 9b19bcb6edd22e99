"""End-to-end integration test with the real Gemini API.

WHY: Unit tests verify individual components against a mocked API, but
only a real call confirms the prompt and response schema still produce a
usable word list: transcribe audio → run the pipeline → render every
export format.

HOW: Uses the real Gemini API with a test audio file from test-assets/.
Skipped automatically if GEMINI_API_KEY is not set in the environment.

RULES:
- Marked with pytest.mark.skipif when no API key or audio is available
- Validates the transcript-record export against the bundled schema
- Validates the SRT output structure
"""

import asyncio
import json
import os
import re
from pathlib import Path

import pytest

# Check for API key before importing modules that trigger dotenv
_HAS_API_KEY = bool(os.getenv("GEMINI_API_KEY", "").strip())

_TEST_ASSETS = Path(__file__).resolve().parent.parent / "test-assets"
_TEST_AUDIO = _TEST_ASSETS / "sample_en.mp3"

_SRT_TIMING_RE = re.compile(r"^\d{2}:\d{2}:\d{2},\d{3} --> \d{2}:\d{2}:\d{2},\d{3}$")


@pytest.mark.skipif(
    not _HAS_API_KEY,
    reason="GEMINI_API_KEY not set in environment — skipping real API test",
)
@pytest.mark.skipif(
    not _TEST_AUDIO.is_file(),
    reason="No test audio file found in test-assets/",
)
class TestRealAPIEndToEnd:
    """Full pipeline test with the real Gemini API."""

    def test_real_api_pipeline(self):
        # Lazy imports so collection works without the optional assets
        import jsonschema

        from subtitle_studio.api.client import GeminiClient
        from subtitle_studio.core.pipeline import build_document
        from subtitle_studio.core.settings import PipelineConfig
        from subtitle_studio.formatters import ExportFormat, render
        from subtitle_studio.schemas import load_schema

        async def _run():
            async with GeminiClient() as client:
                return await client.transcribe_audio(_TEST_AUDIO, "en-US")

        words = asyncio.run(_run())
        assert len(words) > 0, "Should have words"

        document = build_document(words, PipelineConfig.from_preset("broadcast"))
        assert document.blocks, "Should have at least one block"

        outputs = {fmt: render(document, fmt) for fmt in ExportFormat}

        jsonschema.validate(
            instance=json.loads(outputs[ExportFormat.prtranscript]),
            schema=load_schema("prtranscript"),
        )

        entries = outputs[ExportFormat.srt].strip("\n").split("\n\n")
        assert len(entries) == len(document.blocks)
        for number, entry in enumerate(entries, start=1):
            lines = entry.split("\n")
            assert lines[0] == str(number)
            assert _SRT_TIMING_RE.match(lines[1])
            assert 1 <= len(lines[2:]) <= 2
