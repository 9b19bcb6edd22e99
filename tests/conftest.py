"""Shared test fixtures for the subtitle_studio test suite.

WHY: Several test modules need the same small, hand-checked word lists —
the pause scenario, the overflow word, a short interview excerpt. Keeping
them here avoids drift between the stage tests and the end-to-end tests.

HOW: Plain module-level lists of WordToken plus pytest fixtures that
return fresh copies, and a document fixture built through the real
pipeline.

RULES:
- Token timings are chosen so expected boundaries can be checked by hand
- Fixtures return new lists; tests may mutate them freely
"""

from typing import List

import pytest

from subtitle_studio.core.ir import WordToken
from subtitle_studio.core.pipeline import build_document
from subtitle_studio.core.settings import PipelineConfig


# ---------------------------------------------------------------------------
# Word lists
# ---------------------------------------------------------------------------

# "Hi there" then a 1.1 s pause before "friend"
PAUSE_TOKENS: List[WordToken] = [
    WordToken("Hi", 0.0, 0.4),
    WordToken("there", 0.5, 0.9),
    WordToken("friend", 2.0, 2.5),
]

INTERVIEW_TOKENS: List[WordToken] = [
    WordToken("Welcome", 0.00, 0.42),
    WordToken("back", 0.45, 0.70),
    WordToken("to", 0.72, 0.80),
    WordToken("the", 0.82, 0.90),
    WordToken("show,", 0.92, 1.30),
    WordToken("everyone.", 1.32, 1.90),
    WordToken("Today", 3.00, 3.35),
    WordToken("we", 3.38, 3.50),
    WordToken("talk", 3.52, 3.80),
    WordToken("about", 3.82, 4.10),
    WordToken("subtitles", 4.12, 4.70),
    WordToken("and", 4.72, 4.85),
    WordToken("why", 4.87, 5.05),
    WordToken("timing", 5.07, 5.45),
    WordToken("matters", 5.47, 5.90),
    WordToken("so", 5.92, 6.05),
    WordToken("much.", 6.07, 6.50),
]


@pytest.fixture
def pause_tokens() -> List[WordToken]:
    return list(PAUSE_TOKENS)


@pytest.fixture
def interview_tokens() -> List[WordToken]:
    return list(INTERVIEW_TOKENS)


@pytest.fixture
def single_line_config() -> PipelineConfig:
    """Narrow single-line settings with no duration or gap adjustments."""
    return PipelineConfig(
        max_chars=20,
        min_duration=0.1,
        gap_frames=0,
        lines="single",
    )


@pytest.fixture
def sample_document(pause_tokens, single_line_config):
    """Document for the pause scenario: two single-line blocks."""
    return build_document(pause_tokens, single_line_config, source_filename="sample.mp3")
