"""Pipeline driver: words + settings in, SubtitleDocument out.

WHY: Callers (CLI, HTTP API, tests) should not have to know the stage
order or remember to validate settings first. Any change to the words or
to a setting can move segmentation boundaries anywhere in the transcript,
so the whole pipeline is simply re-run — it is O(n) and has no state.

HOW: build_blocks() validates the config, then runs
sanitize → segment → compose → apply_timing. build_document() wraps the
sanitized words and the finished blocks into a SubtitleDocument.

RULES:
- Invalid configuration is rejected before any stage runs
- Never mutates the caller's word list
- Same words + same config always yield the same document
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Tuple

from subtitle_studio.core.composer import compose_blocks
from subtitle_studio.core.ir import SubtitleBlock, SubtitleDocument, WordToken
from subtitle_studio.core.sanitizer import sanitize_tokens
from subtitle_studio.core.segmenter import segment_phrases
from subtitle_studio.core.settings import PipelineConfig
from subtitle_studio.core.timing import apply_timing

logger = logging.getLogger(__name__)


def _run(
    words: Iterable[WordToken],
    config: PipelineConfig,
) -> Tuple[List[WordToken], List[SubtitleBlock]]:
    config.validate()

    sanitized = sanitize_tokens(words)
    phrases = segment_phrases(sanitized, config.max_chars, config.pause_threshold)
    blocks = compose_blocks(phrases, config.lines)
    timed = apply_timing(blocks, config.min_duration, config.gap_frames)

    logger.debug(
        "Pipeline: %d words -> %d lines -> %d blocks (%s)",
        len(sanitized), len(phrases), len(timed), config.lines,
    )
    return sanitized, timed


def build_blocks(
    words: Iterable[WordToken],
    config: Optional[PipelineConfig] = None,
) -> List[SubtitleBlock]:
    """Run the full pipeline and return only the finished blocks.

    Raises:
        InvalidConfiguration: If ``config`` fails validation.
    """
    _, blocks = _run(words, config or PipelineConfig())
    return blocks


def build_document(
    words: Iterable[WordToken],
    config: Optional[PipelineConfig] = None,
    source_filename: str = "",
) -> SubtitleDocument:
    """Run the full pipeline and bundle the result for the formatters.

    Args:
        words: Raw word tokens from transcription or an importer.
        config: Pipeline settings; defaults to PipelineConfig().
        source_filename: Original input name, carried through for output naming.

    Returns:
        SubtitleDocument with sanitized words and timing-corrected blocks.

    Raises:
        InvalidConfiguration: If ``config`` fails validation.
    """
    config = config or PipelineConfig()
    sanitized, blocks = _run(words, config)
    return SubtitleDocument(
        words=sanitized,
        blocks=blocks,
        config=config,
        source_filename=source_filename,
    )
