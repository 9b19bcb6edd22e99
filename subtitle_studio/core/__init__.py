"""Core timing-normalization and segmentation pipeline.

WHY: The core package is the algorithmic heart of Subtitle Studio — the
IR dataclasses and the four transformation stages. Everything else
(formatters, importers, CLI, HTTP API) consumes what lives here.

HOW: ir.py defines the data structures, settings.py the validated
pipeline configuration and presets, sanitizer/segmenter/composer/timing
are the stages, pipeline.py chains them into a SubtitleDocument.

RULES:
- Stages never mutate their input; each returns a new list
- No I/O, no global state — concurrent runs with different settings are safe
- Configuration is validated once, before any stage runs
"""

from subtitle_studio.core.ir import LinePhrase, SubtitleBlock, SubtitleDocument, WordToken
from subtitle_studio.core.pipeline import build_blocks, build_document
from subtitle_studio.core.settings import InvalidConfiguration, PipelineConfig

__all__ = [
    "InvalidConfiguration",
    "LinePhrase",
    "PipelineConfig",
    "SubtitleBlock",
    "SubtitleDocument",
    "WordToken",
    "build_blocks",
    "build_document",
]
