"""Pydantic request/response models for the HTTP API.

WHY: The FastAPI endpoints need typed schemas for request validation,
response serialization, and automatic OpenAPI documentation. Range
checks on the pipeline settings happen here, at the boundary, so bad
values are rejected with a 422 before any work is done.

HOW: Each endpoint pair (request + response) has its own model.
ExportFormat (from the formatter registry) is the closed set of format
names. SettingsModel mirrors PipelineConfig and converts into it.

RULES:
- All models use Field(description=...) for OpenAPI documentation
- Word records use the external field names: word, startTime, endTime
- Python 3.9+ compatible (no PEP 604 unions, use Optional from typing)
"""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from subtitle_studio.core.ir import WordToken
from subtitle_studio.core.settings import DEFAULT_PAUSE_THRESHOLD_S, PipelineConfig
from subtitle_studio.formatters.base import ExportFormat


class WordModel(BaseModel):
    """One word record as exchanged with clients."""

    word: str = Field(description="Transcribed word text.")
    startTime: float = Field(description="Word start time in seconds.")
    endTime: float = Field(description="Word end time in seconds.")

    @classmethod
    def from_token(cls, token: WordToken) -> WordModel:
        return cls(word=token.text, startTime=token.start_s, endTime=token.end_s)

    def to_token(self) -> WordToken:
        return WordToken(text=self.word, start_s=self.startTime, end_s=self.endTime)


class SettingsModel(BaseModel):
    """Pipeline settings accepted by export endpoints.

    RULES:
    - Defaults match the broadcast preset
    - pause_threshold=None disables pause-based line breaks
    """

    max_chars: int = Field(default=42, ge=1, description="Maximum characters per line.")
    min_duration: float = Field(default=1.2, gt=0, description="Minimum block duration (seconds).")
    gap_frames: int = Field(default=2, ge=0, description="Minimum gap between blocks, in frames at 30 fps.")
    lines: Literal["single", "double"] = Field(default="double", description="Lines per block.")
    pause_threshold: Optional[float] = Field(
        default=DEFAULT_PAUSE_THRESHOLD_S,
        ge=0,
        description="Silence (seconds) that forces a line break; null disables pause splitting.",
    )

    def to_config(self) -> PipelineConfig:
        return PipelineConfig(
            max_chars=self.max_chars,
            min_duration=self.min_duration,
            gap_frames=self.gap_frames,
            lines=self.lines,
            pause_threshold=self.pause_threshold,
        )


class ExportRequest(BaseModel):
    """Stateless export: words + settings + format in, file out."""

    words: List[WordModel] = Field(description="Word records in transcript order.")
    settings: SettingsModel = Field(default_factory=SettingsModel, description="Pipeline settings.")
    format: ExportFormat = Field(default=ExportFormat.srt, description="Export format.")
    filename: str = Field(default="subtitles", description="Download filename stem.")


class JobResponse(BaseModel):
    """Transcription job status response.

    RULES:
    - error is only set when status is 'failed'
    - word_count is only set when status is 'completed'
    """

    id: str = Field(description="Unique job identifier (UUID).")
    status: str = Field(description="Current job status.")
    filename: str = Field(description="Original uploaded filename.")
    created_at: float = Field(description="Job creation timestamp (Unix epoch seconds).")
    language: str = Field(description="BCP-47 language code used for transcription.")
    romanize: bool = Field(description="Whether the transcript is romanized.")
    error: Optional[str] = Field(default=None, description="Error message when status is 'failed'.")
    word_count: Optional[int] = Field(default=None, description="Number of words when completed.")


class JobCreatedResponse(BaseModel):
    """Response returned when a new transcription job is submitted."""

    id: str = Field(description="Unique job identifier (UUID) for polling status.")
    status: str = Field(description="Initial job status (always 'pending').")
    filename: str = Field(description="Original uploaded filename.")


class WordListResponse(BaseModel):
    """Word list returned by a completed job or by an import."""

    filename: str = Field(description="Source filename.")
    words: List[WordModel] = Field(description="Word records in transcript order.")


class FormatInfo(BaseModel):
    """Description of an available export format."""

    key: str = Field(description="Format identifier used in API requests.")
    name: str = Field(description="Human-readable format name.")
    suffix: str = Field(description="File suffix produced (e.g. '.srt').")
    media_type: str = Field(description="MIME type of the exported content.")


class ErrorResponse(BaseModel):
    """Standard error response body."""

    detail: str = Field(description="Human-readable error description.")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(description="Service health status.", json_schema_extra={"example": "ok"})
    version: str = Field(description="API version string.", json_schema_extra={"example": "0.1.0"})
