"""FastAPI application: transcription jobs, exports, imports, and OpenAPI docs.

WHY: External clients (a web front end, curl, automation tools) need an
HTTP API to submit audio for transcription, fetch the resulting words,
and download any export format with their own segmentation settings.
FastAPI provides automatic OpenAPI documentation, request validation,
and background task support.

HOW: POST /transcriptions accepts a multipart audio upload, creates a
job, and runs Gemini transcription in the background. Once completed,
GET /transcriptions/{id}/export/{format} re-runs the pipeline on the
job's words with the settings given as query parameters. POST /exports
does the same statelessly from a JSON word list, and POST /imports turns
an uploaded SRT or word-list file into words.

RULES:
- Every export re-runs the whole pipeline; nothing is cached per setting
- Error responses use the ErrorResponse schema
- InvalidConfiguration → 422, ImportFormatError → 422
- Background transcription uses FastAPI BackgroundTasks
- The job store is a module-level singleton; expired jobs are purged
  every 5 minutes by a task started in the app lifespan
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Annotated, List, Optional

from fastapi import BackgroundTasks, FastAPI, File, Form, HTTPException, Query, UploadFile
from fastapi.responses import Response

from subtitle_studio import __version__
from subtitle_studio.config import (
    DEFAULT_LANGUAGE,
    SUPPORTED_AUDIO_FORMATS,
    SUPPORTED_IMPORT_FORMATS,
    needs_romanization,
)
from subtitle_studio.core.ir import WordToken
from subtitle_studio.core.pipeline import build_document
from subtitle_studio.core.settings import (
    DEFAULT_PAUSE_THRESHOLD_S,
    InvalidConfiguration,
    PipelineConfig,
)
from subtitle_studio.formatters import FORMATTERS, ExportFormat, get_formatter
from subtitle_studio.importers import ImportFormatError, loads_words
from subtitle_studio.server.jobs import Job, JobStatus, JobStore
from subtitle_studio.server.models import (
    ErrorResponse,
    ExportRequest,
    FormatInfo,
    HealthResponse,
    JobCreatedResponse,
    JobResponse,
    WordListResponse,
    WordModel,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# App and store setup
# ---------------------------------------------------------------------------

job_store = JobStore()


async def _periodic_cleanup() -> None:
    """Run job cleanup every 5 minutes."""
    while True:
        await asyncio.sleep(300)
        job_store.cleanup_expired()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start periodic cleanup on startup, cancel on shutdown."""
    task = asyncio.create_task(_periodic_cleanup())
    yield
    task.cancel()
    try:
        await task
    except asyncio.CancelledError:
        pass


app = FastAPI(
    lifespan=lifespan,
    title="Subtitle Studio API",
    description=(
        "REST API for transcribing audio with Gemini and exporting "
        "display-ready subtitles (SRT, plain text, CSV, word-list JSON, "
        "transcript records). Submit audio, poll for status, and export "
        "with any segmentation settings."
    ),
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _job_to_response(job: Job) -> JobResponse:
    return JobResponse(
        id=job.id,
        status=job.status.value,
        filename=job.filename,
        created_at=job.created_at,
        language=job.language,
        romanize=job.romanize,
        error=job.error,
        word_count=len(job.words) if job.status == JobStatus.COMPLETED else None,
    )


def _get_job_or_404(job_id: str) -> Job:
    job = job_store.get_job(job_id)
    if job is None:
        raise HTTPException(status_code=404, detail="Job not found: {}".format(job_id))
    return job


def _require_completed(job: Job) -> None:
    if job.status != JobStatus.COMPLETED:
        raise HTTPException(
            status_code=409,
            detail="Job is not completed (current status: {}).".format(job.status.value),
        )


def _render_download(
    words: List[WordToken],
    config: PipelineConfig,
    fmt: ExportFormat,
    stem: str,
) -> Response:
    """Run the pipeline and return the rendered format as a file download."""
    try:
        document = build_document(words, config, source_filename=stem)
    except InvalidConfiguration as exc:
        raise HTTPException(status_code=422, detail="Invalid settings: {}".format(exc))

    formatter = get_formatter(fmt)
    filename = "{}{}".format(stem, formatter.suffix)
    return Response(
        content=formatter.render(document),
        media_type=formatter.media_type,
        headers={"Content-Disposition": 'attachment; filename="{}"'.format(filename)},
    )


async def _run_transcription_pipeline(job_id: str, store: JobStore) -> None:
    """Transcribe a job's uploaded audio with Gemini and store the words.

    HOW: Reads the uploaded file from the job's upload_dir, transcribes,
    optionally romanizes, and stores the raw words on the job. Any
    exception marks the job failed with the error message.
    """
    from subtitle_studio.api.client import GeminiClient

    job = store.get_job(job_id)
    if job is None:
        return

    try:
        async with GeminiClient() as client:
            store.set_status(job_id, JobStatus.TRANSCRIBING)
            words = await client.transcribe_audio(job.audio_path, job.language)

            if job.romanize and needs_romanization(job.language):
                store.set_status(job_id, JobStatus.ROMANIZING)
                words = await client.transliterate_words(words)

        store.complete_job(job_id, words)

    except Exception as exc:
        logger.exception("Transcription failed for job %s", job_id)
        store.fail_job(job_id, str(exc))


def _run_transcription_sync(job_id: str, store: JobStore) -> None:
    """Synchronous wrapper so BackgroundTasks can run the async pipeline."""
    asyncio.run(_run_transcription_pipeline(job_id, store))


# ---------------------------------------------------------------------------
# Endpoints: Transcriptions
# ---------------------------------------------------------------------------


@app.post(
    "/transcriptions",
    response_model=JobCreatedResponse,
    status_code=201,
    tags=["transcriptions"],
    summary="Submit a transcription job",
    description=(
        "Upload an audio file. Returns a job ID immediately; transcription "
        "runs in the background. Poll GET /transcriptions/{id} for status."
    ),
    responses={
        400: {"model": ErrorResponse, "description": "Unsupported file type"},
        429: {"model": ErrorResponse, "description": "Too many concurrent jobs"},
    },
)
async def create_transcription(
    background_tasks: BackgroundTasks,
    file: Annotated[
        UploadFile,
        File(description="Audio file to transcribe (.mp3, .wav, ...)."),
    ],
    language: Annotated[
        str,
        Form(description="Language of the audio as a BCP-47 code (e.g. 'en-US')."),
    ] = DEFAULT_LANGUAGE,
    romanize: Annotated[
        bool,
        Form(description="Convert a non-English transcript to Latin script."),
    ] = False,
) -> JobCreatedResponse:
    # Sanitize filename to prevent path traversal
    filename = Path(file.filename or "upload").name
    ext = Path(filename).suffix.lower()
    if ext not in SUPPORTED_AUDIO_FORMATS:
        raise HTTPException(
            status_code=400,
            detail="Unsupported file type '{}'. Supported formats: {}".format(
                ext, ", ".join(sorted(SUPPORTED_AUDIO_FORMATS))
            ),
        )

    try:
        job = job_store.create_job(
            filename=filename,
            language=language,
            romanize=romanize,
        )
    except ValueError as exc:
        raise HTTPException(status_code=429, detail=str(exc))

    job.audio_path.write_bytes(await file.read())

    background_tasks.add_task(_run_transcription_sync, job.id, job_store)

    return JobCreatedResponse(id=job.id, status=job.status.value, filename=job.filename)


@app.get(
    "/transcriptions/{job_id}",
    response_model=JobResponse,
    tags=["transcriptions"],
    summary="Get transcription job status",
    responses={404: {"model": ErrorResponse, "description": "Job not found"}},
)
async def get_transcription(job_id: str) -> JobResponse:
    return _job_to_response(_get_job_or_404(job_id))


@app.get(
    "/transcriptions/{job_id}/words",
    response_model=WordListResponse,
    tags=["transcriptions"],
    summary="Get the transcribed words of a completed job",
    responses={
        404: {"model": ErrorResponse, "description": "Job not found"},
        409: {"model": ErrorResponse, "description": "Job not yet completed"},
    },
)
async def get_transcription_words(job_id: str) -> WordListResponse:
    job = _get_job_or_404(job_id)
    _require_completed(job)
    return WordListResponse(
        filename=job.filename,
        words=[WordModel.from_token(w) for w in job.words],
    )


@app.get(
    "/transcriptions/{job_id}/export/{fmt}",
    tags=["transcriptions"],
    summary="Export a completed job in one format",
    description=(
        "Runs the segmentation pipeline on the job's words with the given "
        "settings and returns the rendered file as a download."
    ),
    responses={
        404: {"model": ErrorResponse, "description": "Job not found"},
        409: {"model": ErrorResponse, "description": "Job not yet completed"},
        422: {"model": ErrorResponse, "description": "Invalid settings"},
    },
)
async def export_transcription(
    job_id: str,
    fmt: ExportFormat,
    max_chars: Annotated[int, Query(ge=1, description="Maximum characters per line.")] = 42,
    min_duration: Annotated[float, Query(gt=0, description="Minimum block duration (seconds).")] = 1.2,
    gap_frames: Annotated[int, Query(ge=0, description="Minimum gap in frames at 30 fps.")] = 2,
    lines: Annotated[str, Query(pattern="^(single|double)$", description="Lines per block.")] = "double",
    pause_threshold: Annotated[
        float, Query(ge=0, description="Silence (seconds) that forces a line break.")
    ] = DEFAULT_PAUSE_THRESHOLD_S,
    no_pause_split: Annotated[bool, Query(description="Break on length only.")] = False,
) -> Response:
    job = _get_job_or_404(job_id)
    _require_completed(job)

    config = PipelineConfig(
        max_chars=max_chars,
        min_duration=min_duration,
        gap_frames=gap_frames,
        lines=lines,
        pause_threshold=None if no_pause_split else pause_threshold,
    )
    return _render_download(job.words, config, fmt, Path(job.filename).stem)


@app.delete(
    "/transcriptions/{job_id}",
    status_code=204,
    tags=["transcriptions"],
    summary="Delete a transcription job",
    responses={404: {"model": ErrorResponse, "description": "Job not found"}},
)
async def delete_transcription(job_id: str) -> Response:
    if not job_store.delete_job(job_id):
        raise HTTPException(status_code=404, detail="Job not found: {}".format(job_id))
    return Response(status_code=204)


# ---------------------------------------------------------------------------
# Endpoints: Exports and imports
# ---------------------------------------------------------------------------


@app.post(
    "/exports",
    tags=["exports"],
    summary="Render a word list in one export format",
    description=(
        "Stateless: sanitizes and segments the posted words with the given "
        "settings and returns the rendered file as a download."
    ),
    responses={422: {"model": ErrorResponse, "description": "Invalid words or settings"}},
)
async def create_export(request: ExportRequest) -> Response:
    words = [w.to_token() for w in request.words]
    stem = Path(request.filename).stem or "subtitles"
    return _render_download(words, request.settings.to_config(), request.format, stem)


@app.post(
    "/imports",
    response_model=WordListResponse,
    tags=["exports"],
    summary="Import an SRT or word-list file",
    description=(
        "Parses an uploaded .srt, .json or .prtranscript file into word "
        "records. SRT block timing is divided evenly across each block's words."
    ),
    responses={
        400: {"model": ErrorResponse, "description": "Unsupported file type"},
        422: {"model": ErrorResponse, "description": "Malformed file content"},
    },
)
async def import_words(
    file: Annotated[UploadFile, File(description="Subtitle or word-list file.")],
) -> WordListResponse:
    filename = Path(file.filename or "upload").name
    ext = Path(filename).suffix.lower()
    if ext not in SUPPORTED_IMPORT_FORMATS:
        raise HTTPException(
            status_code=400,
            detail="Unsupported file type '{}'. Supported formats: {}".format(
                ext, ", ".join(sorted(SUPPORTED_IMPORT_FORMATS))
            ),
        )

    raw = await file.read()
    try:
        words = loads_words(raw.decode("utf-8-sig"), filename)
    except UnicodeDecodeError:
        raise HTTPException(status_code=422, detail="File is not valid UTF-8 text.")
    except ImportFormatError as exc:
        raise HTTPException(status_code=422, detail=str(exc))

    return WordListResponse(
        filename=filename,
        words=[WordModel.from_token(w) for w in words],
    )


# ---------------------------------------------------------------------------
# Endpoints: Formats and health
# ---------------------------------------------------------------------------


@app.get(
    "/formats",
    response_model=List[FormatInfo],
    tags=["formats"],
    summary="List available export formats",
)
async def list_formats() -> List[FormatInfo]:
    result = []
    for fmt, formatter_cls in FORMATTERS.items():
        formatter = formatter_cls()
        result.append(FormatInfo(
            key=fmt.value,
            name=formatter.name,
            suffix=formatter.suffix,
            media_type=formatter.media_type,
        ))
    return result


@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["health"],
    summary="Health check",
)
async def health_check() -> HealthResponse:
    return HealthResponse(status="ok", version=__version__)


def run_api(host: Optional[str] = None, port: Optional[int] = None) -> None:
    """Entry point for the subtitle-studio-api console script."""
    import uvicorn
    uvicorn.run(app, host=host or "0.0.0.0", port=port or 8000)
