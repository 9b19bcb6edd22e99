"""In-memory transcription jobs for the HTTP API, with TTL expiry.

WHY: Gemini needs tens of seconds to minutes for a long recording, so
POST /transcriptions answers with a job ID and the transcription runs in
the background. A finished job keeps its raw word list; every export
request re-runs the pipeline on those words with the caller's settings.
One process, no persistence: a dict behind a lock is enough.

HOW: A Job is created PENDING with its own upload directory. The
background runner moves it through TRANSCRIBING (and ROMANIZING when
asked) and finishes it with complete_job() or fail_job(). Finished jobs
expire ttl_seconds after finishing; cleanup_expired() is called
periodically from the app lifespan.

RULES:
- Every read or write of the job dict holds self._lock; directory
  removal happens after the lock is released
- Status changes go through set_status/complete_job/fail_job only
- finished_at is set exactly when a job enters COMPLETED or FAILED
- Running jobs never expire
"""

from __future__ import annotations

import enum
import logging
import shutil
import tempfile
import threading
import time
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from subtitle_studio.config import DEFAULT_LANGUAGE
from subtitle_studio.core.ir import WordToken

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 3600


class JobStatus(str, enum.Enum):
    """Lifecycle of a transcription job.

    pending → transcribing → [romanizing →] completed, or failed from any
    running state.
    """

    PENDING = "pending"
    TRANSCRIBING = "transcribing"
    ROMANIZING = "romanizing"
    COMPLETED = "completed"
    FAILED = "failed"


FINISHED_STATUSES = frozenset({JobStatus.COMPLETED, JobStatus.FAILED})


@dataclass
class Job:
    """One uploaded recording and what became of it.

    ``words`` stays empty until the job completes and holds the raw
    (unsanitized) transcription; the pipeline sanitizes on every export.
    """

    id: str
    filename: str
    upload_dir: Path
    language: str = DEFAULT_LANGUAGE
    romanize: bool = False
    status: JobStatus = JobStatus.PENDING
    created_at: float = 0.0
    updated_at: float = 0.0
    finished_at: Optional[float] = None
    error: Optional[str] = None
    words: List[WordToken] = field(default_factory=list)

    @property
    def audio_path(self) -> Path:
        return self.upload_dir / self.filename

    @property
    def is_finished(self) -> bool:
        return self.status in FINISHED_STATUSES


class JobStore:
    """Thread-safe registry of transcription jobs.

    The FastAPI handlers run on the event loop while transcriptions run in
    BackgroundTasks threads; both go through this store.
    """

    def __init__(
        self,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        max_jobs: int = 100,
    ) -> None:
        self._jobs: Dict[str, Job] = {}
        self._lock = threading.Lock()
        self._ttl_seconds = ttl_seconds
        self.max_jobs = max_jobs

    def create_job(
        self,
        filename: str,
        language: str = DEFAULT_LANGUAGE,
        romanize: bool = False,
    ) -> Job:
        """Register a PENDING job and create its upload directory.

        Raises:
            ValueError: When max_jobs jobs are already held.
        """
        with self._lock:
            if len(self._jobs) >= self.max_jobs:
                raise ValueError(
                    "Too many transcription jobs ({} held); try again later".format(
                        self.max_jobs
                    )
                )
            now = time.time()
            job = Job(
                id=uuid.uuid4().hex,
                filename=filename,
                upload_dir=Path(tempfile.mkdtemp(prefix="subtitle_job_")),
                language=language,
                romanize=romanize,
                created_at=now,
                updated_at=now,
            )
            self._jobs[job.id] = job

        logger.info("Job %s queued for %s (%s)", job.id, filename, language)
        return job

    def get_job(self, job_id: str) -> Optional[Job]:
        with self._lock:
            return self._jobs.get(job_id)

    def _transition(
        self,
        job_id: str,
        status: JobStatus,
        words: Optional[List[WordToken]] = None,
        error: Optional[str] = None,
    ) -> Optional[Job]:
        with self._lock:
            job = self._jobs.get(job_id)
            if job is None:
                return None
            now = time.time()
            job.status = status
            job.updated_at = now
            if words is not None:
                job.words = list(words)
            if error is not None:
                job.error = error
            if status in FINISHED_STATUSES:
                job.finished_at = now
            return job

    def set_status(self, job_id: str, status: JobStatus) -> Optional[Job]:
        """Move a running job to another in-progress status."""
        if status in FINISHED_STATUSES:
            raise ValueError("Use complete_job() or fail_job() to finish a job")
        return self._transition(job_id, status)

    def complete_job(self, job_id: str, words: List[WordToken]) -> Optional[Job]:
        """Finish a job successfully, storing a copy of its words."""
        job = self._transition(job_id, JobStatus.COMPLETED, words=words)
        if job is not None:
            logger.info("Job %s completed with %d words", job_id, len(job.words))
        return job

    def fail_job(self, job_id: str, error: str) -> Optional[Job]:
        """Finish a job with an error message."""
        job = self._transition(job_id, JobStatus.FAILED, error=error)
        if job is not None:
            logger.warning("Job %s failed: %s", job_id, error)
        return job

    def delete_job(self, job_id: str) -> bool:
        """Forget a job and remove its upload directory; False if unknown."""
        with self._lock:
            job = self._jobs.pop(job_id, None)
        if job is None:
            return False
        self._remove_upload_dir(job)
        logger.info("Job %s deleted", job_id)
        return True

    def cleanup_expired(self) -> int:
        """Drop finished jobs older than the TTL; returns how many went."""
        now = time.time()
        with self._lock:
            expired = [
                job for job in self._jobs.values()
                if job.finished_at is not None
                and now - job.finished_at > self._ttl_seconds
            ]
            for job in expired:
                del self._jobs[job.id]

        for job in expired:
            self._remove_upload_dir(job)
        if expired:
            logger.info("Expired %d finished job(s)", len(expired))
        return len(expired)

    @staticmethod
    def _remove_upload_dir(job: Job) -> None:
        try:
            shutil.rmtree(job.upload_dir)
        except FileNotFoundError:
            pass
        except OSError:
            logger.warning("Could not remove upload dir %s", job.upload_dir)
