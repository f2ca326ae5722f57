import logging
import threading

from .errors import DuplicateJobError, InvalidTransitionError
from .models import TERMINAL_STATUSES, Resume, ResumeStatus, ResumeSummary

logger = logging.getLogger(__name__)


class ResumeJobStore:
    """In-memory registry of resume jobs for the life of the process.

    Records are never handed out directly: ``get`` and ``update`` return
    copies, so callers cannot mutate stored state behind the lock.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._jobs: dict[str, Resume] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._jobs)

    def __contains__(self, job_id: str) -> bool:
        with self._lock:
            return job_id in self._jobs

    def create(self, job: Resume) -> None:
        if job.status != "processing" or job.summary is not None:
            raise InvalidTransitionError(f"New job {job.id} must start in 'processing' without a summary")
        with self._lock:
            if job.id in self._jobs:
                raise DuplicateJobError(f"Job {job.id} already exists")
            self._jobs[job.id] = job.model_copy(deep=True)

    def get(self, job_id: str) -> Resume | None:
        with self._lock:
            job = self._jobs.get(job_id)
            return job.model_copy(deep=True) if job is not None else None

    def update(
        self,
        job_id: str,
        *,
        text: str | None = None,
        status: ResumeStatus | None = None,
        summary: ResumeSummary | None = None,
    ) -> Resume | None:
        """Merge the given fields into a job; fields left as None are untouched.

        Returns the updated snapshot, or None if the job is unknown.
        """
        with self._lock:
            job = self._jobs.get(job_id)
            if job is None:
                logger.warning("Update for unknown job %s ignored", job_id)
                return None

            new_status = status or job.status
            if job.status in TERMINAL_STATUSES and (status is not None or summary is not None):
                raise InvalidTransitionError(f"Job {job_id} is already {job.status}")
            if new_status == "completed" and summary is None:
                raise InvalidTransitionError(f"Job {job_id} cannot complete without a summary")
            if summary is not None and new_status != "completed":
                raise InvalidTransitionError(f"Job {job_id} can only receive a summary when completing")

            changes = {}
            if text is not None:
                changes["text"] = text
            if status is not None:
                changes["status"] = status
            if summary is not None:
                changes["summary"] = summary.model_copy(deep=True)
            updated = job.model_copy(update=changes)
            self._jobs[job_id] = updated
            return updated.model_copy(deep=True)

    def delete(self, job_id: str) -> None:
        with self._lock:
            self._jobs.pop(job_id, None)
