"""Background jobs for long-running generations."""

import asyncio
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Coroutine, Optional


class JobStatus(str, Enum):
    """Job status."""

    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


FINISHED = (JobStatus.COMPLETED, JobStatus.FAILED, JobStatus.CANCELLED)


@dataclass
class Job:
    """A generation running in the background."""

    id: str
    type: str
    status: JobStatus = JobStatus.PENDING
    progress: int = 0
    total: int = 0
    message: Optional[str] = None
    result: Optional[Any] = None
    error: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.now)
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    metadata: dict = field(default_factory=dict)

    @property
    def is_active(self) -> bool:
        return self.status not in FINISHED


class JobService:
    """Tracks background generation tasks."""

    def __init__(self):
        self._jobs: dict[str, Job] = {}
        self._tasks: dict[str, asyncio.Task] = {}

    def create_job(self, job_type: str, metadata: Optional[dict] = None) -> Job:
        """Create a new job.

        Finished jobs older than a day are forgotten first.

        Args:
            job_type: Type of job (e.g., "comic_generation", "video_generation")
            metadata: Additional metadata

        Returns:
            Created job
        """
        self.cleanup_old_jobs()

        job = Job(
            id=str(uuid.uuid4()),
            type=job_type,
            metadata=metadata or {},
        )
        self._jobs[job.id] = job
        return job

    def has_active_job(self, job_type: str, session_id: str) -> bool:
        """Whether a job of this type is pending or running for a session."""
        return any(
            job.is_active
            for job in self._jobs.values()
            if job.type == job_type and job.metadata.get("session_id") == session_id
        )

    def get_job(self, job_id: str) -> Optional[Job]:
        """Get job by ID, or None."""
        return self._jobs.get(job_id)

    def list_jobs(
        self,
        status: Optional[JobStatus] = None,
        job_type: Optional[str] = None,
        session_id: Optional[str] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> tuple[list[Job], int]:
        """List jobs with optional filtering, newest first.

        Returns:
            Tuple of (jobs, total_count)
        """
        jobs = list(self._jobs.values())

        if status:
            jobs = [j for j in jobs if j.status == status]
        if job_type:
            jobs = [j for j in jobs if j.type == job_type]
        if session_id:
            jobs = [j for j in jobs if j.metadata.get("session_id") == session_id]

        jobs.sort(key=lambda j: j.created_at, reverse=True)

        total = len(jobs)
        return jobs[offset:offset + limit], total

    async def run_job(self, job: Job, coro: Coroutine) -> Job:
        """Await a job's coroutine and record how it ended."""
        job.status = JobStatus.RUNNING
        job.started_at = datetime.now()

        try:
            job.result = await coro
            job.status = JobStatus.COMPLETED
        except asyncio.CancelledError:
            job.status = JobStatus.CANCELLED
            job.error = "Job was cancelled"
        except Exception as e:
            job.status = JobStatus.FAILED
            job.error = str(e)
        finally:
            job.completed_at = datetime.now()

        return job

    def start_job(self, job: Job, coro: Coroutine) -> asyncio.Task:
        """Start a job in the background on the running loop."""
        task = asyncio.create_task(self.run_job(job, coro))
        self._tasks[job.id] = task
        task.add_done_callback(lambda _: self._tasks.pop(job.id, None))
        return task

    def cancel_job(self, job_id: str) -> bool:
        """Cancel a running job.

        Returns:
            True if cancelled, False if not found or already finished
        """
        job = self._jobs.get(job_id)
        if not job or not job.is_active:
            return False

        task = self._tasks.get(job_id)
        if task and not task.done():
            task.cancel()

        job.status = JobStatus.CANCELLED
        job.completed_at = datetime.now()
        return True

    def update_progress(self, job_id: str, progress: int, total: int) -> None:
        job = self._jobs.get(job_id)
        if job:
            job.progress = progress
            job.total = total

    def update_message(self, job_id: str, message: str) -> None:
        job = self._jobs.get(job_id)
        if job:
            job.message = message

    def cleanup_old_jobs(self, max_age_hours: int = 24) -> int:
        """Forget finished jobs older than ``max_age_hours``.

        Returns:
            Number of jobs removed
        """
        cutoff = datetime.now() - timedelta(hours=max_age_hours)
        expired = [
            job_id
            for job_id, job in self._jobs.items()
            if not job.is_active and job.completed_at and job.completed_at < cutoff
        ]

        for job_id in expired:
            del self._jobs[job_id]
            self._tasks.pop(job_id, None)

        return len(expired)


# Global job service instance
_job_service: Optional[JobService] = None


def get_job_service() -> JobService:
    """Get the global job service instance."""
    global _job_service
    if _job_service is None:
        _job_service = JobService()
    return _job_service
