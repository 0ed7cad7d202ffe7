"""In-process job queue: FIFO backlog, state transitions and the drain guard."""

import logging
import threading
from collections import deque
from enum import Enum
from typing import Any, Deque, Dict, List, Optional, Union
from uuid import uuid4
from .exceptions import InvalidTransitionError
from .models import Config, Job, JobState, TRANSITIONS, utcnow
from .registry import HandlerRegistry, job_type_key
from .storage import Storage
from .worker import Worker

logger = logging.getLogger(__name__)


class JobQueue:
    """Accepts jobs and runs them one at a time, in submission order.

    A single worker thread drains the backlog and exits once it is empty;
    the next enqueue starts a new one. Whether a worker is running is
    decided under the same lock that guards the backlog, so concurrent
    enqueue calls can never start two workers.
    """

    def __init__(
        self,
        registry: HandlerRegistry,
        config: Optional[Config] = None,
        storage: Optional[Storage] = None,
    ):
        self.registry = registry
        self.config = config or Config()
        self.storage = storage or Storage()
        self._lock = threading.Lock()
        self._idle = threading.Condition(self._lock)
        self._backlog: Deque[Job] = deque()
        self._draining = False

    def enqueue(self, job_type: Union[str, Enum], payload: Any = None) -> str:
        """Add a job to the tail of the backlog and return its id."""
        job = Job(id=str(uuid4()), type=job_type_key(job_type), payload=payload)
        with self._lock:
            self._backlog.append(job)
            self.storage.add_job(job)
            start_worker = not self._draining
            self._draining = True
        logger.info("Job enqueued", extra={"job_id": job.id, "job_type": job.type})
        if start_worker:
            self._start_worker()
        return job.id

    def _start_worker(self) -> None:
        worker = Worker(self, self.registry, self.config)
        thread = threading.Thread(target=worker.run, name=self.config.worker_name, daemon=True)
        thread.start()

    def claim_next(self) -> Optional[Job]:
        """Pop the head of the backlog and mark it processing.

        Returns None once the backlog is empty; the draining flag is cleared
        in the same critical section so the caller must exit.
        """
        with self._lock:
            if not self._backlog:
                self._draining = False
                self._idle.notify_all()
                return None
            job = self._backlog.popleft()
            self._transition(job, JobState.PROCESSING)
            job.started_at = job.updated_at
            self.storage.update_job(job)
            return job

    def release_worker(self) -> None:
        """Called when a worker stops abnormally. Restarts one if work is left."""
        with self._lock:
            restart = bool(self._backlog)
            self._draining = restart
            if not restart:
                self._idle.notify_all()
        if restart:
            self._start_worker()

    def abandon(self, job: Job, error_message: str) -> None:
        """Settle the record of a job whose worker crashed.

        A job still processing is failed; one that already reached a terminal
        state in memory is written to storage again.
        """
        if job.is_terminal:
            self.storage.update_job(job)
        else:
            self.mark_failed(job, error_message)

    def mark_completed(self, job: Job) -> None:
        """Mark a job as successfully completed."""
        self._transition(job, JobState.COMPLETED)
        job.finished_at = job.updated_at
        self.storage.update_job(job)

    def mark_failed(self, job: Job, error_message: str) -> None:
        """Mark a job as failed. There are no retries."""
        self._transition(job, JobState.FAILED)
        job.finished_at = job.updated_at
        job.error_message = error_message
        self.storage.update_job(job)

    def _transition(self, job: Job, state: JobState) -> None:
        if state not in TRANSITIONS[job.state]:
            raise InvalidTransitionError(job.id, job.state.value, state.value)
        job.state = state
        job.updated_at = utcnow()

    def wait_idle(self, timeout: Optional[float] = None) -> bool:
        """Block until the backlog is empty and no worker is running."""
        with self._idle:
            return self._idle.wait_for(
                lambda: not self._draining and not self._backlog, timeout
            )

    @property
    def is_draining(self) -> bool:
        with self._lock:
            return self._draining

    def pending_count(self) -> int:
        with self._lock:
            return len(self._backlog)

    def get_job(self, job_id: str) -> Optional[Job]:
        """Get a copy of a job by ID."""
        return self.storage.get_job(job_id)

    def get_jobs_by_state(self, state: JobState) -> List[Job]:
        """Get all jobs in a specific state."""
        return self.storage.get_jobs_by_state(state)

    def get_all_jobs(self) -> List[Job]:
        """Get all jobs."""
        return self.storage.get_all_jobs()

    def get_stats(self) -> Dict[str, int]:
        """Get job statistics."""
        return self.storage.get_stats()
