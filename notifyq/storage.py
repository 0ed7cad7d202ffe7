"""In-memory ledger of every job the queue has accepted."""

import threading
from typing import Dict, List, Optional
from .models import Job, JobState


class Storage:
    """Thread-safe job ledger. Reads return copies."""

    def __init__(self):
        self._lock = threading.Lock()
        self._jobs: Dict[str, Job] = {}

    def add_job(self, job: Job) -> None:
        """Record a newly enqueued job."""
        with self._lock:
            if job.id in self._jobs:
                raise ValueError(f"Job {job.id} already exists")
            self._jobs[job.id] = job.model_copy()

    def update_job(self, job: Job) -> None:
        """Update an existing job."""
        with self._lock:
            if job.id not in self._jobs:
                raise ValueError(f"Job {job.id} not found")
            self._jobs[job.id] = job.model_copy()

    def get_job(self, job_id: str) -> Optional[Job]:
        """Get a job by ID."""
        with self._lock:
            job = self._jobs.get(job_id)
            return job.model_copy() if job is not None else None

    def get_jobs_by_state(self, state: JobState) -> List[Job]:
        """Get all jobs in a specific state, in enqueue order."""
        with self._lock:
            return [j.model_copy() for j in self._jobs.values() if j.state == state]

    def get_all_jobs(self) -> List[Job]:
        """Get all jobs, in enqueue order."""
        with self._lock:
            return [j.model_copy() for j in self._jobs.values()]

    def get_stats(self) -> Dict[str, int]:
        """Get job statistics."""
        stats = {state.value: 0 for state in JobState}
        with self._lock:
            for job in self._jobs.values():
                stats[job.state.value] += 1
            stats["total"] = len(self._jobs)
        return stats
