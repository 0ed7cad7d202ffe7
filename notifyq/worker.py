"""The drain loop that executes queued jobs."""

import asyncio
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import TYPE_CHECKING, Any, Optional
from .exceptions import HandlerTimeoutError
from .models import Config, Job
from .registry import HandlerRegistry

if TYPE_CHECKING:
    from .queue import JobQueue

logger = logging.getLogger(__name__)


class Worker:
    """Executes jobs from the queue until the backlog is empty."""

    def __init__(self, queue: "JobQueue", registry: HandlerRegistry, config: Config):
        self.queue = queue
        self.registry = registry
        self.config = config
        self.current_job: Optional[Job] = None

    def run(self) -> None:
        """Run the drain loop.

        The drain guard is handed back to the queue on any exit other than
        an empty backlog, so a crashed worker never leaves the queue stuck.
        """
        logger.debug("Worker started", extra={"worker": self.config.worker_name})
        drained = False
        try:
            while True:
                job = self.queue.claim_next()
                if job is None:
                    drained = True
                    break
                self._execute_job(job)
        except Exception as e:
            logger.exception("Worker crashed", extra={"worker": self.config.worker_name})
            self._abandon_current_job(f"Worker crashed: {e}")
        finally:
            self.current_job = None
            if not drained:
                self.queue.release_worker()
        logger.debug("Worker stopped", extra={"worker": self.config.worker_name})

    def _execute_job(self, job: Job) -> None:
        """Execute a single job that is already marked processing."""
        self.current_job = job
        logger.info("Job processing", extra={"job_id": job.id, "job_type": job.type})
        try:
            self._invoke(job)
        except (Exception, asyncio.CancelledError) as e:
            self._fail(job, e)
        except BaseException as e:
            # SystemExit / KeyboardInterrupt still stop this worker.
            self._fail(job, e)
            raise
        else:
            self.queue.mark_completed(job)
            logger.info("Job completed", extra={"job_id": job.id, "job_type": job.type})
        self.current_job = None

    def _fail(self, job: Job, exc: BaseException) -> None:
        error_msg = str(exc) or type(exc).__name__
        self.queue.mark_failed(job, error_msg)
        logger.error(
            "Job failed",
            extra={"job_id": job.id, "job_type": job.type, "error": error_msg},
        )

    def _abandon_current_job(self, message: str) -> None:
        job = self.current_job
        if job is None:
            return
        try:
            self.queue.abandon(job, message)
        except Exception:
            logger.exception("Could not record abandoned job", extra={"job_id": job.id})

    def _invoke(self, job: Job) -> None:
        if self.config.processing_delay > 0:
            time.sleep(self.config.processing_delay)

        timeout = self.config.handler_timeout
        if timeout is None:
            self._call(job)
            return

        # A timed-out handler thread cannot be cancelled; it is left to finish on its own.
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix=f"{self.config.worker_name}-handler")
        try:
            future = executor.submit(self._call, job)
            try:
                future.result(timeout=timeout)
            except FutureTimeoutError:
                if future.done():
                    raise
                raise HandlerTimeoutError(job.type, timeout) from None
        finally:
            executor.shutdown(wait=False)

    def _call(self, job: Job) -> Any:
        result = self.registry.dispatch(job)
        if asyncio.iscoroutine(result):
            result = asyncio.run(result)
        return result
