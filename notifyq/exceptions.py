"""Exceptions raised while handling jobs."""

from typing import Any, Dict, Optional


class NotifyQError(Exception):
    """Base exception for notifyq."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class UnknownJobTypeError(NotifyQError):
    """Raised when no handler is registered for a job type."""

    def __init__(self, job_type: str):
        super().__init__(f"Unknown job type: {job_type}", {"job_type": job_type})
        self.job_type = job_type


class HandlerTimeoutError(NotifyQError):
    """Raised when a handler runs past the configured timeout."""

    def __init__(self, job_type: str, timeout: float):
        super().__init__(
            f"Handler for {job_type} timed out after {timeout:g}s",
            {"job_type": job_type, "timeout": timeout},
        )


class InvalidTransitionError(NotifyQError):
    """Raised on an illegal job state change."""

    def __init__(self, job_id: str, current: str, target: str):
        super().__init__(
            f"Job {job_id} cannot move from {current} to {target}",
            {"job_id": job_id, "from": current, "to": target},
        )
