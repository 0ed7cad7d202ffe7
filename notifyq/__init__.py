"""notifyq - in-process background notification job queue."""

from .exceptions import HandlerTimeoutError, InvalidTransitionError, NotifyQError, UnknownJobTypeError
from .handlers import ConsoleTransport, RecordingTransport, build_registry
from .models import Config, Job, JobState, JobType
from .queue import JobQueue
from .registry import HandlerRegistry

__all__ = [
    "Config",
    "ConsoleTransport",
    "HandlerRegistry",
    "HandlerTimeoutError",
    "InvalidTransitionError",
    "Job",
    "JobQueue",
    "JobState",
    "JobType",
    "NotifyQError",
    "RecordingTransport",
    "UnknownJobTypeError",
    "build_registry",
]
