"""Mapping from job type to the handler that processes it."""

import logging
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union
from .exceptions import UnknownJobTypeError
from .models import Job

logger = logging.getLogger(__name__)

Handler = Callable[[Any], Any]


def job_type_key(job_type: Union[str, Enum]) -> str:
    if isinstance(job_type, Enum):
        return str(job_type.value)
    return str(job_type)


class HandlerRegistry:
    """Fixed table of job type -> handler, populated at startup.

    A handler is any callable taking the job payload. Returning normally
    means success; raising means the job failed. Coroutine functions are
    accepted, the worker runs the returned awaitable to completion.
    """

    def __init__(self):
        self._handlers: Dict[str, Handler] = {}

    def register(self, job_type: Union[str, Enum], handler: Handler) -> None:
        """Register a handler for a job type."""
        key = job_type_key(job_type)
        if key in self._handlers:
            logger.warning("Replacing handler", extra={"job_type": key})
        self._handlers[key] = handler

    def handler(self, job_type: Union[str, Enum]) -> Callable[[Handler], Handler]:
        """Decorator form of register()."""
        def decorator(func: Handler) -> Handler:
            self.register(job_type, func)
            return func
        return decorator

    def get(self, job_type: Union[str, Enum]) -> Optional[Handler]:
        return self._handlers.get(job_type_key(job_type))

    def job_types(self) -> List[str]:
        return sorted(self._handlers)

    def __contains__(self, job_type: object) -> bool:
        if not isinstance(job_type, (str, Enum)):
            return False
        return job_type_key(job_type) in self._handlers

    def __len__(self) -> int:
        return len(self._handlers)

    def __bool__(self) -> bool:
        # An empty registry is still a registry.
        return True

    def dispatch(self, job: Job) -> Any:
        """Invoke the handler for job.type with the job payload.

        Raises UnknownJobTypeError when nothing is registered; any exception
        the handler raises propagates to the caller unchanged.
        """
        handler = self.get(job.type)
        if handler is None:
            raise UnknownJobTypeError(job.type)
        return handler(job.payload)
