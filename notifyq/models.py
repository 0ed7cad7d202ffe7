"""Data models for jobs, notification payloads and configuration."""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from pydantic_settings import BaseSettings, SettingsConfigDict


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class JobState(str, Enum):
    """Job lifecycle states."""
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


TERMINAL_STATES = frozenset({JobState.COMPLETED, JobState.FAILED})

# Legal moves between states; anything else is a bug in the caller.
TRANSITIONS = {
    JobState.PENDING: frozenset({JobState.PROCESSING}),
    JobState.PROCESSING: frozenset({JobState.COMPLETED, JobState.FAILED}),
    JobState.COMPLETED: frozenset(),
    JobState.FAILED: frozenset(),
}


class JobType(str, Enum):
    """Job types with a built-in handler."""
    BOOKING_CONFIRMATION = "BOOKING_CONFIRMATION"
    EVENT_UPDATE_NOTIFICATION = "EVENT_UPDATE_NOTIFICATION"


class Job(BaseModel):
    """A unit of deferred work."""
    id: str
    type: str
    payload: Any = None
    state: JobState = JobState.PENDING
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None
    error_message: Optional[str] = None

    @property
    def is_terminal(self) -> bool:
        return self.state in TERMINAL_STATES


# Notification payloads. Keys are accepted in snake_case or camelCase.

class PayloadModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Customer(PayloadModel):
    id: str
    email: str
    name: str


class Event(PayloadModel):
    model_config = ConfigDict(extra="allow")

    id: str
    name: str
    date: datetime
    location: str
    description: Optional[str] = None
    ticket_price: Optional[float] = None


class Booking(PayloadModel):
    id: str
    ticket_count: int = Field(ge=1)
    total_amount: float


class BookingConfirmationPayload(PayloadModel):
    booking: Booking
    customer: Customer
    event: Event


class EventUpdatePayload(PayloadModel):
    event: Event
    customers: List[Customer]
    update_fields: List[str]


class Config(BaseSettings):
    """Queue configuration, read from NOTIFYQ_* environment variables."""
    model_config = SettingsConfigDict(
        env_prefix="NOTIFYQ_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    processing_delay: float = Field(
        default=0.1, ge=0, description="Simulated latency before each dispatch (seconds)"
    )
    handler_timeout: Optional[float] = Field(
        default=None, gt=0, description="Per-handler timeout in seconds; None waits forever"
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", description="Logging level"
    )
    worker_name: str = Field(default="notifyq-worker", description="Drain thread name")
