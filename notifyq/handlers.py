"""Notification handlers for booking and event-update jobs.

Each handler validates its payload, renders a plain-text report and hands
it to a transport. The console transport is the default outbound side
effect; embedders can supply any object with a ``send(message)`` method.
"""

import logging
import threading
from typing import Any, List, Optional
import click
from .models import (
    BookingConfirmationPayload,
    Event,
    EventUpdatePayload,
    JobType,
)
from .registry import HandlerRegistry

logger = logging.getLogger(__name__)

RULE = "=" * 60
THIN_RULE = "-" * 60


class ConsoleTransport:
    """Writes reports to stdout."""

    def send(self, message: str) -> None:
        click.echo(message)


class RecordingTransport:
    """Keeps reports in memory."""

    def __init__(self):
        self._lock = threading.Lock()
        self._messages: List[str] = []

    def send(self, message: str) -> None:
        with self._lock:
            self._messages.append(message)

    @property
    def messages(self) -> List[str]:
        with self._lock:
            return list(self._messages)


def _format_date(value) -> str:
    return value.strftime("%Y-%m-%d %H:%M")


def _field_value(event: Event, field: str) -> Any:
    """Look up an event field by attribute name or camelCase alias."""
    for name, info in type(event).model_fields.items():
        if field in (name, info.alias):
            return getattr(event, name)
    return getattr(event, field, None)


class BookingConfirmationHandler:
    """Sends a booking confirmation to the customer who booked.

    Payload expected:
    {
        "booking": {"id", "ticket_count", "total_amount"},
        "customer": {"id", "email", "name"},
        "event": {"id", "name", "date", "location", ...}
    }
    """

    def __init__(self, transport: Any):
        self.transport = transport

    def render(self, data: BookingConfirmationPayload) -> str:
        booking, customer, event = data.booking, data.customer, data.event
        lines = [
            RULE,
            "BOOKING CONFIRMATION EMAIL",
            RULE,
            f"To: {customer.email}",
            f"Subject: Booking Confirmation - {event.name}",
            THIN_RULE,
            f"Dear {customer.name},",
            "",
            "Your booking has been confirmed!",
            "",
            "Booking Details:",
            f"  Booking ID: {booking.id}",
            f"  Event: {event.name}",
            f"  Date: {_format_date(event.date)}",
            f"  Location: {event.location}",
            f"  Tickets: {booking.ticket_count}",
            f"  Total Amount: ${booking.total_amount:.2f}",
            "",
            "Thank you for your booking!",
            RULE,
        ]
        return "\n".join(lines)

    def __call__(self, payload: Any) -> None:
        data = BookingConfirmationPayload.model_validate(payload)
        self.transport.send(self.render(data))
        logger.info(
            "Booking confirmation sent",
            extra={"booking_id": data.booking.id, "email": data.customer.email},
        )


class EventUpdateNotificationHandler:
    """Tells every customer holding a booking that an event changed.

    Payload expected:
    {
        "event": {...},
        "customers": [{"id", "email", "name"}, ...],
        "update_fields": ["location", ...]
    }
    """

    def __init__(self, transport: Any):
        self.transport = transport

    def render(self, data: EventUpdatePayload) -> str:
        event = data.event
        lines = [
            RULE,
            "EVENT UPDATE NOTIFICATION",
            RULE,
            f"Event: {event.name}",
            f"Updated Fields: {', '.join(data.update_fields)}",
            f"Notifying {len(data.customers)} customer(s)",
            THIN_RULE,
        ]
        for customer in data.customers:
            lines.extend([
                "",
                f"To: {customer.email}",
                f"Subject: Update for {event.name}",
                f"Dear {customer.name},",
                "",
                f'The event "{event.name}" has been updated.',
                "",
                "Updated Information:",
            ])
            for field in data.update_fields:
                lines.append(f"  {field}: {_field_value(event, field)}")
            lines.extend(["", "Please review the changes."])
        lines.extend(["", RULE])
        return "\n".join(lines)

    def __call__(self, payload: Any) -> None:
        data = EventUpdatePayload.model_validate(payload)
        self.transport.send(self.render(data))
        logger.info(
            "Event update notification sent",
            extra={"event_id": data.event.id, "recipients": len(data.customers)},
        )


def build_registry(transport: Optional[Any] = None) -> HandlerRegistry:
    """Registry with the built-in notification handlers."""
    if transport is None:
        transport = ConsoleTransport()
    registry = HandlerRegistry()
    registry.register(JobType.BOOKING_CONFIRMATION, BookingConfirmationHandler(transport))
    registry.register(
        JobType.EVENT_UPDATE_NOTIFICATION, EventUpdateNotificationHandler(transport)
    )
    return registry
