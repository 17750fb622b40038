"""
Allocation event publisher.

Services publish an event after their transaction commits. Subscribers
are notified synchronously; a failing subscriber is logged and never
undoes or fails the operation that published the event.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

ALLOCATION_CREATED = "allocation.created"
ALLOCATION_ENDED = "allocation.ended"
ALLOCATION_UPDATED = "allocation.updated"
OCCUPANCY_CORRECTED = "room.occupancy_corrected"


@dataclass(frozen=True)
class AllocationEvent:
    """Something that changed a room's occupants."""

    event_type: str
    room_id: str
    allocation_id: Optional[str] = None
    student_id: Optional[str] = None
    bed_id: Optional[str] = None
    actor_id: Optional[str] = None
    data: Dict[str, Any] = field(default_factory=dict)
    occurred_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event_type": self.event_type,
            "room_id": self.room_id,
            "allocation_id": self.allocation_id,
            "student_id": self.student_id,
            "bed_id": self.bed_id,
            "actor_id": self.actor_id,
            "data": self.data,
            "occurred_at": self.occurred_at.isoformat(),
        }


Handler = Callable[[AllocationEvent], None]


class AllocationEventPublisher:
    """
    In-process publisher for allocation events.

    Handlers subscribe per event type, or to every event with ``"*"``.
    """

    def __init__(self):
        self._handlers: Dict[str, List[Handler]] = {}

    def subscribe(self, event_type: str, handler: Handler) -> None:
        self._handlers.setdefault(event_type, []).append(handler)
        logger.debug(f"Registered handler for event type: {event_type}")

    def publish(self, event: AllocationEvent) -> None:
        handlers = self._handlers.get(event.event_type, []) + self._handlers.get("*", [])
        for handler in handlers:
            try:
                handler(event)
            except Exception:
                logger.error(
                    f"Handler {getattr(handler, '__name__', handler)!r} failed for {event.event_type}",
                    exc_info=True,
                    extra={
                        "allocation_id": event.allocation_id,
                        "room_id": event.room_id,
                    },
                )


def log_allocation_event(event: AllocationEvent) -> None:
    """Default subscriber: write the event to the application log."""
    logger.info(
        f"Allocation event {event.event_type}",
        extra={
            "event": event.to_dict(),
            "allocation_id": event.allocation_id,
            "room_id": event.room_id,
            "bed_id": event.bed_id,
        },
    )


def default_publisher() -> AllocationEventPublisher:
    publisher = AllocationEventPublisher()
    publisher.subscribe("*", log_allocation_event)
    return publisher
