"""
Domain Events

Events raised by the operation plan and vessel-visit execution aggregates,
plus a small synchronous dispatcher the application services publish through
once a change has been saved.
"""

from collections.abc import Callable
from datetime import date, datetime
from uuid import UUID

from berthing.core.observability import get_logger

from ...shared.base import DomainEvent
from ..value_objects.enums import ExecutionStatus, OperationPlanStatus


class OperationPlanGenerated(DomainEvent):
    """Raised when a plan is produced for a date."""

    plan_date: date
    algorithm: str
    assignment_count: int
    unassigned_count: int
    is_feasible: bool


class DockConflictDetected(DomainEvent):
    """Raised for each overlapping pair found by a feasibility check."""

    dock_id: UUID
    first_visit_id: UUID
    second_visit_id: UUID


class OperationPlanStatusChanged(DomainEvent):
    """Raised when the derived plan status changes."""

    old_status: OperationPlanStatus
    new_status: OperationPlanStatus


class ExecutionStatusChanged(DomainEvent):
    """Raised when a vessel-visit execution changes status."""

    visit_id: UUID
    old_status: ExecutionStatus
    new_status: ExecutionStatus
    reason: str | None = None


class BerthUpdated(DomainEvent):
    """Raised when actual berth data is recorded for an execution."""

    visit_id: UUID
    actual_dock_id: UUID | None
    actual_arrival_time: datetime | None
    actual_departure_time: datetime | None
    dock_changed: bool
    delayed: bool


EventHandler = Callable[[DomainEvent], None]


class DomainEventDispatcher:
    """Dispatches domain events to registered handlers."""

    def __init__(self) -> None:
        self._handlers: list[tuple[type[DomainEvent], EventHandler]] = []
        self._logger = get_logger(__name__)

    def register_handler(
        self, handler: EventHandler, event_type: type[DomainEvent] = DomainEvent
    ) -> None:
        """Register a handler for an event type (and its subclasses)."""
        if (event_type, handler) not in self._handlers:
            self._handlers.append((event_type, handler))

    def unregister_handler(
        self, handler: EventHandler, event_type: type[DomainEvent] = DomainEvent
    ) -> None:
        """Unregister an event handler."""
        if (event_type, handler) in self._handlers:
            self._handlers.remove((event_type, handler))

    def dispatch(self, event: DomainEvent) -> None:
        """Dispatch an event to all capable handlers."""
        self._logger.debug(
            "Dispatching domain event",
            event_type=type(event).__name__,
            aggregate_id=str(event.aggregate_id),
        )
        for event_type, handler in self._handlers:
            if isinstance(event, event_type):
                handler(event)

    def dispatch_all(self, events: list[DomainEvent]) -> None:
        """Dispatch multiple events."""
        for event in events:
            self.dispatch(event)
