"""Scheduling domain events."""

from .domain_events import (
    BerthUpdated,
    DockConflictDetected,
    DomainEventDispatcher,
    ExecutionStatusChanged,
    OperationPlanGenerated,
    OperationPlanStatusChanged,
)

__all__ = [
    "BerthUpdated",
    "DockConflictDetected",
    "DomainEventDispatcher",
    "ExecutionStatusChanged",
    "OperationPlanGenerated",
    "OperationPlanStatusChanged",
]
