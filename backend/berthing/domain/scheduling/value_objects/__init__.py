"""Scheduling value objects."""

from .assignment import Assignment, UnassignedVisit
from .enums import ExecutionStatus, OperationPlanStatus
from .planning_inputs import DockInfo, VisitRequest
from .time_window import TimeWindow

__all__ = [
    "Assignment",
    "UnassignedVisit",
    "ExecutionStatus",
    "OperationPlanStatus",
    "DockInfo",
    "VisitRequest",
    "TimeWindow",
]
