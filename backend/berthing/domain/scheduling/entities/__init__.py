"""Scheduling domain entities."""

from .operation_plan import OperationPlan
from .vessel_visit_execution import VesselVisitExecution

__all__ = ["OperationPlan", "VesselVisitExecution"]
