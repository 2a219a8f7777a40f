"""Repository contracts for the scheduling aggregates."""

from .operation_plan_repository import OperationPlanRepository
from .vessel_visit_execution_repository import VesselVisitExecutionRepository

__all__ = ["OperationPlanRepository", "VesselVisitExecutionRepository"]
