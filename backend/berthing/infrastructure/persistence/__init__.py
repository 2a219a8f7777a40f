"""Persistence mapping and repository implementations."""

from .in_memory import (
    InMemoryOperationPlanRepository,
    InMemoryVesselVisitExecutionRepository,
)
from .mappers import OperationPlanMapper, VesselVisitExecutionMapper

__all__ = [
    "InMemoryOperationPlanRepository",
    "InMemoryVesselVisitExecutionRepository",
    "OperationPlanMapper",
    "VesselVisitExecutionMapper",
]
