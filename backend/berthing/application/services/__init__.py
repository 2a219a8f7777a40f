"""
Application services for coordinating berth planning use cases.

These services orchestrate domain operations, coordinate with repositories
and publish domain events once changes are saved.
"""

from .execution_service import ExecutionService
from .operation_plan_service import OperationPlanService

__all__ = ["ExecutionService", "OperationPlanService"]
