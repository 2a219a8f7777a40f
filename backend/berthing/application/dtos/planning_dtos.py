"""
Planning Data Transfer Objects.

Results returned by the operation plan and execution application services.
"""

from uuid import UUID

from pydantic import BaseModel, Field

from berthing.domain.scheduling.entities.vessel_visit_execution import (
    VesselVisitExecution,
)


class FeasibilityReport(BaseModel):
    """Outcome of checking a candidate assignment list without saving it."""

    is_feasible: bool = Field(..., description="True when no warnings were produced")
    warnings: list[str] = Field(default_factory=list)
    total_assignments: int = Field(..., ge=0)


class PreparationResult(BaseModel):
    """Executions created from a plan, and the visits that already had one."""

    created: list[VesselVisitExecution] = Field(default_factory=list)
    skipped: list[UUID] = Field(
        default_factory=list, description="Visit IDs that already had an execution"
    )


class BerthUpdateResult(BaseModel):
    """An execution after a berth update, with operator-facing warnings."""

    execution: VesselVisitExecution
    warnings: list[str] = Field(default_factory=list)
