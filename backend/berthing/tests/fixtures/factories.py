"""
Test factories for berth planning objects.

All times are timezone-aware UTC on a fixed operating day so that plans,
executions and stored records compare cleanly.
"""

from datetime import date, datetime, timedelta, timezone
from uuid import UUID, uuid4

from berthing.domain.scheduling.entities.operation_plan import OperationPlan
from berthing.domain.scheduling.entities.vessel_visit_execution import (
    VesselVisitExecution,
)
from berthing.domain.scheduling.value_objects.assignment import Assignment
from berthing.domain.scheduling.value_objects.planning_inputs import (
    DockInfo,
    VisitRequest,
)

PLAN_DAY = date(2025, 3, 10)
MIDNIGHT = datetime(2025, 3, 10, tzinfo=timezone.utc)


def at(hour: int, minute: int = 0) -> datetime:
    """Instant on the test operating day."""
    return MIDNIGHT + timedelta(hours=hour, minutes=minute)


def make_dock(name: str | None = None, dock_id: UUID | None = None) -> DockInfo:
    return DockInfo(dock_id=dock_id or uuid4(), name=name)


def make_assignment(
    dock_id: UUID,
    start_hour: float,
    end_hour: float,
    visit_id: UUID | None = None,
    **kwargs,
) -> Assignment:
    return Assignment(
        visit_id=visit_id or uuid4(),
        dock_id=dock_id,
        eta=MIDNIGHT + timedelta(hours=start_hour),
        etd=MIDNIGHT + timedelta(hours=end_hour),
        **kwargs,
    )


def make_visit(
    start_hour: float,
    end_hour: float,
    visit_id: UUID | None = None,
    **kwargs,
) -> VisitRequest:
    return VisitRequest(
        visit_id=visit_id or uuid4(),
        eta=MIDNIGHT + timedelta(hours=start_hour),
        etd=MIDNIGHT + timedelta(hours=end_hour),
        **kwargs,
    )


def make_plan(assignments: list[Assignment] | None = None, **kwargs) -> OperationPlan:
    return OperationPlan.assemble(PLAN_DAY, assignments or [], **kwargs)


def make_execution(
    planned_dock_id: UUID | None = None,
    start_hour: float = 10,
    end_hour: float = 14,
    **kwargs,
) -> VesselVisitExecution:
    return VesselVisitExecution(
        visit_id=kwargs.pop("visit_id", None) or uuid4(),
        vve_date=kwargs.pop("vve_date", PLAN_DAY),
        planned_dock_id=planned_dock_id or uuid4(),
        planned_arrival_time=MIDNIGHT + timedelta(hours=start_hour),
        planned_departure_time=MIDNIGHT + timedelta(hours=end_hour),
        **kwargs,
    )
