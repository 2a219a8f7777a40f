"""Vessel-visit execution aggregate: tracks one visit's actual berthing."""

from datetime import date, datetime, timedelta
from uuid import UUID

from pydantic import (
    AwareDatetime,
    Field,
    TypeAdapter,
    field_validator,
    model_validator,
)

from berthing.core.observability import EXECUTION_TRANSITIONS

from ...shared.base import AggregateRoot, utc_now
from ...shared.exceptions import InvalidStatusTransitionError, ValidationError
from ...shared.validation import BusinessRuleValidators, SchedulingValidators
from ..events.domain_events import BerthUpdated, ExecutionStatusChanged
from ..value_objects.assignment import Assignment
from ..value_objects.enums import ExecutionStatus

_instant = TypeAdapter(AwareDatetime)


class VesselVisitExecution(AggregateRoot):
    """
    Execution-time record of one visit on one operating date.

    The planned fields are copied from the plan when the execution is
    prepared; the actual fields are filled in as the vessel berths and
    departs. Berth updates never change the status on their own: callers
    decide which transition the new data implies and call ``transition_to``.
    """

    visit_id: UUID
    operation_plan_id: UUID | None = None
    vve_date: date
    planned_dock_id: UUID
    planned_arrival_time: AwareDatetime
    planned_departure_time: AwareDatetime

    actual_dock_id: UUID | None = None
    actual_arrival_time: AwareDatetime | None = None
    actual_departure_time: AwareDatetime | None = None

    status: ExecutionStatus = Field(default=ExecutionStatus.NOT_STARTED)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @field_validator("visit_id", "planned_dock_id", mode="before")
    @classmethod
    def validate_identifier(cls, v, info):
        try:
            return SchedulingValidators.parse_identifier(info.field_name, v)
        except ValidationError as e:
            raise ValueError(e.message)

    @field_validator("operation_plan_id", "actual_dock_id", mode="before")
    @classmethod
    def validate_optional_identifier(cls, v, info):
        if v is None:
            return v
        try:
            return SchedulingValidators.parse_identifier(info.field_name, v)
        except ValidationError as e:
            raise ValueError(e.message)

    @field_validator("vve_date", mode="before")
    @classmethod
    def normalize_vve_date(cls, v):
        try:
            return SchedulingValidators.normalize_calendar_date("vve_date", v)
        except ValidationError as e:
            raise ValueError(e.message)

    @model_validator(mode="after")
    def planned_window_is_valid(self) -> "VesselVisitExecution":
        try:
            BusinessRuleValidators.validate_date_range(
                "planned_arrival_time",
                self.planned_arrival_time,
                "planned_departure_time",
                self.planned_departure_time,
            )
        except ValidationError as e:
            raise ValueError(e.message)
        return self

    def is_delayed(self) -> bool:
        """True iff the vessel has arrived and did so after the planned arrival."""
        if self.actual_arrival_time is None:
            return False
        return self.actual_arrival_time > self.planned_arrival_time

    def is_dock_changed(self) -> bool:
        """True iff the vessel berthed at a dock other than the planned one."""
        if self.actual_dock_id is None:
            return False
        return self.actual_dock_id != self.planned_dock_id

    def arrival_delay(self) -> timedelta | None:
        """Actual minus planned arrival, or None while the vessel has not arrived."""
        if self.actual_arrival_time is None:
            return None
        return self.actual_arrival_time - self.planned_arrival_time

    def can_transition_to(self, target: ExecutionStatus) -> bool:
        return self.status.can_transition_to(target)

    def transition_to(self, target: ExecutionStatus, reason: str | None = None) -> None:
        """
        Move to a new status.

        Args:
            target: Status to move to
            reason: Optional reason recorded on the event

        Raises:
            InvalidStatusTransitionError: If the transition table forbids the move
        """
        target = ExecutionStatus(target)
        if not self.can_transition_to(target):
            raise InvalidStatusTransitionError(
                self.status.value,
                target.value,
                [s.value for s in self.status.allowed_transitions()],
            )

        old_status = self.status
        self.status = target
        self.updated_at = utc_now()

        EXECUTION_TRANSITIONS.labels(
            from_status=old_status.value, to_status=target.value
        ).inc()
        self.add_domain_event(
            ExecutionStatusChanged(
                aggregate_id=self.id,
                visit_id=self.visit_id,
                old_status=old_status,
                new_status=target,
                reason=reason,
            )
        )

    def update_berth(
        self,
        actual_dock_id: UUID | None = None,
        actual_arrival_time: datetime | None = None,
        actual_departure_time: datetime | None = None,
    ) -> None:
        """
        Record actual berth data. Fields left as None keep their current value.

        Raises:
            ValueError: If a time has no UTC offset or the recorded departure
                is not after the arrival
        """
        if actual_arrival_time is not None:
            actual_arrival_time = _instant.validate_python(actual_arrival_time)
        if actual_departure_time is not None:
            actual_departure_time = _instant.validate_python(actual_departure_time)

        arrival = actual_arrival_time or self.actual_arrival_time
        departure = actual_departure_time or self.actual_departure_time
        if arrival and departure:
            try:
                BusinessRuleValidators.validate_date_range(
                    "actual_arrival_time", arrival, "actual_departure_time", departure
                )
            except ValidationError as e:
                raise ValueError(e.message)

        if actual_dock_id is not None:
            self.actual_dock_id = actual_dock_id
        if actual_arrival_time is not None:
            self.actual_arrival_time = actual_arrival_time
        if actual_departure_time is not None:
            self.actual_departure_time = actual_departure_time

        self.updated_at = utc_now()
        self.add_domain_event(
            BerthUpdated(
                aggregate_id=self.id,
                visit_id=self.visit_id,
                actual_dock_id=self.actual_dock_id,
                actual_arrival_time=self.actual_arrival_time,
                actual_departure_time=self.actual_departure_time,
                dock_changed=self.is_dock_changed(),
                delayed=self.is_delayed(),
            )
        )

    @classmethod
    def from_assignment(
        cls,
        assignment: Assignment,
        operation_plan_id: UUID | None,
        vve_date: date | datetime | str,
    ) -> "VesselVisitExecution":
        """Create a NotStarted execution mirroring a planned assignment."""
        return cls(
            visit_id=assignment.visit_id,
            operation_plan_id=operation_plan_id,
            vve_date=vve_date,
            planned_dock_id=assignment.dock_id,
            planned_arrival_time=assignment.eta,
            planned_departure_time=assignment.etd,
        )

    def __str__(self) -> str:
        return (
            f"VesselVisitExecution(visit={self.visit_id}, "
            f"date={self.vve_date.isoformat()}, status={self.status.value})"
        )
