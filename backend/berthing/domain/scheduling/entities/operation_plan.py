"""Operation plan aggregate root: the dock assignments for one calendar day."""

from collections.abc import Iterable
from datetime import date, datetime
from uuid import UUID

from pydantic import Field, PrivateAttr, computed_field, field_validator

from berthing.core.config import settings
from berthing.core.observability import DOCK_CONFLICTS

from ...shared.base import AggregateRoot, utc_now
from ...shared.exceptions import ValidationError
from ...shared.validation import SchedulingValidators
from ..events.domain_events import DockConflictDetected, OperationPlanStatusChanged
from ..services.conflict_detector import conflicting_pairs
from ..services.plan_status import derive_plan_status
from ..value_objects.assignment import Assignment, UnassignedVisit, format_window
from ..value_objects.enums import ExecutionStatus, OperationPlanStatus


def conflict_warning(first: Assignment, second: Assignment, id_length: int = 0) -> str:
    """Human-readable description of two assignments clashing on a dock."""
    return (
        f"{first.label(id_length)} {format_window(first.eta, first.etd)} "
        f"conflicts with {second.label(id_length)} "
        f"{format_window(second.eta, second.etd)} "
        f"on dock {first.dock_label(id_length)}"
    )


class OperationPlan(AggregateRoot):
    """
    Operation plan aggregate root.

    Holds the assignments produced for a date together with feasibility
    metadata. ``warnings`` is rebuilt by ``check_feasibility`` from the
    visits that could not be placed, conflicts with commitments outside the
    plan and pairwise conflicts between the plan's own assignments.
    ``is_feasible`` is derived from ``warnings`` and cannot be set.
    """

    plan_date: date
    status: OperationPlanStatus = Field(default=OperationPlanStatus.NOT_STARTED)
    algorithm: str = Field(default_factory=lambda: settings.DEFAULT_PLAN_ALGORITHM)
    assignments: list[Assignment] = Field(default_factory=list)
    unassigned: list[UnassignedVisit] = Field(default_factory=list)
    external_conflicts: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    creation_date: datetime = Field(default_factory=utc_now)
    author: str = Field(default_factory=lambda: settings.DEFAULT_PLAN_AUTHOR)

    _reported_conflicts: set[tuple[UUID, UUID, UUID]] = PrivateAttr(default_factory=set)

    @field_validator("plan_date", mode="before")
    @classmethod
    def normalize_plan_date(cls, v):
        try:
            return SchedulingValidators.normalize_calendar_date("plan_date", v)
        except ValidationError as e:
            raise ValueError(e.message)

    @field_validator("author", mode="before")
    @classmethod
    def default_author(cls, v):
        if v is None or (isinstance(v, str) and not v.strip()):
            return settings.DEFAULT_PLAN_AUTHOR
        return v

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_feasible(self) -> bool:
        """True when the last feasibility check produced no warnings."""
        return not self.warnings

    def check_feasibility(self) -> bool:
        """
        Recompute warnings and return whether the plan is feasible.

        Idempotent: repeated calls on an unmodified plan produce the same
        warnings in the same order. A conflicting pair is recorded as a
        DockConflictDetected event only on the check that first finds it.
        """
        id_length = settings.WARNING_ID_LENGTH
        warnings = [visit.warning(id_length) for visit in self.unassigned]
        warnings.extend(self.external_conflicts)

        reported: set[tuple[UUID, UUID, UUID]] = set()
        for first, second in conflicting_pairs(self.assignments):
            warnings.append(conflict_warning(first, second, id_length))
            key = (first.dock_id, first.visit_id, second.visit_id)
            reported.add(key)
            if key in self._reported_conflicts:
                continue
            DOCK_CONFLICTS.labels(source="plan").inc()
            self.add_domain_event(
                DockConflictDetected(
                    aggregate_id=self.id,
                    dock_id=first.dock_id,
                    first_visit_id=first.visit_id,
                    second_visit_id=second.visit_id,
                )
            )
        self._reported_conflicts = reported
        self.warnings = warnings
        return self.is_feasible

    def get_total_assignments(self) -> int:
        return len(self.assignments)

    def assignments_for_dock(self, dock_id: UUID) -> list[Assignment]:
        """Assignments on a dock, earliest arrival first."""
        return sorted(
            (a for a in self.assignments if a.dock_id == dock_id),
            key=lambda a: a.eta,
        )

    def find_assignment(self, visit_id: UUID) -> Assignment | None:
        for assignment in self.assignments:
            if assignment.visit_id == visit_id:
                return assignment
        return None

    def refresh_status(self, statuses: Iterable[ExecutionStatus]) -> bool:
        """
        Recompute the status from the executions of the plan's date.

        Returns:
            True if the status changed
        """
        new_status = derive_plan_status(statuses)
        if new_status == self.status:
            return False

        old_status = self.status
        self.status = new_status
        self.add_domain_event(
            OperationPlanStatusChanged(
                aggregate_id=self.id,
                old_status=old_status,
                new_status=new_status,
            )
        )
        return True

    @classmethod
    def assemble(
        cls,
        plan_date: date | datetime | str,
        assignments: Iterable[Assignment],
        author: str | None = None,
        algorithm: str | None = None,
        unassigned: Iterable[UnassignedVisit] = (),
        external_conflicts: Iterable[str] = (),
    ) -> "OperationPlan":
        """
        Factory method to build a plan and run its feasibility check.

        Args:
            plan_date: Operating day of the plan
            assignments: Dock assignments making up the plan
            author: Who produced the plan
            algorithm: Name of the strategy that produced the assignments
            unassigned: Visits that could not be placed
            external_conflicts: Warnings about commitments outside the plan

        Returns:
            New OperationPlan with warnings populated

        Raises:
            pydantic.ValidationError: If the date or any field is invalid
        """
        plan = cls(
            plan_date=plan_date,
            algorithm=algorithm or settings.DEFAULT_PLAN_ALGORITHM,
            assignments=list(assignments),
            unassigned=list(unassigned),
            external_conflicts=list(external_conflicts),
            author=author,
        )
        plan.check_feasibility()
        return plan

    def __str__(self) -> str:
        return (
            f"OperationPlan({self.plan_date.isoformat()}, "
            f"assignments={len(self.assignments)}, feasible={self.is_feasible})"
        )
