"""
Operation plan application service.

Coordinates plan generation, manual assembly, lookups and the approval-time
dock conflict check over the repository contracts. Plans for a date are
always written wholesale, and generation for one date runs under a per-date
lock so two concurrent generations cannot interleave.
"""

import threading
from collections.abc import Iterable, Iterator, Mapping
from contextlib import contextmanager
from datetime import date, datetime
from uuid import UUID

from berthing.core.observability import DOCK_CONFLICTS, get_logger, monitor_performance
from berthing.domain.scheduling.entities.operation_plan import OperationPlan
from berthing.domain.scheduling.events.domain_events import DomainEventDispatcher
from berthing.domain.scheduling.repositories.operation_plan_repository import (
    OperationPlanRepository,
)
from berthing.domain.scheduling.repositories.vessel_visit_execution_repository import (
    VesselVisitExecutionRepository,
)
from berthing.domain.scheduling.services.conflict_detector import find_conflicts
from berthing.domain.scheduling.services.schedule_generator import ScheduleGenerator
from berthing.domain.scheduling.value_objects.assignment import Assignment
from berthing.domain.scheduling.value_objects.planning_inputs import (
    DockInfo,
    VisitRequest,
)
from berthing.domain.shared.exceptions import (
    OperationPlanNotFoundError,
    PlanAlreadyExistsError,
    ResourceConflictError,
    ValidationError,
)
from berthing.domain.shared.validation import SchedulingValidators

from ..dtos.planning_dtos import FeasibilityReport

logger = get_logger(__name__)


def _plan_day(plan_date: date | datetime | str) -> date:
    try:
        return SchedulingValidators.normalize_calendar_date("plan_date", plan_date)
    except ValidationError as e:
        raise ValueError(e.message)


class OperationPlanService:
    """
    Application service for operation plan use cases.

    Domain events recorded by the plans are dispatched after the plan has
    been saved.
    """

    def __init__(
        self,
        plan_repository: OperationPlanRepository,
        execution_repository: VesselVisitExecutionRepository,
        generator: ScheduleGenerator | None = None,
        event_dispatcher: DomainEventDispatcher | None = None,
    ) -> None:
        """
        Initialize the operation plan service.

        Args:
            plan_repository: Operation plan data access
            execution_repository: Execution data access, read to derive plan status
            generator: Schedule generator, FIFO by default
            event_dispatcher: Dispatcher receiving the plans' domain events
        """
        self._plans = plan_repository
        self._executions = execution_repository
        self._generator = generator or ScheduleGenerator()
        self._dispatcher = event_dispatcher or DomainEventDispatcher()
        # date -> [lock, number of callers using it]
        self._date_locks: dict[date, list] = {}
        self._date_locks_guard = threading.Lock()

    @contextmanager
    def _lock_for(self, plan_date: date) -> Iterator[None]:
        """Hold the lock of a date; the lock is dropped once nobody uses it."""
        with self._date_locks_guard:
            entry = self._date_locks.setdefault(plan_date, [threading.Lock(), 0])
            entry[1] += 1
        try:
            with entry[0]:
                yield
        finally:
            with self._date_locks_guard:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._date_locks[plan_date]

    def _publish(self, plan: OperationPlan) -> None:
        self._dispatcher.dispatch_all(plan.get_domain_events())
        plan.clear_domain_events()

    def _store(self, plan: OperationPlan, replace: bool) -> OperationPlan:
        plan.refresh_status(
            e.status for e in self._executions.list_by_date(plan.plan_date)
        )
        if replace:
            self._plans.replace(plan)
        else:
            self._plans.add(plan)
        self._publish(plan)
        return plan

    @monitor_performance("generate_plan_request")
    def generate_plan(
        self,
        plan_date: date | datetime | str,
        visits: Iterable[VisitRequest],
        docks: Iterable[DockInfo] | Mapping[UUID, DockInfo],
        commitments: Iterable[Assignment] = (),
        author: str | None = None,
        replace: bool = False,
    ) -> OperationPlan:
        """
        Generate and save the plan for a date.

        Args:
            plan_date: Operating day to plan
            visits: Approved visit requests for the day
            docks: Dock catalog snapshot
            commitments: Assignments already holding docks
            author: Who requested the plan
            replace: Overwrite an existing plan for the date

        Returns:
            Saved plan; an infeasible plan is saved and returned as well

        Raises:
            ValueError: If plan_date is not a calendar date
            PlanAlreadyExistsError: If a plan exists for the date and replace is False
        """
        day = _plan_day(plan_date)
        with self._lock_for(day):
            if not replace and self._plans.get_by_date(day) is not None:
                raise PlanAlreadyExistsError(day)

            plan = self._generator.generate(
                day, visits, docks, commitments, author=author
            )
            return self._store(plan, replace)

    def create_plan(
        self,
        plan_date: date | datetime | str,
        assignments: Iterable[Assignment],
        author: str | None = None,
    ) -> OperationPlan:
        """
        Save a manually assembled plan after checking its feasibility.

        Raises:
            PlanAlreadyExistsError: If a plan already exists for the date
        """
        day = _plan_day(plan_date)
        with self._lock_for(day):
            plan = OperationPlan.assemble(day, assignments, author=author)
            logger.info(
                "Manual operation plan assembled",
                plan_date=day.isoformat(),
                assignments=plan.get_total_assignments(),
                is_feasible=plan.is_feasible,
            )
            return self._store(plan, replace=False)

    def replace_plan(
        self,
        plan_date: date | datetime | str,
        assignments: Iterable[Assignment],
        author: str | None = None,
    ) -> OperationPlan:
        """Save a manually assembled plan, overwriting any plan for the date."""
        day = _plan_day(plan_date)
        with self._lock_for(day):
            plan = OperationPlan.assemble(day, assignments, author=author)
            return self._store(plan, replace=True)

    def validate_feasibility(
        self, plan_date: date | datetime | str, assignments: Iterable[Assignment]
    ) -> FeasibilityReport:
        """Check a candidate assignment list without saving anything."""
        plan = OperationPlan.assemble(plan_date, assignments)
        return FeasibilityReport(
            is_feasible=plan.is_feasible,
            warnings=list(plan.warnings),
            total_assignments=plan.get_total_assignments(),
        )

    def get_plan(self, plan_id: UUID) -> OperationPlan:
        """
        Get a plan by ID.

        Raises:
            OperationPlanNotFoundError: If no plan has this ID
        """
        plan = self._plans.get_by_id(plan_id)
        if plan is None:
            raise OperationPlanNotFoundError(plan_id)
        return plan

    def get_plan_by_date(self, plan_date: date | datetime | str) -> OperationPlan | None:
        return self._plans.get_by_date(_plan_day(plan_date))

    def search_plans(
        self,
        start: date | datetime | str | None = None,
        end: date | datetime | str | None = None,
        is_feasible: bool | None = None,
    ) -> list[OperationPlan]:
        start_day = _plan_day(start) if start is not None else None
        end_day = _plan_day(end) if end is not None else None
        return self._plans.search(start_day, end_day, is_feasible)

    def delete_plan(self, plan_date: date | datetime | str) -> None:
        """
        Delete the plan for a date.

        Raises:
            OperationPlanNotFoundError: If no plan exists for the date
        """
        day = _plan_day(plan_date)
        with self._lock_for(day):
            if not self._plans.delete_by_date(day):
                raise OperationPlanNotFoundError(day)
        logger.info("Operation plan deleted", plan_date=day.isoformat())

    def refresh_status(self, plan_id: UUID) -> OperationPlan:
        """
        Recompute a plan's status from the executions of its date and save it.

        Raises:
            OperationPlanNotFoundError: If no plan has this ID
        """
        return self._refresh(self.get_plan(plan_id))

    def refresh_status_for_date(self, plan_date: date) -> OperationPlan | None:
        """Refresh the status of the plan for a date, if there is one."""
        plan = self._plans.get_by_date(plan_date)
        if plan is None:
            return None
        return self._refresh(plan)

    def _refresh(self, plan: OperationPlan) -> OperationPlan:
        statuses = [e.status for e in self._executions.list_by_date(plan.plan_date)]
        if plan.refresh_status(statuses):
            self._plans.update(plan)
            logger.info(
                "Operation plan status changed",
                plan_id=str(plan.id),
                status=plan.status.value,
            )
            self._publish(plan)
        return plan

    def check_dock_conflicts(
        self, candidate: Assignment, plan_date: date | datetime | str
    ) -> list[Assignment]:
        """
        Assignments in the stored plan for a date that clash with a candidate.

        An assignment for the candidate's own visit is not a conflict. With
        no plan stored for the date there is nothing to clash with.
        """
        plan = self._plans.get_by_date(_plan_day(plan_date))
        if plan is None:
            return []
        others = [a for a in plan.assignments if a.visit_id != candidate.visit_id]
        return find_conflicts(candidate, others)

    def ensure_dock_available(
        self,
        candidate: Assignment,
        plan_date: date | datetime | str,
        override: bool = False,
    ) -> list[Assignment]:
        """
        Approval-time check of an operator-chosen dock.

        Returns:
            The conflicting assignments (empty when the dock is free)

        Raises:
            ResourceConflictError: If the dock is taken and override is False
        """
        conflicts = self.check_dock_conflicts(candidate, plan_date)
        if not conflicts:
            return conflicts

        DOCK_CONFLICTS.labels(source="approval").inc(len(conflicts))
        if not override:
            raise ResourceConflictError(
                f"Dock {candidate.dock_label()} is already assigned during "
                f"{candidate.time_window} to "
                + ", ".join(a.label() for a in conflicts),
                [a.visit_id for a in conflicts],
            )

        logger.warning(
            "Dock conflict overridden at approval",
            visit_id=str(candidate.visit_id),
            dock_id=str(candidate.dock_id),
            conflicting_visits=[str(a.visit_id) for a in conflicts],
        )
        return conflicts
