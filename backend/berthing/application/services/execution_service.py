"""
Vessel-visit execution application service.

Prepares executions from a stored plan, records berth data and status
changes, and keeps the owning plan's derived status current.
"""

from datetime import date, datetime
from uuid import UUID

from berthing.core.config import settings
from berthing.core.observability import get_logger, monitor_performance
from berthing.domain.scheduling.entities.vessel_visit_execution import (
    VesselVisitExecution,
)
from berthing.domain.scheduling.events.domain_events import DomainEventDispatcher
from berthing.domain.scheduling.repositories.vessel_visit_execution_repository import (
    VesselVisitExecutionRepository,
)
from berthing.domain.scheduling.value_objects.enums import ExecutionStatus
from berthing.domain.shared.exceptions import (
    OperationPlanNotFoundError,
    ValidationError,
    VesselVisitExecutionNotFoundError,
)
from berthing.domain.shared.validation import SchedulingValidators

from ..dtos.planning_dtos import BerthUpdateResult, PreparationResult
from .operation_plan_service import OperationPlanService

logger = get_logger(__name__)


def _vve_day(vve_date: date | datetime | str) -> date:
    try:
        return SchedulingValidators.normalize_calendar_date("vve_date", vve_date)
    except ValidationError as e:
        raise ValueError(e.message)


def implied_transitions(execution: VesselVisitExecution) -> list[ExecutionStatus]:
    """
    Status changes implied by an execution's actual berth data, in order.

    A departure only completes a visit whose arrival has been recorded.
    """
    steps: list[ExecutionStatus] = []
    status = execution.status
    arrived = execution.actual_arrival_time is not None

    if status == ExecutionStatus.NOT_STARTED and arrived:
        status = (
            ExecutionStatus.DELAYED
            if execution.is_delayed()
            else ExecutionStatus.IN_PROGRESS
        )
        steps.append(status)
    elif status == ExecutionStatus.IN_PROGRESS and execution.is_delayed():
        status = ExecutionStatus.DELAYED
        steps.append(status)
    elif status == ExecutionStatus.DELAYED and arrived and not execution.is_delayed():
        status = ExecutionStatus.IN_PROGRESS
        steps.append(status)

    if (
        arrived
        and execution.actual_departure_time is not None
        and status in (ExecutionStatus.IN_PROGRESS, ExecutionStatus.DELAYED)
    ):
        steps.append(ExecutionStatus.COMPLETED)
    return steps


class ExecutionService:
    """Application service for the vessel-visit execution lifecycle."""

    def __init__(
        self,
        execution_repository: VesselVisitExecutionRepository,
        plan_service: OperationPlanService,
        event_dispatcher: DomainEventDispatcher | None = None,
    ) -> None:
        """
        Initialize the execution service.

        Args:
            execution_repository: Execution data access
            plan_service: Plan service used to read plans and refresh their status
            event_dispatcher: Dispatcher receiving the executions' domain events
        """
        self._executions = execution_repository
        self._plans = plan_service
        self._dispatcher = event_dispatcher or DomainEventDispatcher()

    def _publish(self, execution: VesselVisitExecution) -> None:
        self._dispatcher.dispatch_all(execution.get_domain_events())
        execution.clear_domain_events()

    @monitor_performance("prepare_executions")
    def prepare_executions(self, plan_date: date | datetime | str) -> PreparationResult:
        """
        Create a NotStarted execution for every assignment of the stored plan.

        Visits that already have an execution for the date are skipped, so the
        call can be repeated safely after a plan is replaced.

        Raises:
            OperationPlanNotFoundError: If no plan exists for the date
        """
        day = _vve_day(plan_date)
        plan = self._plans.get_plan_by_date(day)
        if plan is None:
            raise OperationPlanNotFoundError(day)

        result = PreparationResult()
        for assignment in plan.assignments:
            if self._executions.get_by_visit_and_date(assignment.visit_id, day):
                result.skipped.append(assignment.visit_id)
                continue
            execution = VesselVisitExecution.from_assignment(assignment, plan.id, day)
            self._executions.add(execution)
            result.created.append(execution)

        if result.created:
            self._plans.refresh_status_for_date(day)

        logger.info(
            "Executions prepared",
            plan_date=day.isoformat(),
            created=len(result.created),
            skipped=len(result.skipped),
        )
        return result

    def create_execution(
        self,
        visit_id: UUID | str,
        vve_date: date | datetime | str,
        planned_dock_id: UUID | str,
        planned_arrival_time: datetime,
        planned_departure_time: datetime,
        operation_plan_id: UUID | str | None = None,
    ) -> VesselVisitExecution:
        """
        Create a single execution outside of plan preparation.

        Raises:
            pydantic.ValidationError: If any field is malformed
            BusinessRuleError: If the visit already has an execution for the date
        """
        execution = VesselVisitExecution(
            visit_id=visit_id,
            vve_date=vve_date,
            planned_dock_id=planned_dock_id,
            planned_arrival_time=planned_arrival_time,
            planned_departure_time=planned_departure_time,
            operation_plan_id=operation_plan_id,
        )
        self._executions.add(execution)
        self._plans.refresh_status_for_date(execution.vve_date)
        return execution

    def get_execution(self, execution_id: UUID) -> VesselVisitExecution:
        """
        Get an execution by ID.

        Raises:
            VesselVisitExecutionNotFoundError: If no execution has this ID
        """
        execution = self._executions.get_by_id(execution_id)
        if execution is None:
            raise VesselVisitExecutionNotFoundError(execution_id)
        return execution

    def get_execution_for_visit(
        self, visit_id: UUID, vve_date: date | datetime | str
    ) -> VesselVisitExecution | None:
        return self._executions.get_by_visit_and_date(visit_id, _vve_day(vve_date))

    def list_for_date(self, vve_date: date | datetime | str) -> list[VesselVisitExecution]:
        return self._executions.list_by_date(_vve_day(vve_date))

    def search_executions(
        self,
        start: date | datetime | str | None = None,
        end: date | datetime | str | None = None,
        status: ExecutionStatus | str | None = None,
        skip: int = 0,
        take: int = 50,
    ) -> list[VesselVisitExecution]:
        """
        Search executions by date range and status, newest first.

        Raises:
            ValueError: If a date or the status is invalid, or paging is negative
        """
        if skip < 0 or take < 0:
            raise ValueError("skip and take must not be negative")
        return self._executions.search(
            _vve_day(start) if start is not None else None,
            _vve_day(end) if end is not None else None,
            ExecutionStatus(status) if status is not None else None,
            skip,
            take,
        )

    @monitor_performance("update_berth")
    def update_berth(
        self,
        execution_id: UUID,
        actual_dock_id: UUID | None = None,
        actual_arrival_time: datetime | None = None,
        actual_departure_time: datetime | None = None,
        auto_transition: bool = True,
    ) -> BerthUpdateResult:
        """
        Record actual berth data and, optionally, the status it implies.

        Args:
            execution_id: Execution to update
            actual_dock_id: Dock the vessel actually berthed at
            actual_arrival_time: When the vessel actually arrived
            actual_departure_time: When the vessel actually departed
            auto_transition: Apply the status change implied by the new data

        Returns:
            Updated execution and warnings about dock change or late arrival

        Raises:
            VesselVisitExecutionNotFoundError: If no execution has this ID
            ConcurrencyError: If the execution changed since it was read
        """
        execution = self.get_execution(execution_id)
        expected_updated_at = execution.updated_at

        execution.update_berth(actual_dock_id, actual_arrival_time, actual_departure_time)
        if auto_transition:
            for target in implied_transitions(execution):
                execution.transition_to(target, reason="berth_update")

        warnings = self._berth_warnings(execution)
        self._executions.update(execution, expected_updated_at)
        self._publish(execution)
        self._plans.refresh_status_for_date(execution.vve_date)

        logger.info(
            "Berth updated",
            execution_id=str(execution.id),
            status=execution.status.value,
            warnings=len(warnings),
        )
        return BerthUpdateResult(execution=execution, warnings=warnings)

    @staticmethod
    def _berth_warnings(execution: VesselVisitExecution) -> list[str]:
        id_length = settings.WARNING_ID_LENGTH
        warnings = []
        if execution.is_dock_changed():
            warnings.append(
                "Vessel berthed at dock "
                f"{SchedulingValidators.shorten_identifier(execution.actual_dock_id, id_length)}"
                " instead of planned dock "
                f"{SchedulingValidators.shorten_identifier(execution.planned_dock_id, id_length)}"
            )
        if execution.is_delayed():
            minutes = int(execution.arrival_delay().total_seconds() // 60)
            warnings.append(f"Vessel arrived {minutes} min after planned arrival")
        return warnings

    def update_status(
        self,
        execution_id: UUID,
        target: ExecutionStatus,
        reason: str | None = None,
    ) -> VesselVisitExecution:
        """
        Apply an explicit status transition.

        Raises:
            VesselVisitExecutionNotFoundError: If no execution has this ID
            InvalidStatusTransitionError: If the transition is not allowed
            ConcurrencyError: If the execution changed since it was read
        """
        execution = self.get_execution(execution_id)
        expected_updated_at = execution.updated_at
        execution.transition_to(target, reason=reason)
        self._executions.update(execution, expected_updated_at)
        self._publish(execution)
        self._plans.refresh_status_for_date(execution.vve_date)
        return execution

    def delete_execution(self, execution_id: UUID) -> None:
        """
        Administratively delete an execution.

        Raises:
            VesselVisitExecutionNotFoundError: If no execution has this ID
        """
        execution = self.get_execution(execution_id)
        self._executions.delete(execution_id)
        logger.warning(
            "Execution deleted",
            execution_id=str(execution_id),
            visit_id=str(execution.visit_id),
        )
        self._plans.refresh_status_for_date(execution.vve_date)
