"""
In-memory repository implementations.

Aggregates are stored as mapped records, never as live objects, so every read
returns a fresh aggregate and callers cannot mutate stored state by accident.
A single lock per repository makes each operation atomic.
"""

import threading
from datetime import date, datetime
from uuid import UUID

from berthing.core.observability import get_logger
from berthing.domain.scheduling.entities.operation_plan import OperationPlan
from berthing.domain.scheduling.entities.vessel_visit_execution import (
    VesselVisitExecution,
)
from berthing.domain.scheduling.repositories.operation_plan_repository import (
    OperationPlanRepository,
)
from berthing.domain.scheduling.repositories.vessel_visit_execution_repository import (
    VesselVisitExecutionRepository,
)
from berthing.domain.scheduling.value_objects.enums import ExecutionStatus
from berthing.domain.shared.exceptions import (
    BusinessRuleError,
    ConcurrencyError,
    OperationPlanNotFoundError,
    PlanAlreadyExistsError,
    VesselVisitExecutionNotFoundError,
)

from .mappers import OperationPlanMapper, Record, VesselVisitExecutionMapper

logger = get_logger(__name__)


class InMemoryOperationPlanRepository(OperationPlanRepository):
    """Operation plan repository keeping records in a dict keyed by plan date."""

    def __init__(self) -> None:
        self._records: dict[date, Record] = {}
        self._lock = threading.Lock()

    def add(self, plan: OperationPlan) -> OperationPlan:
        with self._lock:
            if plan.plan_date in self._records:
                raise PlanAlreadyExistsError(plan.plan_date)
            self._records[plan.plan_date] = OperationPlanMapper.to_record(plan)
        logger.debug("Operation plan stored", plan_id=str(plan.id))
        return plan

    def replace(self, plan: OperationPlan) -> OperationPlan | None:
        with self._lock:
            previous = self._records.get(plan.plan_date)
            self._records[plan.plan_date] = OperationPlanMapper.to_record(plan)
        if previous is None:
            return None
        logger.info(
            "Operation plan replaced",
            plan_date=plan.plan_date.isoformat(),
            previous_plan_id=previous["id"],
            plan_id=str(plan.id),
        )
        return OperationPlanMapper.from_record(previous)

    def update(self, plan: OperationPlan) -> OperationPlan:
        with self._lock:
            stored = self._records.get(plan.plan_date)
            if stored is None or stored["id"] != str(plan.id):
                raise OperationPlanNotFoundError(plan.id)
            self._records[plan.plan_date] = OperationPlanMapper.to_record(plan)
        return plan

    def get_by_id(self, plan_id: UUID) -> OperationPlan | None:
        with self._lock:
            record = next(
                (r for r in self._records.values() if r["id"] == str(plan_id)), None
            )
        return OperationPlanMapper.from_record(record) if record else None

    def get_by_date(self, plan_date: date) -> OperationPlan | None:
        with self._lock:
            record = self._records.get(plan_date)
        return OperationPlanMapper.from_record(record) if record else None

    def search(
        self,
        start: date | None = None,
        end: date | None = None,
        is_feasible: bool | None = None,
    ) -> list[OperationPlan]:
        with self._lock:
            records = [
                record
                for plan_date, record in sorted(self._records.items())
                if (start is None or plan_date >= start)
                and (end is None or plan_date <= end)
                and (is_feasible is None or record["isFeasible"] == is_feasible)
            ]
        return [OperationPlanMapper.from_record(record) for record in records]

    def delete_by_date(self, plan_date: date) -> bool:
        with self._lock:
            return self._records.pop(plan_date, None) is not None


class InMemoryVesselVisitExecutionRepository(VesselVisitExecutionRepository):
    """Execution repository keeping records in a dict keyed by execution id."""

    def __init__(self) -> None:
        self._records: dict[UUID, Record] = {}
        self._lock = threading.Lock()

    def _find_for_visit(self, visit_id: UUID, vve_date: date) -> Record | None:
        for record in self._records.values():
            if record["visitId"] == str(visit_id) and record["vveDate"] == (
                vve_date.isoformat()
            ):
                return record
        return None

    def add(self, execution: VesselVisitExecution) -> VesselVisitExecution:
        with self._lock:
            if self._find_for_visit(execution.visit_id, execution.vve_date):
                raise BusinessRuleError(
                    f"Execution already exists for visit {execution.visit_id} "
                    f"on {execution.vve_date.isoformat()}",
                    {
                        "visit_id": str(execution.visit_id),
                        "vve_date": execution.vve_date.isoformat(),
                    },
                )
            self._records[execution.id] = VesselVisitExecutionMapper.to_record(
                execution
            )
        return execution

    def update(
        self, execution: VesselVisitExecution, expected_updated_at: datetime
    ) -> VesselVisitExecution:
        with self._lock:
            stored = self._records.get(execution.id)
            if stored is None:
                raise VesselVisitExecutionNotFoundError(execution.id)
            if stored["updatedAt"] != expected_updated_at.isoformat():
                logger.warning(
                    "Concurrent execution update rejected",
                    execution_id=str(execution.id),
                )
                raise ConcurrencyError("VesselVisitExecution", execution.id)
            self._records[execution.id] = VesselVisitExecutionMapper.to_record(
                execution
            )
        return execution

    def get_by_id(self, execution_id: UUID) -> VesselVisitExecution | None:
        with self._lock:
            record = self._records.get(execution_id)
        return VesselVisitExecutionMapper.from_record(record) if record else None

    def get_by_visit_and_date(
        self, visit_id: UUID, vve_date: date
    ) -> VesselVisitExecution | None:
        with self._lock:
            record = self._find_for_visit(visit_id, vve_date)
        return VesselVisitExecutionMapper.from_record(record) if record else None

    def list_by_date(self, vve_date: date) -> list[VesselVisitExecution]:
        with self._lock:
            records = [
                r for r in self._records.values() if r["vveDate"] == vve_date.isoformat()
            ]
        executions = [VesselVisitExecutionMapper.from_record(r) for r in records]
        return sorted(executions, key=lambda e: e.planned_arrival_time)

    def search(
        self,
        start: date | None = None,
        end: date | None = None,
        status: ExecutionStatus | None = None,
        skip: int = 0,
        take: int = 50,
    ) -> list[VesselVisitExecution]:
        with self._lock:
            records = list(self._records.values())

        executions = [
            execution
            for execution in map(VesselVisitExecutionMapper.from_record, records)
            if (start is None or execution.vve_date >= start)
            and (end is None or execution.vve_date <= end)
            and (status is None or execution.status == status)
        ]
        executions.sort(
            key=lambda e: (e.vve_date, e.planned_arrival_time), reverse=True
        )
        return executions[skip : skip + take]

    def delete(self, execution_id: UUID) -> bool:
        with self._lock:
            return self._records.pop(execution_id, None) is not None
