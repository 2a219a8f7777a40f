"""
Integration tests for record mapping and the in-memory repositories.
"""

import json
from datetime import date, timedelta
from uuid import uuid4

import pytest

from berthing.domain.scheduling.entities.operation_plan import OperationPlan
from berthing.domain.scheduling.value_objects.assignment import UnassignedVisit
from berthing.domain.scheduling.value_objects.enums import (
    ExecutionStatus,
    OperationPlanStatus,
)
from berthing.domain.shared.exceptions import (
    ConcurrencyError,
    OperationPlanNotFoundError,
    PlanAlreadyExistsError,
    VesselVisitExecutionNotFoundError,
)
from berthing.infrastructure.persistence.mappers import (
    OperationPlanMapper,
    VesselVisitExecutionMapper,
)
from berthing.tests.fixtures.factories import (
    PLAN_DAY,
    at,
    make_assignment,
    make_execution,
    make_plan,
)


@pytest.fixture
def infeasible_plan(dock_id):
    unplaced = UnassignedVisit(
        visit_id=uuid4(), eta=at(6), etd=at(8), reason="no available dock"
    )
    return make_plan(
        [
            make_assignment(dock_id, 10, 14, vessel_name="Aurora", dock_name="North"),
            make_assignment(dock_id, 12, 16, vessel_imo="9321483", dock_name="North"),
        ],
        author="planner",
        unassigned=[unplaced],
    )


class TestOperationPlanMapper:
    """Test plan records."""

    def test_record_columns(self, infeasible_plan, dock_id):
        record = OperationPlanMapper.to_record(infeasible_plan)

        assert record["id"] == str(infeasible_plan.id)
        assert record["planDate"] == "2025-03-10"
        assert record["status"] == "NotStarted"
        assert record["isFeasible"] is False
        assert record["algorithm"] == "FIFO"
        assert record["author"] == "planner"

        assignments = json.loads(record["assignments"])
        assert [a["dockId"] for a in assignments] == [str(dock_id), str(dock_id)]
        assert assignments[0]["vesselName"] == "Aurora"
        assert json.loads(record["warnings"]) == infeasible_plan.warnings
        assert json.loads(record["unassigned"])[0]["reason"] == "no available dock"

    def test_record_restores_plan(self, infeasible_plan):
        restored = OperationPlanMapper.from_record(
            OperationPlanMapper.to_record(infeasible_plan)
        )

        assert restored.id == infeasible_plan.id
        assert restored.plan_date == PLAN_DAY
        assert restored.assignments == infeasible_plan.assignments
        assert restored.unassigned == infeasible_plan.unassigned
        assert restored.warnings == infeasible_plan.warnings
        assert restored.is_feasible is False
        assert restored.creation_date == infeasible_plan.creation_date
        assert restored.get_domain_events() == []

    def test_restored_plan_rechecks_to_same_warnings(self, infeasible_plan):
        restored = OperationPlanMapper.from_record(
            OperationPlanMapper.to_record(infeasible_plan)
        )

        restored.check_feasibility()

        assert restored.warnings == infeasible_plan.warnings

    def test_record_with_invalid_status_is_rejected(self, infeasible_plan):
        record = OperationPlanMapper.to_record(infeasible_plan)
        record["status"] = "Cancelled"

        with pytest.raises(ValueError):
            OperationPlanMapper.from_record(record)


class TestVesselVisitExecutionMapper:
    """Test execution rows."""

    def test_row_columns(self, dock_id):
        execution = make_execution(dock_id)

        record = VesselVisitExecutionMapper.to_record(execution)

        assert record["visitId"] == str(execution.visit_id)
        assert record["vveDate"] == "2025-03-10"
        assert record["plannedDockId"] == str(dock_id)
        assert record["actualDockId"] is None
        assert record["actualArrivalTime"] is None
        assert record["status"] == "NotStarted"

    def test_row_restores_execution(self, dock_id):
        execution = make_execution(dock_id, operation_plan_id=uuid4())
        execution.update_berth(actual_dock_id=uuid4(), actual_arrival_time=at(10, 15))
        execution.transition_to(ExecutionStatus.DELAYED)

        restored = VesselVisitExecutionMapper.from_record(
            VesselVisitExecutionMapper.to_record(execution)
        )

        assert restored.id == execution.id
        assert restored.operation_plan_id == execution.operation_plan_id
        assert restored.actual_dock_id == execution.actual_dock_id
        assert restored.actual_arrival_time == execution.actual_arrival_time
        assert restored.status == ExecutionStatus.DELAYED
        assert restored.updated_at == execution.updated_at
        assert restored.is_delayed()
        assert restored.is_dock_changed()


class TestInMemoryOperationPlanRepository:
    """Test the in-memory plan repository."""

    def test_one_plan_per_date(self, plan_repository):
        plan_repository.add(make_plan([]))

        with pytest.raises(PlanAlreadyExistsError):
            plan_repository.add(make_plan([]))

    def test_replace_returns_previous(self, plan_repository):
        first = make_plan([])
        plan_repository.add(first)

        second = make_plan([], author="second")
        previous = plan_repository.replace(second)

        assert previous.id == first.id
        assert plan_repository.get_by_date(PLAN_DAY).id == second.id
        assert plan_repository.replace(make_plan([])).author == "second"

    def test_reads_return_copies(self, plan_repository, dock_id):
        plan = make_plan([make_assignment(dock_id, 10, 12)])
        plan_repository.add(plan)

        loaded = plan_repository.get_by_id(plan.id)
        loaded.status = OperationPlanStatus.FINISHED

        assert plan_repository.get_by_id(plan.id).status == OperationPlanStatus.NOT_STARTED

    def test_update_requires_stored_plan(self, plan_repository):
        with pytest.raises(OperationPlanNotFoundError):
            plan_repository.update(make_plan([]))

    def test_update_persists_status(self, plan_repository):
        plan = make_plan([])
        plan_repository.add(plan)

        plan.refresh_status([ExecutionStatus.COMPLETED])
        plan_repository.update(plan)

        assert plan_repository.get_by_date(PLAN_DAY).status == OperationPlanStatus.FINISHED

    def test_search_is_ordered_and_bounded(self, plan_repository):
        for offset in (2, 0, 1):
            plan_repository.add(
                OperationPlan.assemble(PLAN_DAY + timedelta(days=offset), [])
            )

        dates = [p.plan_date for p in plan_repository.search(end=date(2025, 3, 11))]

        assert dates == [date(2025, 3, 10), date(2025, 3, 11)]

    def test_delete(self, plan_repository):
        plan_repository.add(make_plan([]))

        assert plan_repository.delete_by_date(PLAN_DAY)
        assert not plan_repository.delete_by_date(PLAN_DAY)
        assert plan_repository.get_by_date(PLAN_DAY) is None


class TestInMemoryVesselVisitExecutionRepository:
    """Test the in-memory execution repository."""

    def test_update_checks_updated_at(self, execution_repository):
        execution = execution_repository.add(make_execution())
        read = execution_repository.get_by_id(execution.id)
        expected = read.updated_at

        read.transition_to(ExecutionStatus.IN_PROGRESS)
        execution_repository.update(read, expected)

        with pytest.raises(ConcurrencyError):
            execution_repository.update(read, expected)

    def test_update_missing(self, execution_repository):
        execution = make_execution()

        with pytest.raises(VesselVisitExecutionNotFoundError):
            execution_repository.update(execution, execution.updated_at)

    def test_lookup_by_visit_and_date(self, execution_repository):
        execution = execution_repository.add(make_execution())

        found = execution_repository.get_by_visit_and_date(execution.visit_id, PLAN_DAY)

        assert found.id == execution.id
        assert (
            execution_repository.get_by_visit_and_date(
                execution.visit_id, PLAN_DAY + timedelta(days=1)
            )
            is None
        )

    def test_delete(self, execution_repository):
        execution = execution_repository.add(make_execution())

        assert execution_repository.delete(execution.id)
        assert execution_repository.get_by_id(execution.id) is None
        assert not execution_repository.delete(execution.id)
