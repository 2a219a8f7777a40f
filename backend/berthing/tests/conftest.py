import sys
from uuid import uuid4

import pytest

from berthing.application.services.execution_service import ExecutionService
from berthing.application.services.operation_plan_service import OperationPlanService
from berthing.core.observability import setup_structured_logging
from berthing.domain.scheduling.events.domain_events import DomainEventDispatcher
from berthing.infrastructure.persistence.in_memory import (
    InMemoryOperationPlanRepository,
    InMemoryVesselVisitExecutionRepository,
)


@pytest.fixture(scope="session", autouse=True)
def structured_logging() -> None:
    """Keep log output off stdout so command output can be asserted on."""
    setup_structured_logging(stream=sys.stderr)


@pytest.fixture
def dock_id():
    """Generate a dock ID for testing."""
    return uuid4()


@pytest.fixture
def other_dock_id():
    """Generate a second dock ID for testing."""
    return uuid4()


@pytest.fixture
def plan_repository() -> InMemoryOperationPlanRepository:
    return InMemoryOperationPlanRepository()


@pytest.fixture
def execution_repository() -> InMemoryVesselVisitExecutionRepository:
    return InMemoryVesselVisitExecutionRepository()


@pytest.fixture
def published_events() -> list:
    return []


@pytest.fixture
def dispatcher(published_events) -> DomainEventDispatcher:
    """Dispatcher recording every published event."""
    dispatcher = DomainEventDispatcher()
    dispatcher.register_handler(published_events.append)
    return dispatcher


@pytest.fixture
def plan_service(
    plan_repository, execution_repository, dispatcher
) -> OperationPlanService:
    return OperationPlanService(
        plan_repository, execution_repository, event_dispatcher=dispatcher
    )


@pytest.fixture
def execution_service(
    execution_repository, plan_service, dispatcher
) -> ExecutionService:
    return ExecutionService(
        execution_repository, plan_service, event_dispatcher=dispatcher
    )
