"""
Vessel Visit Execution Repository Interface

Defines the contract for vessel-visit execution data access operations.
"""

from abc import ABC, abstractmethod
from datetime import date, datetime
from uuid import UUID

from ..entities.vessel_visit_execution import VesselVisitExecution
from ..value_objects.enums import ExecutionStatus


class VesselVisitExecutionRepository(ABC):
    """
    Abstract repository interface for VesselVisitExecution aggregates.

    One execution exists per (visit, date). Concurrent writers to the same
    execution are serialized with optimistic concurrency on ``updated_at``.
    """

    @abstractmethod
    def add(self, execution: VesselVisitExecution) -> VesselVisitExecution:
        """
        Store a new execution.

        Raises:
            BusinessRuleError: If an execution already exists for the visit and date
        """

    @abstractmethod
    def update(
        self, execution: VesselVisitExecution, expected_updated_at: datetime
    ) -> VesselVisitExecution:
        """
        Persist changes to a stored execution.

        Args:
            execution: Modified execution
            expected_updated_at: ``updated_at`` as it was when the execution was read

        Returns:
            Stored execution

        Raises:
            VesselVisitExecutionNotFoundError: If the execution is not stored
            ConcurrencyError: If the stored execution changed since it was read
        """

    @abstractmethod
    def get_by_id(self, execution_id: UUID) -> VesselVisitExecution | None:
        """Retrieve an execution by its ID, or None if not found."""

    @abstractmethod
    def get_by_visit_and_date(
        self, visit_id: UUID, vve_date: date
    ) -> VesselVisitExecution | None:
        """Retrieve the execution of a visit on a date, or None if not found."""

    @abstractmethod
    def list_by_date(self, vve_date: date) -> list[VesselVisitExecution]:
        """All executions for a date, ordered by planned arrival."""

    @abstractmethod
    def search(
        self,
        start: date | None = None,
        end: date | None = None,
        status: ExecutionStatus | None = None,
        skip: int = 0,
        take: int = 50,
    ) -> list[VesselVisitExecution]:
        """
        Find executions within an inclusive date range.

        Results are ordered newest first: by date, then by planned arrival,
        both descending.

        Args:
            start: Earliest execution date, unbounded if None
            end: Latest execution date, unbounded if None
            status: Only executions in this status, any if None
            skip: Number of matching executions to leave out
            take: Maximum number of executions returned
        """

    @abstractmethod
    def delete(self, execution_id: UUID) -> bool:
        """Delete an execution. Returns True if it existed."""
