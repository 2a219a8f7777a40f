"""
Operation Plan Repository Interface

Defines the contract for operation plan data access operations.
"""

from abc import ABC, abstractmethod
from datetime import date
from uuid import UUID

from ..entities.operation_plan import OperationPlan


class OperationPlanRepository(ABC):
    """
    Abstract repository interface for OperationPlan aggregates.

    At most one plan exists per date. Plans are written wholesale; there is
    no partial update of a stored plan's assignments.
    """

    @abstractmethod
    def add(self, plan: OperationPlan) -> OperationPlan:
        """
        Store a new plan.

        Args:
            plan: Plan to store

        Returns:
            Stored plan

        Raises:
            PlanAlreadyExistsError: If a plan already exists for the plan's date
        """

    @abstractmethod
    def replace(self, plan: OperationPlan) -> OperationPlan | None:
        """
        Store a plan, overwriting whatever plan exists for its date.

        Returns:
            The plan that was replaced, or None
        """

    @abstractmethod
    def update(self, plan: OperationPlan) -> OperationPlan:
        """
        Persist changes to an already stored plan (status refresh).

        Raises:
            OperationPlanNotFoundError: If the plan is not stored
        """

    @abstractmethod
    def get_by_id(self, plan_id: UUID) -> OperationPlan | None:
        """Retrieve a plan by its ID, or None if not found."""

    @abstractmethod
    def get_by_date(self, plan_date: date) -> OperationPlan | None:
        """Retrieve the plan for a date, or None if not found."""

    @abstractmethod
    def search(
        self,
        start: date | None = None,
        end: date | None = None,
        is_feasible: bool | None = None,
    ) -> list[OperationPlan]:
        """
        Find plans within an inclusive date range, ordered by date.

        Args:
            start: Earliest plan date, unbounded if None
            end: Latest plan date, unbounded if None
            is_feasible: Only plans with this feasibility, any if None
        """

    @abstractmethod
    def delete_by_date(self, plan_date: date) -> bool:
        """Delete the plan for a date. Returns True if a plan was deleted."""
