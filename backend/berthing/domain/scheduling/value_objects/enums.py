"""Domain enums for berth planning and visit execution."""

from enum import Enum


class OperationPlanStatus(str, Enum):
    """
    Coarse status of an operation plan.

    Derived from the statuses of the plan's vessel-visit executions; there is
    no manual transition API for it.
    """

    NOT_STARTED = "NotStarted"
    IN_PROGRESS = "InProgress"
    FINISHED = "Finished"


class ExecutionStatus(str, Enum):
    """Vessel-visit execution status enumeration."""

    NOT_STARTED = "NotStarted"  # Placeholder created from the plan
    IN_PROGRESS = "InProgress"  # Berthed on time
    DELAYED = "Delayed"  # Berthed after the planned arrival
    COMPLETED = "Completed"  # Departed

    @property
    def has_started(self) -> bool:
        """Check if execution has started (any state past NotStarted)."""
        return self != ExecutionStatus.NOT_STARTED

    @property
    def is_terminal(self) -> bool:
        """Check if execution status is terminal (cannot transition further)."""
        return self == ExecutionStatus.COMPLETED

    def allowed_transitions(self) -> tuple["ExecutionStatus", ...]:
        """Statuses reachable from this one, in a stable order."""
        return _EXECUTION_TRANSITIONS[self]

    def can_transition_to(self, target_status: "ExecutionStatus") -> bool:
        """Check if execution can transition from current status to target status."""
        return target_status in self.allowed_transitions()


_EXECUTION_TRANSITIONS: dict[ExecutionStatus, tuple[ExecutionStatus, ...]] = {
    ExecutionStatus.NOT_STARTED: (
        ExecutionStatus.IN_PROGRESS,
        ExecutionStatus.DELAYED,
    ),
    ExecutionStatus.IN_PROGRESS: (
        ExecutionStatus.DELAYED,
        ExecutionStatus.COMPLETED,
    ),
    ExecutionStatus.DELAYED: (
        ExecutionStatus.IN_PROGRESS,
        ExecutionStatus.COMPLETED,
    ),
    ExecutionStatus.COMPLETED: (),  # Terminal state
}
