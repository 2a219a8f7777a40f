"""Derivation of an operation plan's coarse status from its executions."""

from collections.abc import Iterable

from ..value_objects.enums import ExecutionStatus, OperationPlanStatus


def derive_plan_status(statuses: Iterable[ExecutionStatus]) -> OperationPlanStatus:
    """
    Compute the plan status from the statuses of the executions for its date.

    Args:
        statuses: Statuses of every vessel-visit execution of the plan's date

    Returns:
        NotStarted when nothing has started (or there are no executions),
        Finished when every execution is Completed, InProgress otherwise.
    """
    statuses = list(statuses)
    if not any(status.has_started for status in statuses):
        return OperationPlanStatus.NOT_STARTED
    if all(status == ExecutionStatus.COMPLETED for status in statuses):
        return OperationPlanStatus.FINISHED
    return OperationPlanStatus.IN_PROGRESS
