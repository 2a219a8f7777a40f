"""
Mappers for converting between domain aggregates and storage records.

A record is a flat dict of column name to JSON-compatible scalar. List-valued
parts of an operation plan (assignments, warnings, unplaced visits and
external conflicts) are stored as JSON array strings.
"""

from typing import Any

from pydantic import TypeAdapter

from berthing.domain.scheduling.entities.operation_plan import OperationPlan
from berthing.domain.scheduling.entities.vessel_visit_execution import (
    VesselVisitExecution,
)
from berthing.domain.scheduling.value_objects.assignment import (
    Assignment,
    UnassignedVisit,
)

Record = dict[str, Any]

_assignments = TypeAdapter(list[Assignment])
_unassigned = TypeAdapter(list[UnassignedVisit])
_strings = TypeAdapter(list[str])


class OperationPlanMapper:
    """Mapper between OperationPlan aggregates and plan records."""

    @staticmethod
    def to_record(plan: OperationPlan) -> Record:
        """
        Convert an OperationPlan to a storage record.

        Args:
            plan: Plan to convert

        Returns:
            Record with scalar columns and JSON array columns
        """
        return {
            "id": str(plan.id),
            "planDate": plan.plan_date.isoformat(),
            "status": plan.status.value,
            "isFeasible": plan.is_feasible,
            "algorithm": plan.algorithm,
            "creationDate": plan.creation_date.isoformat(),
            "author": plan.author,
            "assignments": _assignments.dump_json(
                plan.assignments, by_alias=True
            ).decode(),
            "warnings": _strings.dump_json(plan.warnings).decode(),
            "unassigned": _unassigned.dump_json(
                plan.unassigned, by_alias=True
            ).decode(),
            "externalConflicts": _strings.dump_json(plan.external_conflicts).decode(),
        }

    @staticmethod
    def from_record(record: Record) -> OperationPlan:
        """
        Convert a storage record back to an OperationPlan.

        The stored warnings are restored as they were saved; ``isFeasible`` is
        derived from them rather than read from its column.
        """
        return OperationPlan(
            id=record["id"],
            plan_date=record["planDate"],
            status=record["status"],
            algorithm=record["algorithm"],
            creation_date=record["creationDate"],
            author=record["author"],
            assignments=_assignments.validate_json(record["assignments"]),
            warnings=_strings.validate_json(record["warnings"]),
            unassigned=_unassigned.validate_json(record.get("unassigned") or "[]"),
            external_conflicts=_strings.validate_json(
                record.get("externalConflicts") or "[]"
            ),
        )


def _iso(value) -> str | None:
    return value.isoformat() if value is not None else None


def _str(value) -> str | None:
    return str(value) if value is not None else None


class VesselVisitExecutionMapper:
    """Mapper between VesselVisitExecution aggregates and execution rows."""

    @staticmethod
    def to_record(execution: VesselVisitExecution) -> Record:
        return {
            "id": str(execution.id),
            "visitId": str(execution.visit_id),
            "operationPlanId": _str(execution.operation_plan_id),
            "vveDate": execution.vve_date.isoformat(),
            "plannedDockId": str(execution.planned_dock_id),
            "plannedArrivalTime": execution.planned_arrival_time.isoformat(),
            "plannedDepartureTime": execution.planned_departure_time.isoformat(),
            "actualDockId": _str(execution.actual_dock_id),
            "actualArrivalTime": _iso(execution.actual_arrival_time),
            "actualDepartureTime": _iso(execution.actual_departure_time),
            "status": execution.status.value,
            "createdAt": execution.created_at.isoformat(),
            "updatedAt": execution.updated_at.isoformat(),
        }

    @staticmethod
    def from_record(record: Record) -> VesselVisitExecution:
        return VesselVisitExecution(
            id=record["id"],
            visit_id=record["visitId"],
            operation_plan_id=record.get("operationPlanId"),
            vve_date=record["vveDate"],
            planned_dock_id=record["plannedDockId"],
            planned_arrival_time=record["plannedArrivalTime"],
            planned_departure_time=record["plannedDepartureTime"],
            actual_dock_id=record.get("actualDockId"),
            actual_arrival_time=record.get("actualArrivalTime"),
            actual_departure_time=record.get("actualDepartureTime"),
            status=record["status"],
            created_at=record["createdAt"],
            updated_at=record["updatedAt"],
        )
