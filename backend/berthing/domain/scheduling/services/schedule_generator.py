"""
Schedule Generator

Greedy earliest-arrival-first placement of a day's visit requests onto docks.
Callers pre-fetch everything the generator needs (visit requests, the dock
catalog snapshot and the commitments already holding docks) and pass it in as
plain data; the generator performs no I/O.
"""

from collections.abc import Iterable, Mapping
from datetime import date, datetime
from uuid import UUID

from berthing.core.config import settings
from berthing.core.observability import (
    DOCK_CONFLICTS,
    PLANS_GENERATED,
    UNPLACED_VISITS,
    get_logger,
    monitor_performance,
)

from ...shared.exceptions import ValidationError
from ...shared.validation import SchedulingValidators
from ..entities.operation_plan import OperationPlan, conflict_warning
from ..events.domain_events import OperationPlanGenerated
from ..value_objects.assignment import Assignment, format_window
from ..value_objects.planning_inputs import DockInfo, VisitRequest
from .conflict_detector import find_conflicts, group_by_dock

logger = get_logger(__name__)

NO_AVAILABLE_DOCK = "no available dock"


class ScheduleGenerator:
    """
    FIFO schedule generator.

    Visits are taken in ascending ETA order (stable, so equal ETAs keep their
    submission order). A pre-assigned dock is always honored; any clash it
    causes is reported through the plan's warnings. Other visits go to the
    first compatible dock, in catalog order, that is free for their whole
    window. A visit that fits nowhere is left unassigned with a warning and
    the run continues.
    """

    algorithm = "FIFO"

    @monitor_performance("generate_plan")
    def generate(
        self,
        plan_date: date | datetime | str,
        visits: Iterable[VisitRequest],
        docks: Iterable[DockInfo] | Mapping[UUID, DockInfo],
        commitments: Iterable[Assignment] = (),
        author: str | None = None,
    ) -> OperationPlan:
        """
        Generate the operation plan for a date.

        Args:
            plan_date: Operating day to plan
            visits: Approved visit requests for the day
            docks: Dock catalog snapshot; its order is the scan order
            commitments: Assignments already holding docks, checked against
                but not copied into the plan
            author: Who requested the plan

        Returns:
            New OperationPlan, feasible or not

        Raises:
            ValueError: If plan_date cannot be read as a calendar date
        """
        try:
            plan_day = SchedulingValidators.normalize_calendar_date(
                "plan_date", plan_date
            )
        except ValidationError as e:
            raise ValueError(e.message)

        catalog = self._catalog(docks)
        commitments = list(commitments)
        external_by_dock = group_by_dock(commitments)
        occupancy: dict[UUID, list[Assignment]] = {
            dock_id: list(held) for dock_id, held in external_by_dock.items()
        }

        id_length = settings.WARNING_ID_LENGTH
        placed: list[Assignment] = []
        unassigned = []
        external_conflicts: list[str] = []

        for visit in sorted(visits, key=lambda v: v.eta):
            if visit.preassigned_dock_id is not None:
                assignment = self._place_preassigned(visit, catalog)
                for commitment in find_conflicts(
                    assignment, external_by_dock.get(assignment.dock_id, [])
                ):
                    external_conflicts.append(
                        conflict_warning(assignment, commitment, id_length)
                    )
                    DOCK_CONFLICTS.labels(source="commitment").inc()
            else:
                assignment, blockers = self._first_free_dock(visit, catalog, occupancy)
                if assignment is None:
                    reason = self._unplaced_reason(blockers, id_length)
                    unassigned.append(visit.to_unassigned(reason))
                    UNPLACED_VISITS.inc()
                    logger.info(
                        "Visit left unassigned",
                        visit_id=str(visit.visit_id),
                        eta=visit.eta.isoformat(),
                        blocking_visits=len(blockers),
                    )
                    continue

            occupancy.setdefault(assignment.dock_id, []).append(assignment)
            placed.append(assignment)

        plan = OperationPlan.assemble(
            plan_day,
            placed,
            author=author,
            algorithm=self.algorithm,
            unassigned=unassigned,
            external_conflicts=external_conflicts,
        )
        plan.add_domain_event(
            OperationPlanGenerated(
                aggregate_id=plan.id,
                plan_date=plan.plan_date,
                algorithm=plan.algorithm,
                assignment_count=len(placed),
                unassigned_count=len(unassigned),
                is_feasible=plan.is_feasible,
            )
        )
        PLANS_GENERATED.labels(
            algorithm=plan.algorithm, feasible=str(plan.is_feasible).lower()
        ).inc()

        logger.info(
            "Operation plan generated",
            plan_date=plan.plan_date.isoformat(),
            algorithm=plan.algorithm,
            assignments=len(placed),
            unassigned=len(unassigned),
            warnings=len(plan.warnings),
            is_feasible=plan.is_feasible,
        )
        return plan

    @staticmethod
    def _catalog(
        docks: Iterable[DockInfo] | Mapping[UUID, DockInfo],
    ) -> dict[UUID, DockInfo]:
        if isinstance(docks, Mapping):
            docks = docks.values()
        # dicts keep insertion order, which is the scan order
        return {dock.dock_id: dock for dock in docks}

    @staticmethod
    def _place_preassigned(
        visit: VisitRequest, catalog: dict[UUID, DockInfo]
    ) -> Assignment:
        dock = catalog.get(visit.preassigned_dock_id)
        if dock is None:
            logger.warning(
                "Pre-assigned dock not in dock catalog",
                visit_id=str(visit.visit_id),
                dock_id=str(visit.preassigned_dock_id),
            )
        return visit.to_assignment(
            visit.preassigned_dock_id, dock.name if dock else None
        )

    @staticmethod
    def _first_free_dock(
        visit: VisitRequest,
        catalog: dict[UUID, DockInfo],
        occupancy: dict[UUID, list[Assignment]],
    ) -> tuple[Assignment | None, list[Assignment]]:
        """Return the assignment on the first free candidate dock, or the blockers."""
        if visit.compatible_dock_ids is None:
            candidates = list(catalog)
        else:
            candidates = list(visit.compatible_dock_ids)

        blockers: list[Assignment] = []
        for dock_id in candidates:
            dock = catalog.get(dock_id)
            candidate = visit.to_assignment(dock_id, dock.name if dock else None)
            conflicts = find_conflicts(candidate, occupancy.get(dock_id, []))
            if not conflicts:
                return candidate, []
            blockers.extend(conflicts)
        return None, blockers

    @staticmethod
    def _unplaced_reason(blockers: list[Assignment], id_length: int) -> str:
        if not blockers:
            return f"{NO_AVAILABLE_DOCK} (no candidate docks)"

        seen: set[UUID] = set()
        names = []
        for blocker in blockers:
            if blocker.visit_id in seen:
                continue
            seen.add(blocker.visit_id)
            names.append(
                f"{blocker.label(id_length)} {format_window(blocker.eta, blocker.etd)}"
                f" on dock {blocker.dock_label(id_length)}"
            )
        return f"{NO_AVAILABLE_DOCK}, blocked by {'; '.join(names)}"
