"""
Generate an operation plan from a JSON planning document.

Usage:
    berthing-plan input.json
    cat input.json | berthing-plan --pretty

The document holds ``date``, ``docks``, ``visits`` and optionally
``commitments`` and ``author``; the generated plan is printed as JSON.
Exit status is 0 for a feasible plan, 2 for an infeasible one and 1 when the
input cannot be read.
"""

import argparse
import json
import sys

from pydantic import BaseModel, ConfigDict, Field

from berthing.core.observability import (
    get_logger,
    initialize_observability,
    set_correlation_id,
)
from berthing.domain.scheduling.entities.operation_plan import OperationPlan
from berthing.domain.scheduling.services.schedule_generator import ScheduleGenerator
from berthing.domain.scheduling.value_objects.assignment import Assignment
from berthing.domain.scheduling.value_objects.planning_inputs import (
    DockInfo,
    VisitRequest,
)

EXIT_FEASIBLE = 0
EXIT_INVALID_INPUT = 1
EXIT_INFEASIBLE = 2

logger = get_logger(__name__)


class PlanningDocument(BaseModel):
    """Input document of the plan generator CLI."""

    model_config = ConfigDict(populate_by_name=True)

    plan_date: str = Field(..., alias="date")
    docks: list[DockInfo] = Field(default_factory=list)
    visits: list[VisitRequest] = Field(default_factory=list)
    commitments: list[Assignment] = Field(default_factory=list)
    author: str | None = None


def plan_document(plan: OperationPlan) -> dict:
    """JSON-compatible representation of a plan, camelCase keys."""
    return {
        "id": str(plan.id),
        "planDate": plan.plan_date.isoformat(),
        "status": plan.status.value,
        "algorithm": plan.algorithm,
        "isFeasible": plan.is_feasible,
        "author": plan.author,
        "creationDate": plan.creation_date.isoformat(),
        "assignments": [a.to_json() for a in plan.assignments],
        "unassigned": [u.to_json() for u in plan.unassigned],
        "warnings": list(plan.warnings),
    }


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="berthing-plan",
        description="Generate a FIFO berth plan for one operating day",
    )
    parser.add_argument(
        "input",
        nargs="?",
        default="-",
        help="Planning document (JSON); reads stdin when omitted or \"-\"",
    )
    parser.add_argument(
        "--pretty", action="store_true", help="Indent the JSON output"
    )
    return parser


def read_document(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    with open(path, encoding="utf-8") as handle:
        return handle.read()


def main(argv: list[str] | None = None) -> int:
    """Entry point of the ``berthing-plan`` command."""
    args = build_parser().parse_args(argv)
    # stdout carries the plan document
    initialize_observability(stream=sys.stderr)
    set_correlation_id()

    try:
        document = PlanningDocument.model_validate_json(read_document(args.input))
        plan = ScheduleGenerator().generate(
            document.plan_date,
            document.visits,
            document.docks,
            document.commitments,
            author=document.author,
        )
    except (OSError, ValueError) as e:
        logger.error("Invalid planning document", error=str(e))
        print(f"error: {e}", file=sys.stderr)
        return EXIT_INVALID_INPUT

    print(json.dumps(plan_document(plan), indent=2 if args.pretty else None))
    return EXIT_FEASIBLE if plan.is_feasible else EXIT_INFEASIBLE


if __name__ == "__main__":
    sys.exit(main())
