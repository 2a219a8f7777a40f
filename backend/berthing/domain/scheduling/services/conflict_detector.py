"""
Conflict Detector

Pure time-overlap checks between dock occupations. The same predicate is used
by the schedule generator, by operation plan feasibility checks and by the
approval workflow before it commits an operator-chosen dock.
"""

from collections import defaultdict
from collections.abc import Iterable, Sequence
from datetime import datetime
from typing import Protocol, TypeVar
from uuid import UUID


class DockOccupation(Protocol):
    """Anything that holds a dock for a time window."""

    @property
    def dock_id(self) -> UUID: ...

    @property
    def eta(self) -> datetime: ...

    @property
    def etd(self) -> datetime: ...


OccupationT = TypeVar("OccupationT", bound=DockOccupation)


def overlaps(a: DockOccupation, b: DockOccupation) -> bool:
    """
    Return True if both occupations use the same dock at intersecting times.

    Windows are half-open: one visit departing exactly when another arrives
    is not a conflict.
    """
    if a.dock_id != b.dock_id:
        return False
    return a.eta < b.etd and b.eta < a.etd


def find_conflicts(
    candidate: DockOccupation, existing: Iterable[OccupationT]
) -> list[OccupationT]:
    """Return the existing occupations the candidate would clash with, in input order."""
    return [occupation for occupation in existing if overlaps(candidate, occupation)]


def group_by_dock(
    occupations: Iterable[OccupationT],
) -> dict[UUID, list[OccupationT]]:
    """Group occupations by dock, preserving input order within each dock."""
    by_dock: dict[UUID, list[OccupationT]] = defaultdict(list)
    for occupation in occupations:
        by_dock[occupation.dock_id].append(occupation)
    return dict(by_dock)


def conflicting_pairs(
    occupations: Sequence[OccupationT],
) -> list[tuple[OccupationT, OccupationT]]:
    """
    Every pair of occupations that conflict, each pair reported once.

    Pairwise within each dock group; a single dock rarely carries more than a
    few tens of visits per day.
    """
    pairs: list[tuple[OccupationT, OccupationT]] = []
    for dock_occupations in group_by_dock(occupations).values():
        for i, first in enumerate(dock_occupations):
            for second in dock_occupations[i + 1 :]:
                if overlaps(first, second):
                    pairs.append((first, second))
    return pairs
