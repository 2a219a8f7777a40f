"""
Assignment Value Objects

An Assignment is one resolved (visit, dock, time-window) binding produced by
planning. An UnassignedVisit records a visit request the planner could not
place, so the plan can report it.
"""

from datetime import datetime
from uuid import UUID

from pydantic import (
    AwareDatetime,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from ...shared.base import ValueObject
from ...shared.exceptions import ValidationError
from ...shared.validation import BusinessRuleValidators, SchedulingValidators
from ..services.conflict_detector import overlaps
from .time_window import TimeWindow


def visit_label(
    visit_id: UUID,
    vessel_name: str | None,
    vessel_imo: str | None,
    id_length: int = 0,
) -> str:
    """Human-readable name of a visit: vessel name/IMO, else its identifier."""
    if vessel_name and vessel_imo:
        return f"{vessel_name} (IMO {vessel_imo})"
    if vessel_name:
        return vessel_name
    if vessel_imo:
        return f"IMO {vessel_imo}"
    return f"visit {SchedulingValidators.shorten_identifier(visit_id, id_length)}"


def format_window(eta: datetime, etd: datetime) -> str:
    return f"[{eta.isoformat()} to {etd.isoformat()}]"


class Assignment(ValueObject):
    """A visit bound to a dock for a planned time window."""

    model_config = ConfigDict(
        frozen=True, populate_by_name=True, alias_generator=to_camel
    )

    visit_id: UUID
    dock_id: UUID
    eta: AwareDatetime
    etd: AwareDatetime
    estimated_volume: int = Field(default=0, ge=0)
    dock_name: str | None = None
    vessel_name: str | None = None
    vessel_imo: str | None = None

    @field_validator("visit_id", "dock_id", mode="before")
    @classmethod
    def validate_identifier(cls, v, info):
        try:
            return SchedulingValidators.parse_identifier(info.field_name, v)
        except ValidationError as e:
            raise ValueError(e.message)

    @model_validator(mode="after")
    def eta_before_etd(self) -> "Assignment":
        try:
            BusinessRuleValidators.validate_date_range("eta", self.eta, "etd", self.etd)
        except ValidationError as e:
            raise ValueError(e.message)
        return self

    @property
    def time_window(self) -> TimeWindow:
        return TimeWindow(start_time=self.eta, end_time=self.etd)

    def overlaps_with(self, other: "Assignment") -> bool:
        """Check if this assignment occupies the same dock at an overlapping time."""
        return overlaps(self, other)

    def label(self, id_length: int = 0) -> str:
        return visit_label(self.visit_id, self.vessel_name, self.vessel_imo, id_length)

    def dock_label(self, id_length: int = 0) -> str:
        if self.dock_name:
            return self.dock_name
        return SchedulingValidators.shorten_identifier(self.dock_id, id_length)

    def to_json(self) -> dict:
        """Convert to a JSON-compatible dict (camelCase keys, ISO datetimes)."""
        return self.model_dump(mode="json", by_alias=True)

    def __str__(self) -> str:
        return (
            f"Assignment(visit={self.visit_id}, dock={self.dock_id}, "
            f"eta={self.eta.isoformat()}, etd={self.etd.isoformat()})"
        )


class UnassignedVisit(ValueObject):
    """A visit request that planning could not place on any dock."""

    model_config = ConfigDict(
        frozen=True, populate_by_name=True, alias_generator=to_camel
    )

    visit_id: UUID
    eta: AwareDatetime
    etd: AwareDatetime
    reason: str
    vessel_name: str | None = None
    vessel_imo: str | None = None

    def warning(self, id_length: int = 0) -> str:
        label = visit_label(self.visit_id, self.vessel_name, self.vessel_imo, id_length)
        return f"{label} {format_window(self.eta, self.etd)}: {self.reason}"

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
