"""
Planning Inputs

Plain data handed to the schedule generator by its callers: the visit
requests for a date and a snapshot of the dock catalog.
"""

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
from .assignment import Assignment, UnassignedVisit


class DockInfo(ValueObject):
    """Read-only snapshot of a dock from the dock catalog."""

    model_config = ConfigDict(
        frozen=True, populate_by_name=True, alias_generator=to_camel
    )

    dock_id: UUID
    name: str | None = None

    @field_validator("dock_id", mode="before")
    @classmethod
    def validate_dock_id(cls, v):
        try:
            return SchedulingValidators.parse_identifier("dock_id", v)
        except ValidationError as e:
            raise ValueError(e.message)


class VisitRequest(ValueObject):
    """
    An approved request for a vessel to occupy a dock within a time window.

    ``compatible_dock_ids`` is the caller's pre-filtered list of candidate
    docks; when omitted every dock in the catalog snapshot is a candidate.
    """

    model_config = ConfigDict(
        frozen=True, populate_by_name=True, alias_generator=to_camel
    )

    visit_id: UUID
    eta: AwareDatetime
    etd: AwareDatetime
    vessel_id: UUID | None = None
    preassigned_dock_id: UUID | None = None
    vessel_name: str | None = None
    vessel_imo: str | None = None
    estimated_volume: int = Field(default=0, ge=0)
    compatible_dock_ids: tuple[UUID, ...] | None = None

    @field_validator("visit_id", mode="before")
    @classmethod
    def validate_visit_id(cls, v):
        try:
            return SchedulingValidators.parse_identifier("visit_id", v)
        except ValidationError as e:
            raise ValueError(e.message)

    @field_validator("vessel_id", "preassigned_dock_id", mode="before")
    @classmethod
    def validate_optional_identifier(cls, v, info):
        if v is None or v == "":
            return None
        try:
            return SchedulingValidators.parse_identifier(info.field_name, v)
        except ValidationError as e:
            raise ValueError(e.message)

    @model_validator(mode="after")
    def eta_before_etd(self) -> "VisitRequest":
        try:
            BusinessRuleValidators.validate_date_range("eta", self.eta, "etd", self.etd)
        except ValidationError as e:
            raise ValueError(e.message)
        return self

    def to_assignment(self, dock_id: UUID, dock_name: str | None = None) -> Assignment:
        return Assignment(
            visit_id=self.visit_id,
            dock_id=dock_id,
            eta=self.eta,
            etd=self.etd,
            estimated_volume=self.estimated_volume,
            dock_name=dock_name,
            vessel_name=self.vessel_name,
            vessel_imo=self.vessel_imo,
        )

    def to_unassigned(self, reason: str) -> UnassignedVisit:
        return UnassignedVisit(
            visit_id=self.visit_id,
            eta=self.eta,
            etd=self.etd,
            reason=reason,
            vessel_name=self.vessel_name,
            vessel_imo=self.vessel_imo,
        )
