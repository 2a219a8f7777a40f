"""
Validators shared by the planning and execution aggregates.

Each validator raises the domain ``ValidationError``; pydantic validators on
the aggregates translate it into ``ValueError`` so construction fails before a
partially valid object exists.
"""

from datetime import date, datetime
from uuid import UUID

from .exceptions import ValidationError


class BusinessRuleValidators:
    """Generic business rule validators."""

    @staticmethod
    def validate_required_field(field_name: str, value: object) -> None:
        """Validate that a required field is present."""
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValidationError(
                field_name, value, f"{field_name} is required", "REQUIRED_FIELD"
            )

    @staticmethod
    def validate_date_range(
        start_field: str, start_date: datetime, end_field: str, end_date: datetime
    ) -> None:
        """Validate date range (end after start)."""
        if end_date <= start_date:
            raise ValidationError(
                end_field,
                end_date,
                f"{start_field} must be before {end_field}",
                "INVALID_DATE_RANGE",
            )


class SchedulingValidators:
    """Validators for identifiers and calendar dates used by the planner."""

    @staticmethod
    def parse_identifier(field_name: str, value: object) -> UUID:
        """Parse a well-formed UUID identifier."""
        if isinstance(value, UUID):
            return value
        if isinstance(value, str) and value.strip():
            try:
                return UUID(value.strip())
            except ValueError:
                pass
        raise ValidationError(
            field_name,
            value,
            f"Invalid {field_name} (must be a valid UUID)",
            "INVALID_IDENTIFIER",
        )

    @staticmethod
    def normalize_calendar_date(field_name: str, value: object) -> date:
        """
        Normalize a date-like value to a date-only value.

        Accepts ``date``, ``datetime`` (time part dropped) and ISO 8601
        strings, either ``YYYY-MM-DD`` or a full datetime with an optional
        ``Z`` suffix.
        """
        BusinessRuleValidators.validate_required_field(field_name, value)

        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        if isinstance(value, str):
            text = value.strip()
            try:
                if len(text) == 10:
                    return date.fromisoformat(text)
                if text.endswith("Z"):
                    text = text[:-1] + "+00:00"
                return datetime.fromisoformat(text).date()
            except ValueError:
                pass
        raise ValidationError(
            field_name,
            value,
            f"{field_name} must be a date or an ISO 8601 date string",
            "INVALID_DATE",
        )

    @staticmethod
    def shorten_identifier(value: UUID | str, length: int) -> str:
        """Shorten an identifier for human-readable messages."""
        text = str(value)
        if length <= 0 or len(text) <= length:
            return text
        return text[:length]
