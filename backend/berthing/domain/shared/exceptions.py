"""
Domain Exceptions

Defines the error taxonomy of the planning and execution domain. Validation
and transition errors surface synchronously to the caller; planning
degradations are never raised, they end up in an operation plan's warnings.
"""

from collections.abc import Iterable
from datetime import date
from enum import Enum
from uuid import UUID


class ErrorType(str, Enum):
    """Error type enumeration for discriminated unions."""

    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    RESOURCE_CONFLICT = "resource_conflict"
    INVALID_TRANSITION = "invalid_transition"
    NOT_FOUND = "not_found"
    CONCURRENCY = "concurrency"


class DomainError(Exception):
    """Base class for all domain errors with type discrimination."""

    def __init__(
        self,
        message: str,
        error_type: ErrorType,
        details: dict[str, str | int | bool | None] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_type = error_type
        self.details = details or {}

    def to_dict(self) -> dict[str, str | dict[str, str | int | bool | None]]:
        """Convert error to dictionary for API responses."""
        return {
            "type": self.error_type.value,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(DomainError):
    """Raised when domain validation rules are violated."""

    def __init__(
        self,
        field_name: str,
        value: object,
        message: str,
        error_code: str | None = None,
    ) -> None:
        self.field_name = field_name
        self.value = value
        self.error_code = error_code or "VALIDATION_ERROR"

        details: dict[str, str | int | bool | None] = {
            "field": field_name,
            "value": str(value) if value is not None else None,
            "error_code": self.error_code,
        }
        super().__init__(
            f"Validation failed for field '{field_name}': {message}",
            ErrorType.VALIDATION,
            details,
        )


class BusinessRuleError(DomainError):
    """Raised when business rules are violated."""

    def __init__(
        self, message: str, details: dict[str, str | int | bool | None] | None = None
    ) -> None:
        super().__init__(message, ErrorType.BUSINESS_RULE, details)


class PlanAlreadyExistsError(BusinessRuleError):
    """Raised when a plan is created for a date that already has one."""

    def __init__(self, plan_date: date) -> None:
        super().__init__(
            f"Operation plan already exists for date {plan_date.isoformat()}",
            {"plan_date": plan_date.isoformat()},
        )
        self.plan_date = plan_date


class ResourceConflictError(DomainError):
    """Raised when a dock would be double-booked without an explicit override."""

    def __init__(
        self, message: str, conflicting_visit_ids: Iterable[UUID] = ()
    ) -> None:
        self.conflicting_visit_ids = list(conflicting_visit_ids)
        super().__init__(
            message,
            ErrorType.RESOURCE_CONFLICT,
            {"conflict_count": len(self.conflicting_visit_ids)},
        )


class InvalidStatusTransitionError(DomainError):
    """Raised when a status change is not allowed by the state machine."""

    def __init__(self, current: str, target: str, allowed: Iterable[str]) -> None:
        self.current = current
        self.target = target
        self.allowed = list(allowed)
        super().__init__(
            f"Cannot transition from '{current}' to '{target}'. "
            f"Valid transitions: {', '.join(self.allowed) or 'none'}",
            ErrorType.INVALID_TRANSITION,
            {"current": current, "target": target},
        )


class OperationPlanNotFoundError(DomainError):
    """Raised when an operation plan is not found."""

    def __init__(self, key: UUID | date) -> None:
        super().__init__(
            f"Operation plan not found: {key}",
            ErrorType.NOT_FOUND,
            {"key": str(key), "entity_type": "operation_plan"},
        )
        self.key = key


class VesselVisitExecutionNotFoundError(DomainError):
    """Raised when a vessel-visit execution is not found."""

    def __init__(self, execution_id: UUID) -> None:
        super().__init__(
            f"Vessel visit execution not found: {execution_id}",
            ErrorType.NOT_FOUND,
            {"execution_id": str(execution_id), "entity_type": "vessel_visit_execution"},
        )
        self.execution_id = execution_id


class ConcurrencyError(DomainError):
    """Raised when an aggregate was modified by someone else since it was read."""

    def __init__(self, entity_type: str, entity_id: UUID) -> None:
        super().__init__(
            f"{entity_type} {entity_id} was modified concurrently",
            ErrorType.CONCURRENCY,
            {"entity_type": entity_type, "entity_id": str(entity_id)},
        )
        self.entity_id = entity_id
