"""Shared domain building blocks."""

from .base import AggregateRoot, DomainEvent, Entity, ValueObject, utc_now
from .exceptions import (
    BusinessRuleError,
    ConcurrencyError,
    DomainError,
    ErrorType,
    InvalidStatusTransitionError,
    OperationPlanNotFoundError,
    PlanAlreadyExistsError,
    ResourceConflictError,
    ValidationError,
    VesselVisitExecutionNotFoundError,
)

__all__ = [
    "AggregateRoot",
    "DomainEvent",
    "Entity",
    "ValueObject",
    "utc_now",
    "BusinessRuleError",
    "ConcurrencyError",
    "DomainError",
    "ErrorType",
    "InvalidStatusTransitionError",
    "OperationPlanNotFoundError",
    "PlanAlreadyExistsError",
    "ResourceConflictError",
    "ValidationError",
    "VesselVisitExecutionNotFoundError",
]
