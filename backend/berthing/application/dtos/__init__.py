"""Data transfer objects returned by the application services."""

from .planning_dtos import BerthUpdateResult, FeasibilityReport, PreparationResult

__all__ = ["BerthUpdateResult", "FeasibilityReport", "PreparationResult"]
