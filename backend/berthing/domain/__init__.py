"""Domain layer: aggregates, value objects and domain services."""
