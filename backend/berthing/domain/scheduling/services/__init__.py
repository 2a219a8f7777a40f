"""
Scheduling domain services.

Import the concrete modules directly: ``conflict_detector``,
``schedule_generator`` and ``plan_status``.
"""
