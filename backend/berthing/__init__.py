"""Berth planning and vessel-visit execution engine."""

__version__ = "0.1.0"
