"""Berth scheduling bounded context."""
