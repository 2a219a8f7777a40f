"""
Time Window Value Object

Represents a dock occupation period with start and end boundaries. Windows
are half-open, ``[start, end)``: a window ending at 12:00 does not overlap
one starting at 12:00.
"""

from datetime import datetime, timedelta
from typing import Optional


class TimeWindow:
    """A time window value object representing a period between two instants."""

    def __init__(self, *, start_time: datetime, end_time: datetime) -> None:
        """
        Initialize a TimeWindow.

        Args:
            start_time: Absolute start time
            end_time: Absolute end time

        Raises:
            ValueError: If the window is empty or inverted
        """
        if start_time >= end_time:
            raise ValueError("Start time must be before end time")
        self._start_time = start_time
        self._end_time = end_time

    @property
    def start_time(self) -> datetime:
        """Get start time."""
        return self._start_time

    @property
    def end_time(self) -> datetime:
        """Get end time."""
        return self._end_time

    @property
    def duration(self) -> timedelta:
        return self._end_time - self._start_time

    def duration_minutes(self) -> int:
        """Get duration of the time window in minutes."""
        return int(self.duration.total_seconds() / 60)

    def contains(self, time_point: datetime) -> bool:
        """Check if a time point falls inside the window (end exclusive)."""
        return self._start_time <= time_point < self._end_time

    def overlaps_with(self, other: "TimeWindow") -> bool:
        """
        Check if this window overlaps with another window.

        Touching endpoints do not overlap.
        """
        return (
            self._start_time < other._end_time
            and other._start_time < self._end_time
        )

    def intersection_with(self, other: "TimeWindow") -> Optional["TimeWindow"]:
        """Get intersection with another time window, or None if disjoint."""
        if not self.overlaps_with(other):
            return None

        return TimeWindow(
            start_time=max(self._start_time, other._start_time),
            end_time=min(self._end_time, other._end_time),
        )

    def __eq__(self, other: object) -> bool:
        """Check equality."""
        if not isinstance(other, TimeWindow):
            return False
        return (
            self._start_time == other._start_time
            and self._end_time == other._end_time
        )

    def __hash__(self) -> int:
        """Hash for use in sets and dicts."""
        return hash((self._start_time, self._end_time))

    def __str__(self) -> str:
        """String representation."""
        return f"{self._start_time.isoformat()} to {self._end_time.isoformat()}"

    def __repr__(self) -> str:
        """Detailed string representation."""
        return f"TimeWindow(start_time={self._start_time}, end_time={self._end_time})"
