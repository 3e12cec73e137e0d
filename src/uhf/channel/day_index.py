"""Flat day ordinal addressing across schedule files.

A channel's days are the concatenation of every schedule's days in manifest
order. The day index translates a single 0-based ordinal into the owning
schedule and the day within it, and derives the calendar date of an
ordinal from the schedule descriptor's start date.

Resolution never raises for out-of-range ordinals: views query ordinals
speculatively, so a miss is reported as ``None``.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, timedelta


@dataclass(frozen=True)
class DayLocation:
    """Position of a day ordinal inside the channel."""

    schedule_index: int
    day_index: int


class DayIndex:
    """Stateless translator between day ordinals and (schedule, day) pairs.

    Built from a snapshot of each schedule's day count; rebuild it after any
    change to the number of schedules or days.
    """

    def __init__(
        self,
        day_counts: Sequence[int],
        start_dates: Sequence[date] | None = None,
    ) -> None:
        """Initialize the index.

        Args:
            day_counts: Number of days in each schedule, in manifest order.
            start_dates: Calendar start date of each schedule, in the same
                order. Required only for date_for().

        Raises:
            ValueError: If start_dates is given with a different length.
        """
        if start_dates is not None and len(start_dates) != len(day_counts):
            raise ValueError(
                f"start_dates has {len(start_dates)} entries, "
                f"expected {len(day_counts)}"
            )
        self._day_counts = tuple(day_counts)
        self._start_dates = tuple(start_dates) if start_dates is not None else None

    @property
    def total_days(self) -> int:
        """Total number of days across all schedules."""
        return sum(self._day_counts)

    def locate(self, ordinal: int) -> DayLocation | None:
        """Resolve an ordinal to its schedule and in-file day.

        Args:
            ordinal: Flat 0-based day ordinal.

        Returns:
            DayLocation, or None if the ordinal is negative or past the end.
        """
        if ordinal < 0:
            return None
        first_ordinal = 0
        for schedule_index, count in enumerate(self._day_counts):
            if ordinal < first_ordinal + count:
                return DayLocation(schedule_index, ordinal - first_ordinal)
            first_ordinal += count
        return None

    def schedule_index_for(self, ordinal: int) -> int | None:
        """Return the index of the schedule holding ``ordinal``, or None."""
        location = self.locate(ordinal)
        return location.schedule_index if location else None

    def day_index_for(self, ordinal: int) -> int | None:
        """Return the in-file day index of ``ordinal``, or None."""
        location = self.locate(ordinal)
        return location.day_index if location else None

    def ordinal_for(self, schedule_index: int, day_index: int) -> int | None:
        """Inverse of locate(): return the flat ordinal of a (schedule, day)."""
        if not 0 <= schedule_index < len(self._day_counts):
            return None
        if not 0 <= day_index < self._day_counts[schedule_index]:
            return None
        return sum(self._day_counts[:schedule_index]) + day_index

    def date_for(self, ordinal: int) -> date | None:
        """Return the calendar date of ``ordinal``, or None if out of range."""
        if self._start_dates is None:
            raise ValueError("DayIndex was built without start dates")
        location = self.locate(ordinal)
        if location is None:
            return None
        start = self._start_dates[location.schedule_index]
        return start + timedelta(days=location.day_index)
