"""Tests for flat day ordinal addressing."""

from datetime import date

import pytest

from uhf.channel.day_index import DayIndex, DayLocation


class TestLocate:
    """Tests for DayIndex.locate and its helpers."""

    def test_two_weeks_boundary(self) -> None:
        """Ordinal 6 is the last day of week one, 7 the first of week two."""
        index = DayIndex([7, 7])

        assert index.schedule_index_for(6) == 0
        assert index.schedule_index_for(7) == 1
        assert index.day_index_for(7) == 0
        assert index.locate(13) == DayLocation(1, 6)

    def test_every_valid_ordinal_lands_inside_its_schedule(self) -> None:
        """Every in-range ordinal maps to an existing day."""
        counts = [7, 3, 0, 9]
        index = DayIndex(counts)

        for ordinal in range(index.total_days):
            location = index.locate(ordinal)
            assert location is not None
            assert location.day_index < counts[location.schedule_index]

    @pytest.mark.parametrize("ordinal", [-1, -100, 14, 15, 1000])
    def test_out_of_range_is_none(self, ordinal: int) -> None:
        """Negative and past-the-end ordinals are not found."""
        index = DayIndex([7, 7])

        assert index.locate(ordinal) is None
        assert index.schedule_index_for(ordinal) is None
        assert index.day_index_for(ordinal) is None

    def test_empty_schedules_are_skipped(self) -> None:
        """A schedule without days owns no ordinals."""
        index = DayIndex([2, 0, 2])

        assert index.locate(2) == DayLocation(2, 0)

    def test_no_schedules(self) -> None:
        """A channel with no schedules has no days."""
        index = DayIndex([])

        assert index.total_days == 0
        assert index.locate(0) is None


class TestOrdinalFor:
    """Tests for the inverse mapping."""

    def test_inverse_of_locate(self) -> None:
        """ordinal_for undoes locate."""
        index = DayIndex([7, 5, 7])

        for ordinal in range(index.total_days):
            location = index.locate(ordinal)
            assert index.ordinal_for(location.schedule_index, location.day_index) == ordinal

    def test_invalid_pairs(self) -> None:
        """Unknown schedule or day gives None."""
        index = DayIndex([7])

        assert index.ordinal_for(1, 0) is None
        assert index.ordinal_for(0, 7) is None


class TestDateFor:
    """Tests for calendar dates of ordinals."""

    def test_date_offsets_from_schedule_start(self) -> None:
        """The date is the owning schedule's start plus the in-file day."""
        index = DayIndex([7, 7], [date(2024, 1, 7), date(2024, 2, 1)])

        assert index.date_for(3) == date(2024, 1, 10)
        assert index.date_for(8) == date(2024, 2, 2)
        assert index.date_for(14) is None

    def test_requires_dates(self) -> None:
        """date_for without start dates is a programming error."""
        with pytest.raises(ValueError):
            DayIndex([7]).date_for(0)

    def test_mismatched_dates_rejected(self) -> None:
        """One start date is needed per schedule."""
        with pytest.raises(ValueError, match="start_dates"):
            DayIndex([7, 7], [date(2024, 1, 7)])
