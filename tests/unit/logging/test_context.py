"""Unit tests for logging context module."""

import logging
import threading

from uhf.logging.context import (
    WorkerContextFilter,
    clear_resolution_context,
    format_worker_tag,
    get_resolution_context,
    resolution_context,
    set_resolution_context,
)


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("uhf.test", logging.INFO, __file__, 1, "msg", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestSetAndGetResolutionContext:
    """Tests for set_resolution_context and get_resolution_context."""

    def test_set_and_get_full_context(self) -> None:
        """Test setting and getting all context values."""
        set_resolution_context("01", 0, 3)

        assert get_resolution_context() == ("01", 0, 3)

        clear_resolution_context()
        assert get_resolution_context() == (None, None, None)

    def test_context_manager_restores_previous(self) -> None:
        """Nested contexts restore the outer values on exit."""
        with resolution_context("01", 0, 3):
            with resolution_context("02", 1, 9):
                assert get_resolution_context() == ("02", 1, 9)
            assert get_resolution_context() == ("01", 0, 3)
        assert get_resolution_context() == (None, None, None)

    def test_context_is_per_thread(self) -> None:
        """A worker's context is not visible on other threads."""
        seen: list[tuple] = []

        def worker() -> None:
            with resolution_context("07", 1, 8):
                seen.append(get_resolution_context())

        thread = threading.Thread(target=worker)
        thread.start()
        thread.join()

        assert seen == [("07", 1, 8)]
        assert get_resolution_context() == (None, None, None)


class TestFormatWorkerTag:
    """Tests for format_worker_tag."""

    def test_full_tag(self) -> None:
        assert format_worker_tag("01", 0, 3) == "[W01:S0D3] "

    def test_worker_only(self) -> None:
        assert format_worker_tag("01", None, None) == "[W01] "

    def test_no_worker(self) -> None:
        """Foreground records carry no tag."""
        assert format_worker_tag(None, 0, 3) == ""


class TestWorkerContextFilter:
    """Tests for WorkerContextFilter."""

    def test_adds_context_fields(self) -> None:
        record = _record()
        with resolution_context("01", 0, 3):
            assert WorkerContextFilter().filter(record)

        assert record.worker_id == "01"
        assert record.schedule_index == 0
        assert record.day_ordinal == 3
        assert record.worker_tag == "[W01:S0D3] "

    def test_foreground_record(self) -> None:
        """Outside a worker every field is empty."""
        record = _record()
        WorkerContextFilter().filter(record)

        assert record.worker_id is None
        assert record.worker_tag == ""

    def test_explicit_schedule_index_kept(self) -> None:
        """An extra schedule_index is not overwritten by the context."""
        record = _record(schedule_index=4)
        with resolution_context("01", 0, 3):
            WorkerContextFilter().filter(record)

        assert record.schedule_index == 4
