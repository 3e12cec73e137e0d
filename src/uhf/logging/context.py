"""Resolution worker context for log records.

Background resolution workers run one per day. The context variables below
carry which worker, schedule and day a thread is resolving, so every record
it emits can be tagged without threading the values through each call.
"""

from __future__ import annotations

import contextvars
import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Generator

_worker_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "worker_id", default=None
)
_schedule_index: contextvars.ContextVar[int | None] = contextvars.ContextVar(
    "schedule_index", default=None
)
_day_ordinal: contextvars.ContextVar[int | None] = contextvars.ContextVar(
    "day_ordinal", default=None
)


def set_resolution_context(
    worker_id: str,
    schedule_index: int | None = None,
    day_ordinal: int | None = None,
) -> None:
    """Set the context of the current thread.

    Args:
        worker_id: Worker identifier (e.g., "01").
        schedule_index: Index of the schedule being resolved.
        day_ordinal: Flat ordinal of the day being resolved.
    """
    _worker_id.set(worker_id)
    _schedule_index.set(schedule_index)
    _day_ordinal.set(day_ordinal)


def clear_resolution_context() -> None:
    _worker_id.set(None)
    _schedule_index.set(None)
    _day_ordinal.set(None)


@contextmanager
def resolution_context(
    worker_id: str,
    schedule_index: int | None = None,
    day_ordinal: int | None = None,
) -> Generator[None, None, None]:
    """Set the resolution context for the duration of a block.

    The previous values are restored on exit.

    Example:
        with resolution_context("01", schedule_index=0, day_ordinal=3):
            logger.info("Probing")  # tagged [W01:S0D3]
    """
    previous = get_resolution_context()
    try:
        set_resolution_context(worker_id, schedule_index, day_ordinal)
        yield
    finally:
        _worker_id.set(previous[0])
        _schedule_index.set(previous[1])
        _day_ordinal.set(previous[2])


def get_resolution_context() -> tuple[str | None, int | None, int | None]:
    """Return (worker_id, schedule_index, day_ordinal); any may be None."""
    return _worker_id.get(), _schedule_index.get(), _day_ordinal.get()


def format_worker_tag(
    worker_id: str | None, schedule_index: int | None, day_ordinal: int | None
) -> str:
    """Build the compact text tag, e.g. ``[W01:S0D3] `` or ``[W01] ``."""
    if not worker_id:
        return ""
    if schedule_index is None and day_ordinal is None:
        return f"[W{worker_id}] "
    where = ""
    if schedule_index is not None:
        where += f"S{schedule_index}"
    if day_ordinal is not None:
        where += f"D{day_ordinal}"
    return f"[W{worker_id}:{where}] "


class WorkerContextFilter(logging.Filter):
    """Logging filter that copies the resolution context onto records.

    Adds ``worker_id``, ``schedule_index`` and ``day_ordinal`` for the JSON
    format and ``worker_tag`` for the text format. Never drops a record.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        worker_id, schedule_index, day_ordinal = get_resolution_context()
        record.worker_id = worker_id
        # An explicit extra={"schedule_index": ...} wins over the context.
        if getattr(record, "schedule_index", None) is None:
            record.schedule_index = schedule_index
        record.day_ordinal = day_ordinal
        record.worker_tag = format_worker_tag(worker_id, schedule_index, day_ordinal)
        return True
