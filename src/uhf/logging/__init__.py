"""Structured logging for UHF Scheduler.

Text or JSON output with optional file rotation. Records emitted by
background resolution workers are tagged with the worker, schedule and day
they are resolving.
"""

from uhf.logging.config import JSONFormatter, configure_logging
from uhf.logging.context import (
    WorkerContextFilter,
    clear_resolution_context,
    get_resolution_context,
    resolution_context,
    set_resolution_context,
)

__all__ = [
    "JSONFormatter",
    "WorkerContextFilter",
    "clear_resolution_context",
    "configure_logging",
    "get_resolution_context",
    "resolution_context",
    "set_resolution_context",
]
