"""Core utilities package.

Time-of-day helpers and the subprocess wrapper used by external probes.
"""

from uhf.core.subprocess_utils import ToolError, run_tool
from uhf.core.time_utils import (
    add_minutes,
    format_clock_duration,
    minutes_since_midnight,
    normalize_time_of_day,
    parse_clock_duration,
    parse_time_of_day,
)

__all__ = [
    "ToolError",
    "add_minutes",
    "format_clock_duration",
    "minutes_since_midnight",
    "normalize_time_of_day",
    "parse_clock_duration",
    "parse_time_of_day",
    "run_tool",
]
