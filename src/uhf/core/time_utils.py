"""Time-of-day utilities.

Programs are placed at a time of day with no date component. Times are
stored as zero-padded 24-hour ``HH:MM`` strings so that lexical order and
chronological order agree.
"""

from __future__ import annotations

MINUTES_PER_DAY = 24 * 60


def parse_time_of_day(value: str) -> tuple[int, int]:
    """Parse a time of day into (hour, minute).

    Accepts ``H:MM``, ``HH:MM`` and ``HH:MM:SS``; seconds are discarded.

    Args:
        value: Time of day string.

    Returns:
        Tuple of (hour, minute).

    Raises:
        ValueError: If the value is not a valid 24-hour time of day.
    """
    parts = value.strip().split(":")
    if len(parts) not in (2, 3):
        raise ValueError(f"Invalid time of day: {value!r} (expected HH:MM)")
    try:
        hour, minute = int(parts[0]), int(parts[1])
        second = int(parts[2]) if len(parts) == 3 else 0
    except ValueError as e:
        raise ValueError(f"Invalid time of day: {value!r} (expected HH:MM)") from e
    if not (0 <= hour < 24 and 0 <= minute < 60 and 0 <= second < 60):
        raise ValueError(f"Invalid time of day: {value!r} (expected HH:MM)")
    return hour, minute


def normalize_time_of_day(value: str) -> str:
    """Return ``value`` as a zero-padded ``HH:MM`` string."""
    hour, minute = parse_time_of_day(value)
    return f"{hour:02d}:{minute:02d}"


def minutes_since_midnight(value: str) -> int:
    """Return the number of minutes from midnight to ``value``."""
    hour, minute = parse_time_of_day(value)
    return hour * 60 + minute


def add_minutes(value: str, minutes: int) -> str:
    """Shift a time of day by ``minutes``, wrapping at midnight.

    Example:
        >>> add_minutes("23:45", 30)
        '00:15'
    """
    total = (minutes_since_midnight(value) + minutes) % MINUTES_PER_DAY
    return f"{total // 60:02d}:{total % 60:02d}"


def parse_clock_duration(value: str) -> int:
    """Parse ``HH:MM:SS`` (or ``MM:SS``, or bare seconds) into seconds.

    Used for resource start offsets entered by hand.

    Raises:
        ValueError: If any component is not a non-negative integer.
    """
    parts = value.strip().split(":")
    if not parts or len(parts) > 3:
        raise ValueError(f"Invalid duration: {value!r} (expected HH:MM:SS)")
    seconds = 0
    for part in parts:
        if not part.isdigit():
            raise ValueError(f"Invalid duration: {value!r} (expected HH:MM:SS)")
        seconds = seconds * 60 + int(part)
    return seconds


def format_clock_duration(seconds: int) -> str:
    """Format a number of seconds as ``H:MM:SS``."""
    hours, remainder = divmod(max(seconds, 0), 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours}:{minutes:02d}:{secs:02d}"
