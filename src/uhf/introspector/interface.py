"""DurationProbe interface for media duration extraction."""

from pathlib import Path
from typing import Protocol


class MediaIntrospectionError(Exception):
    """Raised when a media file cannot be probed."""

    pass


class DurationProbe(Protocol):
    """Protocol for media duration probes.

    Implementations return 0.0 when the duration cannot be determined;
    they never raise for unreadable or unknown files.
    """

    def probe_duration(self, path: Path) -> float:
        """Return the duration of a media file in seconds.

        Args:
            path: Absolute path to the media file.

        Returns:
            Duration in seconds, or 0.0 if unknown.
        """
        ...
