"""FFprobe-based fallback duration probe."""

from __future__ import annotations

import json
import logging
import shutil
from pathlib import Path

from uhf.core.subprocess_utils import ToolError, run_tool
from uhf.introspector.interface import MediaIntrospectionError

logger = logging.getLogger(__name__)


class FFprobeDurationProbe:
    """ffprobe-based duration probe.

    Used as the fallback for containers the primary probe cannot time
    (e.g. Matroska files without a duration element).
    """

    def __init__(self, ffprobe_path: Path | None = None, timeout: int = 60) -> None:
        """Initialize the probe.

        Args:
            ffprobe_path: Optional explicit path to ffprobe. If not provided,
                uses the configured path or the system PATH.
            timeout: Seconds to wait for ffprobe before giving up.

        Raises:
            MediaIntrospectionError: If ffprobe is not available.
        """
        self._ffprobe_path = ffprobe_path or self._get_configured_path()
        self._timeout = timeout

        if self._ffprobe_path is None:
            raise MediaIntrospectionError(
                "ffprobe is not installed or not in PATH. "
                "Install ffmpeg to enable the fallback duration probe. "
                "You can also configure a custom path via UHF_FFPROBE_PATH "
                "environment variable or ~/.uhf/config.toml"
            )

    @staticmethod
    def _get_configured_path() -> Path | None:
        """Get ffprobe path from configuration, then PATH.

        Returns:
            Path to ffprobe or None if not available.
        """
        from uhf.config import get_config

        configured = get_config().tools.ffprobe
        if configured is not None:
            return configured
        found = shutil.which("ffprobe")
        return Path(found) if found else None

    @classmethod
    def is_available(cls) -> bool:
        """Check if ffprobe can be located.

        Returns:
            True if ffprobe is available, False otherwise.
        """
        return cls._get_configured_path() is not None

    def read_duration(self, path: Path) -> float:
        """Run ffprobe and return the container duration.

        Raises:
            MediaIntrospectionError: If ffprobe fails or reports no duration.
        """
        if not path.exists():
            raise MediaIntrospectionError(f"File not found: {path}")

        try:
            stdout = run_tool(
                self._ffprobe_path,
                "-v",
                "error",
                "-print_format",
                "json",
                "-show_format",
                path,
                timeout=self._timeout,
            )
        except ToolError as e:
            raise MediaIntrospectionError(f"ffprobe failed for {path}: {e.reason}") from e

        try:
            data = json.loads(stdout)
        except json.JSONDecodeError as e:
            raise MediaIntrospectionError(
                f"Invalid ffprobe output for {path}: {e}"
            ) from e

        duration = data.get("format", {}).get("duration")
        if duration is None:
            raise MediaIntrospectionError(f"No duration in ffprobe output for {path}")
        try:
            return float(duration)
        except (TypeError, ValueError) as e:
            raise MediaIntrospectionError(
                f"Invalid duration {duration!r} for {path}"
            ) from e

    def probe_duration(self, path: Path) -> float:
        try:
            return self.read_duration(path)
        except MediaIntrospectionError as e:
            logger.debug("Fallback probe failed: %s", e)
            return 0.0
