"""Composite duration prober with an extension-gated fallback."""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING

from uhf.introspector.interface import DurationProbe, MediaIntrospectionError

if TYPE_CHECKING:
    from uhf.config.models import UHFConfig

logger = logging.getLogger(__name__)

DEFAULT_MEDIA_EXTENSIONS: tuple[str, ...] = ("avi", "mov", "mkv", "mp4", "m4v")
DEFAULT_FALLBACK_EXTENSIONS: tuple[str, ...] = ("mkv",)


def _normalize_extensions(extensions: Iterable[str]) -> frozenset[str]:
    return frozenset(ext.strip().lstrip(".").casefold() for ext in extensions if ext)


class MediaDurationProber:
    """Primary probe, then the secondary probe for selected extensions.

    A secondary failure is treated exactly like a primary failure: the
    duration is reported as 0.0.
    """

    def __init__(
        self,
        primary: DurationProbe,
        secondary: DurationProbe | None = None,
        fallback_extensions: Iterable[str] = DEFAULT_FALLBACK_EXTENSIONS,
        media_extensions: Iterable[str] = DEFAULT_MEDIA_EXTENSIONS,
    ) -> None:
        self.primary = primary
        self.secondary = secondary
        self.fallback_extensions = _normalize_extensions(fallback_extensions)
        self.media_extensions = _normalize_extensions(media_extensions)

    @classmethod
    def from_config(cls, config: UHFConfig) -> MediaDurationProber:
        """Build the production prober (PyAV, then ffprobe when installed)."""
        from uhf.introspector.ffprobe import FFprobeDurationProbe
        from uhf.introspector.pyav import PyAVDurationProbe

        secondary: DurationProbe | None
        try:
            secondary = FFprobeDurationProbe(
                config.tools.ffprobe, timeout=config.probe.ffprobe_timeout
            )
        except MediaIntrospectionError as e:
            logger.warning("Fallback duration probe disabled: %s", e)
            secondary = None

        return cls(
            PyAVDurationProbe(),
            secondary,
            fallback_extensions=config.probe.fallback_extensions,
            media_extensions=config.probe.media_extensions,
        )

    @staticmethod
    def _extension(path: Path) -> str:
        return path.suffix.lstrip(".").casefold()

    def is_media_file(self, path: Path) -> bool:
        """True if ``path`` has one of the supported media extensions."""
        return self._extension(path) in self.media_extensions

    def probe_duration(self, path: Path) -> float:
        """Return the duration of ``path`` in seconds, or 0.0 if unknown."""
        duration = self.primary.probe_duration(path)
        if duration > 0:
            return duration
        if self.secondary is not None and self._extension(path) in self.fallback_extensions:
            logger.debug("Using fallback probe for %s", path.name)
            duration = self.secondary.probe_duration(path)
        return duration if duration > 0 else 0.0

    def probe_seconds(self, path: Path) -> int:
        """Return the duration rounded up to whole seconds (0 if unknown)."""
        return math.ceil(self.probe_duration(path))
