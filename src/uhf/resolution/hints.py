"""Location hints: directories the user pointed at to find missing media.

When a resource path is not readable under the channel directory, its file
name is looked up in each hint directory, most recently added first. Hints
are stored as a JSON array of directory strings so they survive restarts.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uhf.storage import ChannelStorage

logger = logging.getLogger(__name__)


class LocationHintRegistry:
    """Ordered, optionally persisted set of hint directories."""

    def __init__(self, path: Path | None = None) -> None:
        """Initialize an empty registry.

        Args:
            path: JSON file to load from and save to; None keeps the hints
                in memory only.
        """
        self.path = path
        self._directories: list[Path] = []
        self._lock = threading.Lock()

    @classmethod
    def load(cls, path: Path) -> LocationHintRegistry:
        """Create a registry from ``path``.

        A missing file yields an empty registry. A corrupt file is logged
        and ignored, since hints are only a convenience.
        """
        registry = cls(path)
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return registry
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable location hints %s: %s", path, e)
            return registry
        if not isinstance(raw, list):
            logger.warning("Ignoring location hints %s: expected a JSON array", path)
            return registry
        registry._directories = [Path(item) for item in raw if isinstance(item, str)]
        logger.debug("Loaded %d location hints from %s", len(registry), path)
        return registry

    def __len__(self) -> int:
        with self._lock:
            return len(self._directories)

    def snapshot(self) -> list[Path]:
        """Return the hint directories, most recent first."""
        with self._lock:
            return list(self._directories)

    def add(self, directories: Iterable[Path]) -> None:
        """Record directories as the most recent hints.

        A directory already known moves to the front.
        """
        new = [Path(d).expanduser() for d in directories]
        with self._lock:
            kept = [d for d in self._directories if d not in new]
            self._directories = new + kept
        logger.info("Added location hints: %s", ", ".join(str(d) for d in new))

    def locate(self, file_name: str) -> Path | None:
        """Return ``hint / file_name`` for the first hint holding that file."""
        for directory in self.snapshot():
            candidate = directory / file_name
            if candidate.is_file():
                return candidate
        return None

    def save(self) -> bool:
        """Persist the hints. Returns False (after logging) on failure."""
        if self.path is None:
            return True
        data = json.dumps([str(d) for d in self.snapshot()], indent=2) + "\n"
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, temp_path_str = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
            )
            temp_path = Path(temp_path_str)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(data)
                temp_path.replace(self.path)
            except Exception:
                temp_path.unlink(missing_ok=True)
                raise
        except OSError as e:
            logger.error("Failed to save location hints to %s: %s", self.path, e)
            return False
        return True


def is_locatable(storage: ChannelStorage, hints: LocationHintRegistry, path: str) -> bool:
    """True if the channel-relative ``path`` is readable under the channel,
    or its file name is found in one of the hint directories."""
    if storage.is_readable(path):
        return True
    return hints.locate(Path(path).name) is not None
