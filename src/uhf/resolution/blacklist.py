"""Session blacklist of media paths the user declined to locate."""

from __future__ import annotations

import logging
import threading

logger = logging.getLogger(__name__)


class SessionBlacklist:
    """Resolved path strings that must not trigger another locate prompt.

    Lives for one editing session and is never persisted. Written by the
    foreground, read by resolution workers.
    """

    def __init__(self) -> None:
        self._paths: set[str] = set()
        self._lock = threading.Lock()

    def add(self, path: str) -> None:
        with self._lock:
            self._paths.add(path)
        logger.info("Blacklisted %s for this session", path)

    def __contains__(self, path: object) -> bool:
        with self._lock:
            return path in self._paths

    def __len__(self) -> int:
        with self._lock:
            return len(self._paths)

    def snapshot(self) -> frozenset[str]:
        with self._lock:
            return frozenset(self._paths)

    def clear(self) -> None:
        with self._lock:
            self._paths.clear()
