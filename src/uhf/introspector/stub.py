"""Stub duration probe for development and testing."""

from __future__ import annotations

import threading
from collections.abc import Mapping
from pathlib import Path


class StubDurationProbe:
    """Returns canned durations keyed by file name.

    Files not in the table probe as 0.0. Durations can be changed while a
    resolution worker is running (e.g. to simulate a file being found after
    the user pointed at a new directory), and every call is recorded.

    Example:
        probe = StubDurationProbe({"pilot.mkv": 1320.4})
        probe.probe_duration(Path("/media/pilot.mkv"))  # 1320.4
    """

    def __init__(self, durations: Mapping[str, float] | None = None) -> None:
        self._durations: dict[str, float] = dict(durations or {})
        self._lock = threading.Lock()
        self.calls: list[Path] = []

    def set_duration(self, name: str, seconds: float) -> None:
        with self._lock:
            self._durations[name] = seconds

    def probe_duration(self, path: Path) -> float:
        with self._lock:
            self.calls.append(path)
            if str(path) in self._durations:
                return self._durations[str(path)]
            return self._durations.get(path.name, 0.0)
