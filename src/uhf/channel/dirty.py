"""Per-entity modification tracking.

Each schedule (by index), each list (by identifier) and the manifest has its
own flag. A flag goes Clean to Dirty on any mutation of its entity and back to
Clean only after that entity's own write succeeded. Whether the channel as a
whole is dirty is computed from the flags, never stored.
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


class DirtyTracker:
    """Dirty flags for the manifest, schedules and lists of one channel."""

    def __init__(self, schedule_count: int = 0) -> None:
        self.manifest = False
        self._schedules: list[bool] = [False] * schedule_count
        self._lists: dict[str, bool] = {}

    def reset(self, schedule_count: int, list_ids: list[str] | None = None) -> None:
        """Forget all flags and size the tracker for a freshly opened channel."""
        self.manifest = False
        self._schedules = [False] * schedule_count
        self._lists = dict.fromkeys(list_ids or [], False)

    def mark_manifest(self) -> None:
        self.manifest = True

    def clear_manifest(self) -> None:
        self.manifest = False

    def mark_schedule(self, index: int) -> None:
        """Mark schedule ``index`` dirty.

        Raises:
            IndexError: If no schedule has that index.
        """
        if not 0 <= index < len(self._schedules):
            raise IndexError(f"No schedule at index {index}")
        self._schedules[index] = True

    def clear_schedule(self, index: int) -> None:
        self._schedules[index] = False

    def schedule_is_dirty(self, index: int) -> bool:
        return 0 <= index < len(self._schedules) and self._schedules[index]

    def mark_list(self, list_id: str) -> None:
        self._lists[list_id] = True

    def clear_list(self, list_id: str) -> None:
        if list_id in self._lists:
            self._lists[list_id] = False

    def list_is_dirty(self, list_id: str) -> bool:
        return self._lists.get(list_id, False)

    def forget_list(self, list_id: str) -> None:
        """Stop tracking a removed list."""
        self._lists.pop(list_id, None)

    def mark_all(self) -> None:
        """Mark every tracked entity dirty (used for new channels)."""
        self.manifest = True
        self._schedules = [True] * len(self._schedules)
        self._lists = dict.fromkeys(self._lists, True)

    def dirty_schedule_indices(self) -> list[int]:
        """Return dirty schedule indices in ascending order."""
        return [i for i, dirty in enumerate(self._schedules) if dirty]

    def dirty_list_ids(self) -> list[str]:
        """Return dirty list identifiers in insertion order."""
        return [list_id for list_id, dirty in self._lists.items() if dirty]

    @property
    def is_dirty(self) -> bool:
        """True if any entity still needs to be written."""
        return self.manifest or any(self._schedules) or any(self._lists.values())

    def summary(self) -> dict[str, object]:
        """Return the current flags for logging and display."""
        return {
            "manifest": self.manifest,
            "schedules": self.dirty_schedule_indices(),
            "lists": self.dirty_list_ids(),
        }
