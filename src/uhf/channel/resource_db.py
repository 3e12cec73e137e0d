"""Global resource database.

Schedules keep private resource tables: the same media file may appear
under different identifiers in different schedules. The resource database
folds every schedule's table into one "best known" resource per identifier
so that the editor can reuse earlier metadata when a file reappears.

The database is derived, never authoritative. It is rebuilt lazily from the
schedules after invalidate(), and is only persisted on explicit export.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING

from uhf.channel.formats import Resource, Schedule
from uhf.storage import StorageError

if TYPE_CHECKING:
    from uhf.storage import ChannelStorage

logger = logging.getLogger(__name__)

# Fields propagated by merge_edit(); path and duration are not user-edited.
EDITABLE_FIELDS: tuple[str, ...] = (
    "order",
    "title",
    "description",
    "year",
    "series_id",
    "start_offset",
)


def preferred_resource(a: Resource, b: Resource) -> Resource:
    """Pick the resource with richer metadata.

    The first rule that distinguishes the two wins, otherwise ``a``:
    1. a non-empty description beats none
    2. a release year beats none
    3. an explicit order beats none

    This is a heuristic for choosing what to offer the user, not a
    correctness rule. Keep the tie-break order stable since exported
    databases depend on it.
    """
    if a.has_description != b.has_description:
        return a if a.has_description else b
    if (a.year is None) != (b.year is None):
        return a if a.year is not None else b
    if (a.order is None) != (b.order is None):
        return a if a.order is not None else b
    return a


class ResourceDatabase:
    """Lazily rebuilt identifier to resource mapping across schedules.

    Reads go through ensure_current(), which rebuilds from the schedule
    source when the database has been invalidated.
    """

    def __init__(self, source: Callable[[], Iterable[Schedule]]) -> None:
        """Initialize an invalid (not yet built) database.

        Args:
            source: Callable returning the schedules to fold, in order.
        """
        self._source = source
        self._entries: dict[str, Resource] = {}
        self._valid = False
        self.dirty = False

    @property
    def is_valid(self) -> bool:
        """False until the next rebuild after invalidate()."""
        return self._valid

    def invalidate(self) -> None:
        """Mark the database stale; the next read rebuilds it."""
        self._valid = False

    def ensure_current(self) -> None:
        """Rebuild from the schedule source if the database is stale."""
        if not self._valid:
            self.rebuild()

    def rebuild(self) -> None:
        """Fold every referenced resource of every schedule."""
        self._entries = {}
        for schedule in self._source():
            for day in schedule.days:
                for program in day:
                    resource = schedule.resources.get(program.resource_id)
                    if resource is None:
                        continue
                    self.fold(program.resource_id, resource)
        self._valid = True
        self.dirty = False
        logger.debug("Rebuilt resource database: %d entries", len(self._entries))

    def fold(self, identifier: str, candidate: Resource) -> Resource:
        """Insert ``candidate`` or replace the entry with the preferred one.

        Returns:
            The entry now stored for ``identifier``.
        """
        existing = self._entries.get(identifier)
        if existing is None:
            chosen = candidate.model_copy()
        else:
            chosen = preferred_resource(existing, candidate)
            if chosen is candidate:
                chosen = candidate.model_copy()
        self._entries[identifier] = chosen
        return chosen

    def get(self, identifier: str) -> Resource | None:
        """Return the entry for ``identifier``, or None."""
        self.ensure_current()
        return self._entries.get(identifier)

    def __len__(self) -> int:
        self.ensure_current()
        return len(self._entries)

    def __contains__(self, identifier: object) -> bool:
        self.ensure_current()
        return identifier in self._entries

    def items(self) -> list[tuple[str, Resource]]:
        """Return a snapshot of (identifier, resource) pairs."""
        self.ensure_current()
        return list(self._entries.items())

    def match_by_path(self, resource: Resource) -> tuple[Resource, str | None]:
        """Find a known resource for the same file.

        Args:
            resource: Freshly built resource (e.g. from a dropped file).

        Returns:
            (copy of the matched entry, its identifier) when an entry has the
            same path, otherwise (``resource``, None).
        """
        self.ensure_current()
        for identifier, entry in self._entries.items():
            if entry.path == resource.path:
                return entry.model_copy(), identifier
        return resource, None

    def add_if_missing(self, identifier: str, resource: Resource) -> None:
        """Record a newly placed resource so later drops can reuse it."""
        self.ensure_current()
        if identifier not in self._entries:
            self._entries[identifier] = resource.model_copy()

    def merge_edit(self, resource: Resource, identifier: str) -> bool:
        """Copy user-edited fields of ``resource`` into the entry.

        Other schedules referencing the same file under a different
        identifier are left alone.

        Returns:
            True if an entry existed and was updated.
        """
        self.ensure_current()
        entry = self._entries.get(identifier)
        if entry is None:
            return False
        for field_name in EDITABLE_FIELDS:
            setattr(entry, field_name, getattr(resource, field_name))
        self.dirty = True
        return True

    def to_json_bytes(self) -> bytes:
        """Serialize the entries as a JSON array (identifiers dropped)."""
        self.ensure_current()
        values = [
            entry.model_dump(mode="json", exclude_none=True)
            for entry in self._entries.values()
        ]
        return (json.dumps(values, indent=2, ensure_ascii=False) + "\n").encode(
            "utf-8"
        )

    def export(self, storage: ChannelStorage, path: str) -> bool:
        """Write the database to ``path``.

        Failures are logged and reported through the return value.

        Returns:
            True on success.
        """
        try:
            data = self.to_json_bytes()
            storage.write_bytes(path, data)
        except (StorageError, TypeError, ValueError) as e:
            logger.error("Failed to export resource database to %s: %s", path, e)
            return False
        self.dirty = False
        logger.info(
            "Exported %d resources to %s",
            len(self._entries),
            storage.describe(path),
        )
        return True
