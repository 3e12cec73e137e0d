"""The channel document: one open channel and every edit made to it.

A channel is a manifest, its schedules and its lists. Consumers address
days by a flat ordinal spanning all schedules; the document translates
ordinals through a DayIndex, keeps the dirty flags current, and maintains
the derived resource database.

Threading:
    All edits run on the foreground thread. The only cross-thread write is
    the duration update made by a resolution worker, which goes through
    set_resource_duration(). Each schedule has its own re-entrant lock, and
    every foreground edit of a schedule holds that lock, so a worker never
    observes a half-applied edit (e.g. a re-key) and unrelated schedules
    never block each other.
"""

from __future__ import annotations

import logging
import math
import threading
import uuid
from dataclasses import dataclass
from datetime import date, timedelta
from pathlib import Path
from typing import TYPE_CHECKING, Any

from uhf.channel.day_index import DayIndex, DayLocation
from uhf.channel.dirty import DirtyTracker
from uhf.channel.exceptions import DuplicateResourceIdError, UnknownEntityError
from uhf.channel.formats import (
    DAYS_PER_WEEK,
    ChannelInfo,
    ChannelList,
    ListDescriptor,
    ListInfo,
    ListProgram,
    ListSchedule,
    Manifest,
    Program,
    Resource,
    Schedule,
    ScheduleDescriptor,
    Series,
)
from uhf.channel.persistence import PersistenceCoordinator, SaveReport, load_channel
from uhf.channel.resource_db import EDITABLE_FIELDS, ResourceDatabase
from uhf.core.time_utils import (
    add_minutes,
    format_clock_duration,
    minutes_since_midnight,
    normalize_time_of_day,
    parse_clock_duration,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from uhf.introspector.interface import DurationProbe
    from uhf.storage import ChannelStorage

logger = logging.getLogger(__name__)

MISSING_TITLE = "Missing title"
IDENTIFIER_LENGTH = 8


@dataclass(frozen=True)
class ScheduledProgram:
    """One display row of a day listing."""

    start_time: str
    duration: int
    title: str
    day_ordinal: int
    has_description: bool
    error: bool
    resource_id: str
    path: str | None


def _sort_day(day: list[Program]) -> None:
    day.sort(key=lambda program: minutes_since_midnight(program.start_time))


class ChannelDocument:
    """An open channel and its editing operations."""

    def __init__(
        self,
        storage: ChannelStorage,
        manifest: Manifest,
        schedules: list[Schedule],
        lists: dict[str, ChannelList] | None = None,
    ) -> None:
        """Wrap already-loaded documents. Use open() or new() instead.

        Raises:
            ValueError: If the schedule count does not match the manifest.
        """
        if len(schedules) != len(manifest.schedules):
            raise ValueError(
                f"{len(schedules)} schedules for "
                f"{len(manifest.schedules)} schedule descriptors"
            )
        self.storage = storage
        self.manifest = manifest
        self.schedules = schedules
        self.lists: dict[str, ChannelList] = dict(lists or {})
        self.dirty = DirtyTracker()
        self.dirty.reset(len(schedules), list(self.lists))
        self.resource_db = ResourceDatabase(lambda: list(self.schedules))
        self._schedule_locks = [threading.RLock() for _ in schedules]
        self._persistence = PersistenceCoordinator(storage)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @classmethod
    def open(cls, storage: ChannelStorage) -> ChannelDocument:
        """Open the channel held by ``storage``.

        Raises:
            ChannelOpenError: If any file of the channel cannot be read or
                decoded. No document is created in that case.
        """
        loaded = load_channel(storage)
        document = cls(storage, loaded.manifest, loaded.schedules, loaded.lists)
        for index, schedule in enumerate(document.schedules):
            missing = schedule.missing_ids()
            if missing:
                logger.warning(
                    "Schedule %d references missing resources: %s",
                    index,
                    ", ".join(sorted(missing)),
                )
        return document

    @classmethod
    def new(
        cls,
        storage: ChannelStorage,
        start_date: date,
        weeks: int = 1,
        title: str | None = None,
    ) -> ChannelDocument:
        """Create an empty channel of ``weeks`` weekly schedules.

        Schedules are named ``schedule0.json``, ``schedule1.json``... and
        start on consecutive seven-day boundaries. Everything starts dirty.

        Raises:
            ValueError: If weeks is not positive.
        """
        if weeks < 1:
            raise ValueError(f"weeks must be at least 1, got {weeks}")
        descriptors = [
            ScheduleDescriptor(
                start_date=(start_date + timedelta(days=DAYS_PER_WEEK * i)).isoformat(),
                schedule_path=f"schedule{i}.json",
            )
            for i in range(weeks)
        ]
        manifest = Manifest(
            schedules=descriptors,
            info=ChannelInfo(title=title) if title else None,
        )
        schedules = [Schedule.empty() for _ in range(weeks)]
        document = cls(storage, manifest, schedules)
        document.dirty.mark_all()
        logger.info("Created channel with %d weeks from %s", weeks, start_date)
        return document

    def save(self) -> SaveReport:
        """Write every dirty entity. See PersistenceCoordinator.save()."""
        return self._persistence.save(self)

    @property
    def is_dirty(self) -> bool:
        return self.dirty.is_dirty

    def schedule_lock(self, schedule_index: int) -> threading.RLock:
        """Return the lock guarding schedule ``schedule_index``."""
        self._require_schedule(schedule_index)
        return self._schedule_locks[schedule_index]

    def mark_schedule_dirty(self, schedule_index: int) -> None:
        self.dirty.mark_schedule(schedule_index)

    # ------------------------------------------------------------------
    # Day addressing
    # ------------------------------------------------------------------

    def day_index(self) -> DayIndex:
        """Build a DayIndex from the current schedules."""
        return DayIndex(
            [len(schedule.days) for schedule in self.schedules],
            [descriptor.parsed_date for descriptor in self.manifest.schedules],
        )

    @property
    def total_days(self) -> int:
        return sum(len(schedule.days) for schedule in self.schedules)

    def locate(self, ordinal: int) -> DayLocation | None:
        return self.day_index().locate(ordinal)

    def date_for(self, ordinal: int) -> date | None:
        return self.day_index().date_for(ordinal)

    def programs_for_day(self, ordinal: int) -> list[Program]:
        """Return copies of the programs of day ``ordinal``.

        Out-of-range ordinals yield an empty list.
        """
        location = self.locate(ordinal)
        if location is None:
            return []
        with self._schedule_locks[location.schedule_index]:
            day = self.schedules[location.schedule_index].days[location.day_index]
            return [program.model_copy() for program in day]

    def display_title(self, resource: Resource) -> str:
        """Series title when the resource belongs to a known series, else
        the resource title."""
        series_title = self.manifest.series_title(resource.series_id)
        if series_title is not None:
            return series_title
        return resource.title or MISSING_TITLE

    def day_listing(
        self,
        ordinal: int,
        is_locatable: Callable[[str], bool] | None = None,
    ) -> list[ScheduledProgram]:
        """Return display rows for day ``ordinal``.

        A row is flagged as an error when its resource is missing from the
        schedule's table, its file cannot be found, or its duration is
        still unknown.

        Args:
            ordinal: Day to list.
            is_locatable: Decides whether a resource path can be found.
                Defaults to readability under the channel root. Callers
                holding location hints pass a check that also accepts
                files found through a hint.
        """
        found = is_locatable or self.storage.is_readable
        location = self.locate(ordinal)
        if location is None:
            return []
        rows: list[ScheduledProgram] = []
        with self._schedule_locks[location.schedule_index]:
            schedule = self.schedules[location.schedule_index]
            for program in schedule.days[location.day_index]:
                resource = schedule.resources.get(program.resource_id)
                if resource is None:
                    rows.append(
                        ScheduledProgram(
                            start_time=program.start_time,
                            duration=0,
                            title=MISSING_TITLE,
                            day_ordinal=ordinal,
                            has_description=False,
                            error=True,
                            resource_id=program.resource_id,
                            path=None,
                        )
                    )
                    continue
                readable = found(resource.path)
                rows.append(
                    ScheduledProgram(
                        start_time=program.start_time,
                        duration=resource.duration,
                        title=self.display_title(resource),
                        day_ordinal=ordinal,
                        has_description=resource.has_description,
                        error=not readable or not resource.is_resolved,
                        resource_id=program.resource_id,
                        path=resource.path,
                    )
                )
        return rows

    def scheduled_paths(self) -> set[str]:
        """Return every resource path referenced by any schedule."""
        paths: set[str] = set()
        for index, schedule in enumerate(self.schedules):
            with self._schedule_locks[index]:
                paths.update(resource.path for resource in schedule.resources.values())
        return paths

    # ------------------------------------------------------------------
    # Resource table access shared with resolution workers
    # ------------------------------------------------------------------

    def media_path(self, path: str) -> Path:
        """Filesystem path of a channel-relative resource path."""
        return self.storage.resolve(path)

    def resource_snapshot(self, schedule_index: int, resource_id: str) -> Resource | None:
        """Return a copy of a resource table entry, or None."""
        with self.schedule_lock(schedule_index):
            resource = self.schedules[schedule_index].resources.get(resource_id)
            return resource.model_copy() if resource is not None else None

    def set_resource_duration(
        self, schedule_index: int, resource_id: str, seconds: int
    ) -> bool:
        """Store a probed duration. Safe to call from a worker thread.

        Does not touch dirty flags, which belong to the foreground; callers
        mark the schedule dirty once the worker reports its results.

        Returns:
            True if the stored duration changed.
        """
        with self.schedule_lock(schedule_index):
            resource = self.schedules[schedule_index].resources.get(resource_id)
            if resource is None or resource.duration == seconds:
                return False
            resource.duration = seconds
            return True

    # ------------------------------------------------------------------
    # Program edits
    # ------------------------------------------------------------------

    def _require_schedule(self, schedule_index: int) -> Schedule:
        if not 0 <= schedule_index < len(self.schedules):
            raise UnknownEntityError(f"No schedule at index {schedule_index}")
        return self.schedules[schedule_index]

    def _require_location(self, ordinal: int) -> DayLocation:
        location = self.locate(ordinal)
        if location is None:
            raise UnknownEntityError(f"No day with ordinal {ordinal}")
        return location

    def _find_program(self, ordinal: int, start_time: str) -> tuple[DayLocation, int]:
        location = self._require_location(ordinal)
        wanted = normalize_time_of_day(start_time)
        day = self.schedules[location.schedule_index].days[location.day_index]
        for program_index, program in enumerate(day):
            if program.start_time == wanted:
                return location, program_index
        raise UnknownEntityError(f"No program at {wanted} on day {ordinal}")

    def _new_identifier(self, schedule: Schedule) -> str:
        while True:
            identifier = str(uuid.uuid4()).upper()[:IDENTIFIER_LENGTH]
            if identifier not in schedule.resources:
                return identifier

    def insert_program(
        self,
        ordinal: int,
        start_time: str,
        resource: Resource,
        category_id: str | None = None,
    ) -> str:
        """Place ``resource`` on day ``ordinal`` at ``start_time``.

        A resource whose path is already known to the resource database is
        placed under the known identifier, so one file does not accumulate
        several records. Otherwise a fresh identifier is generated.

        Returns:
            The resource identifier used by the new program.

        Raises:
            UnknownEntityError: If the ordinal is out of range.
            ValueError: If start_time is not a valid time of day.
        """
        location = self._require_location(ordinal)
        program_time = normalize_time_of_day(start_time)
        matched, identifier = self.resource_db.match_by_path(resource)
        index = location.schedule_index

        with self._schedule_locks[index]:
            schedule = self.schedules[index]
            existing = schedule.resources.get(identifier) if identifier else None
            if identifier is None or (existing is not None and existing.path != matched.path):
                # Identifiers are unique per schedule only; never clobber a
                # different file stored under the same key here.
                identifier = self._new_identifier(schedule)
                existing = None
            if existing is None:
                schedule.resources[identifier] = matched.model_copy()
            day = schedule.days[location.day_index]
            day.append(
                Program(
                    start_time=program_time,
                    resource_id=identifier,
                    category_id=category_id,
                )
            )
            _sort_day(day)

        self.resource_db.add_if_missing(identifier, matched)
        self.dirty.mark_schedule(index)
        logger.debug(
            "Inserted %s at %s on day %d", identifier, program_time, ordinal
        )
        return identifier

    def set_program_start_time(
        self, ordinal: int, start_time: str, new_start_time: str
    ) -> str:
        """Move a program to a new time of day within its day.

        Returns:
            The normalized new start time.
        """
        new_time = normalize_time_of_day(new_start_time)
        location, program_index = self._find_program(ordinal, start_time)
        with self._schedule_locks[location.schedule_index]:
            day = self.schedules[location.schedule_index].days[location.day_index]
            day[program_index].start_time = new_time
            _sort_day(day)
        self.dirty.mark_schedule(location.schedule_index)
        return new_time

    def shift_program_start_time(self, ordinal: int, start_time: str, minutes: int) -> str:
        """Shift a program by ``minutes``, wrapping around midnight."""
        return self.set_program_start_time(
            ordinal, start_time, add_minutes(start_time, minutes)
        )

    def delete_program(self, ordinal: int, start_time: str) -> Program:
        """Remove a program. Its resource is pruned on the next save if
        nothing else references it.

        Returns:
            The removed program.
        """
        location, program_index = self._find_program(ordinal, start_time)
        with self._schedule_locks[location.schedule_index]:
            day = self.schedules[location.schedule_index].days[location.day_index]
            removed = day.pop(program_index)
        self.dirty.mark_schedule(location.schedule_index)
        return removed

    def program_resource(self, ordinal: int, start_time: str) -> tuple[str, Resource | None]:
        """Return (resource identifier, copy of its resource) for a program."""
        location, program_index = self._find_program(ordinal, start_time)
        with self._schedule_locks[location.schedule_index]:
            schedule = self.schedules[location.schedule_index]
            program = schedule.days[location.day_index][program_index]
            resource = schedule.resources.get(program.resource_id)
            return program.resource_id, resource.model_copy() if resource else None

    def update_program_resource(
        self, ordinal: int, start_time: str, **changes: Any
    ) -> Resource:
        """Edit metadata of a program's resource.

        Only the user-editable fields (order, title, description, year,
        series_id, start_offset) may be changed. The edit is merged into
        the resource database entry of the same identifier.

        Returns:
            Copy of the updated resource.

        Raises:
            ValueError: On an unknown field or an invalid value.
            UnknownEntityError: If the program or its resource is missing.
        """
        unknown = set(changes) - set(EDITABLE_FIELDS)
        if unknown:
            raise ValueError(f"Not editable: {', '.join(sorted(unknown))}")
        # Cleared text fields arrive as "", which means unset.
        changes = {
            name: None if isinstance(value, str) and not value.strip() else value
            for name, value in changes.items()
        }

        location, program_index = self._find_program(ordinal, start_time)
        index = location.schedule_index
        with self._schedule_locks[index]:
            schedule = self.schedules[index]
            resource_id = schedule.days[location.day_index][program_index].resource_id
            resource = schedule.resources.get(resource_id)
            if resource is None:
                raise UnknownEntityError(f"Resource {resource_id} is missing")
            # Validate on a copy so a bad value leaves the entry untouched.
            updated = resource.model_validate({**resource.model_dump(), **changes})
            schedule.resources[resource_id] = updated
            snapshot = updated.model_copy()

        self.resource_db.merge_edit(snapshot, resource_id)
        self.dirty.mark_schedule(index)
        return snapshot

    def set_program_start_offset(self, ordinal: int, start_time: str, text: str) -> str:
        """Set the start offset from ``HH:MM:SS`` text.

        Text that does not parse clears the offset.

        Returns:
            The offset as ``H:MM:SS``, or "" when cleared.
        """
        try:
            seconds: int | None = parse_clock_duration(text)
        except ValueError:
            seconds = None
        self.update_program_resource(ordinal, start_time, start_offset=seconds)
        return format_clock_duration(seconds) if seconds is not None else ""

    def set_program_path(
        self, ordinal: int, start_time: str, path: str, probe: DurationProbe
    ) -> Resource:
        """Point a program's resource at another file and re-probe it.

        The stored duration is replaced only if the new file can be timed.
        """
        location, program_index = self._find_program(ordinal, start_time)
        index = location.schedule_index
        seconds = math.ceil(probe.probe_duration(self.media_path(path)))
        with self._schedule_locks[index]:
            schedule = self.schedules[index]
            resource_id = schedule.days[location.day_index][program_index].resource_id
            resource = schedule.resources.get(resource_id)
            if resource is None:
                raise UnknownEntityError(f"Resource {resource_id} is missing")
            resource.path = path
            if seconds > 0:
                resource.duration = seconds
            snapshot = resource.model_copy()
        if seconds == 0:
            logger.warning("Could not determine duration of %s", path)
        self.resource_db.merge_edit(snapshot, resource_id)
        self.dirty.mark_schedule(index)
        return snapshot

    def rekey_resource_strict(self, schedule_index: int, old_id: str, new_id: str) -> None:
        """Rename a resource identifier within one schedule.

        Moves the table entry and rewrites every program referencing it.
        Runs entirely under the schedule lock, so it either fully applies or
        (when it raises) leaves the schedule untouched.

        Raises:
            DuplicateResourceIdError: If ``new_id`` is already in use.
            UnknownEntityError: If the schedule or ``old_id`` does not exist.
            ValueError: If ``new_id`` is empty.
        """
        if not new_id:
            raise ValueError("New resource identifier must not be empty")
        with self.schedule_lock(schedule_index):
            schedule = self.schedules[schedule_index]
            if new_id in schedule.resources:
                raise DuplicateResourceIdError(schedule_index, new_id)
            if old_id not in schedule.resources:
                raise UnknownEntityError(
                    f"No resource {old_id!r} in schedule {schedule_index}"
                )
            schedule.resources[new_id] = schedule.resources.pop(old_id)
            for day in schedule.days:
                for program in day:
                    if program.resource_id == old_id:
                        program.resource_id = new_id
        self.dirty.mark_schedule(schedule_index)
        self.resource_db.invalidate()
        logger.info("Re-keyed resource %s to %s in schedule %d", old_id, new_id, schedule_index)

    def rekey_resource(self, schedule_index: int, old_id: str, new_id: str) -> bool:
        """Like rekey_resource_strict() but reports refusal as False."""
        try:
            self.rekey_resource_strict(schedule_index, old_id, new_id)
        except DuplicateResourceIdError as e:
            logger.warning("Re-key refused: %s", e)
            return False
        except (UnknownEntityError, ValueError) as e:
            logger.warning("Re-key failed: %s", e)
            return False
        return True

    # ------------------------------------------------------------------
    # Manifest edits
    # ------------------------------------------------------------------

    def _channel_info(self) -> ChannelInfo:
        if self.manifest.info is None:
            self.manifest.info = ChannelInfo()
        return self.manifest.info

    def set_channel_title(self, title: str | None) -> None:
        self._channel_info().title = title or None
        self.dirty.mark_manifest()

    def set_channel_description(self, description: str | None) -> None:
        self._channel_info().description = description or None
        self.dirty.mark_manifest()

    def set_channel_logo_path(self, logo_path: str | None) -> None:
        self._channel_info().logo_path = logo_path or None
        self.dirty.mark_manifest()

    def set_beginning_of_broadcast_day(self, value: str | None) -> str | None:
        """Set (or clear, with None) the beginning of broadcast day.

        Returns:
            The normalized ``HH:MM`` value.
        """
        normalized = normalize_time_of_day(value) if value else None
        self.manifest.beginning_of_broadcast_day = normalized
        self.dirty.mark_manifest()
        return normalized

    def offset_schedule(self, days: int) -> None:
        """Shift every schedule's start date by ``days``."""
        for descriptor in self.manifest.schedules:
            descriptor.start_date = (
                descriptor.parsed_date + timedelta(days=days)
            ).isoformat()
        self.dirty.mark_manifest()
        logger.info("Offset %d schedules by %d days", len(self.manifest.schedules), days)

    def _series_table(self) -> dict[str, Series]:
        if self.manifest.series is None:
            self.manifest.series = {}
        return self.manifest.series

    def _require_series(self, series_id: str) -> Series:
        series = (self.manifest.series or {}).get(series_id)
        if series is None:
            raise UnknownEntityError(f"No series {series_id!r}")
        return series

    def add_series(self, series_id: str, title: str, logo_path: str | None = None) -> bool:
        """Add a series. Returns False if the identifier is taken."""
        if not series_id:
            raise ValueError("Series identifier must not be empty")
        table = self._series_table()
        if series_id in table:
            return False
        table[series_id] = Series(title=title, logo_path=logo_path)
        self.dirty.mark_manifest()
        return True

    def rename_series(self, old_id: str, new_id: str) -> bool:
        """Change a series identifier. Resources keep their old series_id."""
        self._require_series(old_id)
        table = self._series_table()
        if not new_id or new_id in table:
            return False
        table[new_id] = table.pop(old_id)
        self.dirty.mark_manifest()
        return True

    def set_series_title(self, series_id: str, title: str) -> None:
        self._require_series(series_id).title = title
        self.dirty.mark_manifest()

    def set_series_logo_path(self, series_id: str, logo_path: str | None) -> None:
        self._require_series(series_id).logo_path = logo_path or None
        self.dirty.mark_manifest()

    def delete_series(self, series_id: str) -> None:
        self._require_series(series_id)
        del self._series_table()[series_id]
        self.dirty.mark_manifest()

    def set_weekday_list_schedule(
        self, weekday: int, programs: list[ListProgram]
    ) -> None:
        """Set the list programs of one weekday (0 is Sunday)."""
        if not 0 <= weekday < DAYS_PER_WEEK:
            raise ValueError(f"weekday must be 0-6, got {weekday}")
        if self.manifest.dotw_list_schedule is None:
            self.manifest.dotw_list_schedule = [
                ListSchedule() for _ in range(DAYS_PER_WEEK)
            ]
        ordered = sorted(programs, key=lambda p: minutes_since_midnight(p.start_time))
        self.manifest.dotw_list_schedule[weekday] = ListSchedule(schedule=ordered)
        self.dirty.mark_manifest()

    # ------------------------------------------------------------------
    # Lists
    # ------------------------------------------------------------------

    def _require_list(self, list_id: str) -> ChannelList:
        channel_list = self.lists.get(list_id)
        if channel_list is None:
            raise UnknownEntityError(f"No list {list_id!r}")
        return channel_list

    def create_list(self, list_id: str, list_path: str, title: str | None = None) -> ChannelList:
        """Create an empty list and its manifest descriptor.

        Raises:
            ValueError: If the identifier is empty or already used.
        """
        if not list_id:
            raise ValueError("List identifier must not be empty")
        if list_id in self.lists:
            raise ValueError(f"List {list_id!r} already exists")
        channel_list = ChannelList(info=ListInfo(title=title))
        self.lists[list_id] = channel_list
        if self.manifest.lists is None:
            self.manifest.lists = {}
        self.manifest.lists[list_id] = ListDescriptor(list_path=list_path)
        self.dirty.mark_list(list_id)
        self.dirty.mark_manifest()
        return channel_list

    def remove_list(self, list_id: str) -> None:
        """Remove a list from the channel. Its file is left on disk."""
        self._require_list(list_id)
        del self.lists[list_id]
        if self.manifest.lists is not None:
            self.manifest.lists.pop(list_id, None)
        self.dirty.forget_list(list_id)
        self.dirty.mark_manifest()

    def _list_info(self, list_id: str) -> ListInfo:
        channel_list = self._require_list(list_id)
        if channel_list.info is None:
            channel_list.info = ListInfo()
        return channel_list.info

    def set_list_title(self, list_id: str, title: str | None) -> None:
        self._list_info(list_id).title = title or None
        self.dirty.mark_list(list_id)

    def set_list_description(self, list_id: str, description: str | None) -> None:
        self._list_info(list_id).description = description or None
        self.dirty.mark_list(list_id)

    def add_resource_to_list(self, list_id: str, resource: Resource) -> str | None:
        """Add a resource unless the list already holds the same file.

        Keys are the list identifier followed by a four digit counter
        starting at the current resource count.

        Returns:
            The new key, or None if the path was already present.
        """
        channel_list = self._require_list(list_id)
        if resource.path in channel_list.paths():
            logger.info("List %s already holds %s, not adding", list_id, resource.path)
            return None
        count = len(channel_list.resources)
        key = f"{list_id}{count:04d}"
        while key in channel_list.resources:
            count += 1
            key = f"{list_id}{count:04d}"
        channel_list.resources[key] = resource.model_copy()
        self.dirty.mark_list(list_id)
        return key

    def remove_list_resources(self, list_id: str, keys: list[str]) -> int:
        """Remove resources from a list. Returns how many were removed."""
        channel_list = self._require_list(list_id)
        removed = 0
        for key in keys:
            if channel_list.resources.pop(key, None) is not None:
                removed += 1
        self.dirty.mark_list(list_id)
        return removed
