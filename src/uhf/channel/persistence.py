"""Loading and selective saving of channel documents.

Open reads the manifest, then every schedule in descriptor order, then every
list. Any failure aborts the whole open and nothing is kept.

Save writes only dirty entities:
1. the manifest first; if it cannot be written nothing else is attempted,
   since every other path is resolved through it
2. each dirty schedule, after pruning resources no program references;
   a failed schedule stays dirty and the next one is still written
3. each dirty list that still has a descriptor in the manifest

An entity's flag is cleared only after its own write succeeded.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, TypeVar

from pydantic import BaseModel, ValidationError

from uhf.channel.exceptions import ChannelOpenError, UnsupportedVersionError
from uhf.channel.formats import (
    LIST_VERSION,
    MANIFEST_VERSION,
    SCHEDULE_VERSION,
    ChannelList,
    Manifest,
    Schedule,
    to_json_bytes,
)
from uhf.storage import StorageError

if TYPE_CHECKING:
    from uhf.channel.document import ChannelDocument
    from uhf.storage import ChannelStorage

logger = logging.getLogger(__name__)

MANIFEST_PATH = "manifest.json"

ModelT = TypeVar("ModelT", bound=BaseModel)


@dataclass
class LoadedChannel:
    """Documents read from storage by load_channel()."""

    manifest: Manifest
    schedules: list[Schedule]
    lists: dict[str, ChannelList]


@dataclass(frozen=True)
class WriteFailure:
    """One entity that could not be written during a save."""

    entity: str
    path: str
    message: str


@dataclass
class SaveReport:
    """Outcome of a save.

    Attributes:
        written: Entity names written successfully ("manifest",
            "schedule:0", "list:fillers").
        failures: Entities whose write failed; they remain dirty.
        aborted: True if the manifest write failed and nothing else
            was attempted.
    """

    written: list[str] = field(default_factory=list)
    failures: list[WriteFailure] = field(default_factory=list)
    aborted: bool = False

    @property
    def success(self) -> bool:
        return not self.aborted and not self.failures


def _decode(
    storage: ChannelStorage,
    path: str,
    model: type[ModelT],
    expected_version: str,
) -> ModelT:
    """Read and validate one document.

    Raises:
        ChannelOpenError: If the file is unreadable or malformed.
        UnsupportedVersionError: If the version tag is not recognized.
    """
    location = storage.describe(path)
    try:
        raw = storage.read_bytes(path)
    except StorageError as e:
        raise ChannelOpenError(location, str(e)) from e

    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ChannelOpenError(location, f"invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ChannelOpenError(location, "expected a JSON object")

    version = data.get("version")
    if not isinstance(version, str):
        raise ChannelOpenError(location, "missing version tag")
    if version.strip().casefold() != expected_version.casefold():
        raise UnsupportedVersionError(
            location, f"unsupported version {version!r}, expected {expected_version!r}"
        )

    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise ChannelOpenError(location, str(e)) from e


def load_channel(storage: ChannelStorage) -> LoadedChannel:
    """Read a complete channel from storage.

    Raises:
        ChannelOpenError: If the manifest, any schedule or any list cannot
            be read or decoded. No partial result is returned.
    """
    manifest = _decode(storage, MANIFEST_PATH, Manifest, MANIFEST_VERSION)

    schedules = [
        _decode(storage, descriptor.schedule_path, Schedule, SCHEDULE_VERSION)
        for descriptor in manifest.schedules
    ]

    lists: dict[str, ChannelList] = {}
    for list_id, descriptor in (manifest.lists or {}).items():
        lists[list_id] = _decode(storage, descriptor.list_path, ChannelList, LIST_VERSION)

    logger.info(
        "Loaded channel: %d schedules, %d lists",
        len(schedules),
        len(lists),
        extra={"channel": storage.describe(MANIFEST_PATH)},
    )
    return LoadedChannel(manifest=manifest, schedules=schedules, lists=lists)


def prune_orphans(schedule: Schedule, schedule_index: int | None = None) -> list[str]:
    """Remove resource table entries no program references.

    Programs referencing identifiers missing from the table are logged but
    left alone.

    Returns:
        Sorted list of removed identifiers.
    """
    referenced = schedule.referenced_ids()
    orphans = sorted(schedule.resources.keys() - referenced)
    for identifier in orphans:
        del schedule.resources[identifier]
        logger.info(
            "Removed orphaned resource %s",
            identifier,
            extra={"schedule_index": schedule_index},
        )

    missing = referenced - schedule.resources.keys()
    if missing:
        logger.error(
            "Schedule references resources missing from its table: %s",
            ", ".join(sorted(missing)),
            extra={"schedule_index": schedule_index},
        )
    return orphans


class PersistenceCoordinator:
    """Writes the dirty parts of a channel document to storage."""

    def __init__(self, storage: ChannelStorage) -> None:
        self.storage = storage

    def _write(self, report: SaveReport, entity: str, path: str, data: bytes) -> bool:
        try:
            self.storage.write_bytes(path, data)
        except StorageError as e:
            logger.error("Failed to write %s (%s): %s", entity, path, e)
            report.failures.append(WriteFailure(entity, path, str(e)))
            return False
        report.written.append(entity)
        logger.debug("Wrote %s to %s", entity, path)
        return True

    def save(self, document: ChannelDocument) -> SaveReport:
        """Write every dirty entity of ``document``.

        Returns:
            SaveReport describing what was written and what failed.
        """
        report = SaveReport()
        dirty = document.dirty

        if dirty.manifest:
            if not self._write(
                report, "manifest", MANIFEST_PATH, to_json_bytes(document.manifest)
            ):
                report.aborted = True
                logger.error("Manifest write failed, save aborted")
                return report
            dirty.clear_manifest()

        for index in dirty.dirty_schedule_indices():
            path = document.manifest.schedules[index].schedule_path
            with document.schedule_lock(index):
                prune_orphans(document.schedules[index], index)
                data = to_json_bytes(document.schedules[index])
            if self._write(report, f"schedule:{index}", path, data):
                dirty.clear_schedule(index)

        descriptors = document.manifest.lists or {}
        for list_id in dirty.dirty_list_ids():
            descriptor = descriptors.get(list_id)
            channel_list = document.lists.get(list_id)
            if descriptor is None or channel_list is None:
                logger.debug("Dropping dirty flag of removed list %s", list_id)
                dirty.forget_list(list_id)
                continue
            if self._write(
                report, f"list:{list_id}", descriptor.list_path, to_json_bytes(channel_list)
            ):
                dirty.clear_list(list_id)

        logger.info(
            "Saved channel: %d written, %d failed",
            len(report.written),
            len(report.failures),
            extra={"dirty": dirty.summary()},
        )
        return report
