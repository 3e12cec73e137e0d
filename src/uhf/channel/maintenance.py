"""Whole-channel maintenance: duration repair and resource creation."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from uhf.channel.formats import Resource

if TYPE_CHECKING:
    from uhf.channel.document import ChannelDocument
    from uhf.introspector.prober import MediaDurationProber

logger = logging.getLogger(__name__)


@dataclass
class DurationChange:
    """A resource whose stored duration differed from the probed one."""

    owner: str
    resource_id: str
    path: str
    old: int
    new: int


@dataclass
class ReassignResult:
    """Outcome of reassign_durations()."""

    changed: list[DurationChange] = field(default_factory=list)
    unresolved: list[str] = field(default_factory=list)
    checked: int = 0


def reassign_durations(
    document: ChannelDocument,
    prober: MediaDurationProber,
    dry_run: bool = False,
) -> ReassignResult:
    """Re-probe every schedule and list resource.

    A zero result is logged and the stored value is kept. A different
    non-zero result replaces the stored value and marks the owning
    schedule or list dirty, unless ``dry_run`` is set.
    """
    result = ReassignResult()

    for schedule_index, schedule in enumerate(document.schedules):
        owner = f"schedule:{schedule_index}"
        with document.schedule_lock(schedule_index):
            entries = [(rid, r.path, r.duration) for rid, r in schedule.resources.items()]
        for resource_id, path, old in entries:
            new = _probe(document, prober, path, result)
            if new == 0 or new == old:
                continue
            result.changed.append(DurationChange(owner, resource_id, path, old, new))
            if not dry_run and document.set_resource_duration(schedule_index, resource_id, new):
                document.mark_schedule_dirty(schedule_index)

    for list_id, channel_list in document.lists.items():
        owner = f"list:{list_id}"
        for key, resource in channel_list.resources.items():
            new = _probe(document, prober, resource.path, result)
            if new == 0 or new == resource.duration:
                continue
            result.changed.append(
                DurationChange(owner, key, resource.path, resource.duration, new)
            )
            if not dry_run:
                resource.duration = new
                document.dirty.mark_list(list_id)

    logger.info(
        "Checked %d resources: %d changed, %d unresolved",
        result.checked,
        len(result.changed),
        len(result.unresolved),
        extra={"dry_run": dry_run},
    )
    return result


def _probe(
    document: ChannelDocument,
    prober: MediaDurationProber,
    path: str,
    result: ReassignResult,
) -> int:
    result.checked += 1
    seconds = prober.probe_seconds(document.media_path(path))
    if seconds == 0:
        logger.warning("Could not determine duration of %s", path)
        result.unresolved.append(path)
    return seconds


def relative_path(path: Path, root: Path) -> str:
    """Express ``path`` relative to the channel root.

    Paths outside the root get ``..`` components.
    """
    return os.path.relpath(Path(path).resolve(), Path(root).resolve())


def new_resource_from_file(
    path: Path,
    root: Path,
    prober: MediaDurationProber,
) -> Resource | None:
    """Build a resource for a media file.

    Args:
        path: The media file.
        root: Channel directory the stored path is relative to.
        prober: Duration prober (with its fallback policy).

    Returns:
        A resource titled after the file stem, or None when the file is not
        a supported media type or its duration cannot be determined.
    """
    path = Path(path)
    if not prober.is_media_file(path):
        logger.info("Skipping unsupported file %s", path.name)
        return None
    seconds = prober.probe_seconds(path)
    if seconds == 0:
        logger.warning("Could not determine duration of %s", path)
        return None
    return Resource(
        path=relative_path(path, root),
        duration=seconds,
        title=path.stem,
    )
