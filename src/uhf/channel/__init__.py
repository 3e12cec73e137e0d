"""Channel document engine.

This module provides the channel data model and its editing operations:

- ChannelDocument: An open channel (manifest, schedules, lists)
- DayIndex: Flat day ordinal to (schedule, day) translation
- ResourceDatabase: Merged resource metadata across schedules
- DirtyTracker: Per-entity modification flags
- PersistenceCoordinator: Selective save of dirty entities
"""

from uhf.channel.day_index import DayIndex, DayLocation
from uhf.channel.dirty import DirtyTracker
from uhf.channel.document import ChannelDocument, ScheduledProgram
from uhf.channel.exceptions import (
    ChannelError,
    ChannelOpenError,
    ChannelWriteError,
    DuplicateResourceIdError,
    NoChannelError,
    UnknownEntityError,
    UnsupportedVersionError,
)
from uhf.channel.formats import (
    ChannelList,
    Manifest,
    Program,
    Resource,
    Schedule,
    ScheduleDescriptor,
)
from uhf.channel.persistence import (
    MANIFEST_PATH,
    PersistenceCoordinator,
    SaveReport,
    WriteFailure,
    load_channel,
    prune_orphans,
)
from uhf.channel.resource_db import ResourceDatabase, preferred_resource

__all__ = [
    "ChannelDocument",
    "ScheduledProgram",
    "DayIndex",
    "DayLocation",
    "DirtyTracker",
    "ResourceDatabase",
    "preferred_resource",
    "PersistenceCoordinator",
    "SaveReport",
    "WriteFailure",
    "MANIFEST_PATH",
    "load_channel",
    "prune_orphans",
    "ChannelError",
    "ChannelOpenError",
    "ChannelWriteError",
    "DuplicateResourceIdError",
    "NoChannelError",
    "UnknownEntityError",
    "UnsupportedVersionError",
    "ChannelList",
    "Manifest",
    "Program",
    "Resource",
    "Schedule",
    "ScheduleDescriptor",
]
