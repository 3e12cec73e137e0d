"""Exceptions raised by the channel document engine.

Structural problems (a file that cannot be read or decoded) and write
problems are raised or reported with the offending path so they can be
shown to a user. Referential problems (missing resources, unreadable media)
and unresolved durations are expected in hand-edited channels and are
recorded as state instead of raised.
"""

from __future__ import annotations


class ChannelError(Exception):
    """Base class for channel document errors."""


class NoChannelError(ChannelError):
    """Raised when an operation needs an open channel and none is open."""


class ChannelOpenError(ChannelError):
    """Raised when a channel cannot be opened.

    Attributes:
        path: Location of the file that failed.
        reason: Human-readable description of the failure.
    """

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot open {path}: {reason}")


class UnsupportedVersionError(ChannelOpenError):
    """Raised when a document carries an unrecognized version tag."""


class ChannelWriteError(ChannelError):
    """Raised when a channel document cannot be serialized or stored."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot write {path}: {reason}")


class DuplicateResourceIdError(ChannelError):
    """Raised when re-keying a resource to an identifier already in use."""

    def __init__(self, schedule_index: int, identifier: str) -> None:
        self.schedule_index = schedule_index
        self.identifier = identifier
        super().__init__(
            f"Resource identifier {identifier!r} already exists "
            f"in schedule {schedule_index}"
        )


class UnknownEntityError(ChannelError, LookupError):
    """Raised when an edit names a schedule, day, program, list or series
    that does not exist."""
