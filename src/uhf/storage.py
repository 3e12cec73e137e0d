"""Byte storage for channel documents.

The channel engine only needs "load bytes for path" and "store bytes for
path", with paths relative to the channel directory. FileStorage is the
real implementation; MemoryStorage keeps everything in a dict and can be
told to fail writes, which is how save behaviour is exercised in tests.
"""

from __future__ import annotations

import logging
import os
import tempfile
import threading
from pathlib import Path, PurePosixPath
from typing import Protocol

logger = logging.getLogger(__name__)


class StorageError(OSError):
    """Base error for storage operations, carrying the offending path."""

    def __init__(self, message: str, path: str) -> None:
        super().__init__(message)
        self.path = path


class StorageNotFoundError(StorageError):
    """Raised when a path cannot be read."""


class StorageWriteError(StorageError):
    """Raised when bytes cannot be stored at a path."""


class ChannelStorage(Protocol):
    """Protocol for the storage collaborator of a channel document.

    All paths are relative to the channel directory.
    """

    def read_bytes(self, path: str) -> bytes:
        """Load the bytes stored at ``path``.

        Raises:
            StorageNotFoundError: If nothing readable exists at ``path``.
        """
        ...

    def write_bytes(self, path: str, data: bytes) -> None:
        """Store ``data`` at ``path``, replacing any previous content.

        Raises:
            StorageWriteError: If the bytes cannot be stored.
        """
        ...

    def is_readable(self, path: str) -> bool:
        """Return True if ``path`` names a readable file."""
        ...

    def describe(self, path: str) -> str:
        """Return a human-readable location for ``path`` (for messages)."""
        ...

    def resolve(self, path: str) -> Path:
        """Return the filesystem path media probes should open."""
        ...


class FileStorage:
    """Storage rooted at a channel directory on the local filesystem."""

    def __init__(self, root: Path) -> None:
        """Initialize storage.

        Args:
            root: Channel directory. Relative paths resolve against it.
        """
        self.root = Path(root).expanduser()

    def resolve(self, path: str) -> Path:
        """Resolve a channel-relative path to an absolute filesystem path."""
        candidate = Path(path).expanduser()
        if candidate.is_absolute():
            return candidate
        return self.root / candidate

    def describe(self, path: str) -> str:
        return str(self.resolve(path))

    def read_bytes(self, path: str) -> bytes:
        target = self.resolve(path)
        try:
            return target.read_bytes()
        except FileNotFoundError as e:
            raise StorageNotFoundError(f"File not found: {target}", path) from e
        except PermissionError as e:
            raise StorageNotFoundError(
                f"Permission denied reading {target}", path
            ) from e
        except OSError as e:
            raise StorageNotFoundError(f"Cannot read {target}: {e}", path) from e

    def write_bytes(self, path: str, data: bytes) -> None:
        """Write bytes using a temp file and rename so readers never see
        a half-written document."""
        target = self.resolve(path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            fd, temp_path_str = tempfile.mkstemp(
                prefix=f".{target.name}.", suffix=".tmp", dir=target.parent
            )
            temp_path = Path(temp_path_str)
            try:
                with os.fdopen(fd, "wb") as f:
                    f.write(data)
                temp_path.replace(target)  # Atomic on POSIX
            except Exception:
                temp_path.unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageWriteError(f"Cannot write {target}: {e}", path) from e
        logger.debug("Wrote %d bytes to %s", len(data), target)

    def is_readable(self, path: str) -> bool:
        target = self.resolve(path)
        return target.is_file() and os.access(target, os.R_OK)


class MemoryStorage:
    """In-memory storage with write failure injection.

    Example:
        storage = MemoryStorage({"manifest.json": b"{...}"})
        storage.fail_writes_for("schedule0.json")
    """

    def __init__(
        self,
        files: dict[str, bytes] | None = None,
        readable: set[str] | None = None,
    ) -> None:
        """Initialize storage.

        Args:
            files: Initial path to content mapping.
            readable: Extra paths reported as readable media files without
                holding any content (e.g. video files referenced by
                resources).
        """
        self.files: dict[str, bytes] = dict(files or {})
        self.readable: set[str] = set(readable or ())
        self.writes: list[str] = []
        self._failing: set[str] = set()
        self._lock = threading.Lock()

    @staticmethod
    def _key(path: str) -> str:
        return str(PurePosixPath(path))

    def fail_writes_for(self, *paths: str) -> None:
        """Make subsequent writes to ``paths`` raise StorageWriteError."""
        self._failing.update(self._key(p) for p in paths)

    def clear_failures(self) -> None:
        """Allow writes to every path again."""
        self._failing.clear()

    def describe(self, path: str) -> str:
        return f"memory:{self._key(path)}"

    def resolve(self, path: str) -> Path:
        return Path(self._key(path))

    def read_bytes(self, path: str) -> bytes:
        key = self._key(path)
        with self._lock:
            if key not in self.files:
                raise StorageNotFoundError(f"File not found: {key}", path)
            return self.files[key]

    def write_bytes(self, path: str, data: bytes) -> None:
        key = self._key(path)
        with self._lock:
            if key in self._failing:
                raise StorageWriteError(f"Cannot write {key}: injected failure", path)
            self.files[key] = data
            self.writes.append(key)

    def is_readable(self, path: str) -> bool:
        key = self._key(path)
        with self._lock:
            return key in self.files or key in self.readable
