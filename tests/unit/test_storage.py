"""Tests for channel byte storage."""

import os
from pathlib import Path

import pytest

from uhf.storage import (
    FileStorage,
    MemoryStorage,
    StorageNotFoundError,
    StorageWriteError,
)


class TestFileStorage:
    """Tests for FileStorage."""

    def test_write_then_read(self, temp_dir: Path) -> None:
        """Writes create parent directories and replace content."""
        storage = FileStorage(temp_dir)

        storage.write_bytes("nested/schedule0.json", b"one")
        storage.write_bytes("nested/schedule0.json", b"two")

        assert storage.read_bytes("nested/schedule0.json") == b"two"
        assert (temp_dir / "nested" / "schedule0.json").read_bytes() == b"two"

    def test_no_temp_files_left(self, temp_dir: Path) -> None:
        """The temporary file is renamed into place."""
        root = temp_dir / "channel"
        FileStorage(root).write_bytes("manifest.json", b"{}")

        assert os.listdir(root) == ["manifest.json"]

    def test_missing_file(self, temp_dir: Path) -> None:
        """Reading a missing file raises with the requested path."""
        with pytest.raises(StorageNotFoundError) as exc_info:
            FileStorage(temp_dir).read_bytes("manifest.json")

        assert exc_info.value.path == "manifest.json"

    def test_write_failure(self, temp_dir: Path) -> None:
        """A path blocked by a regular file cannot be written."""
        (temp_dir / "blocked").write_bytes(b"")

        with pytest.raises(StorageWriteError):
            FileStorage(temp_dir).write_bytes("blocked/schedule0.json", b"{}")

    def test_resolve(self, temp_dir: Path) -> None:
        """Relative paths resolve under the root, absolute ones are kept."""
        storage = FileStorage(temp_dir)

        assert storage.resolve("media/a.mkv") == temp_dir / "media" / "a.mkv"
        assert storage.resolve("/srv/a.mkv") == Path("/srv/a.mkv")

    def test_is_readable(self, temp_dir: Path) -> None:
        """Only existing files are readable."""
        (temp_dir / "a.mkv").write_bytes(b"")
        storage = FileStorage(temp_dir)

        assert storage.is_readable("a.mkv")
        assert not storage.is_readable("b.mkv")
        assert not storage.is_readable(".")


class TestMemoryStorage:
    """Tests for MemoryStorage."""

    def test_injected_failure(self) -> None:
        """Writes to failing paths raise until cleared."""
        storage = MemoryStorage()
        storage.fail_writes_for("schedule0.json")

        with pytest.raises(StorageWriteError):
            storage.write_bytes("schedule0.json", b"{}")
        storage.clear_failures()
        storage.write_bytes("schedule0.json", b"{}")

        assert storage.writes == ["schedule0.json"]

    def test_readable_without_content(self) -> None:
        """Media paths can be readable without stored bytes."""
        storage = MemoryStorage(readable={"media/a.mkv"})

        assert storage.is_readable("media/a.mkv")
        with pytest.raises(StorageNotFoundError):
            storage.read_bytes("media/a.mkv")
