"""Shared test fixtures for UHF Scheduler."""

import os
import shutil
import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest

from uhf.channel import ChannelDocument
from uhf.channel.formats import (
    ChannelInfo,
    ChannelList,
    ListDescriptor,
    ListInfo,
    Manifest,
    Program,
    Resource,
    Schedule,
    ScheduleDescriptor,
    to_json_bytes,
)
from uhf.config import clear_config_cache
from uhf.storage import MemoryStorage


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test isolation."""
    dir_path = tempfile.mkdtemp()
    yield Path(dir_path)
    shutil.rmtree(dir_path, ignore_errors=True)


@pytest.fixture(autouse=True)
def uhf_data_dir(temp_dir: Path):
    """Point the data directory and config file at a temporary location.

    Keeps tests away from the real ~/.uhf and from UHF_* variables set in
    the developer's shell.
    """
    data_dir = temp_dir / ".uhf"
    data_dir.mkdir(parents=True, exist_ok=True)
    config_path = data_dir / "config.toml"
    config_path.write_text('[logging]\nlevel = "info"\n')

    clean_env = {k: v for k, v in os.environ.items() if not k.startswith("UHF_")}
    clean_env["UHF_DATA_DIR"] = str(data_dir)
    clean_env["UHF_CONFIG_PATH"] = str(config_path)
    clear_config_cache()
    with patch.dict(os.environ, clean_env, clear=True):
        yield data_dir
    clear_config_cache()


def build_manifest(*start_dates: str, lists: dict[str, str] | None = None) -> Manifest:
    """Build a manifest with one schedule descriptor per start date."""
    return Manifest(
        info=ChannelInfo(title="Test Channel"),
        schedules=[
            ScheduleDescriptor(start_date=start, schedule_path=f"schedule{i}.json")
            for i, start in enumerate(start_dates)
        ],
        lists=(
            {list_id: ListDescriptor(list_path=path) for list_id, path in lists.items()}
            if lists
            else None
        ),
    )


def sample_schedule() -> Schedule:
    """A week with two programs on its first day.

    r1 is resolved (30 minutes), r2 has no duration yet.
    """
    schedule = Schedule.empty()
    schedule.resources = {
        "r1": Resource(path="media/pilot.mkv", duration=1800, title="Pilot"),
        "r2": Resource(path="media/news.mp4", title="News"),
    }
    schedule.days[0] = [
        Program(start_time="09:00", resource_id="r1"),
        Program(start_time="10:00", resource_id="r2"),
    ]
    return schedule


def sample_list() -> ChannelList:
    return ChannelList(
        info=ListInfo(title="Fillers"),
        resources={
            "fillers0000": Resource(path="fillers/bumper.mp4", duration=15),
        },
    )


@pytest.fixture
def storage() -> MemoryStorage:
    """Empty in-memory storage where media/pilot.mkv is readable."""
    return MemoryStorage(readable={"media/pilot.mkv"})


@pytest.fixture
def document(storage: MemoryStorage) -> ChannelDocument:
    """A clean two-week channel: sample_schedule() then an empty week."""
    return ChannelDocument(
        storage,
        build_manifest("2024-01-07", "2024-01-14", lists={"fillers": "fillers.json"}),
        [sample_schedule(), Schedule.empty()],
        {"fillers": sample_list()},
    )


@pytest.fixture
def channel_storage() -> MemoryStorage:
    """In-memory storage holding the serialized sample channel."""
    return MemoryStorage(
        files={
            "manifest.json": to_json_bytes(
                build_manifest(
                    "2024-01-07", "2024-01-14", lists={"fillers": "fillers.json"}
                )
            ),
            "schedule0.json": to_json_bytes(sample_schedule()),
            "schedule1.json": to_json_bytes(Schedule.empty()),
            "fillers.json": to_json_bytes(sample_list()),
        },
        readable={"media/pilot.mkv"},
    )


def write_channel(directory: Path) -> Path:
    """Write the sample channel to ``directory`` as real files."""
    directory.mkdir(parents=True, exist_ok=True)
    (directory / "manifest.json").write_bytes(
        to_json_bytes(
            build_manifest("2024-01-07", "2024-01-14", lists={"fillers": "fillers.json"})
        )
    )
    (directory / "schedule0.json").write_bytes(to_json_bytes(sample_schedule()))
    (directory / "schedule1.json").write_bytes(to_json_bytes(Schedule.empty()))
    (directory / "fillers.json").write_bytes(to_json_bytes(sample_list()))
    media = directory / "media"
    media.mkdir(exist_ok=True)
    (media / "pilot.mkv").write_bytes(b"")
    return directory


@pytest.fixture
def channel_dir(temp_dir: Path) -> Path:
    """The sample channel written to a real directory."""
    return write_channel(temp_dir / "channel")
