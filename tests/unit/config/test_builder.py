"""Tests for ConfigBuilder module."""

from __future__ import annotations

from pathlib import Path

from uhf.config.builder import (
    ConfigBuilder,
    ConfigSource,
    source_from_env,
    source_from_file,
)
from uhf.config.env import EnvReader


class TestConfigSource:
    """Tests for ConfigSource dataclass."""

    def test_all_fields_default_to_none(self) -> None:
        """All fields should default to None."""
        source = ConfigSource()
        assert source.ffprobe_path is None
        assert source.fallback_extensions is None
        assert source.logging_level is None


class TestConfigBuilder:
    """Tests for ConfigBuilder class."""

    def test_build_with_no_sources_uses_defaults(self) -> None:
        """Should use default values when no sources applied."""
        config = ConfigBuilder().build()

        assert config.tools.ffprobe is None
        assert config.probe.media_extensions == ["avi", "mov", "mkv", "mp4", "m4v"]
        assert config.probe.ffprobe_timeout == 60
        assert config.logging.format == "text"

    def test_later_source_overrides(self) -> None:
        """Non-None values of a later source win."""
        builder = ConfigBuilder()
        builder.apply(ConfigSource(logging_level="warning", default_weeks=2), "file")
        builder.apply(ConfigSource(logging_level="debug"), "env")

        config = builder.build()

        assert config.logging.level == "debug"
        assert config.channel.default_weeks == 2
        assert builder.origin("logging_level") == "env"
        assert builder.origin("default_weeks") == "file"
        assert builder.origin("ffprobe_path") is None


class TestSourceFromFile:
    """Tests for source_from_file function."""

    def test_reads_every_table(self) -> None:
        source = source_from_file(
            {
                "tools": {"ffprobe": "/opt/ffmpeg/bin/ffprobe"},
                "probe": {"fallback_extensions": ["avi"], "ffprobe_timeout": 15},
                "channel": {"hints_file": "/srv/hints.json", "default_weeks": 2},
                "logging": {"level": "debug", "format": "json", "backup_count": 2},
            }
        )

        assert source.ffprobe_path == Path("/opt/ffmpeg/bin/ffprobe")
        assert source.fallback_extensions == ["avi"]
        assert source.ffprobe_timeout == 15
        assert source.hints_file == Path("/srv/hints.json")
        assert source.default_weeks == 2
        assert source.logging_format == "json"
        assert source.logging_backup_count == 2

    def test_empty_file(self) -> None:
        """Missing tables leave everything unset."""
        assert source_from_file({}) == ConfigSource()


class TestSourceFromEnv:
    """Tests for source_from_env function."""

    def test_reads_variables(self, tmp_path: Path) -> None:
        ffprobe = tmp_path / "ffprobe"
        ffprobe.write_bytes(b"")
        reader = EnvReader(
            env={
                "UHF_FFPROBE_PATH": str(ffprobe),
                "UHF_FALLBACK_EXTENSIONS": "mkv,,avi",
                "UHF_LOG_FILE": str(tmp_path / "uhf.log"),
                "UHF_LOG_FORMAT": "json",
            }
        )

        source = source_from_env(reader)

        assert source.ffprobe_path == ffprobe
        assert source.fallback_extensions == ["mkv", "avi"]
        assert source.logging_file == tmp_path / "uhf.log"
        assert source.logging_format == "json"

    def test_nonexistent_ffprobe_ignored(self, tmp_path: Path) -> None:
        """A UHF_FFPROBE_PATH that does not exist is dropped."""
        reader = EnvReader(env={"UHF_FFPROBE_PATH": str(tmp_path / "nope")})

        assert source_from_env(reader).ffprobe_path is None
