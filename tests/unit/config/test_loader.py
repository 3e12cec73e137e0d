"""Tests for config loader module."""

from __future__ import annotations

from pathlib import Path

import pytest

from uhf.config.env import EnvReader
from uhf.config.loader import (
    clear_config_cache,
    get_config,
    get_data_dir,
    get_default_config_path,
    get_hints_path,
    load_config_file,
)
from uhf.config.models import ChannelConfig, UHFConfig
from uhf.config.toml_parser import TomlParseError


class TestGetDefaultConfigPath:
    """Tests for get_default_config_path function."""

    def test_returns_default_when_env_not_set(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Should return default path when UHF_CONFIG_PATH not set."""
        monkeypatch.delenv("UHF_CONFIG_PATH", raising=False)
        result = get_default_config_path()
        assert result == Path.home() / ".uhf" / "config.toml"

    def test_returns_env_path_when_set(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Should return env path when UHF_CONFIG_PATH is set."""
        monkeypatch.setenv("UHF_CONFIG_PATH", "/custom/config.toml")
        result = get_default_config_path()
        assert result == Path("/custom/config.toml")


class TestGetDataDir:
    """Tests for get_data_dir function."""

    def test_returns_default_when_env_not_set(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Should return default path when UHF_DATA_DIR not set."""
        monkeypatch.delenv("UHF_DATA_DIR", raising=False)
        assert get_data_dir() == Path.home() / ".uhf"

    def test_expands_tilde(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        """Should expand tilde in path."""
        monkeypatch.setenv("HOME", str(tmp_path))
        monkeypatch.setenv("UHF_DATA_DIR", "~/custom/uhf")
        assert get_data_dir() == tmp_path / "custom" / "uhf"


class TestGetHintsPath:
    """Tests for get_hints_path function."""

    def test_defaults_to_data_dir(self, uhf_data_dir: Path) -> None:
        """Without configuration the hints live in the data dir."""
        assert get_hints_path(UHFConfig()) == uhf_data_dir / "location_hints.json"

    def test_configured_file(self, tmp_path: Path) -> None:
        config = UHFConfig(channel=ChannelConfig(hints_file=tmp_path / "hints.json"))
        assert get_hints_path(config) == tmp_path / "hints.json"


class TestLoadConfigFile:
    """Tests for load_config_file function."""

    def test_returns_empty_dict_when_file_not_exists(self, tmp_path: Path) -> None:
        """Should return empty dict when file doesn't exist."""
        assert load_config_file(tmp_path / "nonexistent.toml") == {}

    def test_loads_valid_config_file(self, tmp_path: Path) -> None:
        """Should load and parse a valid config file."""
        config_file = tmp_path / "config.toml"
        config_file.write_text('[probe]\nfallback_extensions = ["mkv", "avi"]\n')

        result = load_config_file(config_file)

        assert result["probe"]["fallback_extensions"] == ["mkv", "avi"]

    def test_cache_returns_same_object(self, tmp_path: Path) -> None:
        """Unchanged files are served from the cache."""
        config_file = tmp_path / "config.toml"
        config_file.write_text('[logging]\nlevel = "debug"\n')

        assert load_config_file(config_file) is load_config_file(config_file)

    def test_clear_cache_rereads(self, tmp_path: Path) -> None:
        """After clearing the cache a new dict is parsed."""
        config_file = tmp_path / "config.toml"
        config_file.write_text('[logging]\nlevel = "debug"\n')
        first = load_config_file(config_file)

        clear_config_cache()

        assert load_config_file(config_file) is not first

    def test_invalid_toml_lenient(self, tmp_path: Path) -> None:
        """Parse errors give an empty config by default."""
        config_file = tmp_path / "config.toml"
        config_file.write_text("[probe\n")

        assert load_config_file(config_file) == {}

    def test_invalid_toml_strict(self, tmp_path: Path) -> None:
        """Strict mode raises with the file path."""
        config_file = tmp_path / "config.toml"
        config_file.write_text("[probe\n")

        with pytest.raises(TomlParseError) as exc_info:
            load_config_file(config_file, strict=True)
        assert exc_info.value.path == config_file


class TestGetConfig:
    """Tests for get_config precedence."""

    def test_defaults(self, tmp_path: Path) -> None:
        """No file and no environment gives the defaults."""
        config = get_config(
            config_path=tmp_path / "missing.toml", env_reader=EnvReader(env={})
        )

        assert config.tools.ffprobe is None
        assert config.probe.fallback_extensions == ["mkv"]
        assert config.channel.default_weeks == 1
        assert config.logging.level == "info"

    def test_file_values(self, tmp_path: Path) -> None:
        config_file = tmp_path / "config.toml"
        config_file.write_text(
            "[probe]\nffprobe_timeout = 10\n\n[channel]\ndefault_weeks = 4\n"
        )

        config = get_config(config_path=config_file, env_reader=EnvReader(env={}))

        assert config.probe.ffprobe_timeout == 10
        assert config.channel.default_weeks == 4

    def test_env_overrides_file(self, tmp_path: Path) -> None:
        """Environment variables beat the config file."""
        config_file = tmp_path / "config.toml"
        config_file.write_text('[logging]\nlevel = "warning"\n')
        reader = EnvReader(
            env={"UHF_LOG_LEVEL": "debug", "UHF_FALLBACK_EXTENSIONS": "mkv, avi"}
        )

        config = get_config(config_path=config_file, env_reader=reader)

        assert config.logging.level == "debug"
        assert config.probe.fallback_extensions == ["mkv", "avi"]

    def test_cli_overrides_env(self, tmp_path: Path) -> None:
        """Explicit arguments beat the environment."""
        reader = EnvReader(env={"UHF_HINTS_FILE": str(tmp_path / "env.json")})

        config = get_config(
            config_path=tmp_path / "missing.toml",
            hints_file=tmp_path / "cli.json",
            env_reader=reader,
        )

        assert config.channel.hints_file == tmp_path / "cli.json"

    def test_invalid_value_raises(self, tmp_path: Path) -> None:
        """A bad value surfaces as ValueError."""
        config_file = tmp_path / "config.toml"
        config_file.write_text("[channel]\ndefault_weeks = 0\n")

        with pytest.raises(ValueError, match="default_weeks"):
            get_config(config_path=config_file, env_reader=EnvReader(env={}))

    def test_unknown_variable_warned(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        """A misspelled UHF_ variable is named in a warning and otherwise ignored."""
        reader = EnvReader(env={"UHF_LOGLEVEL": "debug"})

        with caplog.at_level("WARNING", logger="uhf.config.loader"):
            config = get_config(config_path=tmp_path / "missing.toml", env_reader=reader)

        assert config.logging.level == "info"
        assert "UHF_LOGLEVEL" in caplog.text
