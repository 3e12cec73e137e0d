"""Configuration loader with precedence handling.

Configuration is loaded with the following precedence (highest to lowest):
1. CLI arguments (passed directly to functions)
2. Environment variables (UHF_*)
3. Config file (~/.uhf/config.toml)
4. Default values

Environment variables:
- UHF_CONFIG_PATH: Path to config file (overrides default location)
- UHF_DATA_DIR: Path to the data directory (overrides ~/.uhf/)
- UHF_FFPROBE_PATH: Path to ffprobe executable
- UHF_FALLBACK_EXTENSIONS: Comma-separated extensions probed with ffprobe
- UHF_HINTS_FILE: Path to the location hints file
- UHF_LOG_LEVEL, UHF_LOG_FILE, UHF_LOG_FORMAT: Logging overrides
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path

from uhf.config.builder import (
    ConfigBuilder,
    ConfigSource,
    source_from_env,
    source_from_file,
)
from uhf.config.env import EnvReader
from uhf.config.models import UHFConfig
from uhf.config.toml_parser import load_toml_file

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path.home() / ".uhf"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.toml"
HINTS_FILE_NAME = "location_hints.json"

# Cache for loaded config files (path -> (parsed dict, mtime))
_config_cache: dict[Path, tuple[dict, float]] = {}
_config_cache_lock = threading.Lock()


def get_default_config_path() -> Path:
    """Get the config file path, honouring UHF_CONFIG_PATH."""
    return EnvReader().get_path("CONFIG_PATH") or DEFAULT_CONFIG_FILE


def get_data_dir() -> Path:
    """Get the data directory (~/.uhf/ unless UHF_DATA_DIR is set).

    Holds the config file and the location hints file.
    """
    return EnvReader().get_path("DATA_DIR") or DEFAULT_CONFIG_DIR


def get_hints_path(config: UHFConfig) -> Path:
    """Location hints file configured in ``config`` or the data dir default."""
    if config.channel.hints_file is not None:
        return config.channel.hints_file
    return get_data_dir() / HINTS_FILE_NAME


def load_config_file(path: Path | None = None, *, strict: bool = False) -> dict:
    """Load configuration from a TOML file.

    Results are cached with mtime-based invalidation. Thread-safe.

    Args:
        path: Path to config file. If None, uses default location.
        strict: Raise TomlParseError on parse failures instead of
            returning {}.

    Returns:
        Parsed configuration dict. Empty dict if the file doesn't exist.
    """
    if path is None:
        path = get_default_config_path()

    try:
        current_mtime = path.stat().st_mtime
    except FileNotFoundError:
        current_mtime = 0.0

    # Fast path without the lock; the cache may be cleared concurrently.
    try:
        if path in _config_cache:
            cached_config, cached_mtime = _config_cache[path]
            if current_mtime == cached_mtime:
                return cached_config
    except KeyError:
        pass

    with _config_cache_lock:
        if path in _config_cache:
            cached_config, cached_mtime = _config_cache[path]
            if current_mtime == cached_mtime:
                return cached_config

        result = load_toml_file(path, strict=strict)
        _config_cache[path] = (result, current_mtime)
        return result


def clear_config_cache() -> None:
    """Forget every cached config file. Primarily useful for testing."""
    with _config_cache_lock:
        _config_cache.clear()


def get_config(
    config_path: Path | None = None,
    # CLI overrides (highest precedence)
    ffprobe_path: Path | None = None,
    hints_file: Path | None = None,
    # Optional dependency injection for testing
    env_reader: EnvReader | None = None,
    *,
    strict: bool = False,
) -> UHFConfig:
    """Get configuration with full precedence handling.

    Args:
        config_path: Path to config file (overrides UHF_CONFIG_PATH).
        ffprobe_path: CLI override for the ffprobe path.
        hints_file: CLI override for the location hints file.
        env_reader: EnvReader to use instead of os.environ.
        strict: Raise TomlParseError when the config file cannot be parsed.

    Returns:
        UHFConfig with merged configuration.

    Raises:
        ValueError: If a configured value is invalid.
    """
    reader = env_reader if env_reader is not None else EnvReader()
    for name in reader.unknown_variables():
        logger.warning("Ignoring unknown environment variable %s", name)
    file_config = load_config_file(config_path, strict=strict)

    builder = ConfigBuilder()
    builder.apply(source_from_file(file_config), source_name="file")
    builder.apply(source_from_env(reader), source_name="env")
    builder.apply(
        ConfigSource(ffprobe_path=ffprobe_path, hints_file=hints_file),
        source_name="cli",
    )
    return builder.build()
