"""Configuration builder with explicit layering.

Each configuration source (config file, environment, command line) is
converted to a ConfigSource; ConfigBuilder applies them lowest precedence
first and fills what nobody set with defaults.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from uhf.config.env import EnvReader
from uhf.config.models import (
    ChannelConfig,
    LoggingConfig,
    ProbeConfig,
    ToolPathsConfig,
    UHFConfig,
)
from uhf.introspector.prober import DEFAULT_FALLBACK_EXTENSIONS, DEFAULT_MEDIA_EXTENSIONS


@dataclass
class ConfigSource:
    """Configuration values from a single source.

    None values indicate "not specified in this source" and will not
    override values from lower-precedence sources.
    """

    # Tool paths
    ffprobe_path: Path | None = None

    # Probe config
    media_extensions: list[str] | None = None
    fallback_extensions: list[str] | None = None
    ffprobe_timeout: int | None = None

    # Channel config
    hints_file: Path | None = None
    default_weeks: int | None = None

    # Logging config
    logging_level: str | None = None
    logging_file: Path | None = None
    logging_format: str | None = None
    logging_include_stderr: bool | None = None
    logging_max_bytes: int | None = None
    logging_backup_count: int | None = None


class ConfigBuilder:
    """Builds UHFConfig by layering ConfigSources.

    Example:
        builder = ConfigBuilder()
        builder.apply(source_from_file(file_config))
        builder.apply(source_from_env(reader))
        builder.apply(cli_source)
        config = builder.build()
    """

    def __init__(self) -> None:
        self._values: dict[str, Any] = {}
        self._origins: dict[str, str] = {}

    def apply(self, source: ConfigSource, source_name: str = "unknown") -> None:
        """Apply a source; its non-None values override earlier ones."""
        for field_obj in fields(source):
            value = getattr(source, field_obj.name)
            if value is not None:
                self._values[field_obj.name] = value
                self._origins[field_obj.name] = source_name

    def origin(self, key: str) -> str | None:
        """Name of the source that supplied ``key``, or None for a default."""
        return self._origins.get(key)

    def _get(self, key: str, default: Any) -> Any:
        return self._values.get(key, default)

    def build(self) -> UHFConfig:
        """Build the final UHFConfig with defaults for unset values.

        Raises:
            ValueError: If a value fails model validation.
        """
        tools = ToolPathsConfig(ffprobe=self._get("ffprobe_path", None))

        probe = ProbeConfig(
            media_extensions=list(
                self._get("media_extensions", DEFAULT_MEDIA_EXTENSIONS)
            ),
            fallback_extensions=list(
                self._get("fallback_extensions", DEFAULT_FALLBACK_EXTENSIONS)
            ),
            ffprobe_timeout=self._get("ffprobe_timeout", 60),
        )

        channel = ChannelConfig(
            hints_file=self._get("hints_file", None),
            default_weeks=self._get("default_weeks", 1),
        )

        logging_config = LoggingConfig(
            level=self._get("logging_level", "info"),
            file=self._get("logging_file", None),
            format=self._get("logging_format", "text"),
            include_stderr=self._get("logging_include_stderr", False),
            max_bytes=self._get("logging_max_bytes", 10_485_760),
            backup_count=self._get("logging_backup_count", 5),
        )

        return UHFConfig(
            tools=tools,
            probe=probe,
            channel=channel,
            logging=logging_config,
        )


def _optional_path(value: Any) -> Path | None:
    return Path(value).expanduser() if value else None


def source_from_file(file_config: dict[str, Any]) -> ConfigSource:
    """Create a ConfigSource from a parsed config file.

    Recognized tables: ``[tools]``, ``[probe]``, ``[channel]``, ``[logging]``.
    """
    tools = file_config.get("tools", {})
    probe = file_config.get("probe", {})
    channel = file_config.get("channel", {})
    logging_conf = file_config.get("logging", {})

    return ConfigSource(
        ffprobe_path=_optional_path(tools.get("ffprobe")),
        media_extensions=probe.get("media_extensions"),
        fallback_extensions=probe.get("fallback_extensions"),
        ffprobe_timeout=probe.get("ffprobe_timeout"),
        hints_file=_optional_path(channel.get("hints_file")),
        default_weeks=channel.get("default_weeks"),
        logging_level=logging_conf.get("level"),
        logging_file=_optional_path(logging_conf.get("file")),
        logging_format=logging_conf.get("format"),
        logging_include_stderr=logging_conf.get("include_stderr"),
        logging_max_bytes=logging_conf.get("max_bytes"),
        logging_backup_count=logging_conf.get("backup_count"),
    )


def source_from_env(reader: EnvReader) -> ConfigSource:
    """Create a ConfigSource from ``UHF_*`` environment variables."""
    return ConfigSource(
        ffprobe_path=reader.get_path("FFPROBE_PATH", must_exist=True),
        fallback_extensions=reader.get_list("FALLBACK_EXTENSIONS"),
        hints_file=reader.get_path("HINTS_FILE"),
        logging_level=reader.get_str("LOG_LEVEL"),
        logging_file=reader.get_path("LOG_FILE"),
        logging_format=reader.get_str("LOG_FORMAT"),
    )
