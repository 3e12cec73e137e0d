"""Configuration data models.

This module defines dataclasses for UHF Scheduler configuration options.
"""

from dataclasses import dataclass, field, replace
from pathlib import Path

from uhf.introspector.prober import DEFAULT_FALLBACK_EXTENSIONS, DEFAULT_MEDIA_EXTENSIONS


@dataclass
class ToolPathsConfig:
    """Configuration for external tool paths.

    If not specified, tools are looked up in PATH.
    """

    ffprobe: Path | None = None


@dataclass
class ProbeConfig:
    """Configuration for media duration probing."""

    # Extensions accepted as media files when adding resources
    media_extensions: list[str] = field(
        default_factory=lambda: list(DEFAULT_MEDIA_EXTENSIONS)
    )

    # Extensions for which ffprobe is tried when PyAV finds no duration
    fallback_extensions: list[str] = field(
        default_factory=lambda: list(DEFAULT_FALLBACK_EXTENSIONS)
    )

    # Seconds before an ffprobe run is abandoned
    ffprobe_timeout: int = 60

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.ffprobe_timeout < 1:
            raise ValueError(
                f"ffprobe_timeout must be at least 1, got {self.ffprobe_timeout}"
            )
        self.media_extensions = [e.strip().lstrip(".").lower() for e in self.media_extensions if e.strip()]
        self.fallback_extensions = [
            e.strip().lstrip(".").lower() for e in self.fallback_extensions if e.strip()
        ]


@dataclass
class ChannelConfig:
    """Configuration for channel creation and media location."""

    # JSON file holding directories supplied to locate-content prompts
    # (None = <data dir>/location_hints.json)
    hints_file: Path | None = None

    # Number of weekly schedules in a new channel
    default_weeks: int = 1

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.default_weeks < 1:
            raise ValueError(
                f"default_weeks must be at least 1, got {self.default_weeks}"
            )


@dataclass
class LoggingConfig:
    """Configuration for structured logging."""

    # Log level: debug, info, warning, error
    level: str = "info"

    # Log file path (None = stderr only)
    file: Path | None = None

    # Log format: text or json
    format: str = "text"

    # Also log to stderr when file is set
    include_stderr: bool = False

    # Rotation threshold in bytes (default 10MB)
    max_bytes: int = 10_485_760

    # Number of rotated files to keep
    backup_count: int = 5

    def __post_init__(self) -> None:
        """Validate configuration."""
        valid_levels = {"debug", "info", "warning", "error"}
        if self.level.lower() not in valid_levels:
            raise ValueError(f"level must be one of {valid_levels}, got {self.level}")
        valid_formats = {"text", "json"}
        if self.format.lower() not in valid_formats:
            raise ValueError(
                f"format must be one of {valid_formats}, got {self.format}"
            )

    def with_overrides(
        self,
        *,
        level: str | None = None,
        file: Path | None = None,
        format: str | None = None,
    ) -> "LoggingConfig":
        """Return a copy with the command line's logging options applied.

        Options left as None keep the configured value.

        Raises:
            ValueError: If an override is not a valid level or format.
        """
        changes = {"level": level, "file": file, "format": format}
        return replace(self, **{k: v for k, v in changes.items() if v is not None})


@dataclass
class UHFConfig:
    """Main configuration container.

    Aggregates all configuration sections.
    """

    tools: ToolPathsConfig = field(default_factory=ToolPathsConfig)
    probe: ProbeConfig = field(default_factory=ProbeConfig)
    channel: ChannelConfig = field(default_factory=ChannelConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
