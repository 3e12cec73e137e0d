"""Configuration management for UHF Scheduler.

Configuration is loaded with precedence handling:
1. CLI flags (highest priority)
2. Environment variables (UHF_*)
3. Config file (~/.uhf/config.toml)
4. Default values (lowest priority)
"""

from uhf.config.builder import (
    ConfigBuilder,
    ConfigSource,
    source_from_env,
    source_from_file,
)
from uhf.config.env import EnvReader
from uhf.config.loader import (
    clear_config_cache,
    get_config,
    get_data_dir,
    get_default_config_path,
    get_hints_path,
    load_config_file,
)
from uhf.config.models import (
    ChannelConfig,
    LoggingConfig,
    ProbeConfig,
    ToolPathsConfig,
    UHFConfig,
)
from uhf.config.toml_parser import TomlParseError, load_toml_file

__all__ = [
    # Models
    "ChannelConfig",
    "LoggingConfig",
    "ProbeConfig",
    "ToolPathsConfig",
    "UHFConfig",
    # Loader
    "clear_config_cache",
    "get_config",
    "get_data_dir",
    "get_default_config_path",
    "get_hints_path",
    "load_config_file",
    # Layering
    "EnvReader",
    "ConfigBuilder",
    "ConfigSource",
    "source_from_env",
    "source_from_file",
    "load_toml_file",
    "TomlParseError",
]
