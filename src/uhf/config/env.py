"""UHF_* environment variables.

Variables are addressed by their short name: ``LOG_LEVEL`` reads
``UHF_LOG_LEVEL``. Blank values count as unset, so ``UHF_LOG_LEVEL=`` in a
shell profile does not override the config file.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

logger = logging.getLogger(__name__)

PREFIX = "UHF_"

KNOWN_VARIABLES: frozenset[str] = frozenset(
    {
        "CONFIG_PATH",
        "DATA_DIR",
        "FFPROBE_PATH",
        "FALLBACK_EXTENSIONS",
        "HINTS_FILE",
        "LOG_LEVEL",
        "LOG_FILE",
        "LOG_FORMAT",
    }
)


class EnvReader:
    """Reads UHF_* variables from ``os.environ`` or an injected mapping.

    Example:
        reader = EnvReader(env={"UHF_LOG_LEVEL": "debug"})
        reader.get_str("LOG_LEVEL")  # "debug"
    """

    def __init__(self, env: Mapping[str, str] | None = None) -> None:
        self._env: Mapping[str, str] = env if env is not None else os.environ

    def _raw(self, name: str) -> str | None:
        value = self._env.get(PREFIX + name)
        if value is None or not value.strip():
            return None
        return value.strip()

    def get_str(self, name: str) -> str | None:
        return self._raw(name)

    def get_path(self, name: str, must_exist: bool = False) -> Path | None:
        """Return the variable as a path with ``~`` expanded.

        With ``must_exist``, a path that does not exist is logged and
        ignored (None), which lets a stale UHF_FFPROBE_PATH fall back to
        the config file or PATH lookup.
        """
        value = self._raw(name)
        if value is None:
            return None
        path = Path(value).expanduser()
        if must_exist and not path.exists():
            logger.warning("Ignoring %s%s: %s does not exist", PREFIX, name, path)
            return None
        return path

    def get_list(self, name: str) -> list[str] | None:
        """Return a comma separated variable as a list, blanks dropped."""
        value = self._raw(name)
        if value is None:
            return None
        return [part.strip() for part in value.split(",") if part.strip()]

    def unknown_variables(self) -> list[str]:
        """UHF_* variables that nothing reads, usually misspellings."""
        return sorted(
            key
            for key in self._env
            if key.startswith(PREFIX) and key[len(PREFIX) :] not in KNOWN_VARIABLES
        )
