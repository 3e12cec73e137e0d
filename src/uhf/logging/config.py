"""Root logger setup from LoggingConfig, and the JSON record format."""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING, Any

from uhf.logging.context import WorkerContextFilter

if TYPE_CHECKING:
    from uhf.config.models import LoggingConfig

_LEVEL_MAP: dict[str, int] = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}

TEXT_FORMAT = "%(asctime)s - %(worker_tag)s%(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"

# Attributes every LogRecord carries; anything else on a record came from
# extra={...} or from WorkerContextFilter.
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {
    "message",
    "asctime",
    "taskName",
}
_WORKER_ATTRS = ("worker_id", "schedule_index", "day_ordinal", "worker_tag")


class JSONFormatter(logging.Formatter):
    """One JSON object per record.

    Keys: ``timestamp`` (ISO-8601 UTC), ``level``, ``logger``, ``message``,
    ``worker`` (``{"id", "schedule", "day"}``, only for records emitted
    inside a resolution context), ``context`` (remaining extras) and
    ``exception``.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        worker_id = getattr(record, "worker_id", None)
        if worker_id is not None:
            entry["worker"] = {
                "id": worker_id,
                "schedule": getattr(record, "schedule_index", None),
                "day": getattr(record, "day_ordinal", None),
            }
        hidden = _WORKER_ATTRS if worker_id is not None else ("worker_tag",)
        context = {
            key: value
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRS and key not in hidden and value is not None
        }
        if context:
            entry["context"] = context
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def _build_formatter(config: LoggingConfig) -> logging.Formatter:
    if config.format.casefold() == "json":
        return JSONFormatter()
    return logging.Formatter(TEXT_FORMAT, datefmt=DATE_FORMAT)


def _open_file_handler(
    config: LoggingConfig, level: int, formatter: logging.Formatter
) -> logging.Handler | None:
    if not config.file:
        return None
    try:
        file_path = Path(config.file).expanduser()
        file_path.parent.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(
            file_path,
            maxBytes=config.max_bytes,
            backupCount=config.backup_count,
            encoding="utf-8",
        )
    except OSError as e:
        sys.stderr.write(f"Warning: Could not open log file {config.file}: {e}\n")
        return None
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def configure_logging(config: LoggingConfig) -> None:
    """Replace the root logger's handlers according to ``config``.

    A rotating file handler is installed when a file is configured. A
    stderr handler is installed when requested, and always when there is
    no usable file handler.
    """
    level = _LEVEL_MAP.get(config.level.casefold(), logging.INFO)
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    formatter = _build_formatter(config)
    context_filter = WorkerContextFilter()

    handlers: list[logging.Handler] = []
    file_handler = _open_file_handler(config, level, formatter)
    if file_handler is not None:
        handlers.append(file_handler)

    if config.include_stderr or file_handler is None:
        stderr_handler = logging.StreamHandler(sys.stderr)
        stderr_handler.setLevel(level)
        stderr_handler.setFormatter(formatter)
        handlers.append(stderr_handler)

    for handler in handlers:
        handler.addFilter(context_filter)
        root_logger.addHandler(handler)
