"""CLI module for UHF Scheduler."""

import logging
from pathlib import Path

import click

_logging_configured: bool = False

logger = logging.getLogger(__name__)


def _configure_logging(
    config_path: Path | None,
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
) -> None:
    """Configure logging from the config file and CLI options (once per
    process). Command line options win over the file."""
    global _logging_configured
    if _logging_configured:
        return

    from uhf.config import get_config
    from uhf.logging import configure_logging

    config = get_config(config_path=config_path)
    configure_logging(
        config.logging.with_overrides(
            level=log_level,
            file=log_file,
            format="json" if log_json else None,
        )
    )
    _logging_configured = True


def _log_startup_settings(config_path: Path | None) -> None:
    """Log where configuration and data come from."""
    from uhf.config.env import EnvReader
    from uhf.config.loader import get_data_dir, get_default_config_path

    data_dir_source = "env" if EnvReader().get_str("DATA_DIR") else "default"
    effective_config = config_path or get_default_config_path()
    logger.debug(
        "uhf starting: data_dir=%s (%s), config=%s",
        str(get_data_dir()).replace(str(Path.home()), "~"),
        data_dir_source,
        str(effective_config).replace(str(Path.home()), "~"),
    )


@click.group()
@click.version_option(package_name="uhf-scheduler")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file (default: ~/.uhf/config.toml).",
)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default=None,
    help="Override log level (default: info).",
)
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    default=None,
    help="Override log file path.",
)
@click.option(
    "--log-json",
    is_flag=True,
    default=False,
    help="Use JSON log format.",
)
@click.pass_context
def main(
    ctx: click.Context,
    config_path: Path | None,
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
) -> None:
    """UHF Scheduler - Edit and maintain UHF channel schedules."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path

    _configure_logging(config_path, log_level, log_file, log_json)
    _log_startup_settings(config_path)


# Defer import to avoid circular dependency
def _register_commands():
    from uhf.cli.create import new_command
    from uhf.cli.durations import fix_durations_command, resolve_command
    from uhf.cli.edit import (
        export_resources_command,
        list_add_command,
        offset_command,
        rekey_command,
        set_bobd_command,
    )
    from uhf.cli.info import day_command, info_command
    from uhf.cli.validate import validate_command

    main.add_command(new_command)
    main.add_command(info_command)
    main.add_command(day_command)
    main.add_command(validate_command)
    main.add_command(fix_durations_command)
    main.add_command(resolve_command)
    main.add_command(export_resources_command)
    main.add_command(offset_command)
    main.add_command(set_bobd_command)
    main.add_command(rekey_command)
    main.add_command(list_add_command)


_register_commands()
