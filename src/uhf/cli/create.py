"""uhf new command."""

from __future__ import annotations

import sys
from datetime import date, datetime
from pathlib import Path

import click

from uhf.channel import ChannelDocument
from uhf.channel.persistence import MANIFEST_PATH
from uhf.cli.channel_loader import get_cli_config, report_save
from uhf.cli.exit_codes import ExitCode
from uhf.storage import FileStorage


@click.command("new")
@click.argument("channel", type=click.Path(file_okay=False, path_type=Path))
@click.option(
    "--start-date",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    default=None,
    help="First day of the first schedule (default: today).",
)
@click.option(
    "--weeks",
    type=click.IntRange(min=1),
    default=None,
    help="Number of weekly schedules (default from config, usually 1).",
)
@click.option("--title", default=None, help="Channel title.")
@click.pass_context
def new_command(
    ctx: click.Context,
    channel: Path,
    start_date: datetime | None,
    weeks: int | None,
    title: str | None,
) -> None:
    """Create an empty channel in CHANNEL.

    Writes manifest.json and one schedule file per week
    (schedule0.json, schedule1.json, ...), each with seven empty days.
    """
    storage = FileStorage(channel)
    if storage.is_readable(MANIFEST_PATH):
        click.echo(f"Error: {channel} already contains a channel", err=True)
        sys.exit(ExitCode.CHANNEL_EXISTS)

    config = get_cli_config(ctx)
    first_day = start_date.date() if start_date else date.today()
    document = ChannelDocument.new(
        storage,
        first_day,
        weeks or config.channel.default_weeks,
        title=title,
    )
    report_save(document.save())
    click.echo(
        f"Created channel with {len(document.schedules)} week(s) "
        f"starting {first_day.isoformat()}"
    )
