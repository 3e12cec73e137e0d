"""uhf info and uhf day commands."""

from __future__ import annotations

import functools
import json
import sys
from pathlib import Path
from typing import Any

import click

from uhf.channel import ChannelDocument
from uhf.cli.channel_loader import get_cli_config, open_channel
from uhf.cli.exit_codes import ExitCode
from uhf.config import get_hints_path
from uhf.core.time_utils import format_clock_duration
from uhf.resolution import LocationHintRegistry, is_locatable

CHANNEL_ARG = click.Path(exists=True, file_okay=False, path_type=Path)


def channel_summary(document: ChannelDocument) -> dict[str, Any]:
    """Collect the facts shown by ``uhf info``."""
    info = document.manifest.info
    return {
        "title": info.title if info else None,
        "description": info.description if info else None,
        "beginning_of_broadcast_day": document.manifest.beginning_of_broadcast_day,
        "total_days": document.total_days,
        "schedules": [
            {
                "start_date": descriptor.start_date,
                "path": descriptor.schedule_path,
                "days": len(schedule.days),
                "resources": len(schedule.resources),
            }
            for descriptor, schedule in zip(
                document.manifest.schedules, document.schedules
            )
        ],
        "lists": {
            list_id: len(channel_list.resources)
            for list_id, channel_list in document.lists.items()
        },
        "series": sorted((document.manifest.series or {}).keys()),
        "known_resources": len(document.resource_db),
    }


@click.command("info")
@click.argument("channel", type=CHANNEL_ARG)
@click.option("--json", "json_output", is_flag=True, help="Output as JSON.")
def info_command(channel: Path, json_output: bool) -> None:
    """Show a summary of the channel in CHANNEL."""
    summary = channel_summary(open_channel(channel))
    if json_output:
        click.echo(json.dumps(summary, indent=2))
        return

    click.echo(f"Title:       {summary['title'] or '(untitled)'}")
    if summary["description"]:
        click.echo(f"Description: {summary['description']}")
    if summary["beginning_of_broadcast_day"]:
        click.echo(f"Day starts:  {summary['beginning_of_broadcast_day']}")
    click.echo(f"Days:        {summary['total_days']}")
    click.echo(f"Resources:   {summary['known_resources']} known")
    click.echo("")
    click.echo("Schedules:")
    for entry in summary["schedules"]:
        click.echo(
            f"  {entry['start_date']}  {entry['path']}  "
            f"{entry['days']} days, {entry['resources']} resources"
        )
    if summary["lists"]:
        click.echo("Lists:")
        for list_id, count in summary["lists"].items():
            click.echo(f"  {list_id}  {count} resources")
    if summary["series"]:
        click.echo(f"Series:      {', '.join(summary['series'])}")


@click.command("day")
@click.argument("channel", type=CHANNEL_ARG)
@click.argument("ordinal", type=int)
@click.option("--json", "json_output", is_flag=True, help="Output as JSON.")
@click.pass_context
def day_command(ctx: click.Context, channel: Path, ordinal: int, json_output: bool) -> None:
    """List the programs of day ORDINAL (0 is the first day).

    Rows marked ! have a missing file or no duration yet; rows marked *
    have a description. Files found through a location hint count as
    present.
    """
    document = open_channel(channel)
    if document.locate(ordinal) is None:
        click.echo(
            f"Error: Day {ordinal} is outside the channel (0-{document.total_days - 1})",
            err=True,
        )
        sys.exit(ExitCode.INVALID_INPUT)

    hints = LocationHintRegistry.load(get_hints_path(get_cli_config(ctx)))
    rows = document.day_listing(
        ordinal, functools.partial(is_locatable, document.storage, hints)
    )
    day = document.date_for(ordinal)
    if json_output:
        click.echo(
            json.dumps(
                {
                    "ordinal": ordinal,
                    "date": day.isoformat() if day else None,
                    "programs": [
                        {
                            "start_time": row.start_time,
                            "duration": row.duration,
                            "title": row.title,
                            "resource_id": row.resource_id,
                            "path": row.path,
                            "has_description": row.has_description,
                            "error": row.error,
                        }
                        for row in rows
                    ],
                },
                indent=2,
            )
        )
        return

    click.echo(f"Day {ordinal} ({day.strftime('%A %Y-%m-%d') if day else '?'})")
    if not rows:
        click.echo("  (no programs)")
    for row in rows:
        marks = ("!" if row.error else " ") + ("*" if row.has_description else " ")
        click.echo(
            f"{marks} {row.start_time}  {format_clock_duration(row.duration):>8}  "
            f"{row.title}"
        )
