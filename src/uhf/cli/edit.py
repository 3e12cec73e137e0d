"""Channel editing commands: offset, set-bobd, rekey, list-add, export-resources."""

from __future__ import annotations

import sys
from pathlib import Path

import click

from uhf.channel.maintenance import new_resource_from_file
from uhf.cli.channel_loader import build_prober, open_channel, save_channel
from uhf.cli.exit_codes import ExitCode
from uhf.storage import FileStorage

CHANNEL_ARG = click.Path(exists=True, file_okay=False, path_type=Path)


@click.command("offset")
@click.argument("channel", type=CHANNEL_ARG)
@click.argument("days", type=int)
def offset_command(channel: Path, days: int) -> None:
    """Move every schedule of CHANNEL by DAYS days.

    Use "--" before a negative value: uhf offset CHANNEL -- -7
    """
    document = open_channel(channel)
    document.offset_schedule(days)
    save_channel(document)
    first = document.manifest.schedules[0].start_date if document.manifest.schedules else "-"
    click.echo(f"Channel now starts {first}")


@click.command("set-bobd")
@click.argument("channel", type=CHANNEL_ARG)
@click.argument("time_of_day")
def set_bobd_command(channel: Path, time_of_day: str) -> None:
    """Set the beginning of the broadcast day (HH:MM)."""
    document = open_channel(channel)
    try:
        value = document.set_beginning_of_broadcast_day(time_of_day)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(ExitCode.INVALID_INPUT)
    save_channel(document)
    click.echo(f"Broadcast day starts at {value}")


@click.command("rekey")
@click.argument("channel", type=CHANNEL_ARG)
@click.argument("schedule_index", type=int)
@click.argument("old_id")
@click.argument("new_id")
def rekey_command(channel: Path, schedule_index: int, old_id: str, new_id: str) -> None:
    """Rename resource OLD_ID to NEW_ID in one schedule.

    Refused (nothing changes) when NEW_ID is already used in that schedule.
    """
    document = open_channel(channel)
    if not document.rekey_resource(schedule_index, old_id, new_id):
        click.echo(f"Error: Cannot re-key {old_id} to {new_id}", err=True)
        sys.exit(ExitCode.EDIT_REJECTED)
    save_channel(document)


@click.command("list-add")
@click.argument("channel", type=CHANNEL_ARG)
@click.argument("list_id")
@click.argument(
    "files", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
@click.option("--create", is_flag=True, help="Create the list if it does not exist.")
@click.pass_context
def list_add_command(
    ctx: click.Context, channel: Path, list_id: str, files: tuple[Path, ...], create: bool
) -> None:
    """Add media FILES to list LIST_ID.

    Files already in the list, unsupported files and files whose duration
    cannot be determined are skipped.
    """
    document = open_channel(channel)
    if list_id not in document.lists:
        if not create:
            click.echo(f"Error: No list {list_id!r} (use --create)", err=True)
            sys.exit(ExitCode.INVALID_INPUT)
        document.create_list(list_id, f"{list_id}.json", title=list_id)

    prober = build_prober(ctx)
    added = 0
    for path in files:
        resource = new_resource_from_file(path, channel, prober)
        if resource is None:
            click.echo(f"Skipped {path.name}: not a timed media file", err=True)
            continue
        key = document.add_resource_to_list(list_id, resource)
        if key is None:
            click.echo(f"Skipped {path.name}: already in {list_id}")
            continue
        added += 1
        click.echo(f"Added {path.name} as {key}")

    save_channel(document)
    click.echo(f"{added} file(s) added to {list_id}")


@click.command("export-resources")
@click.argument("channel", type=CHANNEL_ARG)
@click.argument("output", type=click.Path(dir_okay=False, path_type=Path))
def export_resources_command(channel: Path, output: Path) -> None:
    """Write the merged resource database of CHANNEL to OUTPUT as JSON."""
    document = open_channel(channel)
    output = output.expanduser().absolute()
    if not document.resource_db.export(FileStorage(output.parent), output.name):
        click.echo(f"Error: Could not export resources to {output}", err=True)
        sys.exit(ExitCode.EXPORT_FAILED)
    click.echo(f"Exported {len(document.resource_db)} resources to {output}")
