"""uhf fix-durations and uhf resolve commands."""

from __future__ import annotations

import os
import sys
from pathlib import Path

import click

from uhf.channel.maintenance import reassign_durations
from uhf.cli.channel_loader import build_prober, get_cli_config, open_channel, save_channel
from uhf.cli.exit_codes import ExitCode
from uhf.config import get_hints_path
from uhf.resolution import DurationResolver, LocationHintRegistry

CHANNEL_ARG = click.Path(exists=True, file_okay=False, path_type=Path)


class ClickPrompt:
    """Answers locate-content requests on the terminal."""

    def request_directory(self, prompt_text: str) -> list[Path] | None:
        click.echo(prompt_text)
        answer = click.prompt(
            f"Directories (separated by '{os.pathsep}', empty to skip)",
            default="",
            show_default=False,
        )
        directories = []
        for part in answer.split(os.pathsep):
            part = part.strip()
            if not part:
                continue
            directory = Path(part).expanduser()
            if directory.is_dir():
                directories.append(directory)
            else:
                click.echo(f"Not a directory, ignored: {directory}", err=True)
        return directories or None


@click.command("fix-durations")
@click.argument("channel", type=CHANNEL_ARG)
@click.option("--dry-run", is_flag=True, help="Report changes without saving.")
@click.pass_context
def fix_durations_command(ctx: click.Context, channel: Path, dry_run: bool) -> None:
    """Re-probe every schedule and list resource in CHANNEL.

    Stored durations that differ from the file are replaced. Files whose
    duration cannot be determined keep their stored value.
    """
    document = open_channel(channel)
    result = reassign_durations(document, build_prober(ctx), dry_run=dry_run)

    for change in result.changed:
        click.echo(f"{change.owner} {change.resource_id}: {change.old}s -> {change.new}s")
    for path in result.unresolved:
        click.echo(f"Unresolved: {path}", err=True)
    click.echo(
        f"Checked {result.checked}, changed {len(result.changed)}, "
        f"unresolved {len(result.unresolved)}"
    )

    if not dry_run:
        save_channel(document)
    if result.unresolved:
        sys.exit(ExitCode.UNRESOLVED_DURATIONS)


@click.command("resolve")
@click.argument("channel", type=CHANNEL_ARG)
@click.argument("ordinal", type=int)
@click.pass_context
def resolve_command(ctx: click.Context, channel: Path, ordinal: int) -> None:
    """Find missing durations for day ORDINAL, asking where files went.

    Declined files are skipped for the rest of the run. Directories you
    supply are remembered for later runs.
    """
    config = get_cli_config(ctx)
    document = open_channel(channel)
    if document.locate(ordinal) is None:
        click.echo(f"Error: Day {ordinal} is outside the channel", err=True)
        sys.exit(ExitCode.INVALID_INPUT)

    resolver = DurationResolver(
        document,
        build_prober(ctx),
        hints=LocationHintRegistry.load(get_hints_path(config)),
    )
    if not resolver.needs_resolution(ordinal):
        click.echo(f"Day {ordinal} has nothing to resolve.")
        return

    outcome = resolver.resolve_interactive(ordinal, ClickPrompt())
    if outcome.error:
        click.echo(f"Error: Resolution failed: {outcome.error}", err=True)
        sys.exit(ExitCode.GENERAL_ERROR)
    click.echo(
        f"Resolved {len(outcome.changed_ids)} resource(s) "
        f"in {outcome.passes} pass(es), {len(resolver.blacklist)} skipped"
    )
    save_channel(document)
    if outcome.had_failure:
        sys.exit(ExitCode.UNRESOLVED_DURATIONS)
