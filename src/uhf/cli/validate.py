"""uhf validate command."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from uhf.channel.validation import validate_channel
from uhf.cli.channel_loader import open_channel
from uhf.cli.exit_codes import ExitCode


@click.command("validate")
@click.argument("channel", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--json", "json_output", is_flag=True, help="Output as JSON.")
def validate_command(channel: Path, json_output: bool) -> None:
    """Check CHANNEL for missing resources, unreadable files and bad paths.

    Exits with status 60 when issues are found.
    """
    issues = validate_channel(open_channel(channel))

    if json_output:
        click.echo(
            json.dumps(
                [
                    {
                        "kind": issue.kind.value,
                        "location": issue.location,
                        "resource_id": issue.resource_id,
                        "path": issue.path,
                        "message": issue.message,
                    }
                    for issue in issues
                ],
                indent=2,
            )
        )
    elif not issues:
        click.echo("No issues found.")
    else:
        for issue in issues:
            click.echo(f"{issue.location}: {issue.message} [{issue.path or issue.resource_id}]")
        click.echo(f"{len(issues)} issue(s) found.")

    if issues:
        sys.exit(ExitCode.VALIDATION_ISSUES)
