"""Shared helpers for commands that operate on a channel directory."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from uhf.channel import ChannelDocument, ChannelOpenError, SaveReport
from uhf.channel.persistence import MANIFEST_PATH
from uhf.cli.exit_codes import ExitCode
from uhf.config import UHFConfig, get_config
from uhf.introspector import MediaDurationProber
from uhf.storage import FileStorage

logger = logging.getLogger(__name__)


def get_cli_config(ctx: click.Context) -> UHFConfig:
    """Return the configuration for this invocation, loading it once."""
    obj = ctx.ensure_object(dict)
    if "config" not in obj:
        try:
            obj["config"] = get_config(config_path=obj.get("config_path"))
        except ValueError as e:
            click.echo(f"Error: Invalid configuration: {e}", err=True)
            sys.exit(ExitCode.CONFIG_ERROR)
    return obj["config"]


def build_prober(ctx: click.Context) -> MediaDurationProber:
    return MediaDurationProber.from_config(get_cli_config(ctx))


def open_channel(channel_dir: Path) -> ChannelDocument:
    """Open the channel in ``channel_dir`` or exit with an error."""
    storage = FileStorage(channel_dir)
    if not storage.is_readable(MANIFEST_PATH):
        click.echo(f"Error: No channel manifest in {channel_dir}", err=True)
        sys.exit(ExitCode.CHANNEL_NOT_FOUND)
    try:
        return ChannelDocument.open(storage)
    except ChannelOpenError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(ExitCode.OPEN_FAILED)


def report_save(report: SaveReport) -> None:
    """Print a save report; exit with SAVE_FAILED if anything failed."""
    for failure in report.failures:
        click.echo(f"Error: Could not write {failure.path}: {failure.message}", err=True)
    if report.aborted:
        click.echo("Error: Manifest could not be written; nothing saved.", err=True)
    if not report.success:
        sys.exit(ExitCode.SAVE_FAILED)
    if report.written:
        click.echo(f"Saved {', '.join(report.written)}")


def save_channel(document: ChannelDocument) -> None:
    """Save dirty entities and report the result."""
    if not document.is_dirty:
        click.echo("Nothing to save.")
        return
    report_save(document.save())
