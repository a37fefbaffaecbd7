"""CLI commands for maintenance tools."""

from __future__ import annotations

import click

from formscli.infrastructure.cli.dispatch import run


@click.command("clear-transients")
def tool_clear_transients() -> None:
    """Clear cached data."""
    run("tool clear-transients")


@click.command("empty-trash")
@click.argument("form_id", required=False)
def tool_empty_trash(form_id) -> None:
    """Permanently delete trashed entries."""
    run("tool empty-trash", [form_id])


@click.command("verify-checksums")
@click.option("--version", default=None, help="Release to verify against.")
def tool_verify_checksums(version) -> None:
    """Check installed files against the release checksums."""
    run("tool verify-checksums", options={"version": version})


@click.command("system-report")
def tool_system_report() -> None:
    """Print environment details."""
    run("tool system-report")
