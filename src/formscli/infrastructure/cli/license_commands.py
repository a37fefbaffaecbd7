"""CLI commands for the stored license key."""

from __future__ import annotations

import click

from formscli.infrastructure.cli.dispatch import run


@click.command("update")
@click.argument("key", required=False)
def license_update(key) -> None:
    """Store a license key."""
    run("license update", [key])


@click.command("delete")
def license_delete() -> None:
    """Forget the stored license key."""
    run("license delete")
