"""Top-level commands: install, setup, check-update, update and version."""

from __future__ import annotations

import click

from formscli.infrastructure.cli.dispatch import run


@click.command("install")
@click.argument("slug", required=False)
@click.option("--license-key", "license_key", envvar="FORMSCLI_LICENSE_KEY", default=None, help="License key.")
@click.option("--force", is_flag=True, help="Reinstall over an existing copy.")
@click.option("--activate", is_flag=True, help="Run the setup after installing.")
@click.option("--network-activate", "network_activate", is_flag=True, help="Same as --activate.")
def install(slug, license_key, force, activate, network_activate) -> None:
    """Download and install a package."""
    run(
        "install",
        [slug],
        {
            "license-key": license_key,
            "force": force,
            "activate": activate,
            "network-activate": network_activate,
        },
    )


@click.command("setup")
@click.argument("slug", required=False)
@click.option("--force", is_flag=True, help="Re-run a setup that already ran.")
def setup(slug, force) -> None:
    """Prepare the data store of an installed package."""
    run("setup", [slug], {"force": force})


@click.command("check-update")
@click.argument("slug", required=False)
@click.option("--format", "fmt", default=None, help="table, csv or json.")
def check_update(slug, fmt) -> None:
    """Report whether a newer release is available."""
    run("check-update", [slug], {"format": fmt})


@click.command("update")
@click.argument("slug", required=False)
def update(slug) -> None:
    """Install the latest release."""
    run("update", [slug])


@click.command("version")
def version() -> None:
    """Print the CLI and backend versions."""
    run("version")
