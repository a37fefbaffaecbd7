"""Entry point: the ``formscli`` command group and its subgroups."""

from __future__ import annotations

from pathlib import Path

import click

from formscli.infrastructure.bootstrap import Settings, default_data_dir
from formscli.infrastructure.cli import (
    entry_commands,
    field_commands,
    form_commands,
    license_commands,
    notification_commands,
    root_commands,
    tool_commands,
)
from formscli.infrastructure.logging_config import LOG_LEVELS, configure_logging


@click.group()
@click.option(
    "--data-dir",
    envvar="FORMSCLI_DATA_DIR",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Where forms, entries and settings are stored.",
)
@click.option("--update-url", envvar="FORMSCLI_UPDATE_URL", default="", help="Release server base URL.")
@click.option(
    "--checksum-url",
    envvar="FORMSCLI_CHECKSUM_URL",
    default="",
    help="Checksum file URL with a {version} placeholder.",
)
@click.option(
    "--log-level",
    envvar="FORMSCLI_LOG_LEVEL",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    help="Diagnostics written to stderr.",
)
@click.pass_context
def cli(ctx: click.Context, data_dir, update_url, checksum_url, log_level) -> None:
    """formscli - manage forms, entries and notifications."""
    configure_logging(log_level)
    obj = ctx.ensure_object(dict)
    obj.setdefault(
        "settings",
        Settings(
            data_dir=data_dir or default_data_dir(),
            update_url=update_url,
            checksum_url=checksum_url,
            log_level=log_level.upper(),
        ),
    )


@cli.group()
def form() -> None:
    """Manage forms."""


@form.group()
def field() -> None:
    """Manage the fields of a form."""


@form.group("notification")
def form_notification() -> None:
    """Manage the notifications of a form."""


@cli.group()
def entry() -> None:
    """Manage entries."""


@entry.group("notification")
def entry_notification() -> None:
    """Inspect and send the notifications of an entry."""


@cli.group("license")
def license_group() -> None:
    """Manage the license key."""


@cli.group()
def tool() -> None:
    """Maintenance tools."""


# Register subcommands
form.add_command(form_commands.form_list)
form.add_command(form_commands.form_get)
form.add_command(form_commands.form_create)
form.add_command(form_commands.form_update)
form.add_command(form_commands.form_delete)
form.add_command(form_commands.form_duplicate)
form.add_command(form_commands.form_export)
form.add_command(form_commands.form_import)
form.add_command(form_commands.form_edit)
field.add_command(field_commands.field_list)
field.add_command(field_commands.field_get)
field.add_command(field_commands.field_create)
field.add_command(field_commands.field_update)
field.add_command(field_commands.field_delete)
field.add_command(field_commands.field_duplicate)
field.add_command(field_commands.field_edit)
form_notification.add_command(notification_commands.notification_list)
form_notification.add_command(notification_commands.notification_get)
form_notification.add_command(notification_commands.notification_create)
form_notification.add_command(notification_commands.notification_update)
form_notification.add_command(notification_commands.notification_delete)
form_notification.add_command(notification_commands.notification_duplicate)
form_notification.add_command(notification_commands.notification_edit)
entry_notification.add_command(notification_commands.entry_notification_get)
entry_notification.add_command(notification_commands.entry_notification_send)
entry.add_command(entry_commands.entry_get)
entry.add_command(entry_commands.entry_list)
entry.add_command(entry_commands.entry_create)
entry.add_command(entry_commands.entry_update)
entry.add_command(entry_commands.entry_delete)
entry.add_command(entry_commands.entry_export)
entry.add_command(entry_commands.entry_import)
entry.add_command(entry_commands.entry_duplicate)
entry.add_command(entry_commands.entry_edit)
license_group.add_command(license_commands.license_update)
license_group.add_command(license_commands.license_delete)
tool.add_command(tool_commands.tool_clear_transients)
tool.add_command(tool_commands.tool_empty_trash)
tool.add_command(tool_commands.tool_verify_checksums)
tool.add_command(tool_commands.tool_system_report)
cli.add_command(root_commands.install)
cli.add_command(root_commands.setup)
cli.add_command(root_commands.check_update)
cli.add_command(root_commands.update)
cli.add_command(root_commands.version)
