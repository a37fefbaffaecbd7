"""CLI commands for form notifications and the notifications of an entry."""

from __future__ import annotations

import click

from formscli.infrastructure.cli.dispatch import run


@click.command("list")
@click.argument("form_id", required=False)
@click.option("--active/--no-active", "active", default=None, help="Filter by active state.")
@click.option("--format", "fmt", default=None, help="table, csv, json, ids or count.")
@click.option("--raw", is_flag=True, help="Print the stored notification objects.")
def notification_list(form_id, active, fmt, raw) -> None:
    """List the notifications of a form."""
    run(
        "form notification list",
        [form_id],
        {"active": active, "format": fmt, "raw": raw},
    )


@click.command("get")
@click.argument("form_id", required=False)
@click.argument("notification_id", required=False)
def notification_get(form_id, notification_id) -> None:
    """Print a notification as JSON."""
    run("form notification get", [form_id, notification_id])


@click.command("create")
@click.argument("form_id", required=False)
@click.argument("name", required=False)
@click.option("--to", default=None, help="Recipient address or merge tag.")
@click.option("--subject", default=None, help="Subject line.")
@click.option("--message", default=None, help="Message body.")
@click.option("--to-type", "to_type", default=None, help="email, field or routing.")
@click.option("--event", default=None, help="Event that sends the notification.")
@click.option("--notification-json", "notification_json", default=None, help="Notification as JSON.")
@click.option("--porcelain", is_flag=True, help="Print only the new notification id.")
def notification_create(
    form_id, name, to, subject, message, to_type, event, notification_json, porcelain
) -> None:
    """Add a notification to a form."""
    run(
        "form notification create",
        [form_id, name],
        {
            "to": to,
            "subject": subject,
            "message": message,
            "to-type": to_type,
            "event": event,
            "notification-json": notification_json,
            "porcelain": porcelain,
        },
    )


@click.command("update")
@click.argument("form_id", required=False)
@click.argument("notification_id", required=False)
@click.option("--notification-json", "notification_json", default=None, help="Notification as JSON.")
def notification_update(form_id, notification_id, notification_json) -> None:
    """Replace a notification with the given JSON."""
    run(
        "form notification update",
        [form_id, notification_id],
        {"notification-json": notification_json},
    )


@click.command("delete")
@click.argument("form_id", required=False)
@click.argument("notification_ids", nargs=-1)
def notification_delete(form_id, notification_ids) -> None:
    """Delete notifications from a form."""
    run("form notification delete", [form_id, *notification_ids])


@click.command("duplicate")
@click.argument("form_id", required=False)
@click.argument("notification_id", required=False)
@click.option("--porcelain", is_flag=True, help="Print only the new notification id.")
def notification_duplicate(form_id, notification_id, porcelain) -> None:
    """Copy a notification."""
    run("form notification duplicate", [form_id, notification_id], {"porcelain": porcelain})


@click.command("edit")
@click.argument("form_id", required=False)
@click.argument("notification_id", required=False)
def notification_edit(form_id, notification_id) -> None:
    """Edit a notification's JSON in $EDITOR."""
    run("form notification edit", [form_id, notification_id])


@click.command("get")
@click.argument("entry_id", required=False)
@click.argument("notification_ids", nargs=-1)
@click.option("--event", default=None, help="Event whose notifications are listed.")
@click.option("--format", "fmt", default=None, help="table, json or ids.")
@click.option("--raw", is_flag=True, help="Print the stored notification objects.")
def entry_notification_get(entry_id, notification_ids, event, fmt, raw) -> None:
    """Show the notifications that apply to an entry."""
    run(
        "entry notification get",
        [entry_id, *notification_ids],
        {"event": event, "format": fmt, "raw": raw},
    )


@click.command("send")
@click.argument("entry_id", required=False)
@click.argument("notification_ids", nargs=-1)
@click.option("--event", default=None, help="Event whose notifications are sent.")
def entry_notification_send(entry_id, notification_ids, event) -> None:
    """Send the notifications of an entry."""
    run("entry notification send", [entry_id, *notification_ids], {"event": event})
