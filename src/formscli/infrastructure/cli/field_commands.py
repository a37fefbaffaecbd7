"""CLI commands for the fields of a form."""

from __future__ import annotations

import click

from formscli.infrastructure.cli.dispatch import RAW_TOKENS, run, split_tokens


@click.command("list")
@click.argument("form_id", required=False)
@click.option("--format", "fmt", default=None, help="table, csv, json, ids or count.")
def field_list(form_id, fmt) -> None:
    """List the fields of a form."""
    run("form field list", [form_id], {"format": fmt})


@click.command("get")
@click.argument("form_id", required=False)
@click.argument("field_id", required=False)
def field_get(form_id, field_id) -> None:
    """Print a field as JSON."""
    run("form field get", [form_id, field_id])


@click.command("create")
@click.argument("form_id", required=False)
@click.argument("type", required=False)
@click.argument("label", required=False)
@click.option("--field-json", "field_json", default=None, help="Field object as JSON.")
@click.option("--porcelain", is_flag=True, help="Print only the new field id.")
def field_create(form_id, type, label, field_json, porcelain) -> None:
    """Add a field to a form."""
    run(
        "form field create",
        [form_id, type, label],
        {"field-json": field_json, "porcelain": porcelain},
    )


@click.command("update", context_settings=RAW_TOKENS)
@click.argument("tokens", nargs=-1, type=click.UNPROCESSED)
@click.option("--field-json", "field_json", default=None, help="Replacement field as JSON.")
def field_update(tokens, field_json) -> None:
    """Update a field from JSON or --<property>=<value> options.

    \b
    Example:
        formscli form field update 1 3 --label="Email address" --isRequired=1
    """
    args, extras = split_tokens(tokens)
    run("form field update", args, {"field-json": field_json}, extras)


@click.command("delete")
@click.argument("form_id", required=False)
@click.argument("field_id", required=False)
def field_delete(form_id, field_id) -> None:
    """Remove a field from a form."""
    run("form field delete", [form_id, field_id])


@click.command("duplicate")
@click.argument("form_id", required=False)
@click.argument("field_id", required=False)
@click.option("--porcelain", is_flag=True, help="Print only the new field id.")
def field_duplicate(form_id, field_id, porcelain) -> None:
    """Copy a field right after the original."""
    run("form field duplicate", [form_id, field_id], {"porcelain": porcelain})


@click.command("edit")
@click.argument("form_id", required=False)
@click.argument("field_id", required=False)
def field_edit(form_id, field_id) -> None:
    """Edit a field's JSON in $EDITOR."""
    run("form field edit", [form_id, field_id])
