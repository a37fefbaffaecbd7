"""CLI commands for entries."""

from __future__ import annotations

import click

from formscli.infrastructure.cli.dispatch import RAW_TOKENS, run, split_tokens


@click.command("get")
@click.argument("entry_id", required=False)
@click.option("--format", "fmt", default=None, help="table or json.")
@click.option("--raw", is_flag=True, help="Show stored values instead of display values.")
def entry_get(entry_id, fmt, raw) -> None:
    """Show one entry."""
    run("entry get", [entry_id], {"format": fmt, "raw": raw})


@click.command("list")
@click.argument("form_id", required=False)
@click.option("--status", default=None, help="active, spam or trash.")
@click.option("--format", "fmt", default=None, help="table, csv, json, ids or count.")
@click.option("--page_size", "page_size", default=None, help="Entries per page.")
@click.option("--offset", default=None, help="Entries to skip.")
def entry_list(form_id, status, fmt, page_size, offset) -> None:
    """List the entries of a form."""
    run(
        "entry list",
        [form_id],
        {"status": status, "format": fmt, "page_size": page_size, "offset": offset},
    )


@click.command("create", context_settings=RAW_TOKENS)
@click.argument("tokens", nargs=-1, type=click.UNPROCESSED)
@click.option("--porcelain", is_flag=True, help="Print only the new entry id.")
def entry_create(tokens, porcelain) -> None:
    """Create an entry from a form id and --field_<id>=<value> options, or from JSON.

    \b
    Examples:
        formscli entry create 1 --field_1=Jane --field_2=jane@example.com
        formscli entry create '{"form_id": 1, "1": "Jane"}'
    """
    args, extras = split_tokens(tokens)
    run("entry create", args, {"porcelain": porcelain}, extras)


@click.command("update", context_settings=RAW_TOKENS)
@click.argument("tokens", nargs=-1, type=click.UNPROCESSED)
@click.option("--entry-json", "entry_json", default=None, help="Values to set, as JSON.")
def entry_update(tokens, entry_json) -> None:
    """Update entry values from JSON or --field_<id>=<value> options."""
    args, extras = split_tokens(tokens)
    run("entry update", args, {"entry-json": entry_json}, extras)


@click.command("delete")
@click.argument("entry_ids", nargs=-1)
@click.option("--force", is_flag=True, help="Delete permanently instead of trashing.")
def entry_delete(entry_ids, force) -> None:
    """Trash or delete entries."""
    run("entry delete", entry_ids, {"force": force})


@click.command("export")
@click.argument("form_id", required=False)
@click.argument("filename", required=False)
@click.option("--dir", "directory", default=None, help="Target directory.")
@click.option("--format", "fmt", default=None, help="csv or json.")
@click.option("--start_date", "start_date", default=None, help="Earliest creation date (YYYY-MM-DD).")
@click.option("--end_date", "end_date", default=None, help="Latest creation date (YYYY-MM-DD).")
@click.option("--porcelain", is_flag=True, help="Print only the written path.")
def entry_export(form_id, filename, directory, fmt, start_date, end_date, porcelain) -> None:
    """Export the entries of a form to CSV or JSON."""
    run(
        "entry export",
        [form_id, filename],
        {
            "dir": directory,
            "format": fmt,
            "start_date": start_date,
            "end_date": end_date,
            "porcelain": porcelain,
        },
    )


@click.command("import")
@click.argument("form_id", required=False)
@click.argument("file", required=False)
def entry_import(form_id, file) -> None:
    """Import entries from a JSON export file."""
    run("entry import", [form_id, file])


@click.command("duplicate")
@click.argument("entry_id", required=False)
@click.option("--count", default=None, help="Number of copies.")
def entry_duplicate(entry_id, count) -> None:
    """Copy an entry one or more times."""
    run("entry duplicate", [entry_id], {"count": count})


@click.command("edit")
@click.argument("entry_id", required=False)
def entry_edit(entry_id) -> None:
    """Edit an entry's JSON in $EDITOR."""
    run("entry edit", [entry_id])
