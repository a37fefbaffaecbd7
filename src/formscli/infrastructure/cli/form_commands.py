"""CLI commands for forms."""

from __future__ import annotations

import click

from formscli.infrastructure.cli.dispatch import run


@click.command("list")
@click.option("--active/--no-active", "active", default=None, help="Filter by active state.")
@click.option("--trash", is_flag=True, help="List trashed forms instead.")
@click.option("--sort_column", "sort_column", default=None, help="Column to sort by.")
@click.option("--sort_dir", "sort_dir", default=None, help="ASC or DESC.")
@click.option("--format", "fmt", default=None, help="table, csv, json, ids or count.")
def form_list(active, trash, sort_column, sort_dir, fmt) -> None:
    """List forms."""
    run(
        "form list",
        options={
            "active": active,
            "trash": trash,
            "sort_column": sort_column,
            "sort_dir": sort_dir,
            "format": fmt,
        },
    )


@click.command("get")
@click.argument("form_id", required=False)
def form_get(form_id) -> None:
    """Print a form as JSON."""
    run("form get", [form_id])


@click.command("create")
@click.argument("title", required=False)
@click.argument("description", required=False)
@click.option("--form-json", "form_json", default=None, help="Complete form object as JSON.")
@click.option("--porcelain", is_flag=True, help="Print only the new form id.")
def form_create(title, description, form_json, porcelain) -> None:
    """Create a form from a title or a JSON object."""
    run(
        "form create",
        [title, description],
        {"form-json": form_json, "porcelain": porcelain},
    )


@click.command("update")
@click.argument("form_id", required=False)
@click.option("--form-json", "form_json", default=None, help="Replacement form as JSON.")
def form_update(form_id, form_json) -> None:
    """Replace a form with the given JSON."""
    run("form update", [form_id], {"form-json": form_json})


@click.command("delete")
@click.argument("form_ids", nargs=-1)
@click.option("--force", is_flag=True, help="Delete permanently instead of trashing.")
def form_delete(form_ids, force) -> None:
    """Trash or delete one or more forms."""
    run("form delete", form_ids, {"force": force})


@click.command("duplicate")
@click.argument("form_id", required=False)
@click.option("--porcelain", is_flag=True, help="Print only the new form id.")
def form_duplicate(form_id, porcelain) -> None:
    """Copy a form under a numbered title."""
    run("form duplicate", [form_id], {"porcelain": porcelain})


@click.command("export")
@click.argument("form_id", required=False)
@click.option("--dir", "directory", default=None, help="Target directory.")
@click.option("--porcelain", is_flag=True, help="Print only the written path.")
def form_export(form_id, directory, porcelain) -> None:
    """Export one form, or all of them, to a JSON file."""
    run("form export", [form_id], {"dir": directory, "porcelain": porcelain})


@click.command("import")
@click.argument("file", required=False)
def form_import(file) -> None:
    """Import forms from an export file."""
    run("form import", [file])


@click.command("edit")
@click.argument("form_id", required=False)
def form_edit(form_id) -> None:
    """Edit a form's JSON in $EDITOR."""
    run("form edit", [form_id])
