"""Helpers shared by the command handlers."""

from __future__ import annotations

from typing import Any

from formscli.application.console import Console
from formscli.application.json_payload import decode_json_text
from formscli.application.output.formatter import to_json
from formscli.domain.exceptions import EntityNotFoundError, InvalidJsonError
from formscli.domain.model.entry import parse_record_id
from formscli.domain.model.record import RecordKind
from formscli.domain.repository.forms_backend import FormsBackend


def load_form(backend: FormsBackend, raw_id: Any) -> tuple[int, dict[str, Any]]:
    form_id = parse_record_id(raw_id, "form")
    form = backend.get_record(RecordKind.FORM, form_id)
    if form is None:
        raise EntityNotFoundError(f"Form not found: {form_id}")
    return form_id, form


def load_entry(backend: FormsBackend, raw_id: Any) -> tuple[int, dict[str, Any]]:
    entry_id = parse_record_id(raw_id, "entry")
    entry = backend.get_record(RecordKind.ENTRY, entry_id)
    if entry is None:
        raise EntityNotFoundError(f"Entry not found: {entry_id}")
    return entry_id, entry


def report_created(
    console: Console, porcelain: bool, record_id: Any, message: str
) -> None:
    """Print the bare ID under ``--porcelain``, the message otherwise."""
    if porcelain:
        console.line(str(record_id))
    else:
        console.success(message)


def emit(console: Console, output: str | int) -> None:
    text = str(output)
    if text:
        console.line(text)


def edit_record(
    console: Console, record: dict[str, Any], filename: str
) -> dict[str, Any] | None:
    """Open *record* as JSON in the editor; None when nothing changed."""
    original = to_json(record, pretty=True)
    edited = console.edit(original, filename)
    if edited is None or edited.strip() == original.strip():
        return None
    data = decode_json_text(edited, filename)
    if not isinstance(data, dict):
        raise InvalidJsonError(f"{filename} must contain a JSON object")
    return data
