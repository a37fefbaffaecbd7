"""Application services: entry commands."""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from typing import Any

from formscli.application.console import Console
from formscli.application.dispatcher import CommandRequest, ExitStatus
from formscli.application.json_payload import decode_json_option
from formscli.application.output.columns import Column, ColumnSpec, ValueMode
from formscli.application.output.formatter import (
    OutputFormat,
    format_items,
    render_rows,
    to_json,
)
from formscli.application.output.projector import DisplayResolver, rows_from_pairs
from formscli.application.support import (
    edit_record,
    emit,
    load_entry,
    load_form,
    report_created,
)
from formscli.domain.exceptions import (
    DomainException,
    InvalidArgumentError,
    ValidationError,
)
from formscli.domain.model.entry import STATUS_TRASH, is_entry_property, parse_record_id
from formscli.domain.model.field import field_kind, field_label, find_field, form_fields
from formscli.domain.model.query import Paging, SearchCriteria
from formscli.domain.model.record import Record, RecordKind, scalar_to_text
from formscli.domain.repository.forms_backend import FormsBackend

logger = logging.getLogger(__name__)

GRID_COLUMN_COUNT = 5
ENTRY_ID_LABEL = "Entry Id"
FIELD_OPTION_PREFIX = "field_"


def field_values(extras: Mapping[str, str]) -> dict[str, str]:
    """``--field_<id>=<value>`` options as an ``{id: value}`` mapping."""
    values = {}
    for option, value in extras.items():
        if not option.startswith(FIELD_OPTION_PREFIX):
            raise InvalidArgumentError(f"Unknown option: --{option}")
        values[option[len(FIELD_OPTION_PREFIX):]] = value
    return values


def display_resolver(backend: FormsBackend, form: Record) -> DisplayResolver:
    return lambda record, key: backend.resolve_display_value(record, key, form)


def grid_columns(form: Record) -> ColumnSpec:
    """``Entry Id`` followed by the first input fields, labelled ``<id>: <label>``."""
    columns = [Column("id", ENTRY_ID_LABEL)]
    for field in form_fields(form):
        if len(columns) > GRID_COLUMN_COUNT:
            break
        if field_kind(field).is_display_only:
            continue
        columns.append(
            Column(
                str(field["id"]),
                f"{field['id']}: {field_label(field)}",
                ValueMode.DECORATED,
            )
        )
    return ColumnSpec(columns)


class _EntryHandler:

    def __init__(self, backend: FormsBackend, console: Console) -> None:
        self._backend = backend
        self._console = console

    def _form_of(self, entry: Record) -> dict[str, Any]:
        _, form = load_form(self._backend, entry.get("form_id"))
        return form


class EntryGetHandler(_EntryHandler):
    """Shows an entry as ID / Field / Value rows.

    By default one row per form field with display values.  With ``--raw``
    one row per stored key, or the stored entry itself as JSON.
    """

    def handle(self, request: CommandRequest) -> None:
        _, entry = load_entry(self._backend, request.arg("entry-id"))

        if request.flag("raw"):
            if request.format is OutputFormat.JSON:
                self._console.line(to_json(entry))
                return
            pairs = [(key, key, scalar_to_text(value)) for key, value in entry.items()]
        else:
            form = self._form_of(entry)
            pairs = [
                (
                    str(field["id"]),
                    field_label(field),
                    self._backend.resolve_display_value(entry, str(field["id"]), form),
                )
                for field in form_fields(form)
                if not field_kind(field).is_display_only
            ]

        rows = rows_from_pairs(pairs)
        emit(self._console, render_rows(request.format, rows, ["ID", "Field", "Value"]))


class EntryListHandler(_EntryHandler):

    @staticmethod
    def paging(request: CommandRequest) -> Paging:
        return Paging(
            offset=_as_int(request.option("offset"), "offset"),
            page_size=_as_int(request.option("page_size"), "page_size"),
        )

    def precheck(self, request: CommandRequest) -> None:
        self.paging(request)

    def handle(self, request: CommandRequest) -> None:
        form_id, form = load_form(self._backend, request.arg("form-id"))
        criteria = SearchCriteria(form_id=form_id, status=request.option("status"))
        paging = self.paging(request)
        entries, total = self._backend.list_records(RecordKind.ENTRY, criteria, paging)

        # count reports the whole filtered set, not just this page
        if request.format is OutputFormat.COUNT:
            self._console.line(str(total))
            return
        emit(
            self._console,
            format_items(
                request.format,
                entries,
                grid_columns(form),
                resolver=display_resolver(self._backend, form),
            ),
        )


class EntryCreateHandler(_EntryHandler):
    """Creates an entry from a JSON object, or for a form from ``--field_<id>`` values."""

    @staticmethod
    def precheck(request: CommandRequest) -> None:
        source = str(request.arg("entry"))
        if not source.isdigit():
            return
        parse_record_id(source, "form")
        if not field_values(request.extras):
            raise InvalidArgumentError(
                "Please specify at least one value --field_<id>=<value>"
            )

    def handle(self, request: CommandRequest) -> ExitStatus:
        source = str(request.arg("entry"))
        status = ExitStatus.OK

        if source.isdigit():
            form_id, form = load_form(self._backend, source)
            entry: dict[str, Any] = {"form_id": form_id}
            for key, value in field_values(request.extras).items():
                if key == "id":
                    self._console.line("The Entry ID value will be ignored.")
                    continue
                if not is_entry_property(key) and find_field(form, key) is None:
                    self._console.error(f"Field not found: {key}")
                    status = ExitStatus.FAILURE
                    continue
                entry[key] = value
        else:
            entry = decode_json_option(source, "entry-json")
            entry.pop("id", None)
            entry.update(field_values(request.extras))

        entry_id = self._backend.create_record(RecordKind.ENTRY, entry)
        logger.info("Created entry %s", entry_id)
        report_created(
            self._console,
            request.flag("porcelain"),
            entry_id,
            f"Entry created successfully. Entry ID: {entry_id}",
        )
        return status


class EntryUpdateHandler(_EntryHandler):
    """Updates entry values from ``--entry-json`` and/or ``--field_<id>`` options.

    Values equal to the stored ones are skipped, and nothing is written if
    no value changes.
    """

    @staticmethod
    def precheck(request: CommandRequest) -> None:
        if not request.option("entry-json") and not field_values(request.extras):
            raise InvalidArgumentError(
                "Specify --entry-json or at least one --field_<id>=<value>"
            )

    def handle(self, request: CommandRequest) -> ExitStatus:
        requested: dict[str, Any] = {}
        if request.option("entry-json"):
            requested.update(decode_json_option(request.option("entry-json"), "entry-json"))
        requested.update(field_values(request.extras))

        entry_id, entry = load_entry(self._backend, request.arg("entry-id"))
        form = self._form_of(entry)
        status = ExitStatus.OK
        changes: dict[str, Any] = {}

        for key, value in requested.items():
            key = str(key)
            if key in entry and scalar_to_text(entry[key]) == scalar_to_text(value):
                self._console.line(
                    f"The value of field {key} is already {scalar_to_text(value)}. Skipping."
                )
                continue
            if key == "id":
                self._console.error("Can't change the Entry ID, sorry.")
                status = ExitStatus.FAILURE
                continue
            if not is_entry_property(key) and find_field(form, key) is None:
                self._console.error(f"Field not found: {key}")
                status = ExitStatus.FAILURE
                continue
            changes[key] = value

        if not changes:
            self._console.line("No fields updated")
            return status

        self._backend.update_record(RecordKind.ENTRY, entry_id, changes)
        for key, value in changes.items():
            previous = scalar_to_text(entry.get(key)) or "[empty]"
            self._console.line(
                f"Updated field {key} from {previous} to {scalar_to_text(value)}"
            )
        self._console.success(f"Field values updated: {len(changes)}")
        return status


class EntryDeleteHandler(_EntryHandler):
    """Trashes entries, or deletes them with ``--force`` or when already trashed."""

    def handle(self, request: CommandRequest) -> ExitStatus:
        status = ExitStatus.OK
        for raw_id in request.arg("entry-ids"):
            try:
                self._delete_one(raw_id, request.flag("force"))
            except DomainException as exc:
                self._console.error(str(exc))
                status = ExitStatus.FAILURE
        return status

    def _delete_one(self, raw_id: str, force: bool) -> None:
        entry_id, entry = load_entry(self._backend, raw_id)
        if force or entry.get("status") == STATUS_TRASH:
            self._backend.delete_record(RecordKind.ENTRY, entry_id)
            self._console.success(f"Deleted entry {entry_id}")
        else:
            self._backend.update_record(
                RecordKind.ENTRY, entry_id, {"status": STATUS_TRASH}
            )
            self._console.success(f"Trashed entry {entry_id}")


class EntryDuplicateHandler(_EntryHandler):

    @staticmethod
    def precheck(request: CommandRequest) -> None:
        if _as_int(request.option("count"), "count") < 1:
            raise InvalidArgumentError("count must be at least 1")

    def handle(self, request: CommandRequest) -> None:
        _, entry = load_entry(self._backend, request.arg("entry-id"))
        count = _as_int(request.option("count"), "count")
        duplicate = copy.deepcopy(entry)
        duplicate.pop("id", None)

        with self._console.progress("Duplicating entry", count) as progress:
            for _ in range(count):
                self._backend.create_record(RecordKind.ENTRY, duplicate)
                progress.tick()
        self._console.success(f"Entries created: {count}")


class EntryEditHandler(_EntryHandler):

    def handle(self, request: CommandRequest) -> None:
        entry_id, entry = load_entry(self._backend, request.arg("entry-id"))
        edited = edit_record(self._console, entry, f"entry-{entry_id}.json")
        if edited is None:
            self._console.warning("No change made to entry.")
            return
        if "id" in edited and scalar_to_text(edited["id"]) != str(entry_id):
            raise ValidationError("Can't change the Entry ID, sorry.")
        edited["id"] = entry_id
        self._backend.update_record(RecordKind.ENTRY, entry_id, edited, replace=True)
        self._console.success("Entry updated successfully")


def _as_int(value: Any, option: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise InvalidArgumentError(f"Invalid {option} '{value}'. Expected a number.")

