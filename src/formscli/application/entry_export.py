"""Application services: entry export and import.

Exports fetch entries page by page (``EXPORT_PAGE_SIZE`` at a time) and
write either the raw entries as a JSON array or a CSV file whose columns
are the default entry properties followed by every form input.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from datetime import date
from pathlib import Path
from typing import Any

from formscli.application.console import Console
from formscli.application.dispatcher import CommandRequest, ExitStatus
from formscli.application.entries import display_resolver
from formscli.application.forms import writable_directory
from formscli.application.json_payload import read_json_file, records_in
from formscli.application.output.columns import Column, ColumnSpec, ValueMode
from formscli.application.output.formatter import OutputFormat, render_csv, to_json
from formscli.application.output.projector import project
from formscli.application.support import load_form
from formscli.domain.exceptions import DomainException
from formscli.domain.model.entry import DEFAULT_EXPORT_PROPERTIES, STATUS_ACTIVE
from formscli.domain.model.field import field_kind, field_label, form_fields
from formscli.domain.model.query import Paging, SearchCriteria, parse_date
from formscli.domain.model.record import Record, RecordKind
from formscli.domain.repository.forms_backend import FormsBackend

logger = logging.getLogger(__name__)

EXPORT_PAGE_SIZE = 20


def export_columns(form: Record) -> ColumnSpec:
    """Default entry properties, then one column per field or field input."""
    columns = [
        Column(key, label, ValueMode.DECORATED)
        for key, label in DEFAULT_EXPORT_PROPERTIES
    ]
    for field in form_fields(form):
        inputs = field.get("inputs")
        if isinstance(inputs, list) and inputs:
            for field_input in inputs:
                input_id = str(field_input.get("id"))
                columns.append(
                    Column(input_id, field_label(field, input_id), ValueMode.DECORATED)
                )
        elif not field_kind(field).is_display_only:
            columns.append(
                Column(str(field["id"]), field_label(field), ValueMode.DECORATED)
            )
    return ColumnSpec(columns)


def slugify(title: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", title.lower()).strip("-")
    return slug or "form"


def _criteria(form_id: int, request: CommandRequest) -> SearchCriteria:
    return SearchCriteria(
        form_id=form_id,
        status=STATUS_ACTIVE,
        start_date=parse_date(request.option("start_date"), "start_date"),
        end_date=parse_date(request.option("end_date"), "end_date"),
    )


class EntryExportHandler:

    def __init__(
        self,
        backend: FormsBackend,
        console: Console,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._backend = backend
        self._console = console
        self._today = today

    @staticmethod
    def precheck(request: CommandRequest) -> None:
        parse_date(request.option("start_date"), "start_date")
        parse_date(request.option("end_date"), "end_date")

    def handle(self, request: CommandRequest) -> None:
        form_id, form = load_form(self._backend, request.arg("form-id"))
        fmt, filename = self._target(request, form)
        path = writable_directory(request.option("dir")) / filename

        entries = self._fetch_all(_criteria(form_id, request))
        if fmt is OutputFormat.JSON:
            content = to_json(entries, pretty=True)
        else:
            spec = export_columns(form)
            rows = project(entries, spec, display_resolver(self._backend, form))
            content = render_csv(spec.labels, [row.values for row in rows]) + "\n"
        path.write_text(content, encoding="utf-8")
        logger.info("Exported %d entries of form %s to %s", len(entries), form_id, path)

        if request.flag("porcelain"):
            self._console.line(str(path))
        else:
            self._console.success(f"{len(entries)} entries exported to {path}")

    def _target(self, request: CommandRequest, form: Record) -> tuple[OutputFormat, str]:
        """Output format and file name; a given file name's extension picks the format."""
        filename = request.arg("filename")
        if filename:
            fmt = OutputFormat.JSON if filename.endswith("json") else OutputFormat.CSV
            return fmt, filename
        fmt = request.format
        title = slugify(str(form.get("title", "")))
        return fmt, f"{title}-{self._today().isoformat()}.{fmt.value}"

    def _fetch_all(self, criteria: SearchCriteria) -> list[dict[str, Any]]:
        total = self._backend.count_records(RecordKind.ENTRY, criteria)
        entries: list[dict[str, Any]] = []
        offset = 0
        with self._console.progress(f"Exporting {total} entries", total) as progress:
            while offset < total:
                page, _ = self._backend.list_records(
                    RecordKind.ENTRY, criteria, Paging(offset, EXPORT_PAGE_SIZE)
                )
                if not page:
                    break
                entries.extend(page)
                progress.tick(len(page))
                offset += EXPORT_PAGE_SIZE
        return entries


class EntryImportHandler:

    def __init__(self, backend: FormsBackend, console: Console) -> None:
        self._backend = backend
        self._console = console

    def handle(self, request: CommandRequest) -> ExitStatus:
        form_id, _ = load_form(self._backend, request.arg("form-id"))
        entries = records_in(read_json_file(Path(request.arg("file"))))

        status = ExitStatus.OK
        added = 0
        for entry in entries:
            entry = dict(entry)
            original_id = entry.pop("id", None)
            entry["form_id"] = form_id
            try:
                self._backend.create_record(RecordKind.ENTRY, entry)
            except DomainException as exc:
                self._console.error(f"Entry {original_id}: {exc}")
                status = ExitStatus.FAILURE
                continue
            added += 1
        logger.info("Imported %d entries into form %s", added, form_id)
        self._console.success(f"Entries added successfully: {added}")
        return status
