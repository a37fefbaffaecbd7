"""Application services: form commands."""

from __future__ import annotations

import copy
import logging
import os
import re
from collections.abc import Callable
from datetime import date
from pathlib import Path
from typing import Any

from formscli.application.console import Console
from formscli.application.dispatcher import CommandRequest, ExitStatus
from formscli.application.json_payload import (
    decode_json_option,
    read_json_file,
    records_in,
)
from formscli.application.output.columns import ColumnSpec
from formscli.application.output.formatter import format_items, to_json
from formscli.application.support import edit_record, emit, load_form, report_created
from formscli.domain.exceptions import (
    DomainException,
    InvalidArgumentError,
    MissingArgumentError,
    NotWritableError,
)
from formscli.domain.model.entry import parse_record_id
from formscli.domain.model.form import ensure_confirmation, new_form
from formscli.domain.model.query import SearchCriteria
from formscli.domain.model.record import RecordKind
from formscli.domain.repository.forms_backend import FormsBackend

logger = logging.getLogger(__name__)

FORM_COLUMNS = ColumnSpec.of(
    "id", "title", "date_created", "is_active", "entry_count", "view_count"
)
EXPORT_FILENAME = "forms-export-{date}.json"


def writable_directory(raw: str | None) -> Path:
    """The export target: ``--dir`` if given, else the working directory."""
    directory = Path(raw) if raw else Path.cwd()
    if not directory.is_dir() or not os.access(directory, os.W_OK):
        if raw:
            raise NotWritableError(f"Not writable: {raw}")
        raise NotWritableError("The current working directory is not writable")
    return directory


class FormListHandler:

    def __init__(self, backend: FormsBackend, console: Console) -> None:
        self._backend = backend
        self._console = console

    @staticmethod
    def precheck(request: CommandRequest) -> None:
        sort_dir = str(request.option("sort_dir")).upper()
        if sort_dir not in ("ASC", "DESC"):
            raise InvalidArgumentError(f"Invalid sort_dir '{sort_dir}'. Use ASC or DESC.")

    def handle(self, request: CommandRequest) -> None:
        sort_dir = str(request.option("sort_dir")).upper()
        criteria = SearchCriteria(
            is_active=request.option("active"),
            is_trash=request.flag("trash"),
            sort_column=request.option("sort_column"),
            sort_dir=sort_dir,
        )
        forms, _ = self._backend.list_records(RecordKind.FORM, criteria)
        emit(self._console, format_items(request.format, forms, FORM_COLUMNS))


class FormGetHandler:

    def __init__(self, backend: FormsBackend, console: Console) -> None:
        self._backend = backend
        self._console = console

    def handle(self, request: CommandRequest) -> None:
        _, form = load_form(self._backend, request.arg("form-id"))
        self._console.line(to_json(form))


class FormCreateHandler:
    """Creates a form from a title, a JSON blob, or both.

    Without JSON the form gets the default admin notification.  Either way
    it gets a default confirmation unless the JSON brings its own.  A title
    or description given as an argument wins over the JSON one.  Any ID in
    the JSON is dropped; the backend assigns a new one.
    """

    def __init__(self, backend: FormsBackend, console: Console) -> None:
        self._backend = backend
        self._console = console

    @staticmethod
    def precheck(request: CommandRequest) -> None:
        if not request.arg("title") and not request.option("form-json"):
            raise MissingArgumentError("title")

    def handle(self, request: CommandRequest) -> None:
        title = request.arg("title")
        description = request.arg("description")
        form_json = request.option("form-json")

        if form_json:
            form = decode_json_option(form_json, "form-json")
            form.pop("id", None)
            form.setdefault("fields", [])
            if title:
                form["title"] = title
            if description:
                form["description"] = description
        else:
            form = new_form(title, description or "")
        ensure_confirmation(form)

        form_id = self._backend.create_record(RecordKind.FORM, form)
        logger.info("Created form %s", form_id)
        report_created(
            self._console,
            request.flag("porcelain"),
            form_id,
            f"Created Form with ID: {form_id}",
        )


class FormUpdateHandler:

    def __init__(self, backend: FormsBackend, console: Console) -> None:
        self._backend = backend
        self._console = console

    @staticmethod
    def precheck(request: CommandRequest) -> None:
        if not request.option("form-json"):
            raise InvalidArgumentError("Missing required option: --form-json")

    def handle(self, request: CommandRequest) -> None:
        form_id = parse_record_id(request.arg("form-id"), "form")
        form = decode_json_option(request.option("form-json"), "form-json")
        replace_form(self._backend, form_id, form)
        self._console.success("Form updated successfully")


def replace_form(backend: FormsBackend, form_id: int, form: dict[str, Any]) -> None:
    form["id"] = form_id
    backend.update_record(RecordKind.FORM, form_id, form, replace=True)
    logger.info("Updated form %s", form_id)


class FormDeleteHandler:
    """Trashes forms, or deletes them with ``--force`` or when already trashed."""

    def __init__(self, backend: FormsBackend, console: Console) -> None:
        self._backend = backend
        self._console = console

    def handle(self, request: CommandRequest) -> ExitStatus:
        status = ExitStatus.OK
        for raw_id in request.arg("form-ids"):
            try:
                self._delete_one(raw_id, request.flag("force"))
            except DomainException as exc:
                self._console.error(str(exc))
                status = ExitStatus.FAILURE
        return status

    def _delete_one(self, raw_id: str, force: bool) -> None:
        form_id, form = load_form(self._backend, raw_id)
        if force or form.get("is_trash"):
            self._backend.delete_record(RecordKind.FORM, form_id)
            self._console.success(f"Deleted form {form_id}")
        else:
            self._backend.update_record(RecordKind.FORM, form_id, {"is_trash": True})
            self._console.success(f"Trashed form {form_id}")


class FormDuplicateHandler:

    def __init__(self, backend: FormsBackend, console: Console) -> None:
        self._backend = backend
        self._console = console

    def handle(self, request: CommandRequest) -> None:
        form_id, form = load_form(self._backend, request.arg("form-id"))
        forms, _ = self._backend.list_records(RecordKind.FORM, SearchCriteria())
        trashed, _ = self._backend.list_records(
            RecordKind.FORM, SearchCriteria(is_trash=True)
        )
        titles = {str(f.get("title", "")) for f in forms + trashed}

        duplicate = copy.deepcopy(form)
        for key in ("id", "date_created", "is_trash"):
            duplicate.pop(key, None)
        duplicate["title"] = copy_title(str(form.get("title", "")), titles)
        duplicate["entry_count"] = 0
        duplicate["view_count"] = 0

        new_id = self._backend.create_record(RecordKind.FORM, duplicate)
        logger.info("Duplicated form %s as %s", form_id, new_id)
        report_created(
            self._console,
            request.flag("porcelain"),
            new_id,
            f"Form duplicated successfully. New Form ID: {new_id}",
        )


def copy_title(title: str, taken: set[str]) -> str:
    """``Title (1)``, ``Title (2)``... the first one not in *taken*."""
    base = re.sub(r" \(\d+\)$", "", title)
    n = 1
    while f"{base} ({n})" in taken:
        n += 1
    return f"{base} ({n})"


class FormExportHandler:

    def __init__(
        self,
        backend: FormsBackend,
        console: Console,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._backend = backend
        self._console = console
        self._today = today

    def handle(self, request: CommandRequest) -> None:
        directory = writable_directory(request.option("dir"))
        if request.arg("form-id"):
            _, form = load_form(self._backend, request.arg("form-id"))
            forms = [form]
        else:
            active, _ = self._backend.list_records(RecordKind.FORM, SearchCriteria())
            trashed, _ = self._backend.list_records(
                RecordKind.FORM, SearchCriteria(is_trash=True)
            )
            forms = active + trashed

        path = directory / EXPORT_FILENAME.format(date=self._today().isoformat())
        path.write_text(to_json(forms, pretty=True), encoding="utf-8")
        logger.info("Exported %d form(s) to %s", len(forms), path)

        if request.flag("porcelain"):
            self._console.line(str(path))
        else:
            self._console.success(f"Forms exported successfully to {path}")


class FormImportHandler:

    def __init__(self, backend: FormsBackend, console: Console) -> None:
        self._backend = backend
        self._console = console

    def handle(self, request: CommandRequest) -> ExitStatus:
        forms = records_in(read_json_file(request.arg("file")))
        status = ExitStatus.OK
        count = 0
        for form in forms:
            form = dict(form)
            form.pop("id", None)
            ensure_confirmation(form)
            try:
                self._backend.create_record(RecordKind.FORM, form)
            except DomainException as exc:
                self._console.error(f"{form.get('title', '')}: {exc}")
                status = ExitStatus.FAILURE
                continue
            count += 1
        self._console.success(f"Forms imported: {count}")
        return status


class FormEditHandler:

    def __init__(self, backend: FormsBackend, console: Console) -> None:
        self._backend = backend
        self._console = console

    def handle(self, request: CommandRequest) -> None:
        form_id, form = load_form(self._backend, request.arg("form-id"))
        edited = edit_record(self._console, form, f"form-{form_id}.json")
        if edited is None:
            self._console.warning("No change made to form.")
            return
        replace_form(self._backend, form_id, edited)
        self._console.success("Form updated successfully")
