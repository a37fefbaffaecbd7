"""Application services: form field commands.

Fields are stored inside their form, so every change rewrites the form's
``fields`` list through ``update_record``.
"""

from __future__ import annotations

import copy
import logging
from typing import Any

from formscli.application.console import Console
from formscli.application.dispatcher import CommandRequest
from formscli.application.json_payload import decode_json_option
from formscli.application.output.columns import ColumnSpec
from formscli.application.output.formatter import format_items, to_json
from formscli.application.support import edit_record, emit, load_form, report_created
from formscli.domain.exceptions import (
    ConflictingIdError,
    EntityNotFoundError,
    InvalidArgumentError,
    MissingArgumentError,
    ValidationError,
)
from formscli.domain.model.field import (
    UNTITLED_LABEL,
    find_field,
    form_fields,
    next_field_id,
    parse_field_id,
    renumber_inputs,
)
from formscli.domain.model.record import RecordKind, scalar_to_text
from formscli.domain.repository.forms_backend import FormsBackend

logger = logging.getLogger(__name__)

FIELD_COLUMNS = ColumnSpec.of("id", "type", "label")


class _FieldHandler:

    def __init__(self, backend: FormsBackend, console: Console) -> None:
        self._backend = backend
        self._console = console

    def _load(self, request: CommandRequest) -> tuple[int, dict[str, Any], dict[str, Any]]:
        form_id, form = load_form(self._backend, request.arg("form-id"))
        field_id = parse_field_id(request.arg("field-id"))
        field = find_field(form, field_id)
        if field is None:
            raise EntityNotFoundError(f"Field not found: {field_id}")
        return form_id, form, field

    def _save_fields(self, form_id: int, fields: list[dict[str, Any]]) -> None:
        self._backend.update_record(RecordKind.FORM, form_id, {"fields": fields})
        logger.info("Saved %d field(s) of form %s", len(fields), form_id)


class FieldListHandler(_FieldHandler):

    def handle(self, request: CommandRequest) -> None:
        _, form = load_form(self._backend, request.arg("form-id"))
        emit(self._console, format_items(request.format, form_fields(form), FIELD_COLUMNS))


class FieldGetHandler(_FieldHandler):

    def handle(self, request: CommandRequest) -> None:
        _, _, field = self._load(request)
        self._console.line(to_json(field))


class FieldCreateHandler(_FieldHandler):

    @staticmethod
    def precheck(request: CommandRequest) -> None:
        if not request.arg("type") and not request.option("field-json"):
            raise MissingArgumentError("type")

    def handle(self, request: CommandRequest) -> None:
        form_id, form = load_form(self._backend, request.arg("form-id"))

        field: dict[str, Any] = {}
        if request.option("field-json"):
            field = decode_json_option(request.option("field-json"), "field-json")
        if request.arg("type"):
            field["type"] = request.arg("type")
        if request.arg("label"):
            field["label"] = request.arg("label")
        if not field.get("type"):
            raise ValidationError("Field type not specified")
        field.setdefault("label", UNTITLED_LABEL)

        if "id" in field:
            field_id = parse_field_id(field["id"])
            if find_field(form, field_id) is not None:
                raise ConflictingIdError(f"Field ID {field_id} already exists")
        else:
            field_id = next_field_id(form)
        field["id"] = field_id
        field["formId"] = form_id

        self._save_fields(form_id, form_fields(form) + [field])
        report_created(
            self._console, request.flag("porcelain"), field_id, f"Field ID: {field_id}"
        )


class FieldUpdateHandler(_FieldHandler):
    """Replaces a field from ``--field-json`` or sets ``--<property>=<value>`` pairs.

    Properties whose value would not change are reported and skipped; if
    nothing changes the form is not written.
    """

    @staticmethod
    def precheck(request: CommandRequest) -> None:
        if not request.option("field-json") and not request.extras:
            raise InvalidArgumentError(
                "Specify --field-json or one or more --<property>=<value> options"
            )

    def handle(self, request: CommandRequest) -> None:
        form_id, form, field = self._load(request)
        field_id = field["id"]

        if request.option("field-json"):
            updated = decode_json_option(request.option("field-json"), "field-json")
            if not updated.get("type"):
                raise ValidationError("Field type not specified in the field json")
            updated.setdefault("label", UNTITLED_LABEL)
        else:
            updated = dict(field)
            changed = False
            for prop, value in request.extras.items():
                if prop in ("id", "form_id", "formId"):
                    raise ValidationError(f"The field property '{prop}' cannot be changed")
                if prop in field and scalar_to_text(field[prop]) == value:
                    self._console.line(
                        f"The value of property {prop} is already {value}. Skipping."
                    )
                    continue
                updated[prop] = value
                changed = True
            if not changed:
                self._console.success(f"Field ID: {field_id} unchanged")
                return
        updated["id"] = field_id
        if updated == field:
            self._console.success(f"Field ID: {field_id} unchanged")
            return

        fields = [
            updated if str(f.get("id")) == str(field_id) else f
            for f in form_fields(form)
        ]
        self._save_fields(form_id, fields)
        self._console.success(f"Field ID: {field_id} updated")


class FieldDeleteHandler(_FieldHandler):

    def handle(self, request: CommandRequest) -> None:
        form_id, form, field = self._load(request)
        fields = [f for f in form_fields(form) if str(f.get("id")) != str(field["id"])]
        self._save_fields(form_id, fields)
        self._console.success(f"Field ID: {field['id']} deleted")


class FieldDuplicateHandler(_FieldHandler):
    """Inserts a copy right after the original, with a new ID."""

    def handle(self, request: CommandRequest) -> None:
        form_id, form, field = self._load(request)
        new_id = next_field_id(form)
        duplicate = copy.deepcopy(field)
        renumber_inputs(duplicate, new_id)

        fields = form_fields(form)
        position = next(
            i for i, f in enumerate(fields) if str(f.get("id")) == str(field["id"])
        )
        fields.insert(position + 1, duplicate)
        self._save_fields(form_id, fields)
        report_created(
            self._console,
            request.flag("porcelain"),
            new_id,
            f"Field ID: {field['id']} duplicated as {new_id}",
        )


class FieldEditHandler(_FieldHandler):

    def handle(self, request: CommandRequest) -> None:
        form_id, form, field = self._load(request)
        edited = edit_record(self._console, field, f"field-{form_id}-{field['id']}.json")
        if edited is None:
            self._console.warning("No change made to field.")
            return
        if not edited.get("type"):
            raise ValidationError("Field type not specified in the field json")
        edited["id"] = field["id"]
        fields = [
            edited if str(f.get("id")) == str(field["id"]) else f
            for f in form_fields(form)
        ]
        self._save_fields(form_id, fields)
        self._console.success(f"Field ID: {field['id']} updated")
