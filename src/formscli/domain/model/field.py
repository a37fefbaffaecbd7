"""Form fields and the closed set of field kinds.

Fields live inside a form record under ``form["fields"]``.  Each field is a
mapping with at least ``id``, ``type`` and ``label``; multi-input fields
also carry ``inputs`` (a list of ``{"id": "5.3", "label": ...}``).
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any

from formscli.domain.exceptions import InvalidArgumentError
from formscli.domain.model.record import Record

UNTITLED_LABEL = "Untitled"


class FieldKind(Enum):
    TEXT = "text"
    TEXTAREA = "textarea"
    EMAIL = "email"
    NUMBER = "number"
    PHONE = "phone"
    WEBSITE = "website"
    DATE = "date"
    TIME = "time"
    NAME = "name"
    ADDRESS = "address"
    CHECKBOX = "checkbox"
    RADIO = "radio"
    SELECT = "select"
    MULTISELECT = "multiselect"
    LIST = "list"
    FILEUPLOAD = "fileupload"
    POST_CATEGORY = "post_category"
    PRODUCT = "product"
    TOTAL = "total"
    HIDDEN = "hidden"
    HTML = "html"
    SECTION = "section"
    PAGE = "page"
    CAPTCHA = "captcha"
    CONSENT = "consent"
    UNKNOWN = "unknown"

    @staticmethod
    def of(type_name: Any) -> FieldKind:
        try:
            return FieldKind(str(type_name))
        except ValueError:
            return FieldKind.UNKNOWN

    @property
    def is_display_only(self) -> bool:
        return self in _DISPLAY_ONLY

    @property
    def input_separator(self) -> str:
        """How the inputs of a multi-input field are joined for display."""
        if self in (FieldKind.ADDRESS, FieldKind.CHECKBOX):
            return ", "
        return " "


_DISPLAY_ONLY = frozenset(
    {FieldKind.HTML, FieldKind.SECTION, FieldKind.PAGE, FieldKind.CAPTCHA}
)


def field_kind(field: Mapping[str, Any]) -> FieldKind:
    # inputType overrides type for product/post fields rendered as another kind
    return FieldKind.of(field.get("inputType") or field.get("type"))


def form_fields(form: Record) -> list[dict[str, Any]]:
    return list(form.get("fields") or [])


def find_field(form: Record, field_id: str | int) -> dict[str, Any] | None:
    """Return the field whose ID matches *field_id* (input IDs resolve to their field)."""
    wanted = str(field_id).partition(".")[0]
    for field in form_fields(form):
        if str(field.get("id")) == wanted:
            return field
    return None


def field_label(field: Mapping[str, Any], input_id: str | None = None) -> str:
    """Admin label of a field, or of one of its inputs."""
    label = field.get("adminLabel") or field.get("label") or ""
    if input_id is not None:
        for field_input in field.get("inputs") or []:
            if str(field_input.get("id")) == input_id:
                return f"{label} ({field_input.get('label', '')})".strip()
    return str(label)


def parse_field_id(raw: str | int) -> int:
    """Validate a positional field ID."""
    try:
        field_id = int(str(raw))
    except ValueError:
        raise InvalidArgumentError(f"Field ID not valid: {raw}")
    if field_id < 1:
        raise InvalidArgumentError(f"Field ID not valid: {raw}")
    return field_id


def next_field_id(form: Record) -> int:
    ids = [_as_int(f.get("id")) for f in form_fields(form)]
    return max(ids, default=0) + 1


def renumber_inputs(field: dict[str, Any], new_id: int) -> None:
    """Move the inputs of a (copied) field under *new_id*."""
    old_prefix = f"{field.get('id')}."
    inputs = field.get("inputs")
    if isinstance(inputs, list):
        field["inputs"] = [
            {
                **field_input,
                "id": str(field_input.get("id", "")).replace(
                    old_prefix, f"{new_id}.", 1
                ),
            }
            for field_input in inputs
        ]
    field["id"] = new_id


def _as_int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0
