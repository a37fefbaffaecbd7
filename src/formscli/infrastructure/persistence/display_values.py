"""Display values of entry fields.

One resolver covers every field kind: entry properties first (dates,
payment amount, creating user), then the field's kind.  Registered display
filters run last, in order, on the resulting string.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Iterable, Mapping
from datetime import datetime
from typing import Any

from formscli.domain.exceptions import ValidationError
from formscli.domain.model.field import FieldKind, field_kind, find_field
from formscli.domain.model.record import (
    ABSENT,
    Record,
    SubFieldMap,
    lookup,
    scalar_to_text,
    value_to_text,
)
from formscli.domain.model.value_objects import Money

# (value, entry, key) -> value
DisplayFilter = Callable[[str, Record, str], str]

ENTRY_DATE_FORMAT = "%Y/%m/%d at %I:%M %p"
_STORED_DATETIME = "%Y-%m-%d %H:%M:%S"

_FIELD_DATE_FORMATS = {
    "mdy": "%m/%d/%Y",
    "dmy": "%d/%m/%Y",
    "dmy_dash": "%d-%m-%Y",
    "dmy_dot": "%d.%m.%Y",
    "ymd_slash": "%Y/%m/%d",
    "ymd_dash": "%Y-%m-%d",
    "ymd_dot": "%Y.%m.%d",
}


class DisplayValueResolver:

    def __init__(
        self,
        users: Callable[[], Mapping[str, str]],
        filters: Iterable[DisplayFilter] = (),
    ) -> None:
        self._users = users
        self._filters = list(filters)

    def add_filter(self, display_filter: DisplayFilter) -> None:
        self._filters.append(display_filter)

    def resolve(self, entry: Record, key: str, form: Record | None = None) -> str:
        value = self._resolve(entry, str(key), form)
        for display_filter in self._filters:
            value = display_filter(value, entry, key)
        return value

    def _resolve(self, entry: Record, key: str, form: Record | None) -> str:
        if key in ("date_created", "payment_date"):
            return format_entry_date(entry.get(key))
        if key == "payment_amount":
            return format_money(entry.get(key), entry.get("currency"))
        if key == "created_by":
            user_id = scalar_to_text(entry.get(key))
            return self._users().get(user_id, user_id)

        field = find_field(form, key) if form is not None else None
        if field is None:
            return value_to_text(lookup(entry, key))
        return field_display_value(field_kind(field), field, entry, key)


def field_display_value(
    kind: FieldKind, field: Mapping[str, Any], entry: Record, key: str
) -> str:
    value = lookup(entry, key)
    if value is ABSENT:
        return ""

    if kind is FieldKind.POST_CATEGORY:
        return ", ".join(
            item.rsplit(":", 1)[0] for item in _items(value) if item
        )
    if kind is FieldKind.DATE and not isinstance(value, SubFieldMap):
        return format_field_date(scalar_to_text(value), field.get("dateFormat"))
    if kind is FieldKind.TOTAL:
        return format_money(value, entry.get("currency"))
    if kind is FieldKind.PRODUCT:
        return _product_value(value, entry.get("currency"))
    if kind is FieldKind.CONSENT and isinstance(value, SubFieldMap):
        return "Checked" if value.get("1") else "Not Checked"
    if kind in (FieldKind.MULTISELECT, FieldKind.LIST, FieldKind.FILEUPLOAD):
        return ", ".join(_items(value))
    if isinstance(value, SubFieldMap):
        return value.join(kind.input_separator)
    return scalar_to_text(value)


def format_entry_date(value: Any) -> str:
    text = scalar_to_text(value)
    try:
        return datetime.strptime(text, _STORED_DATETIME).strftime(ENTRY_DATE_FORMAT)
    except ValueError:
        return text


def format_field_date(text: str, date_format: str | None) -> str:
    pattern = _FIELD_DATE_FORMATS.get(date_format or "mdy", _FIELD_DATE_FORMATS["mdy"])
    try:
        return datetime.strptime(text, "%Y-%m-%d").strftime(pattern)
    except ValueError:
        return text


def format_money(value: Any, currency: Any) -> str:
    text = value_to_text(value)
    if not text:
        return ""
    try:
        return str(Money.of(text, scalar_to_text(currency) or None))
    except ValidationError:
        return text


def _product_value(value: Any, currency: Any) -> str:
    if isinstance(value, SubFieldMap):
        name = scalar_to_text(value.get("1"))
        price = format_money(value.get("2"), currency)
        quantity = scalar_to_text(value.get("3"))
        return f"{name}, Qty: {quantity}, Price: {price}" if quantity else f"{name}, {price}"
    name, sep, price = scalar_to_text(value).partition("|")
    return f"{name}, {format_money(price, currency)}" if sep else name


def _items(value: Any) -> list[str]:
    """List values, stored as JSON arrays, comma-separated text or inputs."""
    if isinstance(value, SubFieldMap):
        return [scalar_to_text(v) for v in value.values() if scalar_to_text(v)]
    if isinstance(value, list):
        return [scalar_to_text(v) for v in value]
    text = scalar_to_text(value)
    if text.startswith("["):
        try:
            decoded = json.loads(text)
        except ValueError:
            decoded = None
        if isinstance(decoded, list):
            return [scalar_to_text(v) for v in decoded]
    return [part.strip() for part in text.split(",") if part.strip()]
