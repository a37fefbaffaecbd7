"""Records: the forms, entries, fields and notifications the backend returns.

A record is a plain ordered mapping.  Entries store multi-input fields
(name, address, checkbox) under dotted keys such as ``5.3`` and ``5.6``.
Rather than splitting strings wherever a value is needed, a key is parsed
once into a ``FieldKey`` and looked up with ``lookup()``, which returns one
of three variants:

- a scalar (str, int, float, bool or a nested structure),
- a ``SubFieldMap`` holding the inputs of a multi-input field,
- ``ABSENT`` when the record has nothing under the key.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

Record = Mapping[str, Any]


class RecordKind(Enum):
    FORM = "form"
    ENTRY = "entry"


@dataclass(frozen=True)
class FieldKey:
    """A field ID with an optional input index (``5`` or ``5.3``)."""

    field_id: str
    input_index: str | None = None

    @staticmethod
    def parse(key: str | int | float) -> FieldKey:
        text = str(key)
        field_id, sep, index = text.partition(".")
        return FieldKey(field_id=field_id, input_index=index if sep else None)

    @property
    def is_input(self) -> bool:
        return self.input_index is not None

    def __str__(self) -> str:
        if self.input_index is None:
            return self.field_id
        return f"{self.field_id}.{self.input_index}"


class _Absent:
    """Singleton marker for a key the record does not contain."""

    _instance: _Absent | None = None

    def __new__(cls) -> _Absent:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "ABSENT"


ABSENT = _Absent()


@dataclass(frozen=True)
class SubFieldMap:
    """Ordered input index -> scalar values of one multi-input field."""

    items: tuple[tuple[str, Any], ...]

    def get(self, index: str, default: Any = None) -> Any:
        for key, value in self.items:
            if key == index:
                return value
        return default

    def values(self) -> list[Any]:
        return [value for _, value in self.items]

    def join(self, separator: str = " ") -> str:
        return separator.join(
            scalar_to_text(v) for v in self.values() if not _is_blank(v)
        )


RecordValue = Union[Any, SubFieldMap, _Absent]


def lookup(record: Record, key: str | FieldKey) -> RecordValue:
    """Resolve *key* in *record* to a scalar, a SubFieldMap or ABSENT."""
    field_key = key if isinstance(key, FieldKey) else FieldKey.parse(key)
    text = str(field_key)
    if text in record:
        return record[text]
    if field_key.is_input:
        return ABSENT

    prefix = f"{field_key.field_id}."
    inputs = [
        (k[len(prefix):], v)
        for k, v in record.items()
        if isinstance(k, str) and k.startswith(prefix)
    ]
    if not inputs:
        return ABSENT
    inputs.sort(key=lambda pair: _index_sort_key(pair[0]))
    return SubFieldMap(items=tuple(inputs))


def value_to_text(value: RecordValue) -> str:
    """Plain (raw) display string for any lookup result."""
    if value is ABSENT:
        return ""
    if isinstance(value, SubFieldMap):
        return value.join(" ")
    return scalar_to_text(value)


def scalar_to_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    return str(value)


def record_id(record: Record, id_key: str = "id") -> str:
    return scalar_to_text(record.get(id_key))


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def _index_sort_key(index: str) -> tuple[int, str]:
    try:
        return (int(index), index)
    except ValueError:
        return (10**9, index)
