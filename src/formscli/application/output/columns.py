"""Column specifications: which keys of a record to show, and how."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import Enum

from formscli.domain.exceptions import InvalidSpecError


class ValueMode(Enum):
    RAW = "raw"
    DECORATED = "decorated"


@dataclass(frozen=True)
class Column:
    key: str
    label: str
    mode: ValueMode = ValueMode.RAW


class ColumnSpec:
    """Ordered, key-unique sequence of columns."""

    def __init__(self, columns: Iterable[Column]) -> None:
        self._columns = tuple(columns)
        seen: set[str] = set()
        for column in self._columns:
            if column.key in seen:
                raise InvalidSpecError(f"Duplicate column key: '{column.key}'")
            seen.add(column.key)

    @staticmethod
    def of(*keys: str, mode: ValueMode = ValueMode.RAW) -> ColumnSpec:
        """Spec whose labels are the keys themselves."""
        return ColumnSpec(Column(key, key, mode) for key in keys)

    @property
    def keys(self) -> list[str]:
        return [c.key for c in self._columns]

    @property
    def labels(self) -> list[str]:
        return [c.label for c in self._columns]

    def __iter__(self) -> Iterator[Column]:
        return iter(self._columns)

    def __len__(self) -> int:
        return len(self._columns)

    def __repr__(self) -> str:
        return f"ColumnSpec({list(self._columns)!r})"
