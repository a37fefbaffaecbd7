"""Record projector: turns records into display rows.

Every row projected from one ColumnSpec has the same cells in the same
order.  Cells are keyed by the column key, so two columns sharing a label
(typed fields with the same admin label, for instance) both keep their
value and are displayed under the shared label.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass

from formscli.application.output.columns import ColumnSpec, ValueMode
from formscli.domain.model.record import Record, lookup, value_to_text

# (record, key) -> display string.  Supplied by the backend.
DisplayResolver = Callable[[Record, str], str]


@dataclass(frozen=True)
class Cell:
    key: str
    label: str
    value: str


@dataclass(frozen=True)
class ProjectedRow:
    cells: tuple[Cell, ...]

    @property
    def labels(self) -> list[str]:
        return [c.label for c in self.cells]

    @property
    def values(self) -> list[str]:
        return [c.value for c in self.cells]

    def value_of(self, key: str) -> str:
        for cell in self.cells:
            if cell.key == key:
                return cell.value
        raise KeyError(key)

    def as_dict(self) -> dict[str, str]:
        """Label -> value.  A label seen twice is suffixed with its key."""
        result: dict[str, str] = {}
        for cell in self.cells:
            label = cell.label
            if label in result:
                label = f"{label} [{cell.key}]"
            result[label] = cell.value
        return result


def project(
    records: Iterable[Record],
    spec: ColumnSpec,
    resolver: DisplayResolver | None = None,
) -> list[ProjectedRow]:
    return [project_one(record, spec, resolver) for record in records]


def project_one(
    record: Record,
    spec: ColumnSpec,
    resolver: DisplayResolver | None = None,
) -> ProjectedRow:
    cells = []
    for column in spec:
        if column.mode is ValueMode.DECORATED and resolver is not None:
            value = resolver(record, column.key)
        else:
            value = value_to_text(lookup(record, column.key))
        cells.append(Cell(key=column.key, label=column.label, value=value))
    return ProjectedRow(cells=tuple(cells))


def rows_from_pairs(pairs: Sequence[tuple[str, str, str]]) -> list[ProjectedRow]:
    """Rows for the ID / Field / Value layout used by ``entry get``."""
    return [
        ProjectedRow(
            cells=(
                Cell("ID", "ID", row_id),
                Cell("Field", "Field", label),
                Cell("Value", "Value", value),
            )
        )
        for row_id, label, value in pairs
    ]
