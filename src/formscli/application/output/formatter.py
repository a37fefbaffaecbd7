"""Output formatter: renders records as table, CSV, JSON, an ID list or a count.

Each call picks exactly one render path.  Records are never modified.
"""

from __future__ import annotations

import csv
import io
import json
from collections.abc import Iterable, Sequence
from enum import Enum
from typing import Any

from formscli.application.output.columns import ColumnSpec
from formscli.application.output.projector import (
    DisplayResolver,
    ProjectedRow,
    project,
)
from formscli.domain.exceptions import UnsupportedFormatError
from formscli.domain.model.record import Record, record_id


class OutputFormat(Enum):
    TABLE = "table"
    CSV = "csv"
    JSON = "json"
    IDS = "ids"
    COUNT = "count"


ALL_FORMATS = tuple(OutputFormat)


def parse_format(
    value: str | OutputFormat,
    accepted: Iterable[OutputFormat] = ALL_FORMATS,
) -> OutputFormat:
    """Map a ``--format`` value to an OutputFormat the caller accepts."""
    accepted = tuple(accepted)
    if isinstance(value, OutputFormat):
        fmt = value
    else:
        try:
            fmt = OutputFormat(str(value).strip().lower())
        except ValueError:
            raise UnsupportedFormatError(str(value), [f.value for f in accepted])
    if fmt not in accepted:
        raise UnsupportedFormatError(fmt.value, [f.value for f in accepted])
    return fmt


def format_items(
    fmt: OutputFormat,
    records: Sequence[Record],
    spec: ColumnSpec,
    *,
    resolver: DisplayResolver | None = None,
    raw: bool = False,
    id_key: str = "id",
) -> str | int:
    if fmt is OutputFormat.COUNT:
        return len(records)
    if fmt is OutputFormat.IDS:
        return " ".join(record_id(r, id_key) for r in records)
    if fmt is OutputFormat.JSON and raw:
        return to_json(list(records))

    rows = project(records, spec, resolver)
    return render_rows(fmt, rows, spec.labels)


def render_rows(
    fmt: OutputFormat, rows: Sequence[ProjectedRow], labels: Sequence[str]
) -> str:
    """Render already projected rows (table, csv or json only)."""
    if fmt is OutputFormat.TABLE:
        return render_table(labels, [r.values for r in rows])
    if fmt is OutputFormat.CSV:
        return render_csv(labels, [r.values for r in rows])
    if fmt is OutputFormat.JSON:
        return to_json([r.as_dict() for r in rows])
    raise UnsupportedFormatError(
        fmt.value, [OutputFormat.TABLE.value, OutputFormat.CSV.value, OutputFormat.JSON.value]
    )


def render_table(labels: Sequence[str], rows: Sequence[Sequence[str]]) -> str:
    if not labels:
        return ""
    cleaned = [[_single_line(v) for v in row] for row in rows]
    widths = [len(label) for label in labels]
    for row in cleaned:
        for i, value in enumerate(row):
            widths[i] = max(widths[i], len(value))

    def line(values: Sequence[str]) -> str:
        return "  ".join(v.ljust(w) for v, w in zip(values, widths)).rstrip()

    out = [line(labels), "-" * (sum(widths) + 2 * (len(widths) - 1))]
    out.extend(line(row) for row in cleaned)
    return "\n".join(out)


def render_csv(labels: Sequence[str], rows: Sequence[Sequence[str]]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(labels)
    writer.writerows(rows)
    return buffer.getvalue().rstrip("\n")


def to_json(data: Any, pretty: bool = False) -> str:
    return json.dumps(data, indent=2 if pretty else None, default=str)


def _single_line(value: str) -> str:
    return value.replace("\r\n", " ").replace("\n", " ")
