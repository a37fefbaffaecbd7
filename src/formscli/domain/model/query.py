"""Search criteria and paging passed to the backend when listing records."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from formscli.domain.exceptions import InvalidArgumentError

DEFAULT_PAGE_SIZE = 20


@dataclass(frozen=True)
class SearchCriteria:
    """Filters understood by ``FormsBackend.list_records``.

    Entry filters: ``form_id``, ``status``, ``start_date``/``end_date``
    (inclusive, compared against ``date_created``).
    Form filters: ``is_active`` (None = any), ``is_trash``.
    """

    form_id: int | None = None
    status: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    is_active: bool | None = None
    is_trash: bool = False
    sort_column: str | None = None
    sort_dir: str = "ASC"


@dataclass(frozen=True)
class Paging:
    offset: int = 0
    page_size: int = DEFAULT_PAGE_SIZE

    def __post_init__(self) -> None:
        if self.offset < 0:
            raise InvalidArgumentError("Offset must not be negative")
        if self.page_size < 1:
            raise InvalidArgumentError("Page size must be positive")


def parse_date(raw: str | None, option: str) -> date | None:
    """Parse a ``yyyy-mm-dd`` option value."""
    if raw is None or raw == "":
        return None
    try:
        return date.fromisoformat(raw)
    except ValueError:
        raise InvalidArgumentError(
            f"Invalid {option} '{raw}'. Expected yyyy-mm-dd."
        )
