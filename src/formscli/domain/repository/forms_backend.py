"""Abstract gateway to the forms backend.

Defined in the domain layer so commands never depend on a concrete store.
The JSON-file implementation lives in the infrastructure layer; tests use
an in-memory fake.

Forms and entries are top-level records.  Fields and notifications are
sub-records of a form and are written back through ``update_record``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from formscli.domain.model.query import Paging, SearchCriteria
from formscli.domain.model.record import Record, RecordKind

CORE_SLUG = "forms"


class FormsBackend(ABC):

    # --- Platform ---------------------------------------------------------------

    @abstractmethod
    def version(self) -> str | None:
        """Installed version of the forms backend, or None if not installed."""

    @abstractmethod
    def package_version(self, slug: str) -> str | None:
        """Installed version of the backend or one of its add-ons."""

    @abstractmethod
    def install_package(
        self, slug: str, version: str, package_url: str, force: bool = False
    ) -> None:
        """Install (or overwrite, with *force*) a package at *version*."""

    @abstractmethod
    def setup(self, slug: str, force: bool = False) -> bool:
        """Run the package setup.  Returns True on first run, False on a re-run.

        Raises ValidationError if the setup already ran and *force* is False.
        """

    # --- Records ----------------------------------------------------------------

    @abstractmethod
    def get_record(self, kind: RecordKind, record_id: int) -> dict[str, Any] | None:
        """Return a record by its ID, or None if not found."""

    @abstractmethod
    def list_records(
        self,
        kind: RecordKind,
        criteria: SearchCriteria,
        paging: Paging | None = None,
    ) -> tuple[list[dict[str, Any]], int]:
        """Return one page of matching records and the total match count."""

    @abstractmethod
    def count_records(self, kind: RecordKind, criteria: SearchCriteria) -> int:
        """Return the number of matching records."""

    @abstractmethod
    def create_record(self, kind: RecordKind, payload: Mapping[str, Any]) -> int:
        """Persist a new record and return its assigned ID."""

    @abstractmethod
    def update_record(
        self,
        kind: RecordKind,
        record_id: int,
        changes: Mapping[str, Any],
        replace: bool = False,
    ) -> None:
        """Merge *changes* into a record, or replace it entirely."""

    @abstractmethod
    def delete_record(self, kind: RecordKind, record_id: int) -> None:
        """Permanently delete a record."""

    @abstractmethod
    def resolve_display_value(
        self, record: Record, key: str, form: Record | None = None
    ) -> str:
        """Display string for *key* of an entry (dates, money, labels, users)."""

    # --- Notifications ----------------------------------------------------------

    @abstractmethod
    def notifications_for_event(
        self, form: Record, entry: Record, event: str
    ) -> list[dict[str, Any]]:
        """Active notifications of *form* that *event* would send for *entry*."""

    @abstractmethod
    def send_notifications(
        self, form: Record, entry: Record, notification_ids: Sequence[str]
    ) -> list[str]:
        """Send the given notifications and return the IDs actually sent."""

    # --- Maintenance ------------------------------------------------------------

    @abstractmethod
    def clear_cache(self) -> bool:
        """Flush cached data.  Returns False if the cache could not be cleared."""

    @abstractmethod
    def empty_trash(self, form_id: int | None = None) -> int:
        """Delete trashed entries of one form (or all forms); return the count."""

    @abstractmethod
    def system_report(self) -> str:
        """Plain-text system status report."""

    @abstractmethod
    def base_path(self) -> Path:
        """Directory holding the backend's installed files."""
