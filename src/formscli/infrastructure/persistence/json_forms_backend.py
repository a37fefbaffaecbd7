"""JSON-file-backed implementation of FormsBackend.

Layout of the data directory::

    meta.json      installed package versions and setup state
    forms.json     list of forms
    entries.json   list of entries
    users.json     list of {"id", "user_login"} used for display values
    outbox.json    log of sent notifications
    packages/      installed package files, one directory per slug
    cache/         disposable cached data
"""

from __future__ import annotations

import copy
import json
import logging
import platform
import shutil
from collections.abc import Callable, Iterable, Mapping, Sequence
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from formscli.domain.exceptions import (
    BackendUnavailableError,
    ConflictingIdError,
    EntityNotFoundError,
    ValidationError,
)
from formscli.domain.model.entry import STATUS_ACTIVE, STATUS_TRASH
from formscli.domain.model.form import DEFAULT_EVENT, is_active, notifications_of
from formscli.domain.model.query import Paging, SearchCriteria
from formscli.domain.model.record import Record, RecordKind, scalar_to_text
from formscli.domain.repository.forms_backend import CORE_SLUG, FormsBackend
from formscli.infrastructure.persistence.display_values import (
    DisplayFilter,
    DisplayValueResolver,
)

logger = logging.getLogger(__name__)

# (url, target directory) -> None
Downloader = Callable[[str, Path], None]

_FILES = {
    RecordKind.FORM: "forms.json",
    RecordKind.ENTRY: "entries.json",
}
_TIMESTAMP = "%Y-%m-%d %H:%M:%S"
_COMPUTED_FORM_KEYS = ("entry_count",)


def _now() -> str:
    return datetime.now(timezone.utc).strftime(_TIMESTAMP)


class JsonFormsBackend(FormsBackend):

    def __init__(
        self,
        data_dir: Path,
        downloader: Downloader | None = None,
        display_filters: Iterable[DisplayFilter] = (),
    ) -> None:
        self._data_dir = data_dir
        self._downloader = downloader
        self._display = DisplayValueResolver(self._user_logins, display_filters)
        self._ensure_files()

    # --- Platform ---------------------------------------------------------------

    def version(self) -> str | None:
        return self.package_version(CORE_SLUG)

    def package_version(self, slug: str) -> str | None:
        return self._load_meta().get("versions", {}).get(slug)

    def install_package(
        self, slug: str, version: str, package_url: str, force: bool = False
    ) -> None:
        meta = self._load_meta()
        installed = meta.get("versions", {}).get(slug)
        if installed is not None and not force:
            raise ValidationError(
                f"{slug} {installed} is already installed. Use --force to overwrite it."
            )
        if self._downloader is not None:
            self._downloader(package_url, self._packages_dir() / slug)
        meta.setdefault("versions", {})[slug] = version
        self._persist_meta(meta)
        logger.info("Package %s %s installed", slug, version)

    def setup(self, slug: str, force: bool = False) -> bool:
        meta = self._load_meta()
        version = meta.get("versions", {}).get(slug)
        if version is None:
            raise BackendUnavailableError(f"{slug} is not installed")
        setup_done = meta.setdefault("setup", {})
        if slug in setup_done and not force:
            raise ValidationError("Use the --force flag to re-run the database setup.")
        first_run = slug not in setup_done
        setup_done[slug] = version
        self._persist_meta(meta)
        logger.info("Setup of %s %s (%s)", slug, version, "first run" if first_run else "re-run")
        return first_run

    # --- Records ----------------------------------------------------------------

    def get_record(self, kind: RecordKind, record_id: int) -> dict[str, Any] | None:
        for raw in self._load(kind):
            if raw.get("id") == record_id:
                return self._decorate(kind, [raw])[0]
        return None

    def list_records(
        self,
        kind: RecordKind,
        criteria: SearchCriteria,
        paging: Paging | None = None,
    ) -> tuple[list[dict[str, Any]], int]:
        matches = self._search(kind, criteria)
        total = len(matches)
        if paging is not None:
            matches = matches[paging.offset:paging.offset + paging.page_size]
        return self._decorate(kind, matches), total

    def count_records(self, kind: RecordKind, criteria: SearchCriteria) -> int:
        return len(self._search(kind, criteria))

    def create_record(self, kind: RecordKind, payload: Mapping[str, Any]) -> int:
        records = self._load(kind)
        record = copy.deepcopy(dict(payload))

        if record.get("id") is not None:
            try:
                record_id = int(record["id"])
            except (TypeError, ValueError):
                raise ValidationError(f"Invalid {kind.value} ID: {record['id']}")
            if any(r.get("id") == record_id for r in records):
                raise ConflictingIdError(
                    f"A {kind.value} with ID {record_id} already exists"
                )
        else:
            record_id = max((r.get("id", 0) for r in records), default=0) + 1
        record["id"] = record_id

        if kind is RecordKind.FORM:
            self._prepare_form(record)
        else:
            self._prepare_entry(record)

        records.append(record)
        self._persist(kind, records)
        logger.debug("Created %s %s", kind.value, record_id)
        return record_id

    def update_record(
        self,
        kind: RecordKind,
        record_id: int,
        changes: Mapping[str, Any],
        replace: bool = False,
    ) -> None:
        records = self._load(kind)
        for i, raw in enumerate(records):
            if raw.get("id") != record_id:
                continue
            if replace:
                updated = copy.deepcopy(dict(changes))
                for key in ("date_created", "is_trash", "is_active", "view_count", "status"):
                    if key in raw and key not in updated:
                        updated[key] = raw[key]
            else:
                updated = {**raw, **copy.deepcopy(dict(changes))}
            updated["id"] = record_id
            if kind is RecordKind.FORM:
                self._validate_form(updated)
                for key in _COMPUTED_FORM_KEYS:
                    updated.pop(key, None)
            else:
                updated["date_updated"] = _now()
            records[i] = updated
            self._persist(kind, records)
            logger.debug("Updated %s %s (%s)", kind.value, record_id, sorted(changes))
            return
        raise EntityNotFoundError(f"{kind.value.capitalize()} not found: {record_id}")

    def delete_record(self, kind: RecordKind, record_id: int) -> None:
        records = self._load(kind)
        remaining = [r for r in records if r.get("id") != record_id]
        if len(remaining) == len(records):
            raise EntityNotFoundError(f"{kind.value.capitalize()} not found: {record_id}")
        self._persist(kind, remaining)
        if kind is RecordKind.FORM:
            entries = self._load(RecordKind.ENTRY)
            self._persist(
                RecordKind.ENTRY, [e for e in entries if e.get("form_id") != record_id]
            )
        logger.debug("Deleted %s %s", kind.value, record_id)

    def resolve_display_value(
        self, record: Record, key: str, form: Record | None = None
    ) -> str:
        return self._display.resolve(record, key, form)

    # --- Notifications ----------------------------------------------------------

    def notifications_for_event(
        self, form: Record, entry: Record, event: str
    ) -> list[dict[str, Any]]:
        return [
            n for n in notifications_of(form).values()
            if is_active(n) and n.get("event", DEFAULT_EVENT) == event
        ]

    def send_notifications(
        self, form: Record, entry: Record, notification_ids: Sequence[str]
    ) -> list[str]:
        notifications = {str(n.get("id")): n for n in notifications_of(form).values()}
        outbox = self._load_file("outbox.json")
        sent = []
        for notification_id in notification_ids:
            notification = notifications.get(str(notification_id))
            if notification is None:
                logger.warning("Notification %s not found on form %s", notification_id, form.get("id"))
                continue
            outbox.append(
                {
                    "notification_id": notification_id,
                    "form_id": form.get("id"),
                    "entry_id": entry.get("id"),
                    "to": notification.get("to", ""),
                    "subject": _merge_tags(str(notification.get("subject", "")), form),
                    "sent_at": _now(),
                }
            )
            sent.append(str(notification_id))
        self._persist_file("outbox.json", outbox)
        return sent

    # --- Maintenance ------------------------------------------------------------

    def clear_cache(self) -> bool:
        cache = self._data_dir / "cache"
        try:
            if cache.exists():
                shutil.rmtree(cache)
            cache.mkdir(parents=True)
        except OSError as exc:
            logger.warning("Could not clear %s: %s", cache, exc)
            return False
        return True

    def empty_trash(self, form_id: int | None = None) -> int:
        entries = self._load(RecordKind.ENTRY)

        def doomed(entry: dict[str, Any]) -> bool:
            if entry.get("status") != STATUS_TRASH:
                return False
            return form_id is None or entry.get("form_id") == form_id

        remaining = [e for e in entries if not doomed(e)]
        self._persist(RecordKind.ENTRY, remaining)
        return len(entries) - len(remaining)

    def system_report(self) -> str:
        forms = self._load(RecordKind.FORM)
        entries = self._load(RecordKind.ENTRY)
        trashed_forms = sum(1 for f in forms if f.get("is_trash"))
        trashed_entries = sum(1 for e in entries if e.get("status") == STATUS_TRASH)
        meta = self._load_meta()
        lines = [
            "Forms Backend",
            f"  Version: {self.version() or 'not installed'}",
            f"  Setup: {meta.get('setup', {}).get(CORE_SLUG, 'not run')}",
            f"  Data directory: {self._data_dir}",
            "",
            "Data",
            f"  Forms: {len(forms)} ({trashed_forms} in trash)",
            f"  Entries: {len(entries)} ({trashed_entries} in trash)",
            "",
            "Packages",
        ]
        lines += [f"  {slug}: {v}" for slug, v in sorted(meta.get("versions", {}).items())]
        lines += [
            "",
            "Environment",
            f"  Python: {platform.python_version()}",
            f"  Platform: {platform.platform()}",
        ]
        return "\n".join(lines)

    def base_path(self) -> Path:
        return self._packages_dir() / CORE_SLUG

    # --- Record helpers ---------------------------------------------------------

    def _search(self, kind: RecordKind, criteria: SearchCriteria) -> list[dict[str, Any]]:
        if kind is RecordKind.FORM:
            matches = [f for f in self._load(kind) if _form_matches(f, criteria)]
            sort_column = criteria.sort_column or "title"
        else:
            matches = [e for e in self._load(kind) if _entry_matches(e, criteria)]
            sort_column = criteria.sort_column or "id"
        matches.sort(
            key=lambda r: _sort_key(r.get(sort_column)),
            reverse=criteria.sort_dir.upper() == "DESC",
        )
        return matches

    def _decorate(self, kind: RecordKind, records: list[dict]) -> list[dict[str, Any]]:
        records = copy.deepcopy(records)
        if kind is RecordKind.FORM:
            counts: dict[int, int] = {}
            for entry in self._load(RecordKind.ENTRY):
                if entry.get("status", STATUS_ACTIVE) == STATUS_ACTIVE:
                    counts[entry.get("form_id")] = counts.get(entry.get("form_id"), 0) + 1
            for form in records:
                form["entry_count"] = counts.get(form["id"], 0)
        return records

    def _prepare_form(self, form: dict[str, Any]) -> None:
        self._validate_form(form)
        for key in _COMPUTED_FORM_KEYS:
            form.pop(key, None)
        form.setdefault("fields", [])
        form.setdefault("date_created", _now())
        form.setdefault("is_active", True)
        form.setdefault("is_trash", False)
        form.setdefault("view_count", 0)

    @staticmethod
    def _validate_form(form: Mapping[str, Any]) -> None:
        if not str(form.get("title") or "").strip():
            raise ValidationError("The form title is missing")
        if not isinstance(form.get("fields", []), list):
            raise ValidationError("The form fields must be a list")

    def _prepare_entry(self, entry: dict[str, Any]) -> None:
        form_id = entry.get("form_id")
        if form_id in (None, ""):
            raise ValidationError("The form ID must be specified")
        try:
            entry["form_id"] = int(form_id)
        except (TypeError, ValueError):
            raise ValidationError(f"Invalid form ID: {form_id}")
        if self.get_record(RecordKind.FORM, entry["form_id"]) is None:
            raise ValidationError(f"Form not found: {entry['form_id']}")
        entry.setdefault("date_created", _now())
        entry.setdefault("status", STATUS_ACTIVE)
        entry.setdefault("is_starred", 0)
        entry.setdefault("is_read", 0)
        entry.setdefault("currency", "USD")

    def _user_logins(self) -> dict[str, str]:
        return {
            scalar_to_text(u.get("id")): str(u.get("user_login", ""))
            for u in self._load_file("users.json")
        }

    # --- File helpers -----------------------------------------------------------

    def _packages_dir(self) -> Path:
        return self._data_dir / "packages"

    def _load(self, kind: RecordKind) -> list[dict]:
        return self._load_file(_FILES[kind])

    def _persist(self, kind: RecordKind, records: list[dict]) -> None:
        self._persist_file(_FILES[kind], records)

    def _load_meta(self) -> dict[str, Any]:
        return json.loads((self._data_dir / "meta.json").read_text(encoding="utf-8"))

    def _persist_meta(self, meta: dict[str, Any]) -> None:
        self._persist_file("meta.json", meta)

    def _load_file(self, name: str) -> Any:
        return json.loads((self._data_dir / name).read_text(encoding="utf-8"))

    def _persist_file(self, name: str, data: Any) -> None:
        (self._data_dir / name).write_text(
            json.dumps(data, indent=2) + "\n", encoding="utf-8"
        )

    def _ensure_files(self) -> None:
        self._data_dir.mkdir(parents=True, exist_ok=True)
        defaults = {
            "meta.json": "{}",
            "forms.json": "[]",
            "entries.json": "[]",
            "users.json": "[]",
            "outbox.json": "[]",
        }
        for name, empty in defaults.items():
            path = self._data_dir / name
            if not path.exists():
                path.write_text(empty, encoding="utf-8")


def _form_matches(form: Mapping[str, Any], criteria: SearchCriteria) -> bool:
    if bool(form.get("is_trash")) != criteria.is_trash:
        return False
    if criteria.is_active is not None and bool(form.get("is_active", True)) != criteria.is_active:
        return False
    return True


def _entry_matches(entry: Mapping[str, Any], criteria: SearchCriteria) -> bool:
    if criteria.form_id is not None and entry.get("form_id") != criteria.form_id:
        return False
    if criteria.status is not None and entry.get("status", STATUS_ACTIVE) != criteria.status:
        return False
    day = str(entry.get("date_created", ""))[:10]
    if criteria.start_date is not None and day < criteria.start_date.isoformat():
        return False
    if criteria.end_date is not None and day > criteria.end_date.isoformat():
        return False
    return True


def _sort_key(value: Any) -> tuple[int, Any]:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return (0, value)
    return (1, scalar_to_text(value).lower())


def _merge_tags(text: str, form: Record) -> str:
    return text.replace("{form_title}", str(form.get("title", "")))
