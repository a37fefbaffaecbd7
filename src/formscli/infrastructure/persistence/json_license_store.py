"""JSON-file-backed implementation of LicenseStore."""

from __future__ import annotations

import json
from pathlib import Path

from formscli.domain.repository.license_store import LicenseStore


class JsonLicenseStore(LicenseStore):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._ensure_file()

    def get(self) -> str | None:
        return self._load_raw().get("key") or None

    def set(self, key: str) -> None:
        self._persist_raw({"key": key})

    def clear(self) -> None:
        self._persist_raw({})

    # --- File helpers ---------------------------------------------------------

    def _load_raw(self) -> dict:
        return json.loads(self._file_path.read_text(encoding="utf-8"))

    def _persist_raw(self, data: dict) -> None:
        self._file_path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("{}", encoding="utf-8")
