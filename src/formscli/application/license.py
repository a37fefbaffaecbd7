"""Application services: license key commands."""

from __future__ import annotations

import hashlib
import logging

from formscli.application.console import Console
from formscli.application.dispatcher import CommandRequest
from formscli.domain.exceptions import InvalidArgumentError
from formscli.domain.repository.license_store import LicenseStore

logger = logging.getLogger(__name__)


def hash_key(key: str) -> str:
    """The form in which a license key is stored (md5 of the trimmed key)."""
    return hashlib.md5(key.strip().encode("utf-8")).hexdigest()


def save_key(store: LicenseStore, key: str) -> None:
    """Store *key* unless the same key is already stored; an empty key clears it."""
    if not key.strip():
        store.clear()
        return
    hashed = hash_key(key)
    if store.get() != hashed:
        store.set(hashed)
        logger.info("License key changed")


class LicenseUpdateHandler:

    def __init__(self, store: LicenseStore, console: Console) -> None:
        self._store = store
        self._console = console

    @staticmethod
    def precheck(request: CommandRequest) -> None:
        if not str(request.arg("key")).strip():
            raise InvalidArgumentError("The license key must not be empty")

    def handle(self, request: CommandRequest) -> None:
        save_key(self._store, request.arg("key"))
        self._console.success("License key updated")


class LicenseDeleteHandler:

    def __init__(self, store: LicenseStore, console: Console) -> None:
        self._store = store
        self._console = console

    def handle(self, request: CommandRequest) -> None:
        self._store.clear()
        self._console.success("License key deleted")
