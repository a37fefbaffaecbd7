"""Application services: maintenance tools."""

from __future__ import annotations

import hashlib
import logging
from pathlib import Path

from formscli.application.console import Console
from formscli.application.dispatcher import CommandRequest, ExitStatus
from formscli.domain.exceptions import RemoteServiceError
from formscli.domain.model.entry import parse_record_id
from formscli.domain.repository.forms_backend import FormsBackend
from formscli.domain.repository.update_server import UpdateServer

logger = logging.getLogger(__name__)


class ClearTransientsHandler:

    def __init__(self, backend: FormsBackend, console: Console) -> None:
        self._backend = backend
        self._console = console

    def handle(self, request: CommandRequest) -> ExitStatus:
        if self._backend.clear_cache():
            self._console.success("Transients cleared successfully.")
            return ExitStatus.OK
        self._console.error("There was a problem clearing the transients.")
        return ExitStatus.FAILURE


class EmptyTrashHandler:

    def __init__(self, backend: FormsBackend, console: Console) -> None:
        self._backend = backend
        self._console = console

    def handle(self, request: CommandRequest) -> None:
        raw_id = request.arg("form-id")
        if raw_id:
            form_id = parse_record_id(raw_id, "form")
            deleted = self._backend.empty_trash(form_id)
            self._console.success(
                f"Trash emptied successfully for form ID {form_id} ({deleted} entries)"
            )
        else:
            deleted = self._backend.empty_trash()
            self._console.success(
                f"Trash emptied successfully for all forms ({deleted} entries)"
            )


class VerifyChecksumsHandler:
    """Compares every file of a release checksum list with the installed copy."""

    def __init__(
        self, backend: FormsBackend, update_server: UpdateServer, console: Console
    ) -> None:
        self._backend = backend
        self._update_server = update_server
        self._console = console

    def handle(self, request: CommandRequest) -> ExitStatus:
        version = request.option("version") or self._backend.version()
        checksums = self._update_server.get_checksums(version)
        if checksums is None:
            raise RemoteServiceError("Couldn't get download checksums.")

        base = self._backend.base_path()
        has_errors = False
        for line in checksums:
            if not line.strip():
                continue
            checksum, relative = line[:32], line[32:].strip()
            path = base / relative
            if not path.is_file():
                self._console.warning(f"File doesn't exist: {relative}")
                has_errors = True
            elif md5_file(path) != checksum:
                self._console.warning(f"File doesn't verify against checksum: {relative}")
                has_errors = True

        if has_errors:
            self._console.error("Forms install doesn't verify against checksums.")
            return ExitStatus.FAILURE
        self._console.success("Forms install verifies against checksums.")
        return ExitStatus.OK


def md5_file(path: Path) -> str:
    digest = hashlib.md5()
    with path.open("rb") as fh:
        for chunk in iter(lambda: fh.read(65536), b""):
            digest.update(chunk)
    return digest.hexdigest()


class SystemReportHandler:

    def __init__(self, backend: FormsBackend, console: Console) -> None:
        self._backend = backend
        self._console = console

    def handle(self, request: CommandRequest) -> None:
        self._console.line(self._backend.system_report())
