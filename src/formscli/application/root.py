"""Application services: installing, setting up and updating the forms backend."""

from __future__ import annotations

import logging

from formscli.application.console import Console
from formscli.application.dispatcher import CommandRequest
from formscli.application.license import save_key
from formscli.application.output.columns import ColumnSpec
from formscli.application.output.formatter import format_items
from formscli.application.support import emit
from formscli.domain.exceptions import (
    EntityNotFoundError,
    InvalidArgumentError,
    RemoteServiceError,
)
from formscli.domain.model.value_objects import Version
from formscli.domain.repository.forms_backend import CORE_SLUG, FormsBackend
from formscli.domain.repository.license_store import LicenseStore
from formscli.domain.repository.update_server import PackageInfo, UpdateServer

logger = logging.getLogger(__name__)

UPDATE_COLUMNS = ColumnSpec.of("slug", "installed", "version", "package_url")


def run_setup(backend: FormsBackend, console: Console, slug: str, force: bool) -> None:
    if backend.setup(slug, force=force):
        console.success(f"setup {slug}")
    else:
        console.success("setup re-run")


def _latest(update_server: UpdateServer, slug: str, key: str) -> PackageInfo:
    info = update_server.get_package_info(slug, key)
    if info is None or not info.download_url:
        raise RemoteServiceError(
            "There was a problem retrieving the download URL, please check the key."
        )
    if not info.version:
        raise RemoteServiceError(f"The release server sent no version for {slug}")
    try:
        Version.parse(info.version)
    except InvalidArgumentError:
        raise RemoteServiceError(
            f"The release server sent an invalid version for {slug}: {info.version}"
        )
    return info


class InstallHandler:
    """Downloads a package with the license key, installs it and optionally sets it up."""

    def __init__(
        self,
        backend: FormsBackend,
        license_store: LicenseStore,
        update_server: UpdateServer,
        console: Console,
    ) -> None:
        self._backend = backend
        self._license_store = license_store
        self._update_server = update_server
        self._console = console

    @staticmethod
    def precheck(request: CommandRequest) -> None:
        if not request.option("license-key"):
            raise InvalidArgumentError(
                "A valid license key must be specified either in the "
                "FORMSCLI_LICENSE_KEY environment variable or the --license-key option."
            )

    def handle(self, request: CommandRequest) -> None:
        slug = request.arg("slug") or CORE_SLUG
        key = request.option("license-key")
        save_key(self._license_store, key)

        info = _latest(self._update_server, slug, key)
        self._backend.install_package(
            slug, info.version, info.download_url, force=request.flag("force")
        )
        logger.info("Installed %s %s from %s", slug, info.version, info.download_url)
        self._console.success(f"Installed {slug} {info.version}")

        if request.flag("activate") or request.flag("network-activate"):
            run_setup(self._backend, self._console, slug, force=False)


class SetupHandler:

    def __init__(self, backend: FormsBackend, console: Console) -> None:
        self._backend = backend
        self._console = console

    def handle(self, request: CommandRequest) -> None:
        run_setup(
            self._backend,
            self._console,
            request.arg("slug") or CORE_SLUG,
            force=request.flag("force"),
        )


class _UpdateHandlerBase:

    def __init__(
        self,
        backend: FormsBackend,
        license_store: LicenseStore,
        update_server: UpdateServer,
        console: Console,
    ) -> None:
        self._backend = backend
        self._license_store = license_store
        self._update_server = update_server
        self._console = console

    def _versions(self, slug: str) -> tuple[str, PackageInfo]:
        installed = self._backend.package_version(slug)
        if installed is None:
            raise EntityNotFoundError(f"{slug} is not installed")
        info = _latest(self._update_server, slug, self._license_store.get() or "")
        return installed, info


class CheckUpdateHandler(_UpdateHandlerBase):

    def handle(self, request: CommandRequest) -> None:
        slug = request.arg("slug") or CORE_SLUG
        installed, info = self._versions(slug)
        if Version.parse(info.version) <= Version.parse(installed):
            self._console.success(f"{slug} is up to date ({installed})")
            return
        update = {
            "slug": slug,
            "installed": installed,
            "version": info.version,
            "package_url": info.download_url,
        }
        emit(self._console, format_items(request.format, [update], UPDATE_COLUMNS))


class UpdateHandler(_UpdateHandlerBase):

    def handle(self, request: CommandRequest) -> None:
        slug = request.arg("slug") or CORE_SLUG
        installed, info = self._versions(slug)
        if Version.parse(info.version) <= Version.parse(installed):
            self._console.success(f"{slug} is up to date ({installed})")
            return
        self._backend.install_package(slug, info.version, info.download_url, force=True)
        logger.info("Updated %s from %s to %s", slug, installed, info.version)
        self._console.success(f"Updated {slug} from {installed} to {info.version}")


class VersionHandler:

    def __init__(self, backend: FormsBackend, console: Console, cli_version: str) -> None:
        self._backend = backend
        self._console = console
        self._cli_version = cli_version

    def handle(self, request: CommandRequest) -> None:
        self._console.line(f"formscli {self._cli_version}")
        self._console.line(f"forms backend {self._backend.version() or 'not installed'}")
