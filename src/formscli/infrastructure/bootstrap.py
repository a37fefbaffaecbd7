"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import click

from formscli.application.console import Console
from formscli.application.dispatcher import Dispatcher
from formscli.application.registry import build_commands
from formscli.infrastructure.cli.console import ClickConsole
from formscli.infrastructure.http.package_downloader import PackageDownloader
from formscli.infrastructure.http.update_server import HttpUpdateServer
from formscli.infrastructure.persistence.json_forms_backend import JsonFormsBackend
from formscli.infrastructure.persistence.json_license_store import JsonLicenseStore

CLI_VERSION = "1.0.0"
APP_NAME = "formscli"


def default_data_dir() -> Path:
    return Path(click.get_app_dir(APP_NAME))


@dataclass(frozen=True)
class Settings:
    data_dir: Path
    update_url: str = ""
    checksum_url: str = ""
    log_level: str = "WARNING"


def forms_backend(settings: Settings) -> JsonFormsBackend:
    return JsonFormsBackend(settings.data_dir, downloader=PackageDownloader())


def license_store(settings: Settings) -> JsonLicenseStore:
    return JsonLicenseStore(settings.data_dir / "license.json")


def update_server(settings: Settings) -> HttpUpdateServer:
    return HttpUpdateServer(settings.update_url, settings.checksum_url)


def build_dispatcher(settings: Settings, console: Console | None = None) -> Dispatcher:
    console = console or ClickConsole()
    backend = forms_backend(settings)
    commands = build_commands(
        backend,
        console,
        license_store(settings),
        update_server(settings),
        CLI_VERSION,
    )
    return Dispatcher(commands, backend, console)
