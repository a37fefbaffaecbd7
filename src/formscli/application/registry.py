"""The command table: every verb with its slots, option defaults and handler."""

from __future__ import annotations

from functools import partial

from formscli.application import entries, entry_export, fields, forms, notifications
from formscli.application import license, root, tools
from formscli.application.console import Console
from formscli.application.dispatcher import CommandSpec, Slot
from formscli.application.output.formatter import ALL_FORMATS, OutputFormat
from formscli.domain.model.entry import STATUS_ACTIVE, parse_record_id
from formscli.domain.model.field import parse_field_id
from formscli.domain.model.form import (
    DEFAULT_EVENT,
    DEFAULT_NOTIFICATION_MESSAGE,
    DEFAULT_NOTIFICATION_SUBJECT,
    DEFAULT_NOTIFICATION_TO,
)
from formscli.domain.model.query import DEFAULT_PAGE_SIZE
from formscli.domain.repository.forms_backend import FormsBackend
from formscli.domain.repository.license_store import LicenseStore
from formscli.domain.repository.update_server import UpdateServer

TABLE_OR_JSON = (OutputFormat.TABLE, OutputFormat.JSON)

parse_form_id = partial(parse_record_id, what="form")
parse_entry_id = partial(parse_record_id, what="entry")

FORM_ID = Slot("form-id", parse=parse_form_id)
ENTRY_ID = Slot("entry-id", parse=parse_entry_id)
FIELD_ID = Slot("field-id", parse=parse_field_id)


def build_commands(
    backend: FormsBackend,
    console: Console,
    license_store: LicenseStore,
    update_server: UpdateServer,
    cli_version: str,
) -> list[CommandSpec]:
    return (
        _form_commands(backend, console)
        + _field_commands(backend, console)
        + _notification_commands(backend, console)
        + _entry_commands(backend, console)
        + _license_commands(license_store, console)
        + _tool_commands(backend, update_server, console)
        + _root_commands(backend, license_store, update_server, console, cli_version)
    )


def _form_commands(backend: FormsBackend, console: Console) -> list[CommandSpec]:
    listing = forms.FormListHandler(backend, console)
    create = forms.FormCreateHandler(backend, console)
    update = forms.FormUpdateHandler(backend, console)
    return [
        CommandSpec(
            "form list",
            listing.handle,
            options={
                "active": None,
                "trash": False,
                "sort_column": "title",
                "sort_dir": "ASC",
                "format": "table",
            },
            formats=ALL_FORMATS,
            precheck=listing.precheck,
        ),
        CommandSpec("form get", forms.FormGetHandler(backend, console).handle, (FORM_ID,)),
        CommandSpec(
            "form create",
            create.handle,
            (Slot("title", required=False), Slot("description", required=False)),
            options={"form-json": None, "porcelain": False},
            precheck=create.precheck,
        ),
        CommandSpec(
            "form update",
            update.handle,
            (FORM_ID,),
            options={"form-json": None},
            precheck=update.precheck,
        ),
        CommandSpec(
            "form delete",
            forms.FormDeleteHandler(backend, console).handle,
            (Slot("form-ids", variadic=True),),
            options={"force": False},
        ),
        CommandSpec(
            "form duplicate",
            forms.FormDuplicateHandler(backend, console).handle,
            (FORM_ID,),
            options={"porcelain": False},
        ),
        CommandSpec(
            "form export",
            forms.FormExportHandler(backend, console).handle,
            (Slot("form-id", required=False, parse=parse_form_id),),
            options={"dir": None, "porcelain": False},
        ),
        CommandSpec(
            "form import",
            forms.FormImportHandler(backend, console).handle,
            (Slot("file"),),
        ),
        CommandSpec("form edit", forms.FormEditHandler(backend, console).handle, (FORM_ID,)),
    ]


def _field_commands(backend: FormsBackend, console: Console) -> list[CommandSpec]:
    both = (FORM_ID, FIELD_ID)
    create = fields.FieldCreateHandler(backend, console)
    update = fields.FieldUpdateHandler(backend, console)
    return [
        CommandSpec(
            "form field list",
            fields.FieldListHandler(backend, console).handle,
            (FORM_ID,),
            options={"format": "table"},
            formats=ALL_FORMATS,
        ),
        CommandSpec("form field get", fields.FieldGetHandler(backend, console).handle, both),
        CommandSpec(
            "form field create",
            create.handle,
            (FORM_ID, Slot("type", required=False), Slot("label", required=False)),
            options={"field-json": None, "porcelain": False},
            precheck=create.precheck,
        ),
        CommandSpec(
            "form field update",
            update.handle,
            both,
            options={"field-json": None},
            accepts_extras=True,
            precheck=update.precheck,
        ),
        CommandSpec(
            "form field delete", fields.FieldDeleteHandler(backend, console).handle, both
        ),
        CommandSpec(
            "form field duplicate",
            fields.FieldDuplicateHandler(backend, console).handle,
            both,
            options={"porcelain": False},
        ),
        CommandSpec("form field edit", fields.FieldEditHandler(backend, console).handle, both),
    ]


def _notification_commands(backend: FormsBackend, console: Console) -> list[CommandSpec]:
    both = (FORM_ID, Slot("notification-id"))
    update = notifications.NotificationUpdateHandler(backend, console)
    return [
        CommandSpec(
            "form notification list",
            notifications.NotificationListHandler(backend, console).handle,
            (FORM_ID,),
            options={"active": None, "format": "table", "raw": False},
            formats=ALL_FORMATS,
        ),
        CommandSpec(
            "form notification get",
            notifications.NotificationGetHandler(backend, console).handle,
            both,
        ),
        CommandSpec(
            "form notification create",
            notifications.NotificationCreateHandler(backend, console).handle,
            (FORM_ID, Slot("name", required=False)),
            options={
                "to": DEFAULT_NOTIFICATION_TO,
                "subject": DEFAULT_NOTIFICATION_SUBJECT,
                "message": DEFAULT_NOTIFICATION_MESSAGE,
                "to-type": "email",
                "event": DEFAULT_EVENT,
                "notification-json": None,
                "porcelain": False,
            },
        ),
        CommandSpec(
            "form notification update",
            update.handle,
            both,
            options={"notification-json": None},
            precheck=update.precheck,
        ),
        CommandSpec(
            "form notification delete",
            notifications.NotificationDeleteHandler(backend, console).handle,
            (FORM_ID, Slot("notification-ids", variadic=True)),
        ),
        CommandSpec(
            "form notification duplicate",
            notifications.NotificationDuplicateHandler(backend, console).handle,
            both,
            options={"porcelain": False},
        ),
        CommandSpec(
            "form notification edit",
            notifications.NotificationEditHandler(backend, console).handle,
            both,
        ),
        CommandSpec(
            "entry notification get",
            notifications.EntryNotificationGetHandler(backend, console).handle,
            (ENTRY_ID, Slot("notification-ids", required=False, variadic=True)),
            options={"event": DEFAULT_EVENT, "format": "table", "raw": False},
            formats=(OutputFormat.TABLE, OutputFormat.JSON, OutputFormat.IDS),
        ),
        CommandSpec(
            "entry notification send",
            notifications.EntryNotificationSendHandler(backend, console).handle,
            (ENTRY_ID, Slot("notification-ids", required=False, variadic=True)),
            options={"event": DEFAULT_EVENT},
        ),
    ]


def _entry_commands(backend: FormsBackend, console: Console) -> list[CommandSpec]:
    listing = entries.EntryListHandler(backend, console)
    create = entries.EntryCreateHandler(backend, console)
    update = entries.EntryUpdateHandler(backend, console)
    duplicate = entries.EntryDuplicateHandler(backend, console)
    export = entry_export.EntryExportHandler(backend, console)
    return [
        CommandSpec(
            "entry get",
            entries.EntryGetHandler(backend, console).handle,
            (ENTRY_ID,),
            options={"format": "table", "raw": False},
            formats=TABLE_OR_JSON,
        ),
        CommandSpec(
            "entry list",
            listing.handle,
            (FORM_ID,),
            options={
                "status": STATUS_ACTIVE,
                "format": "table",
                "page_size": DEFAULT_PAGE_SIZE,
                "offset": 0,
            },
            formats=ALL_FORMATS,
            precheck=listing.precheck,
        ),
        CommandSpec(
            "entry create",
            create.handle,
            (Slot("entry"),),
            options={"porcelain": False},
            accepts_extras=True,
            precheck=create.precheck,
        ),
        CommandSpec(
            "entry update",
            update.handle,
            (ENTRY_ID,),
            options={"entry-json": None},
            accepts_extras=True,
            precheck=update.precheck,
        ),
        CommandSpec(
            "entry delete",
            entries.EntryDeleteHandler(backend, console).handle,
            (Slot("entry-ids", variadic=True),),
            options={"force": False},
        ),
        CommandSpec(
            "entry export",
            export.handle,
            (FORM_ID, Slot("filename", required=False)),
            options={
                "dir": None,
                "format": "csv",
                "start_date": None,
                "end_date": None,
                "porcelain": False,
            },
            formats=(OutputFormat.CSV, OutputFormat.JSON),
            precheck=export.precheck,
        ),
        CommandSpec(
            "entry import",
            entry_export.EntryImportHandler(backend, console).handle,
            (FORM_ID, Slot("file")),
        ),
        CommandSpec(
            "entry duplicate",
            duplicate.handle,
            (ENTRY_ID,),
            options={"count": 1},
            precheck=duplicate.precheck,
        ),
        CommandSpec("entry edit", entries.EntryEditHandler(backend, console).handle, (ENTRY_ID,)),
    ]


def _license_commands(store: LicenseStore, console: Console) -> list[CommandSpec]:
    update = license.LicenseUpdateHandler(store, console)
    return [
        CommandSpec(
            "license update",
            update.handle,
            (Slot("key"),),
            needs_backend=False,
            precheck=update.precheck,
        ),
        CommandSpec(
            "license delete",
            license.LicenseDeleteHandler(store, console).handle,
            needs_backend=False,
        ),
    ]


def _tool_commands(
    backend: FormsBackend, update_server: UpdateServer, console: Console
) -> list[CommandSpec]:
    return [
        CommandSpec(
            "tool clear-transients", tools.ClearTransientsHandler(backend, console).handle
        ),
        CommandSpec(
            "tool empty-trash",
            tools.EmptyTrashHandler(backend, console).handle,
            (Slot("form-id", required=False, parse=parse_form_id),),
        ),
        CommandSpec(
            "tool verify-checksums",
            tools.VerifyChecksumsHandler(backend, update_server, console).handle,
            options={"version": None},
        ),
        CommandSpec(
            "tool system-report", tools.SystemReportHandler(backend, console).handle
        ),
    ]


def _root_commands(
    backend: FormsBackend,
    license_store: LicenseStore,
    update_server: UpdateServer,
    console: Console,
    cli_version: str,
) -> list[CommandSpec]:
    slug = Slot("slug", required=False)
    install = root.InstallHandler(backend, license_store, update_server, console)
    return [
        CommandSpec(
            "install",
            install.handle,
            (slug,),
            options={
                "license-key": None,
                "force": False,
                "activate": False,
                "network-activate": False,
            },
            needs_backend=False,
            precheck=install.precheck,
        ),
        CommandSpec(
            "setup",
            root.SetupHandler(backend, console).handle,
            (slug,),
            options={"force": False},
            needs_backend=False,
        ),
        CommandSpec(
            "check-update",
            root.CheckUpdateHandler(backend, license_store, update_server, console).handle,
            (slug,),
            options={"format": "table"},
            formats=(OutputFormat.TABLE, OutputFormat.CSV, OutputFormat.JSON),
        ),
        CommandSpec(
            "update",
            root.UpdateHandler(backend, license_store, update_server, console).handle,
            (slug,),
        ),
        CommandSpec(
            "version",
            root.VersionHandler(backend, console, cli_version).handle,
            needs_backend=False,
        ),
    ]
