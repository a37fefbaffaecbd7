"""Application services: form notifications and entry notifications."""

from __future__ import annotations

import copy
import logging
from collections.abc import Iterable
from typing import Any

from formscli.application.console import Console
from formscli.application.dispatcher import CommandRequest, ExitStatus
from formscli.application.json_payload import decode_json_option
from formscli.application.output.columns import ColumnSpec
from formscli.application.output.formatter import OutputFormat, format_items, to_json
from formscli.application.support import (
    edit_record,
    emit,
    load_entry,
    load_form,
    report_created,
)
from formscli.domain.exceptions import EntityNotFoundError, InvalidArgumentError
from formscli.domain.model.form import (
    DEFAULT_NOTIFICATION_NAME,
    default_notification,
    find_notification,
    is_active,
    new_uid,
    notifications_of,
)
from formscli.domain.model.entry import parse_record_id
from formscli.domain.model.record import RecordKind
from formscli.domain.repository.forms_backend import FormsBackend

logger = logging.getLogger(__name__)

NOTIFICATION_COLUMNS = ColumnSpec.of("id", "name", "subject", "active")


def _emit_notifications(
    console: Console,
    notifications: Iterable[dict[str, Any]],
    fmt: OutputFormat,
    raw: bool,
) -> None:
    notifications = list(notifications)
    if raw and fmt is not OutputFormat.IDS:
        console.line(to_json(notifications))
        return
    rows = [
        {**n, "active": "yes" if is_active(n) else "no", "event": n.get("event", "")}
        for n in notifications
    ]
    emit(console, format_items(fmt, rows, NOTIFICATION_COLUMNS))


# --- Form notifications ---------------------------------------------------------


class _FormNotificationHandler:

    def __init__(self, backend: FormsBackend, console: Console) -> None:
        self._backend = backend
        self._console = console

    def _load(self, request: CommandRequest) -> tuple[int, dict[str, Any], dict[str, Any]]:
        form_id, form = load_form(self._backend, request.arg("form-id"))
        notification = find_notification(form, str(request.arg("notification-id")))
        if notification is None:
            raise EntityNotFoundError(
                f"Notification not found: {request.arg('notification-id')}"
            )
        return form_id, form, notification

    def _save(self, form_id: int, notifications: dict[str, dict[str, Any]]) -> None:
        self._backend.update_record(
            RecordKind.FORM, form_id, {"notifications": notifications}
        )
        logger.info("Saved %d notification(s) of form %s", len(notifications), form_id)

    def _replace(
        self, form_id: int, form: dict[str, Any], notification_id: str, new: dict[str, Any]
    ) -> None:
        notifications = {
            key: (new if str(n.get("id")) == notification_id else n)
            for key, n in notifications_of(form).items()
        }
        self._save(form_id, notifications)


class NotificationListHandler(_FormNotificationHandler):

    def handle(self, request: CommandRequest) -> None:
        _, form = load_form(self._backend, request.arg("form-id"))
        active = request.option("active")
        notifications = [
            n for n in notifications_of(form).values()
            if active is None or is_active(n) == active
        ]
        _emit_notifications(
            self._console, notifications, request.format, request.flag("raw")
        )


class NotificationGetHandler(_FormNotificationHandler):

    def handle(self, request: CommandRequest) -> None:
        _, _, notification = self._load(request)
        self._console.line(to_json(notification))


class NotificationCreateHandler(_FormNotificationHandler):
    """Adds a notification built from options or from ``--notification-json``."""

    def handle(self, request: CommandRequest) -> None:
        form_id, form = load_form(self._backend, request.arg("form-id"))
        notifications = notifications_of(form)

        if request.option("notification-json"):
            notification = decode_json_option(
                request.option("notification-json"), "notification-json"
            )
            if request.arg("name"):
                notification["name"] = request.arg("name")
            if not notification.get("id") or str(notification["id"]) in notifications:
                notification["id"] = new_uid()
        else:
            notification = default_notification(
                name=request.arg("name") or DEFAULT_NOTIFICATION_NAME,
                to=request.option("to"),
                subject=request.option("subject"),
                message=request.option("message"),
                to_type=request.option("to-type"),
                event=request.option("event"),
            )

        notification_id = str(notification["id"])
        notifications[notification_id] = notification
        self._save(form_id, notifications)
        report_created(
            self._console,
            request.flag("porcelain"),
            notification_id,
            f"Created Notification with ID: {notification_id}",
        )


class NotificationUpdateHandler(_FormNotificationHandler):

    @staticmethod
    def precheck(request: CommandRequest) -> None:
        if not request.option("notification-json"):
            raise InvalidArgumentError("Missing required option: --notification-json")

    def handle(self, request: CommandRequest) -> None:
        new = decode_json_option(request.option("notification-json"), "notification-json")
        form_id, form, notification = self._load(request)
        new["id"] = notification["id"]
        self._replace(form_id, form, str(notification["id"]), new)
        self._console.success("Notification updated successfully")


class NotificationDeleteHandler(_FormNotificationHandler):

    def handle(self, request: CommandRequest) -> ExitStatus:
        form_id, form = load_form(self._backend, request.arg("form-id"))
        notifications = notifications_of(form)
        deleted = 0
        status = ExitStatus.OK
        for notification_id in request.arg("notification-ids"):
            matches = [
                key for key, n in notifications.items()
                if str(n.get("id")) == notification_id
            ]
            if not matches:
                self._console.error(f"Notification not found: {notification_id}")
                status = ExitStatus.FAILURE
            for key in matches:
                del notifications[key]
                deleted += 1
        if deleted:
            self._save(form_id, notifications)
        self._console.success(f"Deleted notifications: {deleted}")
        return status


class NotificationDuplicateHandler(_FormNotificationHandler):

    def handle(self, request: CommandRequest) -> None:
        form_id, form, notification = self._load(request)
        duplicate = copy.deepcopy(notification)
        duplicate["id"] = new_uid()
        notifications = notifications_of(form)
        notifications[duplicate["id"]] = duplicate
        self._save(form_id, notifications)
        report_created(
            self._console,
            request.flag("porcelain"),
            duplicate["id"],
            "Notification duplicated successfully. "
            f"New Notification ID: {duplicate['id']}",
        )


class NotificationEditHandler(_FormNotificationHandler):

    def handle(self, request: CommandRequest) -> None:
        form_id, form, notification = self._load(request)
        edited = edit_record(
            self._console, notification, f"notification-{form_id}-{notification['id']}.json"
        )
        if edited is None:
            self._console.warning("No change made to notification.")
            return
        edited["id"] = notification["id"]
        self._replace(form_id, form, str(notification["id"]), edited)
        self._console.success("Notification updated successfully")


# --- Entry notifications --------------------------------------------------------


class _EntryNotificationHandler:

    def __init__(self, backend: FormsBackend, console: Console) -> None:
        self._backend = backend
        self._console = console

    def _load(self, request: CommandRequest) -> tuple[dict[str, Any], dict[str, Any]]:
        _, entry = load_entry(self._backend, request.arg("entry-id"))
        form_id = parse_record_id(entry.get("form_id"), "form")
        _, form = load_form(self._backend, form_id)
        return form, entry

    def _selected(
        self, form: dict[str, Any], entry: dict[str, Any], request: CommandRequest
    ) -> list[dict[str, Any]]:
        """The notifications named on the command line, else those *event* sends."""
        wanted = request.arg("notification-ids")
        if not wanted:
            return self._backend.notifications_for_event(form, entry, request.option("event"))
        return [n for n in notifications_of(form).values() if str(n.get("id")) in wanted]


class EntryNotificationGetHandler(_EntryNotificationHandler):

    def handle(self, request: CommandRequest) -> None:
        form, entry = self._load(request)
        _emit_notifications(
            self._console,
            self._selected(form, entry, request),
            request.format,
            request.flag("raw"),
        )


class EntryNotificationSendHandler(_EntryNotificationHandler):

    def handle(self, request: CommandRequest) -> None:
        form, entry = self._load(request)
        ids = [str(n["id"]) for n in self._selected(form, entry, request)]
        if not ids:
            self._console.warning("No notifications to send.")
            return
        sent = self._backend.send_notifications(form, entry, ids)
        logger.info("Sent notifications %s for entry %s", sent, entry.get("id"))
        self._console.success(f"Notifications sent: {', '.join(sent) or 'none'}")
