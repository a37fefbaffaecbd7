"""Form records: defaults for new forms, notifications and confirmations.

A form is a record with ``title``, ``fields`` (list), ``notifications`` and
``confirmations`` (both mappings keyed by their own ``id``).
"""

from __future__ import annotations

import uuid
from typing import Any

from formscli.domain.model.record import Record

DEFAULT_NOTIFICATION_NAME = "Admin Notification"
DEFAULT_NOTIFICATION_TO = "{admin_email}"
DEFAULT_NOTIFICATION_SUBJECT = "New submission from {form_title}"
DEFAULT_NOTIFICATION_MESSAGE = "{all_fields}"
DEFAULT_EVENT = "form_submission"
DEFAULT_CONFIRMATION_MESSAGE = (
    "Thanks for contacting us! We will get in touch with you shortly."
)


def new_uid() -> str:
    """Short unique ID for notifications and confirmations."""
    return uuid.uuid4().hex[:13]


def new_form(title: str, description: str = "") -> dict[str, Any]:
    """A blank form with one default admin notification."""
    notification = default_notification()
    return {
        "title": title,
        "description": description,
        "labelPlacement": "top_label",
        "descriptionPlacement": "below",
        "button": {"type": "text", "text": "Submit", "imageUrl": ""},
        "fields": [],
        "notifications": {notification["id"]: notification},
    }


def default_notification(
    name: str = DEFAULT_NOTIFICATION_NAME,
    to: str = DEFAULT_NOTIFICATION_TO,
    subject: str = DEFAULT_NOTIFICATION_SUBJECT,
    message: str = DEFAULT_NOTIFICATION_MESSAGE,
    to_type: str = "email",
    event: str = DEFAULT_EVENT,
) -> dict[str, Any]:
    return {
        "id": new_uid(),
        "name": name,
        "to": to,
        "toType": to_type,
        "event": event,
        "subject": subject,
        "message": message,
    }


def default_confirmation() -> dict[str, Any]:
    return {
        "id": new_uid(),
        "name": "Default Confirmation",
        "isDefault": True,
        "type": "message",
        "message": DEFAULT_CONFIRMATION_MESSAGE,
        "url": "",
        "pageId": "",
        "queryString": "",
    }


def ensure_confirmation(form: dict[str, Any]) -> None:
    """Give *form* a default confirmation unless it already has some."""
    if "confirmations" not in form:
        confirmation = default_confirmation()
        form["confirmations"] = {confirmation["id"]: confirmation}


# --- Notifications ------------------------------------------------------------


def notifications_of(form: Record) -> dict[str, dict[str, Any]]:
    """The form's notifications as an ordered id -> notification mapping.

    Older exports store notifications as a list; both shapes are accepted.
    """
    raw = form.get("notifications") or {}
    if isinstance(raw, list):
        return {str(n.get("id")): dict(n) for n in raw}
    return {str(key): dict(n) for key, n in raw.items()}


def find_notification(form: Record, notification_id: str) -> dict[str, Any] | None:
    notifications = notifications_of(form)
    if notification_id in notifications:
        return notifications[notification_id]
    for notification in notifications.values():
        if str(notification.get("id")) == notification_id:
            return notification
    return None


def is_active(notification: Record) -> bool:
    return bool(notification.get("isActive", True))

