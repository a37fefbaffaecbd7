"""Entry records.

An entry holds the built-in properties below plus one key per field value
(``"3"``) or per field input (``"5.3"``).
"""

from __future__ import annotations

from formscli.domain.exceptions import InvalidArgumentError

STATUS_ACTIVE = "active"
STATUS_TRASH = "trash"

# Built-in entry properties, in the order exports list them.
ENTRY_PROPERTIES = (
    "id",
    "form_id",
    "date_created",
    "date_updated",
    "is_starred",
    "is_read",
    "ip",
    "source_url",
    "user_agent",
    "currency",
    "payment_status",
    "payment_date",
    "payment_amount",
    "payment_method",
    "transaction_id",
    "is_fulfilled",
    "created_by",
    "transaction_type",
    "status",
    "post_id",
)

# Properties added in front of the form fields in CSV exports.
DEFAULT_EXPORT_PROPERTIES = (
    ("created_by", "Created By (User Id)"),
    ("id", "Entry Id"),
    ("date_created", "Entry Date"),
    ("source_url", "Source Url"),
    ("transaction_id", "Transaction Id"),
    ("payment_amount", "Payment Amount"),
    ("payment_date", "Payment Date"),
    ("payment_status", "Payment Status"),
    ("post_id", "Post Id"),
    ("user_agent", "User Agent"),
    ("ip", "User IP"),
)


def is_entry_property(key: str) -> bool:
    return key in ENTRY_PROPERTIES


def parse_record_id(raw: str | int, what: str) -> int:
    """Validate a positional form or entry ID."""
    try:
        value = int(str(raw))
    except ValueError:
        raise InvalidArgumentError(f"Invalid {what} ID: {raw}")
    if value < 1:
        raise InvalidArgumentError(f"Invalid {what} ID: {raw}")
    return value
