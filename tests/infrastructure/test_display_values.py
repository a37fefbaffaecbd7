"""Tests for entry display values."""

from formscli.infrastructure.persistence.display_values import (
    DisplayValueResolver,
    format_entry_date,
    format_field_date,
    format_money,
)

FORM = {
    "id": 1,
    "fields": [
        {"id": 1, "type": "name", "label": "Name"},
        {"id": 2, "type": "address", "label": "Address"},
        {"id": 3, "type": "date", "label": "Day", "dateFormat": "dmy"},
        {"id": 4, "type": "checkbox", "label": "Options"},
        {"id": 5, "type": "multiselect", "label": "Tags"},
        {"id": 6, "type": "product", "label": "Widget"},
        {"id": 7, "type": "consent", "label": "Consent"},
        {"id": 8, "type": "post_category", "label": "Category"},
    ],
}

ENTRY = {
    "id": 10,
    "form_id": 1,
    "date_created": "2024-03-09 14:05:00",
    "payment_amount": "1234.5",
    "currency": "USD",
    "created_by": "2",
    "1.3": "Jane",
    "1.6": "Doe",
    "2.1": "1 Main St",
    "2.3": "Springfield",
    "3": "2024-03-09",
    "4.1": "Red",
    "4.2": "",
    "4.3": "Blue",
    "5": '["a","b"]',
    "6.1": "Widget",
    "6.2": "10",
    "6.3": "2",
    "7.1": "1",
    "8": "News:4",
}


def _resolver(*filters):
    return DisplayValueResolver(lambda: {"2": "admin"}, filters)


class TestDisplayValues:

    def test_properties(self):
        resolver = _resolver()
        assert resolver.resolve(ENTRY, "date_created", FORM) == "2024/03/09 at 02:05 PM"
        assert resolver.resolve(ENTRY, "payment_amount", FORM) == "$1,234.50"
        assert resolver.resolve(ENTRY, "created_by", FORM) == "admin"

    def test_unknown_user_shows_id(self):
        assert _resolver().resolve({**ENTRY, "created_by": "9"}, "created_by") == "9"

    def test_multi_input_fields(self):
        resolver = _resolver()
        assert resolver.resolve(ENTRY, "1", FORM) == "Jane Doe"
        assert resolver.resolve(ENTRY, "2", FORM) == "1 Main St, Springfield"
        assert resolver.resolve(ENTRY, "4", FORM) == "Red, Blue"
        assert resolver.resolve(ENTRY, "1.6", FORM) == "Doe"

    def test_typed_fields(self):
        resolver = _resolver()
        assert resolver.resolve(ENTRY, "3", FORM) == "09/03/2024"
        assert resolver.resolve(ENTRY, "5", FORM) == "a, b"
        assert resolver.resolve(ENTRY, "6", FORM) == "Widget, Qty: 2, Price: $10.00"
        assert resolver.resolve(ENTRY, "7", FORM) == "Checked"
        assert resolver.resolve(ENTRY, "8", FORM) == "News"

    def test_missing_value_is_empty(self):
        assert _resolver().resolve(ENTRY, "99", FORM) == ""

    def test_filters_run_in_order(self):
        resolver = _resolver(lambda value, entry, key: value.upper())
        resolver.add_filter(lambda value, entry, key: f"{key}={value}")
        assert resolver.resolve(ENTRY, "1", FORM) == "1=JANE DOE"

    def test_helpers_leave_unparseable_text(self):
        assert format_entry_date("yesterday") == "yesterday"
        assert format_field_date("soon", "mdy") == "soon"
        assert format_money("n/a", "USD") == "n/a"
        assert format_money("", "USD") == ""
