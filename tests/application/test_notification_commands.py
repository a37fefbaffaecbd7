"""Integration tests for form and entry notification commands."""

import json

from formscli.application.dispatcher import ExitStatus
from formscli.domain.model.form import DEFAULT_NOTIFICATION_NAME
from tests.fakes import FakeConsole, FakeFormsBackend, build_dispatcher


def _form():
    return {
        "id": 1,
        "title": "Contact",
        "fields": [],
        "notifications": {
            "n1": {"id": "n1", "name": "Admin", "subject": "New", "event": "form_submission"},
            "n2": {"id": "n2", "name": "Off", "subject": "Old", "isActive": False},
            "n3": {"id": "n3", "name": "Paid", "subject": "$", "event": "payment_completed"},
        },
    }


def _setup():
    backend = FakeFormsBackend(
        forms=[_form()], entries=[{"id": 7, "form_id": 1, "status": "active"}]
    )
    console = FakeConsole()
    return backend, console, build_dispatcher(backend, console)


class TestFormNotifications:

    def test_list_active_only(self):
        _, console, dispatcher = _setup()
        dispatcher.dispatch("form notification list", ["1"], {"active": True, "format": "ids"})
        assert console.lines == ["n1 n3"]

    def test_list_table_shows_active_flag(self):
        _, console, dispatcher = _setup()
        dispatcher.dispatch("form notification list", ["1"], {"format": "csv"})
        assert console.lines[0].splitlines()[2] == "n2,Off,Old,no"

    def test_create_with_defaults(self):
        backend, console, dispatcher = _setup()
        dispatcher.dispatch("form notification create", ["1"], {"porcelain": True})
        (new_id,) = console.lines
        created = backend.form(1)["notifications"][new_id]
        assert created["name"] == DEFAULT_NOTIFICATION_NAME
        assert created["toType"] == "email"

    def test_create_from_json(self):
        backend, console, dispatcher = _setup()
        dispatcher.dispatch(
            "form notification create",
            ["1", "Sales"],
            {"notification-json": '{"id": "n9", "subject": "Hi"}'},
        )
        assert backend.form(1)["notifications"]["n9"]["name"] == "Sales"
        assert console.successes == ["Created Notification with ID: n9"]

    def test_update(self):
        backend, _, dispatcher = _setup()
        dispatcher.dispatch(
            "form notification update", ["1", "n2"], {"notification-json": '{"name": "On"}'}
        )
        assert backend.form(1)["notifications"]["n2"] == {"name": "On", "id": "n2"}

    def test_delete_reports_missing(self):
        backend, console, dispatcher = _setup()
        status = dispatcher.dispatch("form notification delete", ["1", "n1", "zz"], {})
        assert status is ExitStatus.FAILURE
        assert sorted(backend.form(1)["notifications"]) == ["n2", "n3"]
        assert console.errors == ["Notification not found: zz"]
        assert console.successes == ["Deleted notifications: 1"]

    def test_duplicate(self):
        backend, _, dispatcher = _setup()
        dispatcher.dispatch("form notification duplicate", ["1", "n1"], {})
        names = [n["name"] for n in backend.form(1)["notifications"].values()]
        assert names.count("Admin") == 2

    def test_get_missing(self):
        _, console, dispatcher = _setup()
        status = dispatcher.dispatch("form notification get", ["1", "zz"], {})
        assert status is ExitStatus.FAILURE
        assert console.errors == ["Notification not found: zz"]


class TestEntryNotifications:

    def test_get_for_default_event(self):
        _, console, dispatcher = _setup()
        dispatcher.dispatch("entry notification get", ["7"], {"format": "ids"})
        assert console.lines == ["n1"]

    def test_get_for_other_event(self):
        _, console, dispatcher = _setup()
        dispatcher.dispatch(
            "entry notification get", ["7"], {"event": "payment_completed", "raw": True, "format": "json"}
        )
        assert [n["id"] for n in json.loads(console.lines[0])] == ["n3"]

    def test_send_selected(self):
        backend, console, dispatcher = _setup()
        dispatcher.dispatch("entry notification send", ["7", "n1", "n3"], {})
        assert backend.sent == [(7, ["n1", "n3"])]
        assert console.successes == ["Notifications sent: n1, n3"]

    def test_send_nothing(self):
        backend, console, dispatcher = _setup()
        dispatcher.dispatch("entry notification send", ["7"], {"event": "user_registered"})
        assert backend.sent == []
        assert console.warnings == ["No notifications to send."]
