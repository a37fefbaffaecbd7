"""Integration tests for the form commands."""

import json
from datetime import date

from formscli.application.dispatcher import CommandRequest, ExitStatus
from formscli.application.forms import FormExportHandler, copy_title
from formscli.domain.model.record import RecordKind
from tests.fakes import FakeConsole, FakeFormsBackend, build_dispatcher

CONTACT = {"id": 1, "title": "Contact", "fields": [], "is_active": True, "is_trash": False}
TRASHED = {"id": 2, "title": "Old", "fields": [], "is_active": False, "is_trash": True}


def _setup(forms=None):
    backend = FakeFormsBackend(forms=[CONTACT, TRASHED] if forms is None else forms)
    console = FakeConsole()
    return backend, console, build_dispatcher(backend, console)


class TestFormCreate:

    def test_create_from_title(self):
        backend, console, dispatcher = _setup(forms=[])

        status = dispatcher.dispatch("form create", ["Survey"], {})

        assert status is ExitStatus.OK
        ((kind, payload),) = backend.calls_to("create_record")
        assert kind is RecordKind.FORM
        assert payload["title"] == "Survey"
        assert payload["fields"] == []
        assert len(payload["notifications"]) == 1
        assert len(payload["confirmations"]) == 1
        assert console.successes == ["Created Form with ID: 1"]

    def test_create_from_json_keeps_its_confirmations(self):
        backend, _, dispatcher = _setup(forms=[])
        form_json = json.dumps({"title": "Quote", "confirmations": {"c": {"id": "c"}}})

        dispatcher.dispatch("form create", [], {"form-json": form_json})

        ((_, payload),) = backend.calls_to("create_record")
        assert payload["confirmations"] == {"c": {"id": "c"}}
        assert "notifications" not in payload

    def test_title_argument_overrides_json(self):
        backend, _, dispatcher = _setup(forms=[])
        dispatcher.dispatch("form create", ["New"], {"form-json": '{"title": "Old"}'})
        assert backend.form(1)["title"] == "New"

    def test_porcelain_prints_only_the_id(self):
        _, console, dispatcher = _setup(forms=[])
        dispatcher.dispatch("form create", ["Survey"], {"porcelain": True})
        assert console.lines == ["1"]
        assert console.successes == []

    def test_title_or_json_required(self):
        backend, console, dispatcher = _setup(forms=[])
        assert dispatcher.dispatch("form create", [], {}) is ExitStatus.USAGE
        assert backend.calls == []

    def test_invalid_json(self):
        backend, console, dispatcher = _setup(forms=[])
        status = dispatcher.dispatch("form create", [], {"form-json": "{nope"})
        assert status is ExitStatus.FAILURE
        assert backend.write_calls == []

    def test_id_in_json_is_dropped(self):
        backend, console, dispatcher = _setup()
        form_json = json.dumps({"id": 1, "title": "Second"})

        status = dispatcher.dispatch("form create", [], {"form-json": form_json})

        assert status is ExitStatus.OK
        ((_, payload),) = backend.calls_to("create_record")
        assert "id" not in payload
        assert backend.form(1)["title"] == "Contact"
        assert console.successes == ["Created Form with ID: 3"]

    def test_non_numeric_id_in_json_is_dropped(self):
        backend, _, dispatcher = _setup(forms=[])
        form_json = json.dumps({"id": "abc", "title": "X"})
        assert dispatcher.dispatch("form create", [], {"form-json": form_json}) is ExitStatus.OK
        assert backend.form(1)["title"] == "X"


class TestFormList:

    def test_ids(self):
        _, console, dispatcher = _setup()
        dispatcher.dispatch("form list", [], {"format": "ids"})
        assert console.lines == ["1"]

    def test_trash(self):
        _, console, dispatcher = _setup()
        dispatcher.dispatch("form list", [], {"format": "ids", "trash": True})
        assert console.lines == ["2"]

    def test_empty_ids_prints_nothing(self):
        _, console, dispatcher = _setup(forms=[])
        dispatcher.dispatch("form list", [], {"format": "ids"})
        assert console.lines == []

    def test_bad_sort_dir(self):
        backend, _, dispatcher = _setup()
        assert dispatcher.dispatch("form list", [], {"sort_dir": "up"}) is ExitStatus.USAGE
        assert backend.calls == []


class TestFormGet:

    def test_invalid_id_rejected_before_backend(self):
        backend, console, dispatcher = _setup()
        assert dispatcher.dispatch("form get", ["abc"], {}) is ExitStatus.USAGE
        assert backend.calls == []
        assert console.errors[0].startswith("Invalid form ID: abc")

    def test_zero_id_rejected(self):
        backend, _, dispatcher = _setup()
        assert dispatcher.dispatch("form get", ["0"], {}) is ExitStatus.USAGE
        assert backend.calls == []


class TestFormUpdateAndDelete:

    def test_update_replaces_form(self):
        backend, console, dispatcher = _setup()
        dispatcher.dispatch("form update", ["1"], {"form-json": '{"title": "Renamed"}'})
        ((_, form_id, changes, replace),) = backend.calls_to("update_record")
        assert (form_id, replace) == (1, True)
        assert changes["title"] == "Renamed"
        assert console.successes == ["Form updated successfully"]

    def test_update_needs_json(self):
        backend, _, dispatcher = _setup()
        assert dispatcher.dispatch("form update", ["1"], {}) is ExitStatus.USAGE
        assert backend.calls == []

    def test_delete_trashes_active_form(self):
        backend, console, dispatcher = _setup()
        dispatcher.dispatch("form delete", ["1"], {})
        assert backend.form(1)["is_trash"] is True
        assert console.successes == ["Trashed form 1"]

    def test_delete_removes_trashed_form(self):
        backend, console, dispatcher = _setup()
        dispatcher.dispatch("form delete", ["2"], {})
        assert backend.calls_to("delete_record") == [(RecordKind.FORM, 2)]
        assert console.successes == ["Deleted form 2"]

    def test_delete_reports_each_missing_form(self):
        backend, console, dispatcher = _setup()
        status = dispatcher.dispatch("form delete", ["1", "9"], {"force": True})
        assert status is ExitStatus.FAILURE
        assert console.errors == ["Form not found: 9"]
        assert backend.calls_to("delete_record") == [(RecordKind.FORM, 1)]


class TestFormDuplicate:

    def test_copy_title_numbers(self):
        assert copy_title("Contact", {"Contact"}) == "Contact (1)"
        assert copy_title("Contact", {"Contact (1)"}) == "Contact (2)"
        assert copy_title("Contact (1)", {"Contact (1)"}) == "Contact (2)"

    def test_duplicate(self):
        backend, console, dispatcher = _setup()
        dispatcher.dispatch("form duplicate", ["1"], {})
        assert backend.form(3)["title"] == "Contact (1)"
        assert console.successes == ["Form duplicated successfully. New Form ID: 3"]


class TestFormExportImport:

    def test_export_all_forms(self, tmp_path):
        backend = FakeFormsBackend(forms=[CONTACT, TRASHED])
        console = FakeConsole()
        handler = FormExportHandler(backend, console, today=lambda: date(2024, 5, 1))
        request = CommandRequest(
            "form export", {"form-id": None}, {"dir": str(tmp_path), "porcelain": False}
        )

        handler.handle(request)

        path = tmp_path / "forms-export-2024-05-01.json"
        assert [f["id"] for f in json.loads(path.read_text())] == [1, 2]
        assert console.successes == [f"Forms exported successfully to {path}"]

    def test_export_to_missing_directory(self, tmp_path):
        _, console, dispatcher = _setup()
        missing = tmp_path / "nope"
        status = dispatcher.dispatch("form export", ["1"], {"dir": str(missing)})
        assert status is ExitStatus.FAILURE
        assert console.errors == [f"Not writable: {missing}"]

    def test_import(self, tmp_path):
        backend, console, dispatcher = _setup(forms=[])
        source = tmp_path / "forms.json"
        source.write_text(json.dumps([{"id": 7, "title": "A"}, {"id": 8, "title": "B"}]))

        dispatcher.dispatch("form import", [str(source)], {})

        assert sorted(f["title"] for f in backend.records[RecordKind.FORM].values()) == ["A", "B"]
        assert all("confirmations" in f for f in backend.records[RecordKind.FORM].values())
        assert console.successes == ["Forms imported: 2"]

    def test_import_missing_file(self, tmp_path):
        _, _, dispatcher = _setup(forms=[])
        status = dispatcher.dispatch("form import", [str(tmp_path / "x.json")], {})
        assert status is ExitStatus.FAILURE


class TestFormEdit:

    def test_unchanged(self):
        backend = FakeFormsBackend(forms=[CONTACT])
        console = FakeConsole(edit_result=None)
        build_dispatcher(backend, console).dispatch("form edit", ["1"], {})
        assert console.warnings == ["No change made to form."]
        assert backend.write_calls == []

    def test_edited(self):
        backend = FakeFormsBackend(forms=[CONTACT])
        console = FakeConsole(edit_result=json.dumps({**CONTACT, "title": "Edited"}))
        build_dispatcher(backend, console).dispatch("form edit", ["1"], {})
        assert backend.form(1)["title"] == "Edited"
        assert console.edited[0][1] == "form-1.json"
