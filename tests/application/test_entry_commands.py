"""Integration tests for the entry commands."""

import json

from formscli.application.dispatcher import ExitStatus
from formscli.application.entries import grid_columns
from formscli.domain.model.record import RecordKind
from tests.fakes import FakeConsole, FakeFormsBackend, build_dispatcher

FORM = {
    "id": 1,
    "title": "Contact",
    "fields": [
        {"id": 1, "type": "text", "label": "Company"},
        {"id": 2, "type": "email", "label": "Email"},
        {"id": 3, "type": "html", "label": "Intro"},
    ],
}


def _entry(entry_id, **values):
    return {"id": entry_id, "form_id": 1, "status": "active", **values}


def _setup(entries=None):
    backend = FakeFormsBackend(
        forms=[FORM],
        entries=[_entry(7, **{"1": "Acme", "2": "a@acme.test"})] if entries is None else entries,
    )
    console = FakeConsole()
    return backend, console, build_dispatcher(backend, console)


class TestEntryGet:

    def test_one_row_per_input_field(self):
        _, console, dispatcher = _setup()
        dispatcher.dispatch("entry get", ["7"], {"format": "json"})
        rows = json.loads(console.lines[0])
        assert rows == [
            {"ID": "1", "Field": "Company", "Value": "Acme"},
            {"ID": "2", "Field": "Email", "Value": "a@acme.test"},
        ]

    def test_raw_json_is_the_stored_entry(self):
        _, console, dispatcher = _setup()
        dispatcher.dispatch("entry get", ["7"], {"format": "json", "raw": True})
        assert json.loads(console.lines[0])["1"] == "Acme"

    def test_missing_entry(self):
        _, console, dispatcher = _setup()
        assert dispatcher.dispatch("entry get", ["8"], {}) is ExitStatus.FAILURE
        assert console.errors == ["Entry not found: 8"]


class TestEntryList:

    def test_grid_columns_skip_display_only_fields(self):
        assert grid_columns(FORM).labels == ["Entry Id", "1: Company", "2: Email"]

    def test_grid_columns_capped(self):
        form = {"fields": [{"id": i, "type": "text", "label": f"F{i}"} for i in range(1, 9)]}
        assert len(grid_columns(form)) == 6

    def test_count_is_the_filtered_total(self):
        entries = [_entry(i) for i in range(1, 26)]
        _, console, dispatcher = _setup(entries)
        dispatcher.dispatch("entry list", ["1"], {"format": "count"})
        assert console.lines == ["25"]

    def test_ids_respect_paging(self):
        entries = [_entry(i) for i in range(1, 6)]
        _, console, dispatcher = _setup(entries)
        dispatcher.dispatch("entry list", ["1"], {"format": "ids", "page_size": "2", "offset": "1"})
        assert console.lines == ["2 3"]

    def test_bad_page_size_is_usage_error(self):
        backend, _, dispatcher = _setup()
        status = dispatcher.dispatch("entry list", ["1"], {"page_size": "many"})
        assert status is ExitStatus.USAGE
        assert backend.calls == []


class TestEntryCreate:

    def test_from_field_options(self):
        backend, console, dispatcher = _setup(entries=[])
        dispatcher.dispatch("entry create", ["1"], {}, {"field_1": "Acme", "field_id": "5"})
        ((_, payload),) = backend.calls_to("create_record")
        assert payload == {"form_id": 1, "1": "Acme"}
        assert console.lines == ["The Entry ID value will be ignored."]
        assert console.successes == ["Entry created successfully. Entry ID: 1"]

    def test_unknown_field_reported(self):
        _, console, dispatcher = _setup(entries=[])
        status = dispatcher.dispatch("entry create", ["1"], {}, {"field_9": "x"})
        assert status is ExitStatus.FAILURE
        assert console.errors == ["Field not found: 9"]

    def test_from_json(self):
        backend, _, dispatcher = _setup(entries=[])
        dispatcher.dispatch("entry create", ['{"id": 4, "form_id": 1, "1": "Acme"}'], {})
        ((_, payload),) = backend.calls_to("create_record")
        assert payload == {"form_id": 1, "1": "Acme"}

    def test_form_id_needs_values(self):
        backend, _, dispatcher = _setup(entries=[])
        assert dispatcher.dispatch("entry create", ["1"], {}) is ExitStatus.USAGE
        assert backend.calls == []

    def test_zero_form_id_rejected_before_backend(self):
        backend, _, dispatcher = _setup(entries=[])
        status = dispatcher.dispatch("entry create", ["0"], {}, {"field_1": "x"})
        assert status is ExitStatus.USAGE
        assert backend.calls == []

    def test_non_field_option_rejected(self):
        _, _, dispatcher = _setup(entries=[])
        status = dispatcher.dispatch("entry create", ["1"], {}, {"colour": "red"})
        assert status is ExitStatus.USAGE


class TestEntryUpdate:

    def test_unchanged_values_make_no_write(self):
        backend, console, dispatcher = _setup()
        status = dispatcher.dispatch("entry update", ["7"], {}, {"field_1": "Acme"})
        assert status is ExitStatus.OK
        assert backend.write_calls == []
        assert console.lines == [
            "The value of field 1 is already Acme. Skipping.",
            "No fields updated",
        ]

    def test_changed_values_written_once(self):
        backend, console, dispatcher = _setup()
        dispatcher.dispatch(
            "entry update",
            ["7"],
            {"entry-json": '{"2": "b@acme.test"}'},
            {"field_1": "Globex"},
        )
        ((_, entry_id, changes, replace),) = backend.calls_to("update_record")
        assert (entry_id, replace) == (7, False)
        assert changes == {"2": "b@acme.test", "1": "Globex"}
        assert "Updated field 1 from Acme to Globex" in console.lines
        assert console.successes == ["Field values updated: 2"]

    def test_entry_id_cannot_change(self):
        backend, console, dispatcher = _setup()
        status = dispatcher.dispatch("entry update", ["7"], {"entry-json": '{"id": 8}'})
        assert status is ExitStatus.FAILURE
        assert console.errors == ["Can't change the Entry ID, sorry."]
        assert backend.write_calls == []


class TestEntryDelete:

    def test_force_deletes(self):
        backend, console, dispatcher = _setup()
        dispatcher.dispatch("entry delete", ["7"], {"force": True})
        assert backend.calls_to("delete_record") == [(RecordKind.ENTRY, 7)]
        assert console.successes == ["Deleted entry 7"]

    def test_trash_by_default(self):
        backend, console, dispatcher = _setup()
        dispatcher.dispatch("entry delete", ["7"], {})
        assert backend.entry(7)["status"] == "trash"
        assert backend.calls_to("delete_record") == []
        assert console.successes == ["Trashed entry 7"]

    def test_missing_entry_not_deleted(self):
        backend, console, dispatcher = _setup()
        status = dispatcher.dispatch("entry delete", ["999"], {"force": True})
        assert status is ExitStatus.FAILURE
        assert console.errors == ["Entry not found: 999"]
        assert backend.calls_to("delete_record") == []


class TestEntryDuplicateAndEdit:

    def test_duplicate_count(self):
        backend, console, dispatcher = _setup()
        dispatcher.dispatch("entry duplicate", ["7"], {"count": "3"})
        assert len(backend.calls_to("create_record")) == 3
        assert console.ticks == 3
        assert console.successes == ["Entries created: 3"]

    def test_duplicate_count_must_be_positive(self):
        backend, _, dispatcher = _setup()
        assert dispatcher.dispatch("entry duplicate", ["7"], {"count": "0"}) is ExitStatus.USAGE
        assert backend.calls == []

    def test_edit_cannot_change_id(self):
        backend = FakeFormsBackend(forms=[FORM], entries=[_entry(7)])
        console = FakeConsole(edit_result=json.dumps({**_entry(7), "id": 9}))
        status = build_dispatcher(backend, console).dispatch("entry edit", ["7"], {})
        assert status is ExitStatus.FAILURE
        assert backend.write_calls == []
