"""Tests for argument binding, option handling and backend gating."""

import pytest

from formscli.application.dispatcher import (
    CommandRequest,
    CommandSpec,
    Dispatcher,
    ExitStatus,
    Slot,
)
from formscli.application.output.formatter import ALL_FORMATS, OutputFormat
from formscli.application.registry import parse_form_id
from formscli.domain.exceptions import EntityNotFoundError
from tests.fakes import FakeConsole, FakeFormsBackend, build_dispatcher


def _recording_dispatcher(backend=None, **spec_kwargs):
    seen: list[CommandRequest] = []

    def handler(request):
        seen.append(request)

    spec = CommandSpec("thing do", handler, **spec_kwargs)
    console = FakeConsole()
    dispatcher = Dispatcher([spec], backend or FakeFormsBackend(), console)
    return dispatcher, console, seen


class TestBinding:

    def test_slots_bound_in_order(self):
        dispatcher, _, seen = _recording_dispatcher(slots=(Slot("a"), Slot("b")))
        assert dispatcher.dispatch("thing do", ["1", "2"], {}) is ExitStatus.OK
        assert seen[0].arg("a") == "1"
        assert seen[0].arg("b") == "2"

    def test_variadic_slot_takes_the_rest(self):
        dispatcher, _, seen = _recording_dispatcher(
            slots=(Slot("form-id"), Slot("ids", variadic=True))
        )
        dispatcher.dispatch("thing do", ["1", "a", "b"], {})
        assert seen[0].arg("ids") == ("a", "b")

    def test_optional_slot_is_none(self):
        dispatcher, _, seen = _recording_dispatcher(slots=(Slot("x", required=False),))
        dispatcher.dispatch("thing do", [], {})
        assert seen[0].arg("x") is None

    def test_slot_parser_converts_value(self):
        dispatcher, _, seen = _recording_dispatcher(slots=(Slot("n", parse=int),))
        dispatcher.dispatch("thing do", ["7"], {})
        assert seen[0].arg("n") == 7

    def test_slot_parser_error_stops_before_backend(self):
        backend = FakeFormsBackend()
        dispatcher, _, seen = _recording_dispatcher(
            backend, slots=(Slot("form-id", parse=parse_form_id),)
        )
        assert dispatcher.dispatch("thing do", ["x"], {}) is ExitStatus.USAGE
        assert seen == []
        assert backend.calls == []

    def test_missing_argument_is_usage_error(self):
        dispatcher, console, seen = _recording_dispatcher(slots=(Slot("form-id"),))
        status = dispatcher.dispatch("thing do", [], {})
        assert status is ExitStatus.USAGE
        assert seen == []
        assert console.errors[0].startswith("Missing required argument: <form-id>")
        assert "See 'formscli thing do --help'." in console.errors[0]

    def test_missing_variadic_argument(self):
        dispatcher, _, _ = _recording_dispatcher(slots=(Slot("ids", variadic=True),))
        assert dispatcher.dispatch("thing do", [], {}) is ExitStatus.USAGE

    def test_too_many_arguments(self):
        dispatcher, console, _ = _recording_dispatcher(slots=(Slot("a"),))
        assert dispatcher.dispatch("thing do", ["1", "2"], {}) is ExitStatus.USAGE
        assert "Too many positional arguments: 2" in console.errors[0]

    def test_only_last_slot_may_be_variadic(self):
        with pytest.raises(ValueError, match="only the last slot"):
            CommandSpec("x", lambda r: None, slots=(Slot("a", variadic=True), Slot("b")))


class TestOptions:

    def test_defaults_fill_unset_options(self):
        dispatcher, _, seen = _recording_dispatcher(options={"force": False, "dir": "."})
        dispatcher.dispatch("thing do", [], {"force": True, "dir": None})
        assert seen[0].options == {"force": True, "dir": "."}

    def test_unknown_option_rejected(self):
        dispatcher, console, _ = _recording_dispatcher(options={"force": False})
        assert dispatcher.dispatch("thing do", [], {"color": "red"}) is ExitStatus.USAGE
        assert "Unknown option: --color" in console.errors[0]

    def test_format_parsed(self):
        dispatcher, _, seen = _recording_dispatcher(
            options={"format": "table"}, formats=ALL_FORMATS
        )
        dispatcher.dispatch("thing do", [], {"format": "CSV"})
        assert seen[0].format is OutputFormat.CSV

    def test_extras_rejected_unless_accepted(self):
        dispatcher, _, _ = _recording_dispatcher()
        assert dispatcher.dispatch("thing do", [], {}, {"field_1": "x"}) is ExitStatus.USAGE

    def test_extras_passed_through(self):
        dispatcher, _, seen = _recording_dispatcher(accepts_extras=True)
        dispatcher.dispatch("thing do", [], {}, {"field_1": "x"})
        assert seen[0].extras == {"field_1": "x"}


class TestBackendGate:

    def test_not_installed(self):
        backend = FakeFormsBackend(version=None)
        dispatcher, console, seen = _recording_dispatcher(backend)
        assert dispatcher.dispatch("thing do", [], {}) is ExitStatus.FAILURE
        assert seen == []
        assert "not installed" in console.errors[0]

    def test_too_old(self):
        backend = FakeFormsBackend(version="1.9.17.7")
        dispatcher, console, seen = _recording_dispatcher(backend)
        assert dispatcher.dispatch("thing do", [], {}) is ExitStatus.FAILURE
        assert seen == []
        assert "1.9.17.8" in console.errors[0]

    def test_minimum_version_accepted(self):
        backend = FakeFormsBackend(version="1.9.17.8")
        dispatcher, _, seen = _recording_dispatcher(backend)
        assert dispatcher.dispatch("thing do", [], {}) is ExitStatus.OK
        assert len(seen) == 1

    def test_commands_without_backend_skip_the_check(self):
        backend = FakeFormsBackend(version=None)
        dispatcher, _, seen = _recording_dispatcher(backend, needs_backend=False)
        assert dispatcher.dispatch("thing do", [], {}) is ExitStatus.OK
        assert backend.calls == []


class TestErrors:

    def test_unknown_verb(self):
        dispatcher, console, _ = _recording_dispatcher()
        assert dispatcher.dispatch("thing undo", [], {}) is ExitStatus.USAGE
        assert console.errors == ["'thing undo' is not a registered command."]

    def test_domain_error_reported_once(self):
        def handler(request):
            raise EntityNotFoundError("Form not found: 9")

        console = FakeConsole()
        dispatcher = Dispatcher([CommandSpec("x", handler)], FakeFormsBackend(), console)
        assert dispatcher.dispatch("x", [], {}) is ExitStatus.FAILURE
        assert console.errors == ["Form not found: 9"]

    def test_handler_status_returned(self):
        console = FakeConsole()
        spec = CommandSpec("x", lambda r: ExitStatus.FAILURE)
        dispatcher = Dispatcher([spec], FakeFormsBackend(), console)
        assert dispatcher.dispatch("x", [], {}) is ExitStatus.FAILURE


class TestCommandTable:

    def test_unsupported_format_makes_no_backend_call(self):
        backend = FakeFormsBackend()
        console = FakeConsole()
        dispatcher = build_dispatcher(backend, console)
        status = dispatcher.dispatch("entry get", ["1"], {"format": "csv"})
        assert status is ExitStatus.USAGE
        assert backend.calls == []
        assert "Invalid format 'csv'" in console.errors[0]

    def test_missing_entry_id_makes_no_backend_call(self):
        backend = FakeFormsBackend()
        dispatcher = build_dispatcher(backend)
        assert dispatcher.dispatch("entry get", [], {}) is ExitStatus.USAGE
        assert backend.calls == []

    def test_every_command_group_registered(self):
        verbs = build_dispatcher().verbs
        for verb in (
            "form list",
            "form field update",
            "form notification create",
            "entry notification send",
            "entry export",
            "license update",
            "tool verify-checksums",
            "install",
            "version",
        ):
            assert verb in verbs
