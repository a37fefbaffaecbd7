"""Command dispatcher: binds a verb's arguments and runs its handler.

Every command is described by a ``CommandSpec``.  ``Dispatcher.dispatch``
then, in order:

1. binds positional arguments to the declared slots (a variadic slot,
   always last, takes the remaining arguments) and parses typed slots
   such as record IDs,
2. fills unset options from the declared defaults and validates
   ``--format`` against the formats the command renders,
3. runs the command's precheck, if any,
4. confirms the forms backend is installed and recent enough (skipped for
   commands such as ``install`` that run without it),
5. calls the handler.

Steps 1-3 never touch the backend, so usage errors are reported before
any backend call.  Domain errors raised anywhere are printed once here
and mapped to an exit status.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from enum import IntEnum
from types import MappingProxyType
from typing import Any

from formscli.application.console import Console
from formscli.application.output.formatter import OutputFormat, parse_format
from formscli.domain.exceptions import (
    BackendUnavailableError,
    BackendVersionTooLowError,
    DomainException,
    InvalidArgumentError,
    MissingArgumentError,
    UsageError,
)
from formscli.domain.model.value_objects import Version
from formscli.domain.repository.forms_backend import FormsBackend

logger = logging.getLogger(__name__)

MIN_BACKEND_VERSION = "1.9.17.8"


class ExitStatus(IntEnum):
    OK = 0
    FAILURE = 1
    USAGE = 2


@dataclass(frozen=True)
class Slot:
    """A positional argument.

    *parse* validates and converts a single value while binding; variadic
    slots stay raw so batch commands can report each bad item.
    """

    name: str
    required: bool = True
    variadic: bool = False
    parse: Callable[[str], Any] | None = None


@dataclass(frozen=True)
class CommandRequest:
    """Bound arguments of one invocation.

    ``args`` maps slot names to values (a tuple for a variadic slot),
    ``options`` holds every declared option with defaults applied and
    ``extras`` the free-form ``--key=value`` pairs of commands that take
    them.
    """

    verb: str
    args: Mapping[str, Any]
    options: Mapping[str, Any]
    extras: Mapping[str, str] = field(default_factory=dict)

    def arg(self, name: str) -> Any:
        return self.args.get(name)

    def option(self, name: str) -> Any:
        return self.options.get(name)

    def flag(self, name: str) -> bool:
        return bool(self.options.get(name))

    @property
    def format(self) -> OutputFormat:
        return self.options["format"]


Handler = Callable[[CommandRequest], "ExitStatus | None"]
Precheck = Callable[[CommandRequest], None]


@dataclass(frozen=True)
class CommandSpec:
    verb: str
    handler: Handler
    slots: tuple[Slot, ...] = ()
    options: Mapping[str, Any] = field(default_factory=dict)
    formats: tuple[OutputFormat, ...] | None = None
    needs_backend: bool = True
    accepts_extras: bool = False
    precheck: Precheck | None = None

    def __post_init__(self) -> None:
        for slot in self.slots[:-1]:
            if slot.variadic:
                raise ValueError(f"{self.verb}: only the last slot may be variadic")
        if self.formats is not None and "format" not in self.options:
            raise ValueError(f"{self.verb}: a format list needs a 'format' default")


class Dispatcher:

    def __init__(
        self,
        commands: Iterable[CommandSpec],
        backend: FormsBackend,
        console: Console,
        min_backend_version: str = MIN_BACKEND_VERSION,
    ) -> None:
        self._commands = {spec.verb: spec for spec in commands}
        self._backend = backend
        self._console = console
        self._min_version = min_backend_version

    @property
    def verbs(self) -> list[str]:
        return sorted(self._commands)

    def dispatch(
        self,
        verb: str,
        args: Sequence[str],
        options: Mapping[str, Any],
        extras: Mapping[str, str] | None = None,
    ) -> ExitStatus:
        spec = self._commands.get(verb)
        if spec is None:
            self._console.error(f"'{verb}' is not a registered command.")
            return ExitStatus.USAGE

        logger.debug("Dispatching %r args=%r options=%r", verb, list(args), dict(options))
        try:
            request = self._bind(spec, args, options, extras or {})
            if spec.precheck is not None:
                spec.precheck(request)
            if spec.needs_backend:
                self._check_backend()
            status = spec.handler(request)
        except UsageError as exc:
            self._console.error(f"{exc}\nSee 'formscli {verb} --help'.")
            return ExitStatus.USAGE
        except DomainException as exc:
            logger.debug("%s failed: %s", verb, type(exc).__name__)
            self._console.error(str(exc))
            return ExitStatus.FAILURE

        return ExitStatus.OK if status is None else ExitStatus(status)

    # --- Binding ------------------------------------------------------------------

    @staticmethod
    def _bind(
        spec: CommandSpec,
        args: Sequence[str],
        options: Mapping[str, Any],
        extras: Mapping[str, str],
    ) -> CommandRequest:
        remaining = list(args)
        bound: dict[str, Any] = {}
        for slot in spec.slots:
            if slot.variadic:
                if slot.required and not remaining:
                    raise MissingArgumentError(slot.name)
                bound[slot.name] = tuple(remaining)
                remaining = []
            elif remaining:
                value = remaining.pop(0)
                bound[slot.name] = slot.parse(value) if slot.parse else value
            elif slot.required:
                raise MissingArgumentError(slot.name)
            else:
                bound[slot.name] = None
        if remaining:
            raise InvalidArgumentError(
                f"Too many positional arguments: {' '.join(remaining)}"
            )

        resolved = dict(spec.options)
        for name, value in options.items():
            if value is None:
                continue
            if name not in spec.options:
                raise InvalidArgumentError(f"Unknown option: --{name}")
            resolved[name] = value
        if spec.formats is not None:
            resolved["format"] = parse_format(resolved["format"], spec.formats)

        if extras and not spec.accepts_extras:
            raise InvalidArgumentError(f"Unknown option: --{next(iter(extras))}")

        return CommandRequest(
            verb=spec.verb,
            args=MappingProxyType(bound),
            options=MappingProxyType(resolved),
            extras=MappingProxyType(dict(extras)),
        )

    # --- Backend gate -------------------------------------------------------------

    def _check_backend(self) -> None:
        installed = self._backend.version()
        if installed is None:
            raise BackendUnavailableError(
                "The forms backend is not installed. Run 'formscli install' first."
            )
        if Version.parse(installed) < Version.parse(self._min_version):
            raise BackendVersionTooLowError(
                f"Forms backend {installed} is installed, but version "
                f"{self._min_version} or later is required."
            )
