"""Glue between click commands and the Dispatcher."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

import click

from formscli.application.dispatcher import Dispatcher
from formscli.infrastructure.bootstrap import build_dispatcher

# For commands that take free-form --<key>=<value> options after their
# positional arguments.
RAW_TOKENS = {"ignore_unknown_options": True}


def split_tokens(tokens: Sequence[str]) -> tuple[list[str], dict[str, str]]:
    """Split raw tokens into positionals and ``--key=value`` extras.

    ``["1", "3", "--label", "Name", "--required=1"]`` gives
    ``(["1", "3"], {"label": "Name", "required": "1"})``.  A bare
    ``--key`` at the end or before another option stands for ``1``.
    """
    positionals: list[str] = []
    extras: dict[str, str] = {}
    pending: str | None = None
    for token in tokens:
        if token.startswith("--"):
            if pending is not None:
                extras[pending] = "1"
            key, sep, value = token[2:].partition("=")
            if sep:
                extras[key] = value
                pending = None
            else:
                pending = key
        elif pending is not None:
            extras[pending] = token
            pending = None
        elif extras:
            raise click.UsageError(f"Unexpected argument: {token}")
        else:
            positionals.append(token)
    if pending is not None:
        extras[pending] = "1"
    return positionals, extras


def _dispatcher(ctx: click.Context) -> Dispatcher:
    obj = ctx.find_object(dict)
    if obj.get("dispatcher") is None:
        obj["dispatcher"] = build_dispatcher(obj["settings"])
    return obj["dispatcher"]


def run(
    verb: str,
    args: Sequence[Any] = (),
    options: Mapping[str, Any] | None = None,
    extras: Mapping[str, str] | None = None,
) -> None:
    """Dispatch *verb* and exit with its status."""
    ctx = click.get_current_context()
    status = _dispatcher(ctx).dispatch(
        verb,
        [str(a) for a in args if a is not None],
        options or {},
        extras,
    )
    ctx.exit(int(status))
