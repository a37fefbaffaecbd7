"""click implementation of the Console port."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import PurePath

import click

from formscli.application.console import Console, Progress


class _ClickProgress(Progress):

    def __init__(self, bar) -> None:
        self._bar = bar

    def tick(self, steps: int = 1) -> None:
        self._bar.update(steps)


class ClickConsole(Console):

    def line(self, text: str = "") -> None:
        click.echo(text)

    def success(self, message: str) -> None:
        click.echo(f"{click.style('Success:', fg='green')} {message}")

    def warning(self, message: str) -> None:
        click.echo(f"{click.style('Warning:', fg='yellow')} {message}", err=True)

    def error(self, message: str) -> None:
        click.echo(f"{click.style('Error:', fg='red')} {message}", err=True)

    @contextmanager
    def progress(self, label: str, total: int) -> Iterator[Progress]:
        with click.progressbar(
            length=max(total, 0), label=label, file=click.get_text_stream("stderr")
        ) as bar:
            yield _ClickProgress(bar)

    def edit(self, content: str, filename: str) -> str | None:
        return click.edit(
            content, extension=PurePath(filename).suffix or ".txt", require_save=True
        )
