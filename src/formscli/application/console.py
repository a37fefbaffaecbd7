"""Console port: everything a command handler writes or asks interactively.

Handlers never print directly.  The click implementation lives in
``infrastructure/cli/console.py``; tests use a recording fake.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager


class Progress(ABC):

    @abstractmethod
    def tick(self, steps: int = 1) -> None:
        """Advance the progress counter by *steps*."""


class Console(ABC):

    @abstractmethod
    def line(self, text: str = "") -> None:
        """Write a line to standard output."""

    @abstractmethod
    def success(self, message: str) -> None:
        """Write ``Success: <message>`` to standard output."""

    @abstractmethod
    def warning(self, message: str) -> None:
        """Write ``Warning: <message>`` to standard error."""

    @abstractmethod
    def error(self, message: str) -> None:
        """Write ``Error: <message>`` to standard error."""

    @abstractmethod
    def progress(self, label: str, total: int) -> AbstractContextManager[Progress]:
        """A progress counter running from 0 to *total*."""

    @abstractmethod
    def edit(self, content: str, filename: str) -> str | None:
        """Open *content* in the user's editor.

        Returns the edited text, or None if the editor was closed without
        saving.
        """
