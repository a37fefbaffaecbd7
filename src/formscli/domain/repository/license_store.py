"""Abstract store for the license key."""

from __future__ import annotations

from abc import ABC, abstractmethod


class LicenseStore(ABC):

    @abstractmethod
    def get(self) -> str | None:
        """Return the stored key hash, or None if no key is stored."""

    @abstractmethod
    def set(self, key: str) -> None:
        """Store *key* (already hashed by the caller)."""

    @abstractmethod
    def clear(self) -> None:
        """Forget the stored key."""
