"""Abstract client for the release/update server."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class PackageInfo:
    slug: str
    version: str
    download_url: str


class UpdateServer(ABC):

    @abstractmethod
    def get_package_info(self, slug: str, key: str) -> PackageInfo | None:
        """Latest release of *slug* available to *key*, or None if refused.

        Raises RemoteServiceError if the server cannot be reached.
        """

    @abstractmethod
    def get_checksums(self, version: str) -> list[str] | None:
        """``<md5>  <relative path>`` lines for a release, or None on failure."""
