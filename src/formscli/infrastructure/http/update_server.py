"""HTTP client for the release server (package info and release checksums)."""

from __future__ import annotations

import logging

import requests

from formscli.domain.exceptions import RemoteServiceError
from formscli.domain.repository.update_server import PackageInfo, UpdateServer

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30


class HttpUpdateServer(UpdateServer):
    """Talks to ``<base_url>/api.php`` and to a per-version checksum file.

    *checksum_url* is a template with a ``{version}`` placeholder.  All
    requests are single-shot with a fixed timeout.
    """

    def __init__(
        self,
        base_url: str,
        checksum_url: str,
        session: requests.Session | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._checksum_url = checksum_url
        self._session = session or requests.Session()
        self._timeout = timeout

    def get_package_info(self, slug: str, key: str) -> PackageInfo | None:
        if not self._base_url:
            raise RemoteServiceError(
                "No update server configured. Use --update-url or FORMSCLI_UPDATE_URL."
            )
        url = f"{self._base_url}/api.php"
        logger.debug("GET %s slug=%s", url, slug)
        try:
            response = self._session.get(
                url,
                params={"op": "get_plugin", "slug": slug, "key": key},
                headers={"Accept": "application/json"},
                timeout=self._timeout,
            )
        except requests.RequestException as exc:
            raise RemoteServiceError(
                f"There was a problem getting the download URL: {exc}"
            ) from exc
        if response.status_code != 200:
            raise RemoteServiceError(
                f"There was a problem getting the download URL (HTTP {response.status_code})"
            )

        try:
            data = response.json()
        except ValueError:
            logger.warning("Release server sent a non-JSON answer for %s", slug)
            return None
        if not isinstance(data, dict) or not data.get("download_url"):
            return None
        return PackageInfo(
            slug=slug,
            version=str(data.get("version", "")),
            download_url=str(data["download_url"]),
        )

    def get_checksums(self, version: str) -> list[str] | None:
        if not self._checksum_url:
            logger.warning("No checksum URL configured (--checksum-url, FORMSCLI_CHECKSUM_URL)")
            return None
        url = self._checksum_url.format(version=version)
        logger.debug("GET %s", url)
        try:
            response = self._session.get(
                url, headers={"Accept": "text/plain"}, timeout=self._timeout
            )
        except requests.RequestException as exc:
            logger.warning("Could not fetch checksums from %s: %s", url, exc)
            return None
        if response.status_code != 200:
            logger.warning("Checksums request to %s answered %s", url, response.status_code)
            return None
        return [line for line in response.text.strip().splitlines() if line.strip()]
