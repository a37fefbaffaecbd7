"""Downloads a release archive and unpacks it into a package directory."""

from __future__ import annotations

import io
import logging
import shutil
import zipfile
from pathlib import Path, PurePosixPath

import requests

from formscli.domain.exceptions import RemoteServiceError, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30


class PackageDownloader:

    def __init__(
        self,
        session: requests.Session | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._session = session or requests.Session()
        self._timeout = timeout

    def __call__(self, url: str, target: Path) -> None:
        """Replace the contents of *target* with the archive at *url*."""
        logger.info("Downloading %s", url)
        try:
            response = self._session.get(url, timeout=self._timeout)
        except requests.RequestException as exc:
            raise RemoteServiceError(f"Download failed: {exc}") from exc
        if response.status_code != 200:
            raise RemoteServiceError(
                f"Download failed: HTTP {response.status_code} for {url}"
            )
        try:
            archive = zipfile.ZipFile(io.BytesIO(response.content))
        except zipfile.BadZipFile as exc:
            raise ValidationError(f"The downloaded package is not a zip archive: {url}") from exc

        if target.exists():
            shutil.rmtree(target)
        target.mkdir(parents=True)
        with archive:
            extract(archive, target)


def extract(archive: zipfile.ZipFile, target: Path) -> None:
    """Unpack *archive* into *target*, dropping a single shared top-level folder."""
    names = [n for n in archive.namelist() if not n.endswith("/")]
    tops = {PurePosixPath(n).parts[0] for n in names}
    strip = len(tops) == 1 and all(len(PurePosixPath(n).parts) > 1 for n in names)

    root = target.resolve()
    for name in names:
        parts = PurePosixPath(name).parts[1 if strip else 0:]
        destination = root.joinpath(*parts).resolve()
        if root not in destination.parents:
            raise ValidationError(f"Unsafe path in package archive: {name}")
        destination.parent.mkdir(parents=True, exist_ok=True)
        with archive.open(name) as src, destination.open("wb") as dst:
            shutil.copyfileobj(src, dst)
