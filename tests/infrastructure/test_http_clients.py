"""Tests for the release server client and the package downloader."""

import io
import zipfile

import pytest
import requests

from formscli.domain.exceptions import RemoteServiceError, ValidationError
from formscli.infrastructure.http.package_downloader import PackageDownloader, extract
from formscli.infrastructure.http.update_server import HttpUpdateServer


class _Response:

    def __init__(self, status_code=200, json_data=None, text="", content=b""):
        self.status_code = status_code
        self._json = json_data
        self.text = text
        self.content = content

    def json(self):
        if self._json is None:
            raise ValueError("not json")
        return self._json


class _Session:

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.requests = []

    def get(self, url, **kwargs):
        self.requests.append((url, kwargs))
        if self.error is not None:
            raise self.error
        return self.response


def _zip(files):
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        for name, data in files.items():
            archive.writestr(name, data)
    return buffer.getvalue()


# ── Update server ────────────────────────────────────────────────────────────


class TestUpdateServer:

    def test_package_info(self):
        session = _Session(_Response(json_data={"version": "2.6.0", "download_url": "https://d/x.zip"}))
        server = HttpUpdateServer("https://updates.example.test/", "", session=session)

        info = server.get_package_info("forms", "key")

        assert (info.version, info.download_url) == ("2.6.0", "https://d/x.zip")
        url, kwargs = session.requests[0]
        assert url == "https://updates.example.test/api.php"
        assert kwargs["params"] == {"op": "get_plugin", "slug": "forms", "key": "key"}

    def test_refused_key_is_none(self):
        session = _Session(_Response(json_data={"error": "bad key"}))
        assert HttpUpdateServer("https://u", "", session=session).get_package_info("forms", "k") is None

    def test_unreachable(self):
        session = _Session(error=requests.ConnectionError("down"))
        with pytest.raises(RemoteServiceError, match="problem getting the download URL"):
            HttpUpdateServer("https://u", "", session=session).get_package_info("forms", "k")

    def test_http_error(self):
        session = _Session(_Response(status_code=500))
        with pytest.raises(RemoteServiceError, match="HTTP 500"):
            HttpUpdateServer("https://u", "", session=session).get_package_info("forms", "k")

    def test_not_configured(self):
        session = _Session()
        with pytest.raises(RemoteServiceError, match="No update server configured"):
            HttpUpdateServer("", "", session=session).get_package_info("forms", "k")
        assert session.requests == []

    def test_checksums(self):
        session = _Session(_Response(text="abc  a.php\n\ndef  b.php\n"))
        server = HttpUpdateServer("", "https://c.example.test/{version}/md5.txt", session=session)
        assert server.get_checksums("2.5") == ["abc  a.php", "def  b.php"]
        assert session.requests[0][0] == "https://c.example.test/2.5/md5.txt"

    def test_checksums_failure_is_none(self):
        session = _Session(error=requests.Timeout("slow"))
        server = HttpUpdateServer("", "https://c/{version}", session=session)
        assert server.get_checksums("2.5") is None

    def test_checksums_not_configured(self):
        assert HttpUpdateServer("", "", session=_Session()).get_checksums("2.5") is None


# ── Package downloader ───────────────────────────────────────────────────────


class TestPackageDownloader:

    def test_download_replaces_target(self, tmp_path):
        target = tmp_path / "forms"
        target.mkdir()
        (target / "stale.php").write_text("old")
        content = _zip({"forms/forms.php": "<?php", "forms/js/app.js": "//"})
        downloader = PackageDownloader(session=_Session(_Response(content=content)))

        downloader("https://d/forms.zip", target)

        assert sorted(p.relative_to(target).as_posix() for p in target.rglob("*") if p.is_file()) == [
            "forms.php",
            "js/app.js",
        ]

    def test_not_a_zip(self, tmp_path):
        downloader = PackageDownloader(session=_Session(_Response(content=b"html")))
        with pytest.raises(ValidationError, match="not a zip archive"):
            downloader("https://d/forms.zip", tmp_path / "forms")

    def test_http_error(self, tmp_path):
        downloader = PackageDownloader(session=_Session(_Response(status_code=404)))
        with pytest.raises(RemoteServiceError, match="HTTP 404"):
            downloader("https://d/forms.zip", tmp_path / "forms")

    def test_mixed_top_level_kept(self, tmp_path):
        with zipfile.ZipFile(io.BytesIO(_zip({"a.php": "1", "lib/b.php": "2"}))) as archive:
            extract(archive, tmp_path)
        assert (tmp_path / "a.php").is_file()
        assert (tmp_path / "lib" / "b.php").is_file()

    def test_path_traversal_rejected(self, tmp_path):
        with zipfile.ZipFile(io.BytesIO(_zip({"ok.php": "1", "../evil.php": "x"}))) as archive:
            with pytest.raises(ValidationError, match="Unsafe path"):
                extract(archive, tmp_path / "pkg")
