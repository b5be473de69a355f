"""Tests for adapters/snell_release.py -- release download and extraction."""

import io
import stat
import zipfile
from pathlib import Path

import httpx
import pytest

from adapters.snell_release import download_snell, extract_binary, release_url
from core.config import AppSettings
from core.errors import DownloadError


def _zip_bytes(members: dict[str, bytes]) -> bytes:
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as zf:
        for name, data in members.items():
            zf.writestr(name, data)
    return buf.getvalue()


def test_release_url(settings: AppSettings) -> None:
    assert release_url(settings, "amd64") == (
        "https://dl.nssurge.com/snell/snell-server-v4.0.1-linux-amd64.zip"
    )


def test_release_url_custom_base() -> None:
    s = AppSettings(_env_file=None, download_base_url="https://mirror.example/snell/", snell_version="v4.1.1")
    assert release_url(s, "aarch64") == "https://mirror.example/snell/snell-server-v4.1.1-linux-aarch64.zip"


class TestDownload:
    def test_downloads_and_extracts(self, settings: AppSettings, tmp_path: Path) -> None:
        payload = _zip_bytes({"snell-server": b"\x7fELF binary"})
        seen: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(str(request.url))
            return httpx.Response(200, content=payload)

        dest = tmp_path / "snell"
        binary = download_snell(settings, dest, "amd64", transport=httpx.MockTransport(handler))

        assert seen == [release_url(settings, "amd64")]
        assert binary == dest / "snell-server"
        assert binary.read_bytes() == b"\x7fELF binary"
        assert stat.S_IMODE(binary.stat().st_mode) == 0o755
        assert sorted(p.name for p in dest.iterdir()) == ["snell-server"]

    def test_http_error(self, settings: AppSettings, tmp_path: Path) -> None:
        transport = httpx.MockTransport(lambda request: httpx.Response(404))
        with pytest.raises(DownloadError, match="download failed"):
            download_snell(settings, tmp_path, "amd64", transport=transport)

    def test_not_a_zip(self, settings: AppSettings, tmp_path: Path) -> None:
        transport = httpx.MockTransport(lambda request: httpx.Response(200, content=b"<html>"))
        with pytest.raises(DownloadError, match="not a valid zip"):
            download_snell(settings, tmp_path, "amd64", transport=transport)


class TestExtract:
    def test_nested_member(self, tmp_path: Path) -> None:
        archive = tmp_path / "a.zip"
        archive.write_bytes(_zip_bytes({"dist/snell-server": b"bin", "README": b"x"}))
        binary = extract_binary(archive, tmp_path / "out")
        assert binary.read_bytes() == b"bin"

    def test_missing_member(self, tmp_path: Path) -> None:
        archive = tmp_path / "a.zip"
        archive.write_bytes(_zip_bytes({"README": b"x"}))
        with pytest.raises(DownloadError, match="does not contain"):
            extract_binary(archive, tmp_path / "out")
