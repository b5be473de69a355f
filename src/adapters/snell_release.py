"""Snell server release download.

Surge publishes the server as a zip holding a single `snell-server`
executable, one archive per version and architecture:

    <base>/snell-server-<version>-linux-<arch>.zip
"""

from __future__ import annotations

import logging
import shutil
import tempfile
import zipfile
from pathlib import Path, PurePosixPath

import httpx

from adapters.http_client import build_client
from core.config import AppSettings
from core.errors import DownloadError

logger = logging.getLogger(__name__)

BINARY_NAME = "snell-server"


def release_filename(version: str, arch: str) -> str:
    return f"snell-server-{version}-linux-{arch}.zip"


def release_url(settings: AppSettings, arch: str) -> str:
    base = settings.download_base_url.rstrip("/")
    return f"{base}/{release_filename(settings.snell_version, arch)}"


def extract_binary(archive: Path, dest_dir: Path) -> Path:
    """Extract `snell-server` from `archive` into `dest_dir` (mode 0755)."""

    try:
        with zipfile.ZipFile(archive) as zf:
            member = next(
                (
                    info
                    for info in zf.infolist()
                    if not info.is_dir() and PurePosixPath(info.filename).name == BINARY_NAME
                ),
                None,
            )
            if member is None:
                raise DownloadError(f"{archive.name} does not contain {BINARY_NAME}")

            dest_dir.mkdir(parents=True, exist_ok=True)
            target = dest_dir / BINARY_NAME
            with zf.open(member) as src, target.open("wb") as dst:
                shutil.copyfileobj(src, dst)
    except zipfile.BadZipFile as exc:
        raise DownloadError(f"{archive.name} is not a valid zip archive") from exc

    target.chmod(0o755)
    return target


def download_snell(
    settings: AppSettings,
    dest_dir: Path,
    arch: str,
    *,
    transport: httpx.BaseTransport | None = None,
) -> Path:
    """Download the release for `arch` and leave the binary in `dest_dir`.

    The archive goes to a temporary directory that is always removed.
    """

    url = release_url(settings, arch)
    logger.info("Downloading %s", url)

    with tempfile.TemporaryDirectory(prefix="snell-") as tmp:
        archive = Path(tmp) / release_filename(settings.snell_version, arch)
        try:
            with build_client(settings, transport=transport) as client:
                with client.stream("GET", url) as response:
                    response.raise_for_status()
                    with archive.open("wb") as fh:
                        for chunk in response.iter_bytes():
                            fh.write(chunk)
        except httpx.HTTPError as exc:
            raise DownloadError(f"download failed ({url}): {exc}") from exc

        binary = extract_binary(archive, dest_dir)

    logger.info("Snell binary ready at %s", binary)
    return binary
