"""Host preparation: OS check, apt, Docker installation.

Only Debian-family hosts are supported, because the installer relies on
apt-get and on Docker's convenience script.
"""

from __future__ import annotations

import errno
import logging
import os
import platform
import socket
from pathlib import Path
from typing import Callable, Iterable, Mapping, Sequence

from adapters.command import Runner, command_exists, run_cmd
from adapters.http_client import fetch_text
from core.config import AppSettings
from core.domain.models import OsRelease
from core.errors import PermissionDeniedError, UnsupportedSystemError

logger = logging.getLogger(__name__)

OS_RELEASE_PATH = Path("/etc/os-release")

# Tools the installer itself shells out to, mapped to their apt package.
# get.docker.com needs curl to fetch Docker's signing key.
REQUIRED_TOOLS: Mapping[str, str] = {
    "curl": "curl",
}

_ARCH_ALIASES: Mapping[str, str] = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "aarch64": "aarch64",
    "arm64": "aarch64",
    "armv7l": "armv7l",
    "armv7": "armv7l",
    "i386": "i386",
    "i686": "i386",
}


def parse_os_release(text: str) -> OsRelease:
    info: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        info[key.strip()] = value.strip().strip('"').strip("'")

    return OsRelease(
        id=info.get("ID", ""),
        id_like=info.get("ID_LIKE", "").split(),
        version_id=info.get("VERSION_ID", ""),
        pretty_name=info.get("PRETTY_NAME", ""),
    )


def read_os_release(path: Path = OS_RELEASE_PATH) -> OsRelease:
    if not path.is_file():
        raise UnsupportedSystemError(f"{path} not found; cannot determine the distribution")
    return parse_os_release(path.read_text(encoding="utf-8"))


def is_root() -> bool:
    return hasattr(os, "geteuid") and os.geteuid() == 0


def require_root() -> None:
    if not is_root():
        raise PermissionDeniedError("root privileges are required")


def check_system(path: Path = OS_RELEASE_PATH) -> OsRelease:
    """Fail unless the host is Debian, Ubuntu or a derivative of either."""

    release = read_os_release(path)
    logger.info("Detected OS: %s %s", release.id or "unknown", release.version_id or "")
    if not release.is_debian_family:
        raise UnsupportedSystemError(
            f"unsupported distribution: {release.pretty_name or release.id or 'unknown'}"
        )
    return release


def apt_install(packages: Sequence[str], *, runner: Runner = run_cmd) -> None:
    if not packages:
        return
    env = {"DEBIAN_FRONTEND": "noninteractive"}
    runner(["apt-get", "update"], env=env)
    runner(["apt-get", "install", "-y", *packages], env=env)


def missing_tools(
    tools: Iterable[str] = REQUIRED_TOOLS,
    *,
    exists: Callable[[str], bool] = command_exists,
) -> list[str]:
    return [tool for tool in tools if not exists(tool)]


def ensure_tools(
    tools: Mapping[str, str] = REQUIRED_TOOLS,
    *,
    runner: Runner = run_cmd,
    exists: Callable[[str], bool] = command_exists,
    on_install: Callable[[str], None] | None = None,
) -> list[str]:
    """apt-get install every missing tool; return the ones installed."""

    missing = missing_tools(tools, exists=exists)
    for tool in missing:
        if on_install:
            on_install(tool)
        logger.info("Installing missing tool %s", tool)
        apt_install([tools[tool]], runner=runner)
    return missing


def install_docker(
    settings: AppSettings,
    *,
    runner: Runner = run_cmd,
    exists: Callable[[str], bool] = command_exists,
    fetch: Callable[[str, AppSettings], str] = fetch_text,
) -> bool:
    """Install Docker Engine via the convenience script when absent.

    Returns True when an installation happened.
    """

    if exists("docker"):
        return False

    logger.info("Docker not found, installing from %s", settings.docker_install_url)
    script = fetch(settings.docker_install_url, settings)
    runner(["sh", "-s"], input_text=script)
    runner(["systemctl", "enable", "docker"])
    runner(["systemctl", "start", "docker"])
    return True


def ensure_compose_plugin(*, runner: Runner = run_cmd) -> bool:
    """Install docker-compose-plugin when `docker compose` is unavailable.

    Returns True when an installation happened.
    """

    result = runner(["docker", "compose", "version"], check=False)
    if result.ok:
        return False
    logger.info("docker compose plugin missing, installing")
    apt_install(["docker-compose-plugin"], runner=runner)
    return True


def detect_arch(machine: str | None = None) -> str:
    """Map `uname -m` to the suffix used by Snell release archives."""

    raw = (machine or platform.machine()).lower()
    arch = _ARCH_ALIASES.get(raw)
    if arch is None:
        raise UnsupportedSystemError(f"unsupported CPU architecture: {raw or 'unknown'}")
    return arch


def _can_bind(family: socket.AddressFamily, kind: socket.SocketKind, host: str, port: int) -> bool:
    try:
        sock = socket.socket(family, kind)
    except OSError:
        # Address family disabled on this host.
        return True
    with sock:
        if family == socket.AF_INET6:
            sock.setsockopt(socket.IPPROTO_IPV6, socket.IPV6_V6ONLY, 1)
        try:
            sock.bind((host, port))
        except OSError as exc:
            # EADDRNOTAVAIL etc. mean the stack is unusable, not that the port is taken.
            return exc.errno != errno.EADDRINUSE
    return True


def is_port_free(port: int) -> bool:
    """Snell listens on `::0` over TCP and UDP; the port must be free on each of them."""

    hosts = [(socket.AF_INET, "0.0.0.0")]
    if socket.has_ipv6:
        hosts.append((socket.AF_INET6, "::"))
    return all(
        _can_bind(family, kind, host, port)
        for family, host in hosts
        for kind in (socket.SOCK_STREAM, socket.SOCK_DGRAM)
    )
