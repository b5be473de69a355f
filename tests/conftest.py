"""Shared fixtures: settings rooted in tmp_path plus fakes for the host and engine."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from adapters.command import CmdResult
from core.config import AppSettings
from core.domain.language import Language
from core.errors import CommandError, EngineError
from core.services.deployment import Deployment, HostActions


class FakeRunner:
    """Stands in for `run_cmd`; records argv and fails on request."""

    def __init__(self, failing: dict[tuple[str, ...], int] | None = None) -> None:
        self.calls: list[dict[str, Any]] = []
        self.failing = failing or {}

    def __call__(self, argv, *, check=True, env=None, cwd=None, input_text=None) -> CmdResult:
        argv = [str(a) for a in argv]
        self.calls.append({"argv": argv, "env": env, "cwd": cwd, "input_text": input_text})
        returncode = 0
        for prefix, code in self.failing.items():
            if tuple(argv[: len(prefix)]) == prefix:
                returncode = code
        if check and returncode != 0:
            raise CommandError(argv, returncode, "boom")
        return CmdResult(argv=argv, returncode=returncode, stdout="", stderr="")

    @property
    def argvs(self) -> list[list[str]]:
        return [c["argv"] for c in self.calls]


class FakeEngine:
    """In-memory `ContainerEngine`."""

    def __init__(self) -> None:
        self.calls: list[tuple] = []
        self.fail_on: set[str] = set()
        self.compose_present = True
        self.images = {"snell-server"}
        self.status: str | None = "running"

    def _record(self, verb: str, *args) -> None:
        self.calls.append((verb, *args))
        if verb in self.fail_on:
            raise EngineError(f"{verb} failed")

    def is_available(self) -> bool:
        return True

    def compose_available(self) -> bool:
        return self.compose_present

    def up(self, service=None, *, build=False) -> None:
        self._record("up", service, build)

    def down(self, service=None) -> None:
        self._record("down", service)

    def build(self, service=None, *, pull=False) -> None:
        self._record("build", service, pull)

    def pull(self, service=None) -> None:
        self._record("pull", service)

    def remove_image(self, image: str) -> bool:
        self._record("remove_image", image)
        if image in self.images:
            self.images.discard(image)
            return True
        return False

    def container_status(self, name: str) -> str | None:
        if "container_status" in self.fail_on:
            raise EngineError("permission denied while trying to connect to the Docker daemon")
        return self.status


def fake_download(settings: AppSettings, dest_dir: Path, arch: str) -> Path:
    dest_dir.mkdir(parents=True, exist_ok=True)
    binary = dest_dir / "snell-server"
    binary.write_bytes(b"\x7fELF fake " + arch.encode())
    binary.chmod(0o755)
    return binary


@pytest.fixture
def settings(tmp_path: Path) -> AppSettings:
    return AppSettings(
        _env_file=None,
        work_dir=tmp_path / "compose",
        language=Language.ENGLISH,
    )


@pytest.fixture
def engine() -> FakeEngine:
    return FakeEngine()


@pytest.fixture
def host() -> HostActions:
    return HostActions(
        require_root=lambda: None,
        check_system=lambda: None,
        ensure_tools=lambda **kwargs: [],
        docker_present=lambda: True,
        install_docker=lambda settings: True,
        install_compose_plugin=lambda: True,
        detect_arch=lambda: "amd64",
        is_port_free=lambda port: True,
        download=fake_download,
        public_ip=lambda settings: "203.0.113.7",
    )


@pytest.fixture
def deployment(settings: AppSettings, engine: FakeEngine, host: HostActions) -> Deployment:
    return Deployment(settings=settings, engine=engine, host=host)
