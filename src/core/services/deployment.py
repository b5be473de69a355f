"""Snell deployment lifecycle.

This module owns the ordering of the install/update/restart/delete flows.
The CLI only chooses an action and prints; host preparation and the
container engine are injected, which keeps the flows testable without
root, apt or a Docker daemon.
"""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from adapters import system
from adapters.command import command_exists
from adapters.http_client import fetch_public_ip
from adapters.renderers import read_server_config, write_deployment_files
from adapters.snell_release import download_snell
from core.config import AppSettings
from core.domain.messages import t
from core.domain.models import ConnectionInfo, SnellServerConfig
from core.errors import DeploymentMissingError, EngineError
from core.interfaces.engine import ContainerEngine
from core.services.credentials import generate_credentials

logger = logging.getLogger(__name__)


@dataclass
class HostActions:
    """Side effects on the host, replaceable in tests."""

    require_root: Callable[[], None] = system.require_root
    check_system: Callable[[], object] = system.check_system
    ensure_tools: Callable[..., list[str]] = system.ensure_tools
    docker_present: Callable[[], bool] = lambda: command_exists("docker")
    install_docker: Callable[[AppSettings], bool] = system.install_docker
    install_compose_plugin: Callable[[], bool] = system.ensure_compose_plugin
    detect_arch: Callable[[], str] = system.detect_arch
    is_port_free: Callable[[int], bool] = system.is_port_free
    download: Callable[[AppSettings, Path, str], Path] = download_snell
    public_ip: Callable[[AppSettings], str] = fetch_public_ip


@dataclass
class DeploymentHooks:
    """Optional callbacks for UI layers (progress lines)."""

    step: Callable[[str], None] | None = None


@dataclass
class Deployment:
    settings: AppSettings
    engine: ContainerEngine
    host: HostActions = field(default_factory=HostActions)
    hooks: DeploymentHooks = field(default_factory=DeploymentHooks)

    def _say(self, key: str, **kwargs: object) -> None:
        message = t(key, self.settings.language, **kwargs)
        logger.info("%s", message)
        if self.hooks.step:
            self.hooks.step(message)

    def _require_compose_file(self) -> None:
        if not self.settings.compose_file.is_file():
            raise DeploymentMissingError(self.settings.compose_file)

    def _arch(self) -> str:
        return self.settings.arch or self.host.detect_arch()

    def _fetch_binary(self) -> Path:
        arch = self._arch()
        self._say("downloading", version=self.settings.snell_version, arch=arch)
        return self.host.download(self.settings, self.settings.snell_dir, arch)

    def prepare_host(self) -> None:
        """OS check, missing tools, Docker Engine and the compose plugin."""

        self.host.check_system()
        self.host.ensure_tools(on_install=lambda tool: self._say("installing_tool", tool=tool))
        if not self.host.docker_present():
            self._say("installing_docker")
            self.host.install_docker(self.settings)
        if not self.engine.compose_available():
            self._say("installing_compose")
            self.host.install_compose_plugin()

    def initial_install(self) -> SnellServerConfig:
        """Fresh install: new credentials, new files, image build, start.

        Any failure propagates; a half-finished install is not resumed.
        """

        self.host.require_root()
        self.settings.work_dir.mkdir(parents=True, exist_ok=True)
        self.prepare_host()

        self._say("generating_credentials")
        config = generate_credentials(self.settings, is_free=self.host.is_port_free)

        self._say("writing_configs")
        write_deployment_files(self.settings, config)

        self._fetch_binary()

        self._say("starting")
        try:
            self.engine.up(build=True)
        except EngineError as exc:
            raise EngineError(f"{t('start_failed', self.settings.language)}\n{exc}") from exc

        self._say("install_done")
        return config

    def update(self) -> None:
        """Re-fetch the binary, rebuild on a refreshed base image, restart.

        The running container is only stopped once the new image is built;
        a failed download or build leaves it untouched.
        """

        self.host.require_root()
        self._require_compose_file()
        self._say("updating")

        service = self.settings.service_name
        self._fetch_binary()
        self.engine.build(service, pull=True)
        self.engine.down(service)
        self.engine.up(service)

        self._say("update_done")

    def restart(self) -> None:
        self.host.require_root()
        self._require_compose_file()
        self._say("restarting")

        service = self.settings.service_name
        self.engine.down(service)
        self.engine.up(service)

        self._say("restart_done")

    def delete(self) -> None:
        """Stop the project, drop the image and remove every generated file."""

        self.host.require_root()
        self._require_compose_file()
        self._say("deleting")

        self.engine.down()
        self.engine.remove_image(self.settings.image_name)

        if self.settings.snell_dir.exists():
            shutil.rmtree(self.settings.snell_dir)
        self.settings.compose_file.unlink(missing_ok=True)

        self._say("delete_done")

    def read_config(self) -> SnellServerConfig:
        if not self.settings.config_file.is_file():
            raise DeploymentMissingError(self.settings.config_file)
        return read_server_config(self.settings)

    def show_info(self) -> ConnectionInfo:
        config = self.read_config()
        address = self.host.public_ip(self.settings)
        return ConnectionInfo(
            label=self.settings.proxy_label,
            host=address,
            port=config.port,
            psk=config.psk,
            version=self.settings.snell_major_version,
        )

    def status(self) -> str | None:
        return self.engine.container_status(self.settings.container_name)
