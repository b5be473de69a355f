"""`ContainerEngine` backed by Docker.

Compose has no Python API, so project verbs (up/down/build/pull) go through
`docker compose`; per-object operations (images, containers, daemon ping)
use the Docker SDK.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

import docker
from docker.errors import APIError, DockerException, ImageNotFound, NotFound

from adapters.command import Runner, command_exists, run_cmd
from core.config import AppSettings
from core.errors import CommandError, EngineError

logger = logging.getLogger(__name__)


class ComposeEngine:
    """Drive the single-service compose project in `settings.work_dir`."""

    def __init__(
        self,
        settings: AppSettings,
        *,
        runner: Runner = run_cmd,
        client_factory: Callable[[], Any] = docker.from_env,
    ) -> None:
        self._settings = settings
        self._runner = runner
        self._client_factory = client_factory
        self._client: Any | None = None

    # Docker SDK

    def _sdk(self) -> Any:
        if self._client is None:
            try:
                self._client = self._client_factory()
            except DockerException as exc:
                raise EngineError(f"cannot connect to the Docker daemon: {exc}") from exc
        return self._client

    def is_available(self) -> bool:
        if not command_exists("docker"):
            return False
        try:
            return bool(self._sdk().ping())
        except (EngineError, DockerException) as exc:
            logger.debug("Docker ping failed: %s", exc)
            return False

    def remove_image(self, image: str) -> bool:
        try:
            self._sdk().images.remove(image)
        except ImageNotFound:
            logger.info("Image %s not present, nothing to remove", image)
            return False
        except APIError as exc:
            raise EngineError(f"failed to remove image {image}: {exc}") from exc
        logger.info("Removed image %s", image)
        return True

    def container_status(self, name: str) -> str | None:
        try:
            container = self._sdk().containers.get(name)
        except NotFound:
            return None
        except APIError as exc:
            raise EngineError(f"failed to inspect container {name}: {exc}") from exc
        return str(container.status)

    # docker compose

    def _compose(self, *args: str, check: bool = True):
        argv = ["docker", "compose", "-f", str(self._settings.compose_file), *args]
        return self._runner(argv, check=check, cwd=self._settings.work_dir)

    def compose_available(self) -> bool:
        return self._runner(["docker", "compose", "version"], check=False).ok

    def up(self, service: str | None = None, *, build: bool = False) -> None:
        args = ["up", "-d"]
        if build:
            args.append("--build")
        if service:
            args.append(service)
        self._verb(*args)

    def down(self, service: str | None = None) -> None:
        self._verb("down", *([service] if service else []))

    def build(self, service: str | None = None, *, pull: bool = False) -> None:
        args = ["build"]
        if pull:
            args.append("--pull")
        if service:
            args.append(service)
        self._verb(*args)

    def pull(self, service: str | None = None) -> None:
        self._verb("pull", "--ignore-buildable", *([service] if service else []))

    def _verb(self, *args: str) -> None:
        try:
            self._compose(*args)
        except CommandError as exc:
            raise EngineError(f"docker compose {args[0]} failed: {exc}") from exc
