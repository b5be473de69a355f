"""Deployment file rendering.

Why it lives in adapters:
- Dockerfile (Jinja2) and compose (YAML) are infrastructure formats.
- The services only know `SnellServerConfig` and `ComposeProject`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import yaml
from jinja2 import Environment, FileSystemLoader, StrictUndefined

from core.config import AppSettings
from core.domain.models import ComposeProject, ComposeService, SnellServerConfig

logger = logging.getLogger(__name__)

_TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

# Path of the build context inside the container.
CONTAINER_DIR = "/root/compose/snell"
BINARY_NAME = "snell-server"
CONFIG_NAME = "snell-server.conf"


@dataclass(frozen=True)
class DeploymentFiles:
    config: Path
    dockerfile: Path
    compose: Path


def _get_env() -> Environment:
    return Environment(
        loader=FileSystemLoader(str(_TEMPLATES_DIR)),
        undefined=StrictUndefined,
        keep_trailing_newline=True,
    )


def render_dockerfile(settings: AppSettings) -> str:
    template = _get_env().get_template("Dockerfile.j2")
    return template.render(
        base_image=settings.base_image,
        container_dir=CONTAINER_DIR,
        binary_name=BINARY_NAME,
        config_name=CONFIG_NAME,
    )


def build_compose_project(settings: AppSettings) -> ComposeProject:
    container_config = f"{CONTAINER_DIR}/{CONFIG_NAME}"
    service = ComposeService(
        build=f"./{settings.snell_dir.name}",
        image=settings.image_name,
        container_name=settings.container_name,
        restart="always",
        volumes=[f"./{settings.snell_dir.name}/{CONFIG_NAME}:{container_config}"],
        network_mode="host",
        command=[f"./{BINARY_NAME}", "-c", container_config],
    )
    return ComposeProject(services={settings.service_name: service})


def render_compose(settings: AppSettings) -> str:
    return yaml.safe_dump(
        build_compose_project(settings).to_dict(),
        sort_keys=False,
        default_flow_style=False,
    )


def write_deployment_files(settings: AppSettings, config: SnellServerConfig) -> DeploymentFiles:
    """Write snell-server.conf, Dockerfile and docker-compose.yml.

    Existing files are overwritten; a reinstall always starts from fresh
    credentials.
    """

    settings.snell_dir.mkdir(parents=True, exist_ok=True)

    settings.config_file.write_text(config.render(), encoding="utf-8")
    settings.config_file.chmod(0o600)
    settings.dockerfile.write_text(render_dockerfile(settings), encoding="utf-8")
    settings.compose_file.write_text(render_compose(settings), encoding="utf-8")

    logger.info(
        "Wrote %s, %s, %s", settings.config_file, settings.dockerfile, settings.compose_file
    )
    return DeploymentFiles(
        config=settings.config_file,
        dockerfile=settings.dockerfile,
        compose=settings.compose_file,
    )


def read_server_config(settings: AppSettings) -> SnellServerConfig:
    return SnellServerConfig.parse(settings.config_file.read_text(encoding="utf-8"))
