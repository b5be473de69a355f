"""Tests for adapters/renderers.py -- Dockerfile, compose and config files."""

import stat

import yaml

from adapters.renderers import (
    build_compose_project,
    read_server_config,
    render_compose,
    render_dockerfile,
    write_deployment_files,
)
from core.config import AppSettings
from core.domain.models import SnellServerConfig


class TestDockerfile:
    def test_content(self, settings: AppSettings) -> None:
        assert render_dockerfile(settings) == (
            "FROM debian:latest\n"
            "WORKDIR /root/compose/snell\n"
            "COPY snell-server /root/compose/snell/snell-server\n"
            "COPY snell-server.conf /root/compose/snell/snell-server.conf\n"
            "RUN chmod +x /root/compose/snell/snell-server\n"
            'CMD ["./snell-server", "-c", "snell-server.conf"]\n'
        )

    def test_base_image_setting(self, tmp_path) -> None:
        s = AppSettings(_env_file=None, work_dir=tmp_path, base_image="debian:bookworm-slim")
        assert render_dockerfile(s).startswith("FROM debian:bookworm-slim\n")


class TestCompose:
    def test_single_service_descriptor(self, settings: AppSettings) -> None:
        data = yaml.safe_load(render_compose(settings))
        assert list(data) == ["services"]
        assert list(data["services"]) == ["snell-server"]

        service = data["services"]["snell-server"]
        assert service["build"] == "./snell"
        assert service["image"] == "snell-server"
        assert service["container_name"] == "snell"
        assert service["restart"] == "always"
        assert service["network_mode"] == "host"
        assert service["volumes"] == [
            "./snell/snell-server.conf:/root/compose/snell/snell-server.conf"
        ]
        assert service["command"] == [
            "./snell-server",
            "-c",
            "/root/compose/snell/snell-server.conf",
        ]

    def test_model_matches_yaml(self, settings: AppSettings) -> None:
        project = build_compose_project(settings)
        assert yaml.safe_load(render_compose(settings)) == project.to_dict()


class TestWriteDeploymentFiles:
    def test_writes_all_files(self, settings: AppSettings) -> None:
        config = SnellServerConfig(port=31000, psk="secret=")
        files = write_deployment_files(settings, config)

        assert files.config.read_text(encoding="utf-8") == config.render()
        assert files.dockerfile.read_text(encoding="utf-8").startswith("FROM ")
        assert files.compose.is_file()
        assert stat.S_IMODE(files.config.stat().st_mode) == 0o600
        assert read_server_config(settings) == config

    def test_overwrites_previous_install(self, settings: AppSettings) -> None:
        write_deployment_files(settings, SnellServerConfig(port=31000, psk="old"))
        write_deployment_files(settings, SnellServerConfig(port=32000, psk="new"))

        config = read_server_config(settings)
        assert (config.port, config.psk) == (32000, "new")
