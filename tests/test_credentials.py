"""Tests for core/services/credentials.py."""

import base64

import pytest

from core.config import AppSettings
from core.errors import DeployError
from core.services.credentials import generate_credentials, generate_port, generate_psk


class TestGeneratePsk:
    def test_length_and_entropy_source(self) -> None:
        psk = generate_psk(32)
        assert len(psk) == 44
        assert len(base64.b64decode(psk)) == 32

    def test_distinct(self) -> None:
        assert generate_psk() != generate_psk()


class TestGeneratePort:
    def test_within_range(self) -> None:
        s = AppSettings(_env_file=None, port_min=15000, port_max=15010)
        ports = {generate_port(s) for _ in range(200)}
        assert ports <= set(range(15000, 15011))

    def test_single_port_range(self) -> None:
        s = AppSettings(_env_file=None, port_min=30000, port_max=30000)
        assert generate_port(s) == 30000

    def test_skips_busy_ports(self) -> None:
        s = AppSettings(_env_file=None, port_min=20000, port_max=20001)
        assert generate_port(s, is_free=lambda p: p == 20001) == 20001

    def test_gives_up_when_all_busy(self) -> None:
        s = AppSettings(_env_file=None, port_min=20000, port_max=20001)
        with pytest.raises(DeployError, match="no free port"):
            generate_port(s, is_free=lambda p: False, attempts=5)


def test_generate_credentials(settings: AppSettings) -> None:
    config = generate_credentials(settings, is_free=lambda p: True)
    assert settings.port_min <= config.port <= settings.port_max
    assert len(config.psk) == 44
    assert config.ipv6 is True
