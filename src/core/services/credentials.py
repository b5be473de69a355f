"""Random port and pre-shared key generation."""

from __future__ import annotations

import base64
import logging
import secrets
from typing import Callable

from core.config import AppSettings
from core.domain.models import SnellServerConfig
from core.errors import DeployError

logger = logging.getLogger(__name__)

MAX_PORT_ATTEMPTS = 50


def generate_psk(n_bytes: int = 32) -> str:
    """Base64 of `n_bytes` random bytes (44 characters for 32 bytes)."""

    return base64.b64encode(secrets.token_bytes(n_bytes)).decode("ascii")


def generate_port(
    settings: AppSettings,
    *,
    is_free: Callable[[int], bool] | None = None,
    attempts: int = MAX_PORT_ATTEMPTS,
) -> int:
    """Pick a port uniformly in [port_min, port_max], skipping busy ones."""

    span = settings.port_max - settings.port_min + 1
    for _ in range(max(1, attempts)):
        port = settings.port_min + secrets.randbelow(span)
        if is_free is None or is_free(port):
            return port
        logger.debug("Port %d in use, picking another", port)
    raise DeployError(
        f"no free port found in {settings.port_min}-{settings.port_max} after {attempts} attempts"
    )


def generate_credentials(
    settings: AppSettings,
    *,
    is_free: Callable[[int], bool] | None = None,
) -> SnellServerConfig:
    return SnellServerConfig(
        port=generate_port(settings, is_free=is_free),
        psk=generate_psk(settings.psk_bytes),
        ipv6=settings.ipv6,
    )
