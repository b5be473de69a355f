"""httpx wrapper.

Why a wrapper:
- Standardizes timeouts, headers and redirects for every download.
- Makes testing easy: pass a `transport` (e.g. `httpx.MockTransport`).
"""

from __future__ import annotations

import ipaddress
import logging

import httpx

from core.config import AppSettings
from core.errors import DownloadError

logger = logging.getLogger(__name__)


def build_client(
    settings: AppSettings | None = None,
    *,
    ipv4_only: bool = False,
    transport: httpx.BaseTransport | None = None,
    extra_headers: dict[str, str] | None = None,
) -> httpx.Client:
    """Create an `httpx.Client` with safe defaults.

    `ipv4_only` binds the connection to 0.0.0.0, which forces an IPv4 route
    (the equivalent of `curl -4`).
    """

    settings = settings or AppSettings()
    headers: dict[str, str] = {"User-Agent": settings.user_agent}
    if extra_headers:
        headers.update(extra_headers)
    if transport is None and ipv4_only:
        transport = httpx.HTTPTransport(local_address="0.0.0.0")
    return httpx.Client(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )


def fetch_public_ip(
    settings: AppSettings | None = None,
    *,
    transport: httpx.BaseTransport | None = None,
) -> str:
    """Return this host's public IPv4 address as seen by `ip_lookup_url`."""

    settings = settings or AppSettings()
    try:
        with build_client(settings, ipv4_only=True, transport=transport) as client:
            response = client.get(settings.ip_lookup_url, headers={"Accept": "text/plain"})
            response.raise_for_status()
    except httpx.HTTPError as exc:
        raise DownloadError(f"IP lookup failed ({settings.ip_lookup_url}): {exc}") from exc

    text = response.text.strip()
    try:
        address = ipaddress.IPv4Address(text)
    except ValueError as exc:
        raise DownloadError(f"IP lookup returned an unexpected answer: {text[:64]!r}") from exc

    logger.debug("Public IPv4: %s", address)
    return str(address)


def fetch_text(
    url: str,
    settings: AppSettings | None = None,
    *,
    transport: httpx.BaseTransport | None = None,
) -> str:
    """GET `url` and return the body as text (used for install scripts)."""

    try:
        with build_client(settings, transport=transport) as client:
            response = client.get(url)
            response.raise_for_status()
    except httpx.HTTPError as exc:
        raise DownloadError(f"GET {url} failed: {exc}") from exc
    return response.text
