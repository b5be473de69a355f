"""Domain models (Pydantic v2).

Why Pydantic in the domain:
- Validation at construction time, so a bad port or an empty PSK never
  reaches a file on disk.
- Plain data: rendering to the on-disk formats lives next to the data, but
  these models know nothing about Docker, apt or HTTP.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from core.errors import ConfigFileError

SNELL_SECTION = "snell-server"


def _format_bool(value: bool) -> str:
    return "true" if value else "false"


class SnellServerConfig(BaseModel):
    """Contents of `snell-server.conf`.

    The file is read by the Snell binary, not by us; the format below is the
    one it accepts:

        [snell-server]
        listen = ::0:<port>
        psk = <psk>
        ipv6 = true
    """

    port: int = Field(..., ge=1, le=65535, description="TCP/UDP port the server listens on.")
    psk: str = Field(..., min_length=1, description="Pre-shared key for client authentication.")
    ipv6: bool = Field(default=True)
    listen_host: str = Field(default="::0", min_length=1)

    @property
    def listen(self) -> str:
        return f"{self.listen_host}:{self.port}"

    def render(self) -> str:
        return (
            f"[{SNELL_SECTION}]\n"
            f"listen = {self.listen}\n"
            f"psk = {self.psk}\n"
            f"ipv6 = {_format_bool(self.ipv6)}\n"
        )

    @classmethod
    def parse(cls, text: str) -> "SnellServerConfig":
        """Read a config previously written by `render` (or by hand).

        The port is the last `:`-separated piece of `listen`; `psk` is taken
        verbatim after the first `=` (base64 padding stays intact).
        """

        section: str | None = None
        values: dict[str, str] = {}
        for raw_line in text.splitlines():
            line = raw_line.strip()
            if not line or line.startswith(("#", ";")):
                continue
            if line.startswith("[") and line.endswith("]"):
                section = line[1:-1].strip()
                continue
            if section != SNELL_SECTION or "=" not in line:
                continue
            key, value = line.split("=", 1)
            values[key.strip().lower()] = value.strip()

        if section is None and not values:
            raise ConfigFileError(f"missing [{SNELL_SECTION}] section")
        for key in ("listen", "psk"):
            if not values.get(key):
                raise ConfigFileError(f"missing '{key}' in [{SNELL_SECTION}]")

        host, _, port_text = values["listen"].rpartition(":")
        try:
            port = int(port_text)
        except ValueError as exc:
            raise ConfigFileError(f"invalid listen value: {values['listen']!r}") from exc

        try:
            return cls(
                port=port,
                psk=values["psk"],
                ipv6=values.get("ipv6", "false").lower() == "true",
                listen_host=host or "::0",
            )
        except ValueError as exc:
            raise ConfigFileError(str(exc)) from exc


class ComposeService(BaseModel):
    """A single service entry of docker-compose.yml."""

    build: str
    image: str
    container_name: str
    restart: str = "always"
    volumes: list[str] = Field(default_factory=list)
    network_mode: str = "host"
    command: list[str] = Field(default_factory=list)


class ComposeProject(BaseModel):
    """The orchestration descriptor: one service, host networking."""

    services: dict[str, ComposeService] = Field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


class ConnectionInfo(BaseModel):
    """What a client needs to connect, in Surge's proxy-line format."""

    label: str = Field(default="snell", min_length=1)
    host: str = Field(..., min_length=1)
    port: int = Field(..., ge=1, le=65535)
    psk: str = Field(..., min_length=1)
    version: int = Field(default=4, ge=1)
    reuse: bool = True
    tfo: bool = True

    def surge_line(self) -> str:
        return (
            f"{self.label} = snell, {self.host}, {self.port}, psk={self.psk}, "
            f"version={self.version}, reuse={_format_bool(self.reuse)}, tfo={_format_bool(self.tfo)}"
        )


class OsRelease(BaseModel):
    """Subset of /etc/os-release used for the platform check."""

    id: str = ""
    id_like: list[str] = Field(default_factory=list)
    version_id: str = ""
    pretty_name: str = ""

    @property
    def is_debian_family(self) -> bool:
        family = {self.id.lower(), *(x.lower() for x in self.id_like)}
        return bool(family & {"debian", "ubuntu"})
