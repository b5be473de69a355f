"""Core configuration.

Why here:
- Centralizes environment variables (pydantic-settings) away from the CLI.
- Lets adapters (HTTP, compose, system) read config consistently.
"""

from __future__ import annotations

import os
import pwd
from pathlib import Path

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.domain.language import Language

APP_NAME = "docker-snell"
APP_VERSION = "0.3.0"


def get_user_config_dir() -> Path:
    """Per-user configuration directory (XDG)."""

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / APP_NAME
    return Path.home() / ".config" / APP_NAME


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _sudo_user_home(name: str) -> Path | None:
    try:
        return Path(pwd.getpwnam(name).pw_dir)
    except KeyError:
        return None


def get_env_files() -> tuple[str, ...]:
    """.env files read by `AppSettings`, lowest priority first.

    Under sudo, HOME is root's, so the invoking user's file is read as well:
    `doctor setup` run without sudo still applies to `sudo docker-snell install`.
    """

    files = [".env"]
    sudo_user = os.environ.get("SUDO_USER")
    if sudo_user and sudo_user != "root":
        home = _sudo_user_home(sudo_user)
        if home is not None:
            files.append(str(home / ".config" / APP_NAME / ".env"))
    own = str(get_user_env_file())
    if own not in files:
        files.append(own)
    return tuple(files)


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str | None], env_path: Path | None = None) -> Path:
    """Write/update variables in the user's global .env."""

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = [f"# {APP_NAME} user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Central application configuration.

    Why pydantic-settings:
    - Typing + validation at the edge (env vars) without leaking into the services.
    - One configuration contract shared by the CLI and the adapters.
    """

    model_config = SettingsConfigDict(
        env_prefix="SNELL_DEPLOY_",
        extra="ignore",
        case_sensitive=False,
        # Project first (dev), then the user's global config.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    work_dir: Path = Field(
        default=Path("/root/compose"),
        description="Directory holding docker-compose.yml and the snell/ build context.",
    )

    snell_version: str = Field(
        default="v4.0.1",
        pattern=r"^v\d+\.\d+\.\d+",
        description="Snell server release to download.",
    )
    download_base_url: str = Field(
        default="https://dl.nssurge.com/snell",
        min_length=8,
        description="Base URL of the Snell release archives.",
    )
    arch: str | None = Field(
        default=None,
        description="Release architecture (amd64, aarch64, armv7l, i386). Detected when unset.",
    )

    port_min: int = Field(default=15000, ge=1, le=65535)
    port_max: int = Field(default=50000, ge=1, le=65535)
    psk_bytes: int = Field(
        default=32,
        ge=16,
        le=128,
        description="Random bytes behind the pre-shared key (base64 encoded).",
    )
    ipv6: bool = Field(default=True, description="Value of the ipv6 flag in snell-server.conf.")

    base_image: str = Field(default="debian:latest", min_length=1)
    service_name: str = Field(default="snell-server", min_length=1)
    container_name: str = Field(default="snell", min_length=1)
    image_name: str = Field(
        default="snell-server",
        min_length=1,
        description="Tag given to the built image; used when deleting.",
    )

    ip_lookup_url: str = Field(
        default="https://ifconfig.me",
        min_length=8,
        description="Endpoint answering with the caller's public IP as plain text.",
    )
    docker_install_url: str = Field(
        default="https://get.docker.com",
        min_length=8,
        description="Docker convenience install script.",
    )
    http_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Timeout per request (seconds).",
    )
    user_agent: str = Field(
        default=f"{APP_NAME}/{APP_VERSION}",
        min_length=1,
    )

    proxy_label: str = Field(
        default="snell",
        min_length=1,
        description="Name on the left-hand side of the printed client line.",
    )
    language: Language = Field(
        default=Language.default(),
        description="Language for user-facing messages (zh/en).",
    )

    log_level: str = Field(default="WARNING")
    log_file: Path | None = Field(
        default=None,
        description="Optional log file in addition to stderr.",
    )

    @model_validator(mode="after")
    def _check_port_range(self) -> "AppSettings":
        if self.port_min > self.port_max:
            raise ValueError("port_min must be <= port_max")
        return self

    @property
    def snell_dir(self) -> Path:
        return self.work_dir / "snell"

    @property
    def compose_file(self) -> Path:
        return self.work_dir / "docker-compose.yml"

    @property
    def config_file(self) -> Path:
        return self.snell_dir / "snell-server.conf"

    @property
    def dockerfile(self) -> Path:
        return self.snell_dir / "Dockerfile"

    @property
    def binary_file(self) -> Path:
        return self.snell_dir / "snell-server"

    @property
    def snell_major_version(self) -> int:
        return int(self.snell_version.lstrip("v").split(".", 1)[0])


def load_settings() -> AppSettings:
    """Settings for a CLI run, with the .env list resolved for this process."""

    return AppSettings(_env_file=get_env_files())
