"""Doctor command for environment diagnostics."""

from __future__ import annotations

import httpx
import typer
from rich.console import Console
from rich.table import Table

from adapters import system
from adapters.compose_engine import ComposeEngine
from adapters.http_client import build_client
from adapters.snell_release import release_url
from core.config import AppSettings, load_settings, write_user_env_vars
from core.domain.language import Language
from core.domain.messages import t
from core.errors import DeployError

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


def _check_http(url: str, settings: AppSettings) -> tuple[bool, str]:
    try:
        with build_client(settings) as client:
            response = client.head(url)
        return response.is_success, f"HTTP {response.status_code}"
    except httpx.HTTPError as exc:
        return False, str(exc)


def _row(table: Table, check: str, ok: bool, detail: str, *, optional: bool = False) -> None:
    status = "OK" if ok else ("OPTIONAL" if optional else "FAIL")
    table.add_row(check, status, detail)


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = load_settings()
    engine = ComposeEngine(settings)

    table = Table(title="docker-snell doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    _row(table, "root", system.is_root(), "lifecycle actions need root")

    try:
        release = system.check_system()
        _row(table, "OS", True, release.pretty_name or release.id)
    except DeployError as exc:
        _row(table, "OS", False, str(exc))

    try:
        arch = settings.arch or system.detect_arch()
        _row(table, "Architecture", True, arch)
    except DeployError as exc:
        arch = None
        _row(table, "Architecture", False, str(exc))

    missing = system.missing_tools()
    _row(table, "Tools", not missing, ", ".join(missing) or "all present", optional=True)

    _row(table, "Docker daemon", engine.is_available(), "docker CLI + daemon ping")
    _row(table, "docker compose", engine.compose_available(), "compose plugin")

    _row(table, "Compose file", settings.compose_file.is_file(), str(settings.compose_file), optional=True)
    _row(table, "Snell config", settings.config_file.is_file(), str(settings.config_file), optional=True)

    if arch:
        ok_http, detail_http = _check_http(release_url(settings, arch), settings)
        _row(table, f"Snell {settings.snell_version}", ok_http, detail_http)

    _console.print(table)


@app.command(name="setup")
def setup() -> None:
    """Interactive setup (stores config in the user config .env).

    Saves language, work directory and Snell version so later runs need no
    environment variables.
    """

    settings = load_settings()

    language = typer.prompt(
        "Language (zh/en)",
        default=settings.language.value,
        show_default=True,
    ).strip().lower()
    try:
        chosen = Language(language)
    except ValueError as exc:
        raise typer.BadParameter("language must be 'zh' or 'en'") from exc

    work_dir = typer.prompt("Work directory", default=str(settings.work_dir), show_default=True).strip()
    version = typer.prompt("Snell version", default=settings.snell_version, show_default=True).strip()

    if not work_dir or not version.startswith("v"):
        raise typer.BadParameter("work directory and a version like v4.0.1 are required")

    env_path = write_user_env_vars(
        {
            "SNELL_DEPLOY_LANGUAGE": chosen.value,
            "SNELL_DEPLOY_WORK_DIR": work_dir,
            "SNELL_DEPLOY_SNELL_VERSION": version,
        }
    )

    _console.print(t("settings_saved", chosen, path=env_path), style="green", markup=False)
