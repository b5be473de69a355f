"""Typer application.

`docker-snell` with no subcommand opens the numbered menu; the
subcommands run one action and exit (status 1 on failure) for use from
scripts.
"""

from __future__ import annotations

import typer
from rich.console import Console

from adapters.compose_engine import ComposeEngine
from cli import actions, doctor
from cli.logging_setup import configure_logging
from cli.menu import run_menu
from cli.ui_components import print_banner
from core.config import APP_NAME, APP_VERSION, AppSettings, load_settings
from core.services.deployment import Deployment, DeploymentHooks

app = typer.Typer(
    name=APP_NAME,
    help="Deploy and manage a Snell server in Docker.",
    add_completion=False,
)
app.add_typer(doctor.app, name="doctor")

console = Console()


def build_deployment(settings: AppSettings) -> Deployment:
    return Deployment(
        settings=settings,
        engine=ComposeEngine(settings),
        hooks=DeploymentHooks(step=lambda message: console.print(message, markup=False)),
    )


def _deployment(ctx: typer.Context) -> Deployment:
    return build_deployment(ctx.obj)


def _exit_on_failure(ok: bool) -> None:
    if not ok:
        raise typer.Exit(code=1)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"{APP_NAME} {APP_VERSION}")
        raise typer.Exit()


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging on stderr."),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
) -> None:
    """Without a subcommand, open the interactive menu."""

    settings = load_settings()
    configure_logging(settings, verbose=verbose)
    ctx.obj = settings

    if ctx.invoked_subcommand is None:
        print_banner(console)
        run_menu(build_deployment(settings), console)


@app.command()
def install(ctx: typer.Context) -> None:
    """Initial install: dependencies, credentials, files, image, start."""

    _exit_on_failure(actions.install(_deployment(ctx), console))


@app.command()
def update(ctx: typer.Context) -> None:
    """Re-download Snell, rebuild the image and restart the container."""

    _exit_on_failure(actions.update(_deployment(ctx), console))


@app.command()
def restart(ctx: typer.Context) -> None:
    """Stop and start the Snell container."""

    _exit_on_failure(actions.restart(_deployment(ctx), console))


@app.command()
def info(ctx: typer.Context) -> None:
    """Print the client connection line."""

    _exit_on_failure(actions.show_info(_deployment(ctx), console))


@app.command()
def delete(ctx: typer.Context) -> None:
    """Remove the container, its image and the generated files."""

    _exit_on_failure(actions.delete(_deployment(ctx), console))


def run() -> None:
    app()
