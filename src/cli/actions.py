"""Menu actions shared by the interactive menu and the subcommands.

Each action prints its own outcome and returns True on success; the
caller decides whether a failure ends the program.
"""

from __future__ import annotations

import logging

from rich.console import Console

from cli.ui_components import build_config_table, print_connection_info
from core.domain.language import Language
from core.domain.messages import t
from core.errors import (
    DeployError,
    DeploymentMissingError,
    EngineError,
    PermissionDeniedError,
    UnsupportedSystemError,
)
from core.services.deployment import Deployment

logger = logging.getLogger(__name__)


def _error(console: Console, message: str) -> None:
    console.print(message, style="red", markup=False, highlight=False, soft_wrap=True)


def _describe(exc: DeployError, language: Language) -> str:
    if isinstance(exc, PermissionDeniedError):
        return t("need_root", language)
    if isinstance(exc, UnsupportedSystemError):
        return f"{t('unsupported_os', language)} ({exc})"
    return str(exc)


def _report_missing(
    console: Console,
    deployment: Deployment,
    exc: DeploymentMissingError,
    *,
    hint: bool = False,
) -> None:
    language = deployment.settings.language
    if exc.path == deployment.settings.config_file:
        _error(console, t("config_missing", language))
        return
    _error(console, t("compose_missing", language))
    if hint:
        console.print(t("compose_missing_hint", language), style="yellow", markup=False)


def show_info(deployment: Deployment, console: Console) -> bool:
    language = deployment.settings.language
    try:
        info = deployment.show_info()
    except DeploymentMissingError as exc:
        _report_missing(console, deployment, exc)
        return False
    except DeployError as exc:
        logger.debug("show_info failed", exc_info=True)
        _error(console, t("info_failed", language, error=exc))
        return False

    try:
        status = deployment.status()
    except EngineError as exc:
        logger.warning("Cannot read container status: %s", exc)
        status = t("container_unknown", language)

    print_connection_info(console, info, status, language)
    return True


def install(deployment: Deployment, console: Console) -> bool:
    language = deployment.settings.language
    try:
        config = deployment.initial_install()
    except DeployError as exc:
        logger.debug("initial_install failed", exc_info=True)
        _error(console, t("install_failed", language, error=_describe(exc, language)))
        return False

    console.print(build_config_table(config.port, config.psk, config.listen))
    show_info(deployment, console)
    return True


def update(deployment: Deployment, console: Console) -> bool:
    try:
        deployment.update()
    except DeploymentMissingError as exc:
        _report_missing(console, deployment, exc, hint=True)
        return False
    except DeployError as exc:
        logger.debug("update failed", exc_info=True)
        _error(console, t("update_failed", deployment.settings.language))
        _error(console, _describe(exc, deployment.settings.language))
        return False
    return True


def restart(deployment: Deployment, console: Console) -> bool:
    try:
        deployment.restart()
    except DeploymentMissingError as exc:
        _report_missing(console, deployment, exc)
        return False
    except DeployError as exc:
        logger.debug("restart failed", exc_info=True)
        _error(console, t("restart_failed", deployment.settings.language))
        _error(console, _describe(exc, deployment.settings.language))
        return False
    return True


def delete(deployment: Deployment, console: Console) -> bool:
    try:
        deployment.delete()
    except DeploymentMissingError as exc:
        _report_missing(console, deployment, exc)
        return False
    except DeployError as exc:
        logger.debug("delete failed", exc_info=True)
        language = deployment.settings.language
        _error(console, t("delete_failed", language, error=_describe(exc, language)))
        return False
    return True
