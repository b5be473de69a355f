"""Logging configuration for the CLI.

Log records go to stderr through Rich so they do not interleave badly with
menu output; an optional plain log file keeps the full command trail.
"""

from __future__ import annotations

import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

from core.config import AppSettings

_CONFIGURED_ATTR = "_docker_snell_configured"


def configure_logging(settings: AppSettings, *, verbose: bool = False) -> None:
    """Attach handlers to the root logger once per process."""

    root = logging.getLogger()
    if getattr(root, _CONFIGURED_ATTR, False):
        return

    level = logging.DEBUG if verbose else logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        level = logging.WARNING
    root.setLevel(logging.DEBUG if settings.log_file else level)

    console_handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    console_handler.setLevel(level)
    root.addHandler(console_handler)

    if settings.log_file:
        log_path = Path(settings.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
                datefmt="%Y-%m-%dT%H:%M:%S%z",
            )
        )
        file_handler.setLevel(logging.DEBUG)
        root.addHandler(file_handler)

    setattr(root, _CONFIGURED_ATTR, True)
    logging.getLogger(__name__).debug("Logging initialized (level=%s)", logging.getLevelName(level))
