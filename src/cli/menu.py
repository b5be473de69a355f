"""Interactive numbered menu.

1) install  2) update  3) restart  4) show info  5) delete  0) exit

A failed install ends the program with status 1; every other failure is
printed and the menu is shown again.
"""

from __future__ import annotations

from typing import Callable

import typer
from rich.console import Console

from cli import actions
from cli.ui_components import build_menu_panel
from core.domain.messages import t
from core.services.deployment import Deployment

_ACTIONS: dict[str, Callable[[Deployment, Console], bool]] = {
    "2": actions.update,
    "3": actions.restart,
    "4": actions.show_info,
    "5": actions.delete,
}


def run_menu(deployment: Deployment, console: Console) -> None:
    language = deployment.settings.language

    while True:
        console.print()
        console.print(build_menu_panel(language))
        try:
            choice = typer.prompt(t("menu_prompt", language), default="", show_default=False)
        except typer.Abort:
            # EOF / Ctrl-C at the prompt.
            console.print()
            return

        choice = choice.strip()
        if choice == "0":
            console.print(t("menu_exit", language))
            return
        if choice == "1":
            if not actions.install(deployment, console):
                raise typer.Exit(code=1)
        elif choice in _ACTIONS:
            _ACTIONS[choice](deployment, console)
        else:
            console.print(t("menu_invalid", language), style="yellow")

        try:
            typer.prompt(
                t("menu_continue", language),
                default="",
                show_default=False,
                prompt_suffix="",
            )
        except typer.Abort:
            console.print()
            return
