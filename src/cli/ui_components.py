"""Rich UI components for the CLI.

Why separate components:
- Keeps command logic apart from visual details.
- Lets the menu and the one-shot subcommands share panels.
"""

from __future__ import annotations

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.language import Language
from core.domain.messages import t
from core.domain.models import ConnectionInfo

MENU_ITEMS: tuple[tuple[str, str], ...] = (
    ("1", "menu_install"),
    ("2", "menu_update"),
    ("3", "menu_restart"),
    ("4", "menu_info"),
    ("5", "menu_delete"),
    ("0", "menu_exit"),
)


def print_banner(console: Console) -> None:
    """Print the welcome banner (interactive mode only)."""

    title = Text("Docker Snell", style="bold cyan")
    subtitle = Text("Snell server • Docker Compose", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_menu_panel(language: Language) -> Panel:
    body = Text()
    for number, key in MENU_ITEMS:
        body.append(f"{number}) ", style="bold cyan")
        body.append(t(key, language) + "\n")
    return Panel(body, title=t("menu_title", language), title_align="left", border_style="cyan")


def print_connection_info(
    console: Console,
    info: ConnectionInfo,
    status: str | None,
    language: Language,
) -> None:
    """Surge proxy line plus the engine-reported container state.

    The proxy line is printed unwrapped so it can be copied as-is.
    """

    console.print(info.surge_line(), style="bold green", soft_wrap=True, markup=False, highlight=False)
    state = status or t("container_absent", language)
    console.print(t("container_status", language, status=state), style="dim", markup=False)


def build_config_table(port: int, psk: str, listen: str) -> Table:
    table = Table(title="snell-server.conf")
    table.add_column("Key", style="cyan", no_wrap=True)
    table.add_column("Value", style="white")
    table.add_row("listen", listen)
    table.add_row("port", str(port))
    table.add_row("psk", psk)
    return table
