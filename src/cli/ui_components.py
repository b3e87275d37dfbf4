"""UI components for the CLI (Rich).

Why separate components:
- Keeps command logic apart from visual details.
- `ConsoleRenderSink` is the terminal implementation of the core's
  `RenderSink`; the core never imports Rich.
"""

from __future__ import annotations

from typing import Sequence

from rich.align import Align
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import EntityDetail


def print_banner(console: Console) -> None:
    """Print the welcome banner (interactive mode only)."""

    title = Text("ROSTER CARDS", style="bold cyan")
    subtitle = Text("Player rosters • Jikan characters", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_cards_table(cards: Sequence[EntityDetail], *, title: str = "Cards") -> Table:
    table = Table(title=title)
    table.add_column("#", style="dim", justify="right", no_wrap=True)
    table.add_column("Id", style="cyan", no_wrap=True)
    table.add_column("Character", style="white")
    table.add_column("Image", style="magenta")
    for position, card in enumerate(cards, start=1):
        table.add_row(str(position), str(card.id), card.display_name, card.image_url)
    return table


class ConsoleRenderSink:
    """Prints every render event as it happens and keeps a copy for summaries."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()
        self.user_id: int | None = None
        self.player_name: str | None = None
        self.cards: list[tuple[str, str]] = []
        self.errors: list[str] = []

    def on_clear_all(self) -> None:
        self.player_name = None
        self.cards.clear()
        self.errors.clear()

    def on_user_changed(self, user_id: int) -> None:
        self.user_id = user_id
        self.console.rule(f"[bold]User {user_id}[/bold]")

    def on_player_name(self, name: str) -> None:
        self.player_name = name
        self.console.print(f"[bold green]Player:[/bold green] {escape(name)}")

    def on_card_resolved(self, display_name: str, image_url: str) -> None:
        self.cards.append((display_name, image_url))
        self.console.print(f"  [cyan]•[/cyan] {escape(display_name)} [dim]{escape(image_url)}[/dim]")

    def on_error(self, message: str) -> None:
        self.errors.append(message)
        self.console.print(f"  [red]✗ {escape(message)}[/red]")
