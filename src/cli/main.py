"""roster-cards command line.

The CLI is the viewer's UI: it picks the user (the
dropdown), renders player name, user number and cards through
`ConsoleRenderSink`, and quits on request. It holds no resolution logic of
its own; everything goes through `RefreshOrchestrator`.
"""

from __future__ import annotations

import asyncio

import typer
from pydantic import ValidationError
from rich.console import Console

from adapters.http_client import RetryingFetcher, build_async_client
from cli import doctor
from cli.ui_components import ConsoleRenderSink, build_cards_table, print_banner
from core.config import AppSettings
from core.domain.models import EntityDetail
from core.logging_setup import setup_logging
from core.services.refresh_orchestrator import RefreshOrchestrator
from core.services.roster_resolver import RosterResolver

app = typer.Typer(no_args_is_help=True, help="Browse player rosters resolved against the Jikan character API.")
app.add_typer(doctor.app, name="doctor")

_console = Console()

_QUIT_WORDS = {"q", "quit", "exit"}


def _load_settings() -> AppSettings:
    try:
        return AppSettings()
    except ValidationError as exc:
        _console.print(f"[red]Invalid configuration:[/red]\n{exc}")
        raise typer.Exit(code=2) from exc


def _build_orchestrator(
    settings: AppSettings,
    fetcher: RetryingFetcher,
    sink: ConsoleRenderSink,
) -> RefreshOrchestrator:
    resolver = RosterResolver(fetcher=fetcher, settings=settings)
    return RefreshOrchestrator(resolver=resolver, sink=sink)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    settings = _load_settings()
    setup_logging("DEBUG" if verbose else settings.log_level)


async def _show(settings: AppSettings, user_id: int, sink: ConsoleRenderSink) -> list[EntityDetail]:
    async with build_async_client(settings) as client:
        fetcher = RetryingFetcher.from_settings(settings, client)
        orchestrator = _build_orchestrator(settings, fetcher, sink)
        await orchestrator.change_user(user_id)
        return orchestrator.rendered_cards


@app.command()
def show(user_id: int = typer.Argument(..., min=1, help="Number of the user whose roster to load.")) -> None:
    """Load one user's roster and print the resolved cards."""

    settings = _load_settings()
    sink = ConsoleRenderSink(_console)
    cards = asyncio.run(_show(settings, user_id, sink))

    title = f"Player: {sink.player_name}" if sink.player_name else f"User {user_id}"
    _console.print(build_cards_table(cards, title=title))

    if not cards and sink.errors:
        raise typer.Exit(code=1)


def _parse_user_choice(raw: str, user_count: int) -> int | None:
    try:
        value = int(raw)
    except ValueError:
        return None
    if 1 <= value <= user_count:
        return value
    return None


async def _browse(settings: AppSettings, console: Console) -> None:
    sink = ConsoleRenderSink(console)
    async with build_async_client(settings) as client:
        fetcher = RetryingFetcher.from_settings(settings, client)
        orchestrator = _build_orchestrator(settings, fetcher, sink)
        orchestrator.change_user(settings.default_user_id)

        prompt = f"Select user [1-{settings.user_count}] or q to quit: "
        while True:
            try:
                raw = await asyncio.to_thread(console.input, prompt)
            except EOFError:
                break

            choice = raw.strip().lower()
            if choice in _QUIT_WORDS:
                break
            if not choice:
                continue

            user_id = _parse_user_choice(choice, settings.user_count)
            if user_id is None:
                console.print(f"[yellow]Unknown user {raw.strip()!r}.[/yellow]")
                continue
            orchestrator.change_user(user_id)

        await orchestrator.shutdown()


@app.command()
def browse() -> None:
    """Interactive viewer: switch users while cards keep loading."""

    settings = _load_settings()
    print_banner(_console)
    asyncio.run(_browse(settings, _console))


def run() -> None:
    app()


if __name__ == "__main__":
    run()
