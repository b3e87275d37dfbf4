"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from adapters.http_client import build_async_client
from core.config import AppSettings, write_user_env_vars

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()

# Any valid Jikan character id works; this one is stable.
_PROBE_CHARACTER_ID = 1


async def _check_http(url: str, settings: AppSettings) -> tuple[bool, str]:
    try:
        async with build_async_client(settings) as client:
            response = await client.get(url)
    except Exception as exc:  # noqa: BLE001
        return False, str(exc)
    return response.is_success, f"HTTP {response.status_code}"


@app.command()
def run() -> None:
    """Show the effective configuration and probe both APIs."""

    settings = AppSettings()

    table = Table(title="roster-cards Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    table.add_row("Roster API", "OK", settings.fake_api_base)
    table.add_row("Character API", "OK", settings.jikan_base)
    table.add_row(
        "Retries",
        "OK",
        f"{settings.request_max_retries} attempts, first delay {settings.request_initial_delay}s",
    )
    table.add_row("Pacing", "OK", f"{settings.inter_entity_delay}s between characters")

    roster_url = settings.roster_url(settings.default_user_id)
    ok_roster, detail_roster = asyncio.run(_check_http(roster_url, settings))
    table.add_row("Roster connectivity", "OK" if ok_roster else "FAIL", f"{detail_roster} ({roster_url})")

    character_url = settings.entity_url(_PROBE_CHARACTER_ID)
    ok_character, detail_character = asyncio.run(_check_http(character_url, settings))
    table.add_row(
        "Character connectivity",
        "OK" if ok_character else "FAIL",
        f"{detail_character} ({character_url})",
    )

    _console.print(table)

    if not (ok_roster and ok_character):
        _console.print(
            "\n[yellow]Note:[/yellow] use `roster-cards doctor configure` to point at different API bases."
        )
        raise typer.Exit(code=1)


@app.command()
def configure() -> None:
    """Interactive setup of the API bases (stored in the user config .env)."""

    settings = AppSettings()

    fake_api_base = typer.prompt("Roster API base URL", default=settings.fake_api_base, show_default=True).strip()
    jikan_base = typer.prompt("Character API base URL", default=settings.jikan_base, show_default=True).strip()

    if not fake_api_base or not jikan_base:
        raise typer.BadParameter("both base URLs are required")

    env_path = write_user_env_vars(
        {
            "ROSTER_CARDS_FAKE_API_BASE": fake_api_base,
            "ROSTER_CARDS_JIKAN_BASE": jikan_base,
        }
    )

    _console.print(f"[green]Saved config to:[/green] {env_path}")
