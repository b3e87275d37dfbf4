"""
Pytest configuration for roster-cards.

Puts the src/ layout on sys.path so `core`, `adapters` and `cli` import
without an install, and provides in-memory collaborators for the pipeline.
"""

import asyncio
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT_DIR / "src"

if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from core.config import AppSettings  # noqa: E402
from core.domain.results import FetchFailure, FetchOutcome, FetchSuccess  # noqa: E402

ROSTER_BASE = "https://rosters.test/players"
JIKAN_BASE = "https://jikan.test/v4/characters"


def ok(url: str, text: str) -> FetchSuccess:
    return FetchSuccess(url=url, status_code=200, text=text, attempts=1)


def failed(url: str, status: Optional[int] = 500) -> FetchFailure:
    return FetchFailure(url=url, attempts=3, status_code=status, error=f"HTTP {status}")


def character_json(entity_id: int, name: str) -> str:
    return (
        '{"data": {"mal_id": %d, "name": "%s", '
        '"images": {"jpg": {"image_url": "https://img.test/%d.jpg"}}}}' % (entity_id, name, entity_id)
    )


class FakeFetcher:
    """URL -> outcome map; unknown URLs fail. Optional gates hold a URL until released."""

    def __init__(self, responses: Optional[Dict[str, Any]] = None) -> None:
        self.responses: Dict[str, Any] = dict(responses or {})
        self.gates: Dict[str, asyncio.Event] = {}
        self.calls: List[str] = []

    def roster(self, user_id: int, text: str) -> None:
        url = f"{ROSTER_BASE}/{user_id}"
        self.responses[url] = ok(url, text)

    def character(self, entity_id: int, name: Optional[str]) -> None:
        url = f"{JIKAN_BASE}/{entity_id}"
        body = character_json(entity_id, name) if name is not None else '{"data": null}'
        self.responses[url] = ok(url, body)

    def gate(self, url: str) -> asyncio.Event:
        event = asyncio.Event()
        self.gates[url] = event
        return event

    async def fetch(self, url: str) -> FetchOutcome:
        self.calls.append(url)
        gate = self.gates.get(url)
        if gate is not None:
            await gate.wait()
        outcome = self.responses.get(url)
        if outcome is None:
            return failed(url, 404)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class SleepRecorder:
    def __init__(self) -> None:
        self.delays: List[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


class RecordingSink:
    def __init__(self) -> None:
        self.events: List[Tuple[Any, ...]] = []

    def on_clear_all(self) -> None:
        self.events.append(("clear",))

    def on_user_changed(self, user_id: int) -> None:
        self.events.append(("user", user_id))

    def on_player_name(self, name: str) -> None:
        self.events.append(("player", name))

    def on_card_resolved(self, display_name: str, image_url: str) -> None:
        self.events.append(("card", display_name, image_url))

    def on_error(self, message: str) -> None:
        self.events.append(("error", message))

    def of(self, kind: str) -> List[Tuple[Any, ...]]:
        return [event for event in self.events if event[0] == kind]


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(
        _env_file=None,
        fake_api_base=ROSTER_BASE + "/",
        jikan_base=JIKAN_BASE,
        request_max_retries=3,
        request_initial_delay=0.5,
        inter_entity_delay=0.5,
    )


@pytest.fixture
def fetcher() -> FakeFetcher:
    return FakeFetcher()


@pytest.fixture
def sleep_recorder() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()
