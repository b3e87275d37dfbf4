"""Typed outcome of a single HTTP fetch.

A fetch either succeeds with a body or ends in a terminal failure; neither
case raises. Callers branch on the type instead of catching exceptions.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class FetchSuccess:
    url: str
    status_code: int
    text: str
    attempts: int


@dataclass(frozen=True)
class FetchFailure:
    """All attempts failed; no data is available for this call."""

    url: str
    attempts: int
    status_code: int | None = None
    error: str | None = None

    def describe(self) -> str:
        detail = self.error or (f"HTTP {self.status_code}" if self.status_code is not None else "unknown error")
        return f"{self.url} failed after {self.attempts} attempt(s): {detail}"


FetchOutcome = Union[FetchSuccess, FetchFailure]
