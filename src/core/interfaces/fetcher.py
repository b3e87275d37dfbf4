"""Fetcher contract.

Why Protocol:
- Structural contract (duck typing) without rigid inheritance.
- The resolver depends on this abstraction, so the httpx adapter can be
  swapped for an in-memory fake in tests.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from core.domain.results import FetchOutcome


@runtime_checkable
class Fetcher(Protocol):
    """Minimal contract for an idempotent GET with its own retry policy.

    Design rules:
    - `fetch` is asynchronous because it performs I/O.
    - Transport and HTTP failures come back as `FetchFailure`, never raised.
    """

    async def fetch(self, url: str) -> FetchOutcome:
        """Fetch `url` and return the typed outcome."""

        ...
