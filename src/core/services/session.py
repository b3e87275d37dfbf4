"""Resolution sessions and cooperative cancellation."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field

from core.domain.models import EntityDetail


class CancellationToken:
    """One-way flag checked by the pipeline between suspension points.

    Cancelling never interrupts an awaited request; it only guarantees
    that whatever comes back afterwards is dropped.
    """

    __slots__ = ("_cancelled",)

    def __init__(self) -> None:
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def __repr__(self) -> str:
        return f"CancellationToken(cancelled={self._cancelled})"


@dataclass
class ResolutionSession:
    """Live state of one roster resolution for one user."""

    user_id: int
    token: CancellationToken = field(default_factory=CancellationToken)
    rendered: list[EntityDetail] = field(default_factory=list)
    player_name: str | None = None
    task: asyncio.Task[None] | None = field(default=None, repr=False)

    @property
    def cancelled(self) -> bool:
        return self.token.cancelled

    def cancel(self) -> None:
        self.token.cancel()
