"""Render sink contract.

The core never draws anything. It hands plain data to whatever implements
these callbacks (a terminal, a GUI, a test recorder).
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class RenderSink(Protocol):
    def on_clear_all(self) -> None:
        """Drop every card rendered for the previous user."""

        ...

    def on_user_changed(self, user_id: int) -> None:
        """Show the number of the user now being resolved."""

        ...

    def on_player_name(self, name: str) -> None: ...

    def on_card_resolved(self, display_name: str, image_url: str) -> None: ...

    def on_error(self, message: str) -> None:
        """Report a failure; no card is produced for it."""

        ...
