"""Refresh orchestration: which user is on screen, and keeping it that way.

The orchestrator owns the single active `ResolutionSession`. Changing user
cancels the previous session cooperatively, clears what it rendered and
starts a fresh resolution as an asyncio task. Every render goes through an
ownership check, so a superseded session can still be draining a request but
nothing it produces ever reaches the sink.

All mutation happens on the event loop thread; no locks are needed.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import aclosing

from core.domain.models import EntityDetail, ResolutionError
from core.interfaces.render_sink import RenderSink
from core.services.roster_resolver import RosterResolver
from core.services.session import ResolutionSession

logger = logging.getLogger(__name__)


class RefreshOrchestrator:
    def __init__(self, *, resolver: RosterResolver, sink: RenderSink) -> None:
        self._resolver = resolver
        self._sink = sink
        self._active: ResolutionSession | None = None
        self._pending: dict[asyncio.Task[None], ResolutionSession] = {}

    @property
    def active_session(self) -> ResolutionSession | None:
        return self._active

    @property
    def rendered_cards(self) -> list[EntityDetail]:
        if self._active is None:
            return []
        return list(self._active.rendered)

    def change_user(self, user_id: int) -> asyncio.Task[None]:
        """Switch to `user_id` and start resolving its roster in the background.

        Must be called from inside a running event loop. Returns the task
        consuming the new session, which callers may await or ignore.
        """

        loop = asyncio.get_running_loop()

        previous = self._active
        if previous is not None:
            previous.cancel()
            logger.debug("Cancelled session for user %d", previous.user_id)

        self._sink.on_clear_all()
        self._sink.on_user_changed(user_id)

        session = ResolutionSession(user_id=user_id)
        self._active = session
        task = loop.create_task(
            self._consume(session),
            name=f"roster-resolution-{user_id}",
        )
        session.task = task
        # Superseded sessions may still be draining a request; keep them joinable.
        self._pending[task] = session
        task.add_done_callback(self._forget)
        return task

    async def wait(self) -> None:
        """Wait for the active session to finish (or be superseded)."""

        session = self._active
        if session is not None and session.task is not None:
            await session.task

    async def shutdown(self) -> None:
        """Cancel every session still running and wait for all of them to end.

        Callers close the HTTP client afterwards, so no session task may
        outlive this call.
        """

        self._active = None
        pending = list(self._pending.items())
        for _, session in pending:
            session.cancel()
        if pending:
            await asyncio.gather(*(task for task, _ in pending))

    def _forget(self, task: asyncio.Task[None]) -> None:
        self._pending.pop(task, None)

    def _owns_sink(self, session: ResolutionSession) -> bool:
        return self._active is session and not session.cancelled

    def _deliver_player_name(self, session: ResolutionSession, name: str) -> None:
        if not self._owns_sink(session):
            return
        session.player_name = name
        self._sink.on_player_name(name)

    async def _consume(self, session: ResolutionSession) -> None:
        stream = self._resolver.resolve(
            session.user_id,
            session.token,
            on_player_name=lambda name: self._deliver_player_name(session, name),
        )
        try:
            async with aclosing(stream) as items:
                async for item in items:
                    if not self._owns_sink(session):
                        break
                    if isinstance(item, ResolutionError):
                        self._sink.on_error(item.message)
                    else:
                        session.rendered.append(item)
                        self._sink.on_card_resolved(item.display_name, item.image_url)
        except Exception as exc:  # noqa: BLE001 - the UI must survive a broken pipeline
            logger.exception("Resolution for user %d crashed", session.user_id)
            if self._owns_sink(session):
                self._sink.on_error(f"Unexpected error while loading user {session.user_id}: {exc}")
        else:
            if not session.cancelled:
                logger.info(
                    "User %d resolved: %d card(s)",
                    session.user_id,
                    len(session.rendered),
                )
