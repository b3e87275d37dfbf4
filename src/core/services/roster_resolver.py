"""Roster resolution: one user's roster into a lazy stream of cards.

The resolver fetches the roster document, surfaces the player name through a
side channel, then walks the roster ids one at a time. Each id produces
either an `EntityDetail` or an `EntityUnavailable` error; a failing id never
stops the walk. Calls are paced with a fixed pause between ids to stay under
the detail API's rate limit.

The result is an async generator, so a consumer cancels mid-roster simply by
flipping the token or by no longer iterating. It is single-use: call
`resolve` again for a new session.
"""

from __future__ import annotations

import asyncio
import logging
from typing import AsyncIterator, Awaitable, Callable, Union

from pydantic import ValidationError

from core.config import AppSettings
from core.domain.models import (
    CharacterEnvelope,
    EntityDetail,
    ErrorCause,
    ResolutionError,
    ResolutionErrorKind,
    RosterDocument,
)
from core.domain.results import FetchFailure
from core.interfaces.fetcher import Fetcher
from core.services.session import CancellationToken

logger = logging.getLogger(__name__)

ResolutionItem = Union[EntityDetail, ResolutionError]


class RosterResolver:
    def __init__(
        self,
        *,
        fetcher: Fetcher,
        settings: AppSettings | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._fetcher = fetcher
        self._settings = settings or AppSettings()
        self._sleep = sleep

    async def resolve(
        self,
        user_id: int,
        cancel_token: CancellationToken,
        *,
        on_player_name: Callable[[str], None] | None = None,
    ) -> AsyncIterator[ResolutionItem]:
        if cancel_token.cancelled:
            return

        roster_url = self._settings.roster_url(user_id)
        outcome = await self._fetcher.fetch(roster_url)
        if cancel_token.cancelled:
            return

        if isinstance(outcome, FetchFailure):
            # The fetcher already logged the terminal failure.
            yield ResolutionError(
                kind=ResolutionErrorKind.ROSTER_UNAVAILABLE,
                cause=ErrorCause.TRANSPORT,
                user_id=user_id,
                message=f"Roster for user {user_id}: request failed after retries.",
            )
            return

        try:
            roster = RosterDocument.model_validate_json(outcome.text)
        except ValidationError as exc:
            logger.error("Failed to parse roster JSON for user %d: %s", user_id, exc)
            yield ResolutionError(
                kind=ResolutionErrorKind.ROSTER_UNAVAILABLE,
                cause=ErrorCause.PARSE,
                user_id=user_id,
                message=f"Roster for user {user_id}: malformed document.",
            )
            return

        if on_player_name is not None:
            on_player_name(roster.display_name)

        entity_ids = roster.entity_ids or []
        if not entity_ids:
            logger.warning("Player %d has no cards.", user_id)
            return

        last_index = len(entity_ids) - 1
        for index, entity_id in enumerate(entity_ids):
            if cancel_token.cancelled:
                logger.debug("Resolution for user %d cancelled before id %d", user_id, entity_id)
                return

            item = await self._resolve_entity(user_id, entity_id)
            if cancel_token.cancelled:
                return
            yield item

            if index < last_index:
                if cancel_token.cancelled:
                    return
                await self._sleep(self._settings.inter_entity_delay)

    async def _resolve_entity(self, user_id: int, entity_id: int) -> ResolutionItem:
        outcome = await self._fetcher.fetch(self._settings.entity_url(entity_id))
        if isinstance(outcome, FetchFailure):
            return self._entity_error(user_id, entity_id, ErrorCause.TRANSPORT, outcome.describe())

        try:
            envelope = CharacterEnvelope.model_validate_json(outcome.text)
        except ValidationError as exc:
            return self._entity_error(user_id, entity_id, ErrorCause.PARSE, str(exc))

        if envelope.data is None:
            return self._entity_error(user_id, entity_id, ErrorCause.NOT_FOUND, "character data is null")

        return EntityDetail.from_character(envelope.data)

    @staticmethod
    def _entity_error(user_id: int, entity_id: int, cause: ErrorCause, detail: str) -> ResolutionError:
        logger.warning("Character %d unavailable (%s): %s", entity_id, cause.value, detail)
        return ResolutionError(
            kind=ResolutionErrorKind.ENTITY_UNAVAILABLE,
            cause=cause,
            user_id=user_id,
            entity_id=entity_id,
            message=f"Character {entity_id}: {cause.value}.",
        )
