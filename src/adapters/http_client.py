"""httpx wrapper.

Why a wrapper:
- Standardizes timeouts, headers, retries and logging for both APIs.
- Eases testing: the client can be built over an `httpx.MockTransport`.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

import httpx

from core.config import AppSettings
from core.domain.results import FetchFailure, FetchOutcome, FetchSuccess

logger = logging.getLogger(__name__)

SleepFunc = Callable[[float], Awaitable[None]]


def build_async_client(
    settings: AppSettings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create an `httpx.AsyncClient` with safe defaults.

    Why a builder:
    - Centralizes timeouts/headers so both APIs behave the same.
    - `transport` lets tests plug in `httpx.MockTransport`.
    """

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json",
    }
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )


class RetryingFetcher:
    """GET with pure exponential backoff and a bounded number of attempts.

    Every non-2xx status and every `httpx.HTTPError` counts as a failed
    attempt. The delay starts at `initial_delay` and doubles after each
    failure; there is no jitter and no cap on the delay itself. No sleep
    follows the last attempt.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        max_attempts: int = 3,
        initial_delay: float = 0.5,
        sleep: SleepFunc = asyncio.sleep,
    ) -> None:
        self._client = client
        self.max_attempts = max(1, max_attempts)
        self.initial_delay = initial_delay
        self._sleep = sleep

    @classmethod
    def from_settings(
        cls,
        settings: AppSettings,
        client: httpx.AsyncClient,
        *,
        sleep: SleepFunc = asyncio.sleep,
    ) -> RetryingFetcher:
        return cls(
            client,
            max_attempts=settings.request_max_retries,
            initial_delay=settings.request_initial_delay,
            sleep=sleep,
        )

    async def fetch(
        self,
        url: str,
        *,
        max_attempts: int | None = None,
        initial_delay: float | None = None,
    ) -> FetchOutcome:
        attempts_allowed = max(1, max_attempts if max_attempts is not None else self.max_attempts)
        delay = initial_delay if initial_delay is not None else self.initial_delay

        last_status: int | None = None
        last_error: str | None = None

        for attempt in range(1, attempts_allowed + 1):
            try:
                response = await self._client.get(url)
            except httpx.HTTPError as exc:
                last_status = None
                last_error = f"{type(exc).__name__}: {exc}"
            else:
                if response.is_success:
                    logger.debug("GET %s -> %s (attempt %d)", url, response.status_code, attempt)
                    return FetchSuccess(
                        url=url,
                        status_code=response.status_code,
                        text=response.text,
                        attempts=attempt,
                    )
                last_status = response.status_code
                last_error = f"HTTP {response.status_code}"

            if attempt == attempts_allowed:
                logger.warning("Request failed (%d/%d): %s for %s", attempt, attempts_allowed, last_error, url)
                break

            logger.warning(
                "Request failed (%d/%d): %s for %s. Retrying in %ss",
                attempt,
                attempts_allowed,
                last_error,
                url,
                delay,
            )
            await self._sleep(delay)
            delay *= 2

        failure = FetchFailure(url=url, attempts=attempts_allowed, status_code=last_status, error=last_error)
        logger.error("Request failed after retries: %s", failure.describe())
        return failure
