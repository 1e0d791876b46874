"""JSON-over-HTTP client with bounded, jittered exponential backoff.

Processing flow:
    1. POST the JSON body to the endpoint.
    2. Transport errors, non-2xx statuses and undecodable bodies count as a
       failed attempt; the error (or response body) is kept as the last error.
    3. Between attempts sleep `base_delay * 2**attempt + uniform(0, max_jitter)`.
    4. Return the parsed body of the first successful attempt, or raise
       `RequestFailed` once `max_attempts` attempts have failed.

The client knows nothing about what the payload means.
"""

from __future__ import annotations

import asyncio
import json
import logging
import random
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional

import httpx

from utils.errors import RequestFailed

LOGGER = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 5


@dataclass(frozen=True)
class AttemptOutcome:
    """Result of one HTTP attempt: a parsed body or an error description."""

    body: Optional[Any] = None
    error: Optional[str] = None
    status_code: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def compute_backoff_delay(
    attempt: int,
    base_delay: float = 1.0,
    max_jitter: float = 1.0,
    rng: Callable[[], float] = random.random,
) -> float:
    """Seconds to wait after failed attempt `attempt` (0-based)."""
    return base_delay * (2 ** attempt) + rng() * max_jitter


class BackoffHttpClient:
    """Execute JSON POST requests with retries."""

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        *,
        headers: Optional[Dict[str, str]] = None,
        timeout: float = 120.0,
        base_delay: float = 1.0,
        max_jitter: float = 1.0,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        rng: Callable[[], float] = random.random,
    ) -> None:
        """Initialize the client.

        Args:
            client: Optional shared httpx.AsyncClient; one is created (and owned) otherwise.
            headers: Headers sent with every request (e.g. credentials).
            timeout: Per-attempt timeout in seconds.
            base_delay: Delay unit in seconds for the exponential schedule.
            max_jitter: Upper bound in seconds of the random delay added per retry.
            sleep: Awaitable sleep function, injectable for tests.
            rng: Source of uniform [0, 1) values, injectable for tests.
        """
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=timeout)
        self.headers = dict(headers or {})
        self.timeout = timeout
        self.base_delay = base_delay
        self.max_jitter = max_jitter
        self._sleep = sleep
        self._rng = rng

    async def execute(
        self,
        endpoint: str,
        request_body: Dict[str, Any],
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ) -> Any:
        """POST `request_body` to `endpoint`, retrying failed attempts.

        Returns:
            The parsed JSON body of the first successful response.

        Raises:
            ValueError: If `max_attempts` is below 1.
            RequestFailed: After `max_attempts` failed attempts.
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1.")

        last = AttemptOutcome(error="No attempt was made.")
        for attempt in range(max_attempts):
            last = await self._attempt(endpoint, request_body)
            if last.ok:
                if attempt:
                    LOGGER.info("Request to %s succeeded on attempt %d", endpoint, attempt + 1)
                return last.body

            LOGGER.warning(
                "Attempt %d/%d to %s failed: %s", attempt + 1, max_attempts, endpoint, last.error
            )
            if attempt == max_attempts - 1:
                break
            delay = compute_backoff_delay(attempt, self.base_delay, self.max_jitter, self._rng)
            LOGGER.debug("Retrying in %.2fs", delay)
            await self._sleep(delay)

        raise RequestFailed(attempts=max_attempts, last_error=last.error or "", status_code=last.status_code)

    async def _attempt(self, endpoint: str, request_body: Dict[str, Any]) -> AttemptOutcome:
        try:
            response = await self.client.post(
                endpoint, json=request_body, headers=self.headers, timeout=self.timeout
            )
        except httpx.HTTPError as exc:
            return AttemptOutcome(error=f"{type(exc).__name__}: {exc}")

        if not response.is_success:
            return AttemptOutcome(
                error=f"API call failed with status {response.status_code}: {response.text}",
                status_code=response.status_code,
            )
        try:
            return AttemptOutcome(body=response.json(), status_code=response.status_code)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            return AttemptOutcome(
                error=f"Invalid JSON in response: {exc}", status_code=response.status_code
            )

    async def aclose(self) -> None:
        """Close the underlying client if this instance created it."""
        if self._owns_client:
            await self.client.aclose()
