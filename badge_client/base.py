"""Base HTTP client with retry logic."""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

import httpx
from loguru import logger
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    RetryError,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from badge_client.errors import FetchExhausted, TerminalFetchError, TransientFetchError

# Default settings
DEFAULT_TIMEOUT = 10.0
DEFAULT_MAX_RETRIES = 3
DEFAULT_USER_AGENT = "BadgeAPI"


def _is_retryable_error(exc: BaseException) -> bool:
    """Check if exception is retryable (network errors, timeouts, 5xx)."""
    return isinstance(exc, (httpx.TransportError, TimeoutError, TransientFetchError))


def _log_retry(state: RetryCallState) -> None:
    exc = state.outcome.exception() if state.outcome else None
    logger.debug(
        "Fetch failed for {}, retrying in {:.0f}s (attempt {}): {}",
        state.args[0] if state.args else "?",
        state.next_action.sleep if state.next_action else 0,
        state.attempt_number,
        exc,
    )


class BaseClient:
    """Async JSON client with a hard per-attempt deadline and exponential backoff.

    A 4xx response is terminal and raised immediately as
    :class:`TerminalFetchError`. Transport errors, timeouts and 5xx are
    retried ``max_retries`` times, waiting ``2 ** attempt`` seconds in
    between, then surface as :class:`FetchExhausted`.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        max_retries: int = DEFAULT_MAX_RETRIES,
        user_agent: str = DEFAULT_USER_AGENT,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self._client: httpx.AsyncClient | None = None
        self._timeout = timeout
        self._max_retries = max_retries
        self._headers = {"User-Agent": user_agent}
        self._transport = transport
        self._sleep = sleep
        self._request_count = 0
        logger.debug("{}: timeout={}s, max_retries={}", self.__class__.__name__, timeout, max_retries)

    @property
    def request_count(self) -> int:
        return self._request_count

    async def __aenter__(self):
        self._client = httpx.AsyncClient(
            headers=self._headers,
            follow_redirects=True,
            transport=self._transport,
            limits=httpx.Limits(max_connections=100, max_keepalive_connections=20),
        )
        return self

    async def __aexit__(self, *_):
        logger.debug("Total upstream requests: {}", self._request_count)
        if self._client:
            await self._client.aclose()
            self._client = None

    async def fetch(
        self,
        url: str,
        headers: dict[str, str] | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
    ) -> Any:
        """GET ``url`` and decode the JSON body, retrying transient failures."""
        max_retries = self._max_retries if max_retries is None else max_retries
        retrying = AsyncRetrying(
            sleep=self._sleep,
            stop=stop_after_attempt(max_retries + 1),
            wait=wait_exponential(multiplier=1, exp_base=2),
            retry=retry_if_exception(_is_retryable_error),
            before_sleep=_log_retry,
        )
        try:
            return await retrying(self._get, url, headers, timeout or self._timeout)
        except RetryError as e:
            raise FetchExhausted(url, max_retries + 1, e.last_attempt.exception()) from e

    async def _get(self, url: str, headers: dict[str, str] | None, timeout: float) -> Any:
        """Single attempt, cancelled when ``timeout`` expires."""
        if self._client is None:
            raise RuntimeError(f"{self.__class__.__name__} used outside its async context")

        self._request_count += 1
        resp = await asyncio.wait_for(self._client.get(url, headers=headers, timeout=timeout), timeout)

        if 400 <= resp.status_code < 500:
            raise TerminalFetchError(url, resp.status_code)
        if not resp.is_success:
            raise TransientFetchError(url, resp.status_code)

        try:
            return resp.json()
        except ValueError as e:
            raise TerminalFetchError(url, resp.status_code, f"Invalid JSON: {e}") from e

