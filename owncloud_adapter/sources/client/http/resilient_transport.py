"""
Resilient HTTP transport.
Combines rate limiting and retry logic at the transport layer.
"""

import asyncio
import logging
import random
from http import HTTPStatus
from typing import FrozenSet, Optional

import httpx
from aiolimiter import AsyncLimiter

# Share creation (POST) and MOVE/COPY are left out: replaying them can create a
# duplicate share or hit a source that the first attempt already moved.
IDEMPOTENT_METHODS: FrozenSet[str] = frozenset(
    {"GET", "HEAD", "OPTIONS", "PUT", "DELETE", "PROPFIND"}
)


class ResilientHTTPTransport(httpx.AsyncHTTPTransport):
    """
    HTTP transport with optional rate limiting and retry logic.

    - Rate limiting is optional (only applied if rate_limiter is provided)
    - Rate limits ONCE per logical request (not per retry attempt)
    - Retries on 429, 5xx and network errors, for idempotent methods only
    - Respects Retry-After header
    - Uses exponential backoff with full jitter
    """

    def __init__(
        self,
        rate_limiter: Optional[AsyncLimiter] = None,
        max_retries: int = 3,
        base_delay: float = 1.0,
        max_delay: float = 32.0,
        logger: Optional[logging.Logger] = None,
        **kwargs
    ) -> None:
        if not isinstance(max_retries, int) or max_retries < 0:
            raise ValueError(f"max_retries must be a non-negative integer, got: {max_retries}")

        if not isinstance(base_delay, (int, float)) or base_delay < 0:
            raise ValueError(f"base_delay must be a non-negative number, got: {base_delay}")

        if not isinstance(max_delay, (int, float)) or max_delay < 0:
            raise ValueError(f"max_delay must be a non-negative number, got: {max_delay}")

        if max_delay < base_delay:
            raise ValueError(f"max_delay ({max_delay}) must be >= base_delay ({base_delay})")

        super().__init__(**kwargs)
        self.rate_limiter = rate_limiter
        self.max_retries = max_retries
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.logger = logger or logging.getLogger(__name__)

    def _retries_for(self, request: httpx.Request) -> int:
        """Number of retries allowed for this request's method."""
        if request.method.upper() in IDEMPOTENT_METHODS:
            return self.max_retries
        return 0

    @staticmethod
    def _is_retryable_status(status_code: int) -> bool:
        return (
            status_code == HTTPStatus.TOO_MANY_REQUESTS or
            HTTPStatus.INTERNAL_SERVER_ERROR <= status_code <= HTTPStatus.NETWORK_AUTHENTICATION_REQUIRED
        )

    def _calculate_delay(self, response: Optional[httpx.Response], attempt: int) -> float:
        """
        Calculate retry delay using exponential backoff with full jitter.
        A numeric Retry-After header takes priority.
        """
        if response is not None:
            retry_after = response.headers.get("Retry-After")
            if retry_after:
                try:
                    return float(retry_after)
                except ValueError:
                    pass  # HTTP-date form, fall back to backoff

        exponential = min(self.max_delay, self.base_delay * (2 ** attempt))
        return random.uniform(0, exponential)

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        """
        Handle HTTP request with optional rate limiting and retry logic.
        Rate limiting (if configured) happens ONCE per logical request.
        """
        if self.rate_limiter:
            await self.rate_limiter.acquire()

        retries = self._retries_for(request)
        attempt = 0
        while True:
            try:
                response = await super().handle_async_request(request)
            except (httpx.TimeoutException, httpx.ConnectError, httpx.ReadError, httpx.RemoteProtocolError) as e:
                if attempt >= retries:
                    if retries:
                        self.logger.error(
                            f"{request.method} {request.url} failed after {attempt + 1} attempts with network error"
                        )
                    raise
                delay = self._calculate_delay(None, attempt)
                self.logger.warning(
                    f"Network error: {type(e).__name__} on {request.method} {request.url} "
                    f"(Attempt {attempt + 1}/{retries + 1}). Retrying in {delay:.2f}s..."
                )
            else:
                if attempt >= retries or not self._is_retryable_status(response.status_code):
                    return response
                delay = self._calculate_delay(response, attempt)
                await response.aclose()
                self.logger.warning(
                    f"HTTP {response.status_code} on {request.method} {request.url} "
                    f"(Attempt {attempt + 1}/{retries + 1}). Retrying in {delay:.2f}s..."
                )

            await asyncio.sleep(delay)
            attempt += 1
