import logging
from pathlib import Path
from typing import Optional

import httpx  # type: ignore
from aiolimiter import AsyncLimiter

from owncloud_adapter.exceptions.owncloud_exceptions import TransportError
from owncloud_adapter.sources.client.http.http_request import HTTPRequest
from owncloud_adapter.sources.client.http.http_response import HTTPResponse
from owncloud_adapter.sources.client.http.resilient_transport import ResilientHTTPTransport
from owncloud_adapter.sources.client.iclient import IClient


class HTTPClient(IClient):
    """
    HTTP client with authentication and optional resilience features.

    Features:
    - Automatic Authorization header injection
    - Optional retry logic with exponential backoff (idempotent methods only)
    - Automatic rate limiting when retries are enabled (default: 50 req/s)
    - Network failures are raised as TransportError; HTTP error statuses are returned as-is

    Args:
        token: Authentication token
        token_type: Token type for Authorization header (default: "Bearer")
        timeout: Request timeout in seconds (default: 30.0)
        follow_redirects: Whether to follow HTTP redirects (default: True)
        verify_ssl: Whether to verify TLS certificates (default: True)
        rate_limiter: Optional AsyncLimiter. If None and max_retries > 0, defaults to 50 req/s
        max_retries: Number of retry attempts (default: 0 = disabled)
        base_delay: Initial delay for exponential backoff in seconds (default: 1.0)
        max_delay: Maximum delay cap in seconds (default: 32.0)
        transport: Optional httpx transport; takes precedence over the resilience settings
        logger: Optional logger instance
    """
    def __init__(
        self,
        token: str,
        token_type: str = "Bearer",
        timeout: float = 30.0,
        follow_redirects: bool = True,
        verify_ssl: bool = True,
        # Optional resilience configuration
        rate_limiter: Optional[AsyncLimiter] = None,
        max_retries: int = 0,  # 0 = disabled
        base_delay: float = 1.0,
        max_delay: float = 32.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        logger: Optional[logging.Logger] = None
    ) -> None:
        self.headers = {
            "Authorization": f"{token_type} {token}",
        }
        self.timeout = timeout
        self.follow_redirects = follow_redirects
        self.verify_ssl = verify_ssl
        self.rate_limiter = rate_limiter
        self.max_retries = max_retries
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.transport = transport
        self.logger = logger or logging.getLogger(__name__)
        self.client: Optional[httpx.AsyncClient] = None

    def get_client(self) -> "HTTPClient":
        """Get the client"""
        return self

    async def _ensure_client(self) -> httpx.AsyncClient:
        """
        Ensure client is created and available.
        An injected transport wins; otherwise a resilient transport is built when
        a rate limiter or retries are configured, and a plain client is used if not.
        """
        if self.client is None:
            transport = self.transport
            if transport is None and (self.rate_limiter is not None or self.max_retries > 0):
                if self.rate_limiter is None:
                    self.rate_limiter = AsyncLimiter(50, 1)
                transport = ResilientHTTPTransport(
                    rate_limiter=self.rate_limiter,
                    max_retries=self.max_retries,
                    base_delay=self.base_delay,
                    max_delay=self.max_delay,
                    logger=self.logger,
                    verify=self.verify_ssl,
                )

            if transport is not None:
                self.client = httpx.AsyncClient(
                    transport=transport,
                    timeout=self.timeout,
                    follow_redirects=self.follow_redirects
                )
            else:
                self.client = httpx.AsyncClient(
                    timeout=self.timeout,
                    follow_redirects=self.follow_redirects,
                    verify=self.verify_ssl
                )
        return self.client

    async def execute(self, request: HTTPRequest, **kwargs) -> HTTPResponse:
        """Execute an HTTP request
        Args:
            request: The HTTP request to execute
            kwargs: Additional keyword arguments to pass to the request
        Returns:
            A HTTPResponse object containing the response from the server, whatever its status
        Raises:
            TransportError: the request never produced a response
        """
        url = f"{request.url.format(**request.path_params)}"
        client = await self._ensure_client()

        # Merge client headers with request headers (request headers take precedence)
        merged_headers = {**self.headers, **request.headers}
        request_kwargs = {
            "params": request.query_params,
            "headers": merged_headers,
            **kwargs
        }

        if isinstance(request.body, dict):
            content_type = request.headers.get("Content-Type", "").lower()
            if "application/x-www-form-urlencoded" in content_type:
                request_kwargs["data"] = request.body
            else:
                request_kwargs["json"] = request.body
        elif isinstance(request.body, (bytes, str)):
            request_kwargs["content"] = request.body
        elif isinstance(request.body, Path):
            request_kwargs["content"] = request.body.read_bytes()

        self.logger.debug(f"{request.method} {url}")
        try:
            response = await client.request(request.method, url, **request_kwargs)
        except httpx.TransportError as e:
            self.logger.error(f"{request.method} {url} failed: {type(e).__name__}: {e}")
            raise TransportError(
                f"{request.method} {url} failed: {e}",
                method=request.method,
                url=url,
            ) from e

        self.logger.debug(f"{request.method} {url} -> HTTP {response.status_code}")
        return HTTPResponse(response)

    async def close(self) -> None:
        """Close the client"""
        if self.client:
            await self.client.aclose()
            self.client = None

    async def __aenter__(self) -> "HTTPClient":
        """Async context manager entry"""
        await self._ensure_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit"""
        await self.close()
