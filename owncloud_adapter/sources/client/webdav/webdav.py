import logging
import os
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional, Union
from urllib.parse import urljoin

import httpx  # type: ignore

from owncloud_adapter.config.constants.http_status_code import HttpStatusCode
from owncloud_adapter.exceptions.owncloud_exceptions import (
    OcsConfigurationError,
    ResourceNotFoundError,
)
from owncloud_adapter.sources.client.http.http_client import HTTPClient
from owncloud_adapter.sources.client.http.http_request import HTTPRequest
from owncloud_adapter.sources.client.http.http_response import HTTPResponse
from owncloud_adapter.sources.client.iclient import IClient
from owncloud_adapter.sources.client.owncloud.owncloud import basic_auth_token


class WebDAVClient(IClient):
    """
    Path-prefixed WebDAV requests against a DAV root such as
    https://cloud.example/remote.php/webdav/.

    Paths are relative to base_url and must already be URL-encoded.
    A 404 is raised as ResourceNotFoundError; every other status is returned.
    """

    def __init__(
        self,
        base_url: str,
        username: str,
        password: str,
        timeout: float = 30.0,
        verify_ssl: bool = True,
        max_retries: int = 0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        # urljoin drops the last segment of a base without trailing slash
        self.base_url = base_url.rstrip('/') + '/'
        self.logger = logger or logging.getLogger(__name__)
        self.http = HTTPClient(
            basic_auth_token(username, password),
            token_type="Basic",
            timeout=timeout,
            verify_ssl=verify_ssl,
            max_retries=max_retries,
            transport=transport,
            logger=self.logger,
        )

    def get_client(self) -> HTTPClient:
        return self.http

    def get_absolute_url(self, path: str) -> str:
        """Absolute URL of a path relative to the DAV root."""
        return urljoin(self.base_url, path.lstrip('/'))

    async def request(
        self,
        method: str,
        path: str,
        body: Union[str, bytes, None] = None,
        headers: Optional[Dict[str, Any]] = None,
    ) -> HTTPResponse:
        _headers = {k: str(v) for k, v in (headers or {}).items()}

        # If body is string (XML), ensure content type
        if isinstance(body, str):
            _headers.setdefault('Content-Type', 'application/xml; charset=utf-8')

        req = HTTPRequest(
            method=method,
            url=self.get_absolute_url(path),
            headers=_headers,
            path={},
            query={},
            body=body,
        )
        response = await self.http.execute(req)
        if response.status == HttpStatusCode.NOT_FOUND.value:
            raise ResourceNotFoundError(f"{method} {path}: resource not found", path=path)
        return response

    async def close(self) -> None:
        await self.http.close()


@dataclass
class WebDAVConfig:
    """Configuration for the WebDAV endpoint of an OwnCloud server"""
    base_url: str
    username: str
    password: str
    timeout: float = 30.0
    verify_ssl: bool = True

    def create_client(
        self,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        logger: Optional[logging.Logger] = None,
    ) -> WebDAVClient:
        return WebDAVClient(
            self.base_url,
            self.username,
            self.password,
            timeout=self.timeout,
            verify_ssl=self.verify_ssl,
            transport=transport,
            logger=logger,
        )

    def to_dict(self) -> dict:
        data = asdict(self)
        data["password"] = "***" if self.password else ""
        return data

    @classmethod
    def from_env(cls) -> "WebDAVConfig":
        """
        Load from OWNCLOUD_WEBDAV_URL, OWNCLOUD_USERNAME, OWNCLOUD_PASSWORD,
        OWNCLOUD_TIMEOUT and OWNCLOUD_VERIFY_SSL.
        """
        base_url = os.getenv("OWNCLOUD_WEBDAV_URL")
        if not base_url:
            raise OcsConfigurationError("OWNCLOUD_WEBDAV_URL is required")
        try:
            timeout = float(os.getenv("OWNCLOUD_TIMEOUT", "30"))
        except ValueError as e:
            raise OcsConfigurationError(f"Invalid OWNCLOUD_TIMEOUT: {e}") from e
        return cls(
            base_url=base_url,
            username=os.getenv("OWNCLOUD_USERNAME", ""),
            password=os.getenv("OWNCLOUD_PASSWORD", ""),
            timeout=timeout,
            verify_ssl=os.getenv("OWNCLOUD_VERIFY_SSL", "true").lower() == "true",
        )
