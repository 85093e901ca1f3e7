import base64
import logging
import os
from dataclasses import asdict, dataclass
from typing import Optional
from urllib.parse import urlparse

import httpx  # type: ignore

from owncloud_adapter.exceptions.owncloud_exceptions import OcsConfigurationError
from owncloud_adapter.sources.client.http.http_client import HTTPClient
from owncloud_adapter.sources.client.iclient import IClient


def basic_auth_token(username: str, password: str) -> str:
    """HTTP Basic Auth requires "username:password" to be Base64 encoded"""
    auth_string = f"{username}:{password}"
    return base64.b64encode(auth_string.encode("utf-8")).decode("utf-8")


class OwnCloudRESTClientViaUsernamePassword(HTTPClient):
    """OwnCloud OCS client via username and password (Basic Auth).
    Args:
        share_api_base_url: Absolute URL of the OCS share endpoint
            (e.g. https://cloud.example/ocs/v1.php/apps/files_sharing/api/v1/shares)
        username: The username
        password: The password or app password
    """

    def __init__(
        self,
        share_api_base_url: str,
        username: str,
        password: str,
        timeout: float = 30.0,
        verify_ssl: bool = True,
        max_retries: int = 0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        super().__init__(
            basic_auth_token(username, password),
            token_type="Basic",
            timeout=timeout,
            verify_ssl=verify_ssl,
            max_retries=max_retries,
            transport=transport,
            logger=logger,
        )
        self.share_api_base_url = share_api_base_url
        self.username = username

    def get_base_url(self) -> str:
        """Get the share API base URL"""
        return self.share_api_base_url


@dataclass
class OcsConfig:
    """Configuration for the OwnCloud OCS share API. There is no anonymous mode."""
    share_api_base_url: str
    username: str
    password: str
    timeout: float = 30.0
    max_retries: int = 0
    verify_ssl: bool = True

    def validate(self) -> "OcsConfig":
        missing = [
            name for name in ("share_api_base_url", "username", "password")
            if not getattr(self, name)
        ]
        if missing:
            raise OcsConfigurationError(
                f"Not presented OCS configuration: missing {', '.join(missing)}",
                details={"missing": missing},
            )

        parsed = urlparse(self.share_api_base_url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise OcsConfigurationError(
                f"OCS share API URL must be an absolute http(s) URL, got: {self.share_api_base_url!r}"
            )
        return self

    def create_client(
        self,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        logger: Optional[logging.Logger] = None,
    ) -> OwnCloudRESTClientViaUsernamePassword:
        return OwnCloudRESTClientViaUsernamePassword(
            self.share_api_base_url,
            self.username,
            self.password,
            timeout=self.timeout,
            verify_ssl=self.verify_ssl,
            max_retries=self.max_retries,
            transport=transport,
            logger=logger,
        )

    def to_dict(self) -> dict:
        data = asdict(self)
        data["password"] = "***" if self.password else ""
        return data

    @classmethod
    def from_env(cls) -> "OcsConfig":
        """
        Load the OCS configuration from environment variables:
        OWNCLOUD_SHARE_API_URL, OWNCLOUD_USERNAME, OWNCLOUD_PASSWORD (required),
        OWNCLOUD_TIMEOUT, OWNCLOUD_MAX_RETRIES, OWNCLOUD_VERIFY_SSL (optional).
        """
        try:
            return cls(
                share_api_base_url=os.getenv("OWNCLOUD_SHARE_API_URL", ""),
                username=os.getenv("OWNCLOUD_USERNAME", ""),
                password=os.getenv("OWNCLOUD_PASSWORD", ""),
                timeout=float(os.getenv("OWNCLOUD_TIMEOUT", "30")),
                max_retries=int(os.getenv("OWNCLOUD_MAX_RETRIES", "0")),
                verify_ssl=os.getenv("OWNCLOUD_VERIFY_SSL", "true").lower() == "true",
            ).validate()
        except ValueError as e:
            raise OcsConfigurationError(f"Invalid OCS configuration in environment: {e}") from e


class OwnCloudClient(IClient):
    """Builder class for OwnCloud OCS clients"""

    def __init__(self, client: OwnCloudRESTClientViaUsernamePassword) -> None:
        """Initialize with an OwnCloud client object"""
        self.client = client

    def get_client(self) -> OwnCloudRESTClientViaUsernamePassword:
        """Return the OwnCloud client object"""
        return self.client

    @classmethod
    def build_with_config(
        cls,
        config: OcsConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        logger: Optional[logging.Logger] = None,
    ) -> "OwnCloudClient":
        """Build OwnCloudClient with a validated configuration object"""
        if not config:
            raise OcsConfigurationError()
        if not isinstance(config, OcsConfig):
            raise OcsConfigurationError(
                f"OCS configuration must be an OcsConfig, got {type(config).__name__}",
                details={"type": type(config).__name__},
            )
        return cls(config.validate().create_client(transport=transport, logger=logger))

    @classmethod
    def build_from_env(cls, logger: Optional[logging.Logger] = None) -> "OwnCloudClient":
        """Build OwnCloudClient from OWNCLOUD_* environment variables"""
        logger = logger or logging.getLogger(__name__)
        try:
            return cls.build_with_config(OcsConfig.from_env(), logger=logger)
        except OcsConfigurationError as e:
            logger.error(f"Failed to build OwnCloud client from environment: {e}")
            raise
