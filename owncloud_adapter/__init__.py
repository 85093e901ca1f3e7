"""Filesystem-style access to OwnCloud over WebDAV, with OCS public link shares."""

from owncloud_adapter.connectors.sources.owncloud.adapter import OwnCloudAdapter
from owncloud_adapter.connectors.sources.webdav.adapter import WebDAVAdapter
from owncloud_adapter.exceptions.owncloud_exceptions import (
    OcsConfigurationError,
    OwnCloudError,
    ResourceNotFoundError,
    ResponseParseError,
    TransportError,
)
from owncloud_adapter.models.shares import SHARE_PARAMS, ShareResponse
from owncloud_adapter.sources.client.owncloud.owncloud import OcsConfig
from owncloud_adapter.sources.client.webdav.webdav import WebDAVClient, WebDAVConfig

__all__ = [
    "OcsConfig",
    "OcsConfigurationError",
    "OwnCloudAdapter",
    "OwnCloudError",
    "ResourceNotFoundError",
    "ResponseParseError",
    "SHARE_PARAMS",
    "ShareResponse",
    "TransportError",
    "WebDAVAdapter",
    "WebDAVClient",
    "WebDAVConfig",
]
