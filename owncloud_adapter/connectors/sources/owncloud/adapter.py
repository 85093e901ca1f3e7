import logging
from typing import Any, Dict, List, Mapping, Optional, Union

import httpx  # type: ignore

from owncloud_adapter.connectors.core.interfaces.filesystem.ifilesystem_adapter import (
    IFilesystemAdapter,
)
from owncloud_adapter.connectors.sources.webdav.adapter import WebDAVAdapter, is_success
from owncloud_adapter.exceptions.owncloud_exceptions import (
    OcsConfigurationError,
    ResourceNotFoundError,
)
from owncloud_adapter.models.shares import RenameRequest, ShareResponse
from owncloud_adapter.sources.client.owncloud.owncloud import OcsConfig, OwnCloudClient
from owncloud_adapter.sources.client.webdav.webdav import WebDAVClient, WebDAVConfig
from owncloud_adapter.sources.external.owncloud.owncloud import OwnCloudShareDataSource


class OwnCloudAdapter(IFilesystemAdapter):
    """
    Filesystem adapter for OwnCloud: generic WebDAV file operations plus the
    OCS public link share API.

    File operations are delegated to a wrapped WebDAVAdapter. rename() is
    overridden because OwnCloud only accepts an absolute URL in the MOVE
    Destination header.

    Args:
        client: Configured WebDAV client
        prefix: Optional path prefix applied to every WebDAV path
        use_streamed_copy: Copy by downloading and re-uploading instead of DAV COPY
        ocs_config: OCS share API configuration; required
        ocs_transport: Optional httpx transport for the OCS client
    Raises:
        OcsConfigurationError: ocs_config is missing or invalid
    """

    def __init__(
        self,
        client: WebDAVClient,
        prefix: Optional[str] = None,
        use_streamed_copy: bool = True,
        ocs_config: Optional[OcsConfig] = None,
        ocs_transport: Optional[httpx.AsyncBaseTransport] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        if not ocs_config:
            raise OcsConfigurationError()
        self.logger = logger or logging.getLogger(__name__)
        self.ocs_config = ocs_config
        self.shares = OwnCloudShareDataSource(
            OwnCloudClient.build_with_config(ocs_config, transport=ocs_transport, logger=self.logger),
            logger=self.logger,
        )
        self.webdav = WebDAVAdapter(client, prefix, use_streamed_copy, logger=self.logger)

    @classmethod
    def build_with_config(
        cls,
        webdav_config: WebDAVConfig,
        ocs_config: OcsConfig,
        prefix: Optional[str] = None,
        use_streamed_copy: bool = True,
        logger: Optional[logging.Logger] = None,
    ) -> "OwnCloudAdapter":
        return cls(
            webdav_config.create_client(logger=logger),
            prefix=prefix,
            use_streamed_copy=use_streamed_copy,
            ocs_config=ocs_config,
            logger=logger,
        )

    @classmethod
    def build_from_env(
        cls,
        prefix: Optional[str] = None,
        use_streamed_copy: bool = True,
        logger: Optional[logging.Logger] = None,
    ) -> "OwnCloudAdapter":
        return cls.build_with_config(
            WebDAVConfig.from_env(),
            OcsConfig.from_env(),
            prefix=prefix,
            use_streamed_copy=use_streamed_copy,
            logger=logger,
        )

    # OwnCloud overrides
    async def get_url(self, path: str) -> str:
        """
        Public URL of a path.

        WARNING: this is not a lookup. Every call creates a NEW public link
        share for the path and returns that share's url, so N calls leave N
        shares on the server. An empty string means the server sent no url.
        """
        response = await self.create_share(path)
        return response.url

    async def rename(self, path: str, new_path: str) -> bool:
        """
        Move a resource with an absolute-URL Destination.
        True on a 2xx reply; False when the source is missing or the server
        refuses. Transport failures still raise.
        """
        location = self.webdav.location(path)
        move = RenameRequest(
            source=location.lstrip('/'),
            destination=self.webdav.client.get_absolute_url(self.webdav.location(new_path).lstrip('/')),
        )

        try:
            response = await self.webdav.client.request('MOVE', move.source, headers={
                'Destination': move.destination,
            })
        except ResourceNotFoundError:
            self.logger.warning(f"Rename skipped, source not found: {path}")
            return False

        if is_success(response):
            return True
        self.logger.debug(f"Rename {path} -> {new_path} refused with HTTP {response.status}")
        return False

    # Share operations
    async def get_shares(self, path: str, subfiles: bool = False) -> ShareResponse:
        return await self.shares.get_shares(path, subfiles)

    async def create_share(self, path: str) -> ShareResponse:
        return await self.shares.create_share(path)

    async def get_share_by_id(self, share_id: str) -> ShareResponse:
        return await self.shares.get_share_by_id(share_id)

    async def update_share_by_id(self, share_id: str, params: Optional[Mapping[str, Any]] = None) -> bool:
        return await self.shares.update_share_by_id(share_id, params)

    async def delete_share_by_id(self, share_id: str) -> bool:
        return await self.shares.delete_share_by_id(share_id)

    # Delegated WebDAV operations
    async def write(self, path: str, contents: Union[bytes, str]) -> bool:
        return await self.webdav.write(path, contents)

    async def read(self, path: str) -> Optional[bytes]:
        return await self.webdav.read(path)

    async def has(self, path: str) -> bool:
        return await self.webdav.has(path)

    async def delete(self, path: str) -> bool:
        return await self.webdav.delete(path)

    async def create_dir(self, path: str) -> bool:
        return await self.webdav.create_dir(path)

    async def list_contents(self, path: str = "") -> List[Dict[str, Any]]:
        return await self.webdav.list_contents(path)

    async def get_metadata(self, path: str) -> Optional[Dict[str, Any]]:
        return await self.webdav.get_metadata(path)

    async def copy(self, path: str, new_path: str) -> bool:
        return await self.webdav.copy(path, new_path)

    async def close(self) -> None:
        try:
            await self.webdav.close()
        finally:
            await self.shares.close()

    async def __aenter__(self) -> "OwnCloudAdapter":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
