import logging
from typing import Any, Dict, Mapping, Optional

from owncloud_adapter.models.shares import (
    SHARE_PARAMS,
    ShareRequest,
    ShareResponse,
    filter_share_params,
)
from owncloud_adapter.sources.client.http.http_request import HTTPRequest
from owncloud_adapter.sources.client.owncloud.owncloud import OwnCloudClient
from owncloud_adapter.sources.external.owncloud.ocs_parser import parse_ocs_response


class OwnCloudShareDataSource:
    """
    Public link share lifecycle over the OCS share API.

    Every request is sent to {share_api_base_url}{sub_path} with Basic auth and
    the mandatory 'OCS-APIRequest: true' header. HTTP statuses are not
    interpreted here; callers inspect the returned ShareResponse.
    """

    SHARE_PARAMS = SHARE_PARAMS

    def __init__(self, client: OwnCloudClient, logger: Optional[logging.Logger] = None) -> None:
        self._client = client.get_client()
        if self._client is None:
            raise ValueError('HTTP client is not initialized')
        try:
            self.base_url = self._client.get_base_url().rstrip('/')
        except AttributeError as exc:
            raise ValueError('HTTP client does not have get_base_url method') from exc
        self.logger = logger or logging.getLogger(__name__)

    async def create_share(self, path: str) -> ShareResponse:
        """
        Create a read-only public link share for a path.
        Ref: POST .../shares (path, shareType=3, permissions=1)
        """
        return await self._ocs_request('POST', '', body=ShareRequest(path).to_form())

    async def get_share_by_id(self, share_id: str) -> ShareResponse:
        """Ref: GET .../shares/{share_id}"""
        return await self._ocs_request('GET', f'/{share_id}')

    async def get_shares(self, path: str, subfiles: bool = False) -> ShareResponse:
        """
        Get the shares of a file or folder, including reshares.
        Listings come back as repeated <element> nodes, see ShareResponse.elements.
        Ref: GET .../shares?path=...&reshares=true&subfiles=...
        """
        params = {
            'path': path,
            'reshares': 'true',
            'subfiles': 'true' if subfiles else 'false',
        }
        return await self._ocs_request('GET', '', params=params)

    async def update_share_by_id(self, share_id: str, params: Optional[Mapping[str, Any]] = None) -> bool:
        """
        Update a share, one PUT per accepted field.

        The OCS API changes a single field per request, so nothing is batched.
        Keys outside SHARE_PARAMS are skipped silently. The result is True once
        every accepted field has been sent; the server's verdict is not checked.
        Ref: PUT .../shares/{share_id}
        """
        accepted = filter_share_params(params)
        ignored = sorted(set(params or {}) - SHARE_PARAMS)
        if ignored:
            self.logger.debug(f"Ignoring unsupported share parameters for share {share_id}: {ignored}")

        for key, value in accepted:
            await self._ocs_request('PUT', f'/{share_id}', body={key: value})
        return True

    async def delete_share_by_id(self, share_id: str) -> bool:
        """
        Remove a share. True whenever the request completes.
        Ref: DELETE .../shares/{share_id}
        """
        await self._ocs_request('DELETE', f'/{share_id}')
        return True

    async def close(self) -> None:
        await self._client.close()

    # Internal OCS API helpers
    def _as_str_dict(self, data: Mapping[str, Any]) -> Dict[str, str]:
        """Helper to ensure all dict values are strings for HTTPRequest."""
        return {k: str(v) for k, v in data.items()}

    async def _ocs_request(
        self,
        method: str,
        sub_path: str,
        params: Optional[Dict[str, Any]] = None,
        body: Optional[Dict[str, Any]] = None,
    ) -> ShareResponse:
        """
        Centralized OCS request handler.
        An empty sub_path addresses the share collection itself.
        """
        headers = {'OCS-APIRequest': 'true'}
        if body is not None:
            headers['Content-Type'] = 'application/x-www-form-urlencoded'

        req = HTTPRequest(
            method=method,
            url=f"{self.base_url}{sub_path}",
            headers=headers,
            path={},
            query=self._as_str_dict(params or {}),
            body=self._as_str_dict(body) if body is not None else None,
        )
        response = await self._client.execute(req)
        return parse_ocs_response(response.bytes(), http_status=response.status)
