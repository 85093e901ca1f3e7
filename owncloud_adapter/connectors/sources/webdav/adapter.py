import logging
from typing import Any, Dict, List, Optional, Union
from urllib.parse import quote, unquote, urlparse

from owncloud_adapter.config.constants.http_status_code import HttpStatusCode
from owncloud_adapter.connectors.core.interfaces.filesystem.ifilesystem_adapter import (
    IFilesystemAdapter,
)
from owncloud_adapter.exceptions.owncloud_exceptions import ResourceNotFoundError
from owncloud_adapter.sources.client.http.http_response import HTTPResponse
from owncloud_adapter.sources.client.webdav.webdav import WebDAVClient
from owncloud_adapter.utils.xml_utils import parse_xml_document

DAV_NAMESPACES = {
    'd': 'DAV:',
    'oc': 'http://owncloud.org/ns',
}

PROPFIND_BODY = """<?xml version="1.0"?>
<d:propfind xmlns:d="DAV:" xmlns:oc="http://owncloud.org/ns">
  <d:prop>
    <d:getlastmodified />
    <d:getetag />
    <d:getcontenttype />
    <d:resourcetype />
    <d:getcontentlength />
    <d:displayname />
    <oc:fileid />
    <oc:permissions />
    <oc:size />
  </d:prop>
</d:propfind>
"""


def is_success(response: HTTPResponse) -> bool:
    return HttpStatusCode.OK.value <= response.status < HttpStatusCode.MULTIPLE_CHOICES.value


def encode_path(path: str) -> str:
    """Percent-encode every segment of a path, keeping the separators."""
    return '/'.join(quote(segment, safe='') for segment in path.split('/'))


def _int_or_none(text: Optional[str]) -> Optional[int]:
    if text and text.strip().isdigit():
        return int(text.strip())
    return None


def parse_propfind_response(body: bytes) -> List[Dict[str, Any]]:
    """
    Parse a PROPFIND multistatus body into entry dictionaries.
    Args:
        body: The XML bytes returned from PROPFIND
    Returns:
        One dictionary per <d:response> carrying a 2xx propstat; 'href' is the
        URL-decoded path of the reply's href, without scheme or host
    """
    root = parse_xml_document(body)
    entries = []

    for response in root.iterfind('d:response', DAV_NAMESPACES):
        href = response.findtext('d:href', default='', namespaces=DAV_NAMESPACES)

        prop = None
        for propstat in response.iterfind('d:propstat', DAV_NAMESPACES):
            status = propstat.findtext('d:status', default='', namespaces=DAV_NAMESPACES)
            if ' 200 ' in f' {status} ':
                prop = propstat.find('d:prop', DAV_NAMESPACES)
                break
        if prop is None:
            continue

        resourcetype = prop.find('d:resourcetype', DAV_NAMESPACES)
        is_collection = resourcetype is not None and \
            resourcetype.find('d:collection', DAV_NAMESPACES) is not None

        entries.append({
            'href': unquote(urlparse(href).path),
            'is_collection': is_collection,
            'content_type': prop.findtext('d:getcontenttype', namespaces=DAV_NAMESPACES),
            'size': _int_or_none(
                prop.findtext('d:getcontentlength', namespaces=DAV_NAMESPACES)
                or prop.findtext('oc:size', namespaces=DAV_NAMESPACES)
            ),
            'last_modified': prop.findtext('d:getlastmodified', namespaces=DAV_NAMESPACES),
            'etag': prop.findtext('d:getetag', namespaces=DAV_NAMESPACES),
            'display_name': prop.findtext('d:displayname', namespaces=DAV_NAMESPACES),
            'file_id': prop.findtext('oc:fileid', namespaces=DAV_NAMESPACES),
            'permissions': prop.findtext('oc:permissions', namespaces=DAV_NAMESPACES),
        })

    return entries


class WebDAVAdapter(IFilesystemAdapter):
    """
    Generic WebDAV filesystem adapter.

    Paths are relative to the optional prefix, which is itself relative to the
    client's DAV root. Missing resources are reported as False/None/[] and never
    raised; transport and XML errors propagate.

    Args:
        client: Configured WebDAV client
        prefix: Optional path prefix applied to every path
        use_streamed_copy: Copy by downloading and re-uploading instead of DAV COPY
    """

    def __init__(
        self,
        client: WebDAVClient,
        prefix: Optional[str] = None,
        use_streamed_copy: bool = True,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.client = client
        self.use_streamed_copy = use_streamed_copy
        self.logger = logger or logging.getLogger(__name__)
        self.set_path_prefix(prefix)

    # Path handling
    def set_path_prefix(self, prefix: Optional[str]) -> None:
        prefix = (prefix or '').strip('/')
        self.path_prefix = f"{prefix}/" if prefix else ''

    def apply_path_prefix(self, path: str) -> str:
        return self.path_prefix + path.lstrip('/')

    def remove_path_prefix(self, path: str) -> str:
        path = path.strip('/')
        prefix = self.path_prefix.rstrip('/')
        if not prefix:
            return path
        if path == prefix:
            return ''
        if path.startswith(prefix + '/'):
            return path[len(prefix) + 1:]
        return path

    def location(self, path: str) -> str:
        """Encoded, prefixed location of a path, relative to the DAV root."""
        return encode_path(self.apply_path_prefix(path))

    def server_path(self, location: str) -> str:
        """Absolute path (no scheme or host) of a location on the server."""
        return urlparse(self.client.get_absolute_url(location)).path

    def _relative_path(self, path: str) -> str:
        """Adapter-relative path of a decoded href path."""
        root = unquote(urlparse(self.client.base_url).path)
        if path.startswith(root):
            path = path[len(root):]
        return self.remove_path_prefix(path)

    def _normalize_entry(self, entry: Dict[str, Any]) -> Dict[str, Any]:
        normalized = dict(entry)
        normalized['path'] = self._relative_path(entry['href'])
        normalized['type'] = 'dir' if entry['is_collection'] else 'file'
        return normalized

    async def _propfind(self, path: str, depth: int) -> List[Dict[str, Any]]:
        response = await self.client.request(
            'PROPFIND',
            self.location(path),
            body=PROPFIND_BODY,
            headers={'Depth': str(depth)},
        )
        if response.status != HttpStatusCode.MULTI_STATUS.value:
            self.logger.debug(f"PROPFIND {path} returned HTTP {response.status}")
            return []
        return [self._normalize_entry(entry) for entry in parse_propfind_response(response.bytes())]

    # Filesystem operations
    async def write(self, path: str, contents: Union[bytes, str]) -> bool:
        if isinstance(contents, str):
            contents = contents.encode('utf-8')
        try:
            response = await self.client.request('PUT', self.location(path), body=contents)
        except ResourceNotFoundError:
            self.logger.warning(f"Cannot write {path}: parent collection not found")
            return False
        return is_success(response)

    async def read(self, path: str) -> Optional[bytes]:
        try:
            response = await self.client.request('GET', self.location(path))
        except ResourceNotFoundError:
            return None
        return response.bytes() if is_success(response) else None

    async def has(self, path: str) -> bool:
        try:
            return bool(await self._propfind(path, depth=0))
        except ResourceNotFoundError:
            return False

    async def delete(self, path: str) -> bool:
        try:
            response = await self.client.request('DELETE', self.location(path))
        except ResourceNotFoundError:
            return False
        return is_success(response)

    async def create_dir(self, path: str) -> bool:
        try:
            response = await self.client.request('MKCOL', self.location(path))
        except ResourceNotFoundError:
            self.logger.warning(f"Cannot create {path}: parent collection not found")
            return False
        # 405: the collection already exists
        return is_success(response) or response.status == HttpStatusCode.METHOD_NOT_ALLOWED.value

    async def list_contents(self, path: str = '') -> List[Dict[str, Any]]:
        try:
            entries = await self._propfind(path, depth=1)
        except ResourceNotFoundError:
            return []
        own_path = path.strip('/')
        return [entry for entry in entries if entry['path'] != own_path]

    async def get_metadata(self, path: str) -> Optional[Dict[str, Any]]:
        try:
            entries = await self._propfind(path, depth=0)
        except ResourceNotFoundError:
            return None
        return entries[0] if entries else None

    async def copy(self, path: str, new_path: str) -> bool:
        if self.use_streamed_copy:
            contents = await self.read(path)
            if contents is None:
                return False
            return await self.write(new_path, contents)

        try:
            response = await self.client.request('COPY', self.location(path), headers={
                'Destination': self.server_path(self.location(new_path)),
            })
        except ResourceNotFoundError:
            return False
        return is_success(response)

    async def rename(self, path: str, new_path: str) -> bool:
        """MOVE with a server-relative Destination, as most DAV servers accept."""
        try:
            response = await self.client.request('MOVE', self.location(path), headers={
                'Destination': self.server_path(self.location(new_path)),
            })
        except ResourceNotFoundError:
            return False
        return is_success(response)

    async def close(self) -> None:
        await self.client.close()
