from owncloud_adapter.sources.client.webdav.webdav import WebDAVClient, WebDAVConfig

__all__ = ["WebDAVClient", "WebDAVConfig"]
