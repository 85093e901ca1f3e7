from owncloud_adapter.connectors.sources.owncloud.adapter import OwnCloudAdapter

__all__ = ["OwnCloudAdapter"]
