from owncloud_adapter.sources.client.owncloud.owncloud import (
    OcsConfig,
    OwnCloudClient,
    OwnCloudRESTClientViaUsernamePassword,
)

__all__ = ["OcsConfig", "OwnCloudClient", "OwnCloudRESTClientViaUsernamePassword"]
