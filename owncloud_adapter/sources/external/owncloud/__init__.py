"""OwnCloud OCS share API data source module."""

from owncloud_adapter.sources.external.owncloud.ocs_parser import parse_ocs_response
from owncloud_adapter.sources.external.owncloud.owncloud import OwnCloudShareDataSource

__all__ = ["OwnCloudShareDataSource", "parse_ocs_response"]
