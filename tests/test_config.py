"""
Tests for OCS and WebDAV configuration loading and validation.
"""
import pytest

from owncloud_adapter.connectors.sources.owncloud.adapter import OwnCloudAdapter
from owncloud_adapter.exceptions.owncloud_exceptions import OcsConfigurationError
from owncloud_adapter.sources.client.owncloud.owncloud import (
    OcsConfig,
    OwnCloudClient,
    OwnCloudRESTClientViaUsernamePassword,
)
from owncloud_adapter.sources.client.webdav.webdav import WebDAVClient, WebDAVConfig
from tests.fixtures.ocs_fixtures import SHARE_API_URL, WEBDAV_URL


@pytest.fixture
def owncloud_env(monkeypatch, credentials):
    monkeypatch.setenv("OWNCLOUD_SHARE_API_URL", SHARE_API_URL)
    monkeypatch.setenv("OWNCLOUD_WEBDAV_URL", WEBDAV_URL)
    monkeypatch.setenv("OWNCLOUD_USERNAME", credentials["username"])
    monkeypatch.setenv("OWNCLOUD_PASSWORD", credentials["password"])
    return credentials


class TestOcsConfig:

    def test_validate_returns_config(self, ocs_config):
        assert ocs_config.validate() is ocs_config

    @pytest.mark.parametrize("url", [
        "cloud.example/ocs/v1.php/apps/files_sharing/api/v1/shares",
        "ftp://cloud.example/shares",
        "https://",
    ])
    def test_non_absolute_url_is_rejected(self, credentials, url):
        with pytest.raises(OcsConfigurationError, match="absolute http"):
            OcsConfig(share_api_base_url=url, **credentials).validate()

    def test_to_dict_masks_password(self, ocs_config):
        data = ocs_config.to_dict()

        assert data["password"] == "***"
        assert data["username"] == ocs_config.username
        assert data["share_api_base_url"] == SHARE_API_URL

    def test_build_with_config_creates_basic_auth_client(self, ocs_config):
        client = OwnCloudClient.build_with_config(ocs_config).get_client()

        assert isinstance(client, OwnCloudRESTClientViaUsernamePassword)
        assert client.get_base_url() == SHARE_API_URL
        assert client.headers["Authorization"].startswith("Basic ")

    def test_build_with_missing_config(self):
        with pytest.raises(OcsConfigurationError):
            OwnCloudClient.build_with_config(None)


class TestEnvironment:

    def test_ocs_config_from_env(self, monkeypatch, owncloud_env):
        monkeypatch.setenv("OWNCLOUD_TIMEOUT", "12.5")
        monkeypatch.setenv("OWNCLOUD_MAX_RETRIES", "2")
        monkeypatch.setenv("OWNCLOUD_VERIFY_SSL", "false")

        config = OcsConfig.from_env()

        assert config.share_api_base_url == SHARE_API_URL
        assert config.username == owncloud_env["username"]
        assert config.timeout == 12.5
        assert config.max_retries == 2
        assert config.verify_ssl is False

    def test_defaults_from_env(self, owncloud_env):
        config = OcsConfig.from_env()

        assert config.timeout == 30.0
        assert config.max_retries == 0
        assert config.verify_ssl is True

    def test_missing_password_in_env(self, monkeypatch, owncloud_env):
        monkeypatch.delenv("OWNCLOUD_PASSWORD")

        with pytest.raises(OcsConfigurationError) as exc_info:
            OcsConfig.from_env()

        assert exc_info.value.details["missing"] == ["password"]

    def test_invalid_number_in_env(self, monkeypatch, owncloud_env):
        monkeypatch.setenv("OWNCLOUD_MAX_RETRIES", "many")

        with pytest.raises(OcsConfigurationError, match="Invalid OCS configuration"):
            OcsConfig.from_env()

    def test_webdav_config_from_env(self, monkeypatch, owncloud_env):
        monkeypatch.setenv("OWNCLOUD_VERIFY_SSL", "FALSE")

        config = WebDAVConfig.from_env()

        assert config.base_url == WEBDAV_URL
        assert config.verify_ssl is False
        assert config.to_dict()["password"] == "***"
        client = config.create_client()
        assert isinstance(client, WebDAVClient)
        assert client.base_url == WEBDAV_URL + "/"

    def test_webdav_url_is_required(self, monkeypatch, owncloud_env):
        monkeypatch.delenv("OWNCLOUD_WEBDAV_URL")

        with pytest.raises(OcsConfigurationError, match="OWNCLOUD_WEBDAV_URL"):
            WebDAVConfig.from_env()

    def test_adapter_from_env(self, owncloud_env):
        adapter = OwnCloudAdapter.build_from_env(prefix="team")

        assert adapter.shares.base_url == SHARE_API_URL
        assert adapter.webdav.path_prefix == "team/"

    def test_adapter_from_env_without_ocs_settings(self, monkeypatch, owncloud_env):
        monkeypatch.delenv("OWNCLOUD_SHARE_API_URL")

        with pytest.raises(OcsConfigurationError):
            OwnCloudAdapter.build_from_env()

    def test_client_from_env_logs_and_raises(self, monkeypatch, caplog):
        for name in ("OWNCLOUD_SHARE_API_URL", "OWNCLOUD_USERNAME", "OWNCLOUD_PASSWORD"):
            monkeypatch.delenv(name, raising=False)

        with caplog.at_level("ERROR"):
            with pytest.raises(OcsConfigurationError):
                OwnCloudClient.build_from_env()

        assert "Failed to build OwnCloud client from environment" in caplog.text
