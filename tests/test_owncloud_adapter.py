"""
Tests for the OwnCloud-specific adapter behaviour: construction, rename and get_url.
"""
import httpx
import pytest

from owncloud_adapter.connectors.sources.owncloud.adapter import OwnCloudAdapter
from owncloud_adapter.exceptions.owncloud_exceptions import (
    OcsConfigurationError,
    TransportError,
)
from owncloud_adapter.sources.client.owncloud.owncloud import OcsConfig
from tests.fixtures.ocs_fixtures import (
    CREATE_SHARE_XML,
    SHARE_API_URL,
    SHARE_WITHOUT_URL_XML,
    WEBDAV_URL,
    form_of,
)


class TestConstruction:
    """The adapter has no anonymous mode and fails fast."""

    @pytest.mark.parametrize("ocs_config", [None, False, {}])
    def test_missing_ocs_config_fails_immediately(self, webdav_client, ocs_config):
        with pytest.raises(OcsConfigurationError, match="Not presented OCS configuration"):
            OwnCloudAdapter(webdav_client, ocs_config=ocs_config)

    @pytest.mark.parametrize("ocs_config", [
        {"shareApi": SHARE_API_URL, "username": "u", "password": "p"},
        SHARE_API_URL,
    ])
    def test_wrong_config_type_fails_immediately(self, webdav_client, ocs_config):
        with pytest.raises(OcsConfigurationError, match="must be an OcsConfig") as exc_info:
            OwnCloudAdapter(webdav_client, ocs_config=ocs_config)

        assert exc_info.value.details["type"] == type(ocs_config).__name__

    def test_empty_credentials_fail_immediately(self, webdav_client):
        config = OcsConfig(share_api_base_url=SHARE_API_URL, username="", password="")

        with pytest.raises(OcsConfigurationError) as exc_info:
            OwnCloudAdapter(webdav_client, ocs_config=config)

        assert exc_info.value.details["missing"] == ["username", "password"]

    def test_relative_share_api_url_is_rejected(self, webdav_client, credentials):
        config = OcsConfig(share_api_base_url="/ocs/v1.php/apps/files_sharing/api/v1/shares", **credentials)

        with pytest.raises(OcsConfigurationError):
            OwnCloudAdapter(webdav_client, ocs_config=config)

    def test_construction_sends_nothing(self, adapter, ocs_server, dav_server):
        assert ocs_server.requests == []
        assert dav_server.requests == []


class TestRename:
    """MOVE with an absolute Destination URL and a boolean outcome."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [201, 204])
    async def test_success_status_returns_true(self, adapter, dav_server, status):
        dav_server.respond_with(status)

        assert await adapter.rename("docs/old.txt", "docs/new.txt") is True

    @pytest.mark.asyncio
    async def test_destination_is_absolute_url(self, adapter, dav_server):
        dav_server.respond_with(201)

        await adapter.rename("docs/old name.txt", "archive/new name.txt")

        request = dav_server.last
        assert request.method == "MOVE"
        assert str(request.url) == f"{WEBDAV_URL}/docs/old%20name.txt"
        assert request.headers["Destination"] == f"{WEBDAV_URL}/archive/new%20name.txt"

    @pytest.mark.asyncio
    async def test_prefix_applies_to_both_ends(self, webdav_client, ocs_config, ocs_server, dav_server):
        dav_server.respond_with(204)
        adapter = OwnCloudAdapter(
            webdav_client,
            prefix="/team/",
            ocs_config=ocs_config,
            ocs_transport=ocs_server.transport,
        )

        assert await adapter.rename("/a.txt", "/b.txt") is True

        assert str(dav_server.last.url) == f"{WEBDAV_URL}/team/a.txt"
        assert dav_server.last.headers["Destination"] == f"{WEBDAV_URL}/team/b.txt"

    @pytest.mark.asyncio
    async def test_missing_source_returns_false(self, adapter, dav_server):
        dav_server.respond_with(404)

        assert await adapter.rename("missing.txt", "new.txt") is False

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [403, 409, 412, 500])
    async def test_other_failures_return_false(self, adapter, dav_server, status):
        dav_server.respond_with(status)

        assert await adapter.rename("a.txt", "b.txt") is False

    @pytest.mark.asyncio
    async def test_transport_failure_is_not_swallowed(self, adapter, dav_server):
        dav_server.fail_with(httpx.ConnectError("connection refused"))

        with pytest.raises(TransportError):
            await adapter.rename("a.txt", "b.txt")

    @pytest.mark.asyncio
    async def test_generic_webdav_rename_uses_server_path(self, webdav_adapter, dav_server):
        dav_server.respond_with(201)

        assert await webdav_adapter.rename("a.txt", "b.txt") is True
        assert dav_server.last.headers["Destination"] == "/remote.php/webdav/b.txt"


class TestGetUrl:
    """get_url creates a share on every call."""

    @pytest.mark.asyncio
    async def test_returns_share_url(self, adapter, ocs_server):
        ocs_server.respond_with(200, CREATE_SHARE_XML)

        url = await adapter.get_url("/docs/report.pdf")

        assert url == "https://cloud.example/s/abc123"
        assert ocs_server.methods() == ["POST"]
        assert form_of(ocs_server.last)["path"] == "/docs/report.pdf"

    @pytest.mark.asyncio
    async def test_each_call_creates_a_new_share(self, adapter, ocs_server):
        ocs_server.respond_with(200, CREATE_SHARE_XML)

        for _ in range(3):
            await adapter.get_url("/docs/report.pdf")

        assert ocs_server.methods() == ["POST", "POST", "POST"]
        assert all(form_of(request)["shareType"] == "3" for request in ocs_server.requests)

    @pytest.mark.asyncio
    async def test_reply_without_url_gives_empty_string(self, adapter, ocs_server):
        ocs_server.respond_with(200, SHARE_WITHOUT_URL_XML)

        assert await adapter.get_url("/docs/report.pdf") == ""


class TestShareDelegation:
    """Share operations on the adapter reach the OCS endpoint, not WebDAV."""

    @pytest.mark.asyncio
    async def test_share_lifecycle(self, adapter, ocs_server, dav_server):
        ocs_server.enqueue(200, CREATE_SHARE_XML)

        share = await adapter.create_share("/docs/report.pdf")
        await adapter.get_share_by_id(share.id)
        await adapter.get_shares("/docs/report.pdf", subfiles=True)
        await adapter.update_share_by_id(share.id, {"expireDate": "2026-12-31", "label": "x"})
        await adapter.delete_share_by_id(share.id)

        assert ocs_server.methods() == ["POST", "GET", "GET", "PUT", "DELETE"]
        assert dav_server.requests == []

    @pytest.mark.asyncio
    async def test_context_manager_closes_clients(self, adapter):
        async with adapter as opened:
            assert opened is adapter

        assert adapter.shares._client.client is None
        assert adapter.webdav.client.http.client is None

    @pytest.mark.asyncio
    async def test_share_client_closed_when_webdav_close_fails(self, adapter, ocs_server, monkeypatch):
        ocs_server.respond_with(200, CREATE_SHARE_XML)
        await adapter.get_url("/docs/report.pdf")
        assert adapter.shares._client.client is not None

        async def broken_close():
            raise RuntimeError("pool already torn down")

        monkeypatch.setattr(adapter.webdav, "close", broken_close)

        with pytest.raises(RuntimeError):
            await adapter.close()

        assert adapter.shares._client.client is None
