"""
Global pytest configuration and fixtures for the OwnCloud adapter tests.

This file contains shared fixtures and configurations that are available
to all test modules without explicit import.
"""

import os
import sys
from pathlib import Path
from typing import Generator

import pytest  # type: ignore
from faker import Faker  # type: ignore

# Add the project root to Python path
project_root: Path = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from owncloud_adapter.connectors.sources.owncloud.adapter import OwnCloudAdapter  # noqa: E402
from owncloud_adapter.connectors.sources.webdav.adapter import WebDAVAdapter  # noqa: E402
from owncloud_adapter.sources.client.owncloud.owncloud import (  # noqa: E402
    OcsConfig,
    OwnCloudClient,
)
from owncloud_adapter.sources.client.webdav.webdav import WebDAVClient  # noqa: E402
from owncloud_adapter.sources.external.owncloud.owncloud import (  # noqa: E402
    OwnCloudShareDataSource,
)
from tests.fixtures.ocs_fixtures import (  # noqa: E402
    SHARE_API_URL,
    WEBDAV_URL,
    RecordingServer,
)

# Initialize Faker for generating test data
fake: Faker = Faker()


# ============================================================================
# Session-level fixtures
# ============================================================================


@pytest.fixture(scope="session")
def faker_instance() -> Faker:
    """Provide a Faker instance for generating test data."""
    return fake


# ============================================================================
# Function-level fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def reset_environment() -> Generator[None, None, None]:
    """
    Reset environment state after each test.
    Config tests set OWNCLOUD_* variables and must not leak them.
    """
    original_env = os.environ.copy()

    yield

    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def credentials(faker_instance: Faker) -> dict:
    return {
        "username": faker_instance.user_name(),
        "password": faker_instance.password(length=16),
    }


@pytest.fixture
def ocs_config(credentials: dict) -> OcsConfig:
    return OcsConfig(share_api_base_url=SHARE_API_URL, **credentials)


@pytest.fixture
def ocs_server() -> RecordingServer:
    """Fake OCS endpoint."""
    return RecordingServer()


@pytest.fixture
def dav_server() -> RecordingServer:
    """Fake WebDAV endpoint."""
    return RecordingServer()


@pytest.fixture
def share_source(ocs_config: OcsConfig, ocs_server: RecordingServer) -> OwnCloudShareDataSource:
    client = OwnCloudClient.build_with_config(ocs_config, transport=ocs_server.transport)
    return OwnCloudShareDataSource(client)


@pytest.fixture
def webdav_client(credentials: dict, dav_server: RecordingServer) -> WebDAVClient:
    return WebDAVClient(WEBDAV_URL, transport=dav_server.transport, **credentials)


@pytest.fixture
def webdav_adapter(webdav_client: WebDAVClient) -> WebDAVAdapter:
    return WebDAVAdapter(webdav_client)


@pytest.fixture
def adapter(webdav_client: WebDAVClient, ocs_config: OcsConfig, ocs_server: RecordingServer) -> OwnCloudAdapter:
    return OwnCloudAdapter(webdav_client, ocs_config=ocs_config, ocs_transport=ocs_server.transport)


# ============================================================================
# Test lifecycle hooks
# ============================================================================


def pytest_collection_modifyitems(config, items):
    """Auto-mark tests by module so subsets can be selected with -m."""
    for item in items:
        module = item.module.__name__ if item.module else ""
        if "parser" in module:
            item.add_marker(pytest.mark.parser)
        if "share" in module:
            item.add_marker(pytest.mark.shares)
        if "webdav" in module or "adapter" in module:
            item.add_marker(pytest.mark.webdav)
