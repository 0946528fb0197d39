"""Shared fixtures and configuration for tests."""

from __future__ import annotations

import base64
import json
from typing import Any
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
import respx

from appregistry_sdk import App, ProjectManagement, ProjectManagementRequestHandler

PROJECT_ID = "test-project-id"
ANDROID_APP_ID = "1:12345678:android:deadbeef"
IOS_APP_ID = "1:12345678:ios:ca5cade5"
SHA_1_HASH = "123456789a123456789a123456789a123456789a"
SHA_256_HASH = "123456789a123456789a123456789a123456789a123456789a123456789a1234"

# ==================== MOCK DATA ====================


def make_android_app_dict(
    app_id: str = ANDROID_APP_ID,
    package_name: str = "com.hello.world.android",
    display_name: str | None = "My Android App",
    project_id: str = PROJECT_ID,
) -> dict[str, Any]:
    """Create a mock Android app resource."""
    data = {
        "name": f"projects/{project_id}/androidApps/{app_id}",
        "appId": app_id,
        "projectId": project_id,
        "packageName": package_name,
    }
    if display_name is not None:
        data["displayName"] = display_name
    return data


def make_ios_app_dict(
    app_id: str = IOS_APP_ID,
    bundle_id: str = "com.hello.world.ios",
    display_name: str | None = "My iOS App",
    project_id: str = PROJECT_ID,
) -> dict[str, Any]:
    """Create a mock iOS app resource."""
    data = {
        "name": f"projects/{project_id}/iosApps/{app_id}",
        "appId": app_id,
        "projectId": project_id,
        "bundleId": bundle_id,
    }
    if display_name is not None:
        data["displayName"] = display_name
    return data


def make_search_entry(
    app_id: str,
    platform: str,
    display_name: str | None = None,
) -> dict[str, Any]:
    """Create a mock searchApps entry."""
    collection = "iosApps" if platform == "IOS" else "androidApps"
    data = {
        "name": f"projects/{PROJECT_ID}/{collection}/{app_id}",
        "appId": app_id,
        "platform": platform,
    }
    if display_name is not None:
        data["displayName"] = display_name
    return data


def make_operation_dict(
    done: bool = True,
    response: dict[str, Any] | None = None,
    error: Any = None,
) -> dict[str, Any]:
    """Create a mock long-running operation."""
    data: dict[str, Any] = {"name": "operations/abcdefg", "done": done}
    if response is not None:
        data["response"] = response
    if error is not None:
        data["error"] = error
    return data


def make_certificate_dict(sha_hash: str, cert_type: str, name: str) -> dict[str, Any]:
    """Create a mock SHA certificate resource."""
    return {
        "name": f"projects/-/androidApps/{ANDROID_APP_ID}/sha/{name}",
        "shaHash": sha_hash,
        "certType": cert_type,
    }


def make_config_dict(
    contents: str = "hello world", filename: str = "config.json"
) -> dict[str, Any]:
    """Create a mock app config response with base64 contents."""
    return {
        "configFilename": filename,
        "configFileContents": base64.standard_b64encode(contents.encode("utf-8")).decode("utf-8"),
    }


def request_body(route) -> dict[str, Any]:
    """Decode the JSON body of the last request a respx route received."""
    return json.loads(route.calls.last.request.content.decode())


# ==================== FIXTURES ====================


@pytest.fixture
def api_base_url() -> str:
    """Base URL for API mocks."""
    return "https://api.appregistry.dev/v1beta1"


@pytest.fixture
def respx_mock():
    """Fixture for respx mocking."""
    with respx.mock(assert_all_called=False) as mock:
        yield mock


@pytest.fixture
def app() -> App:
    """App handle configured with a project and token."""
    return App({"project_id": PROJECT_ID, "access_token": "test-token"})


@pytest.fixture
def request_handler() -> ProjectManagementRequestHandler:
    """Real request handler with polling waits disabled."""
    handler = ProjectManagementRequestHandler(access_token="test-token")
    handler.poll_base_wait_seconds = 0
    handler.maximum_polling_attempts = 3
    return handler


@pytest_asyncio.fixture
async def project(request_handler):
    """Facade over the real request handler; closes it afterwards."""
    facade = ProjectManagement(PROJECT_ID, request_handler, owns_request_handler=True)
    yield facade
    await facade.close()


@pytest.fixture
def fake_handler() -> AsyncMock:
    """Request handler stand-in for call-count assertions."""
    return AsyncMock(spec=ProjectManagementRequestHandler)


@pytest.fixture
def temp_credentials_file(tmp_path):
    """Create a temporary credentials file."""
    creds_dir = tmp_path / ".appregistry"
    creds_dir.mkdir()
    creds_file = creds_dir / "credentials.json"
    creds_file.write_text(
        json.dumps({"access_token": "file-token", "project_id": "file-project"})
    )
    return creds_file
