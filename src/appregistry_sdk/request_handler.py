"""Async HTTP request handler for the project management REST API."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any

import httpx

from .auth import AuthProvider
from .config import (
    API_VERSION,
    DEFAULT_BASE_URL,
    DEFAULT_TIMEOUT,
    MAX_LIST_APPS_PAGE_SIZE,
    MAXIMUM_POLLING_ATTEMPTS,
    POLL_BASE_WAIT_TIME_SECONDS,
    POLL_EXPONENTIAL_BACKOFF_FACTOR,
    USER_AGENT,
    App,
)
from .exceptions import (
    ConnectionError,
    DeadlineExceededError,
    InvalidServerResponseError,
    OperationFailedError,
    TimeoutError,
    raise_for_status,
)
from .validator import Operation, assert_non_empty_string, parse_response

logger = logging.getLogger(__name__)

ANDROID_APPS = "androidApps"
IOS_APPS = "iosApps"


class ProjectManagementRequestHandler:
    """Performs the REST calls behind the project management SDK.

    Methods return parsed JSON payloads exactly as the server sent them; shape
    validation is left to the callers. Client-side argument checks raise
    :class:`~appregistry_sdk.exceptions.InvalidArgumentError` before any I/O.
    Transport failures surface as :class:`~appregistry_sdk.exceptions.APIError`
    subclasses, ``ConnectionError`` or ``TimeoutError``. Nothing is retried.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float | None = DEFAULT_TIMEOUT,
        access_token: str | None = None,
        credentials_path: Path | None = None,
    ) -> None:
        """Initialize the request handler.

        Args:
            base_url: Base URL for the API (without version prefix).
            timeout: Request timeout in seconds, or None for no timeout.
            access_token: Bearer token. If not provided, will be read from
                APPREGISTRY_ACCESS_TOKEN or ~/.appregistry/credentials.json.
            credentials_path: Path to credentials file.
        """
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._auth = AuthProvider(access_token=access_token, credentials_path=credentials_path)
        self._client: httpx.AsyncClient | None = None
        self.poll_base_wait_seconds = POLL_BASE_WAIT_TIME_SECONDS
        self.maximum_polling_attempts = MAXIMUM_POLLING_ATTEMPTS

    @classmethod
    def from_app(cls, app: App) -> ProjectManagementRequestHandler:
        """Build a request handler from an app's options."""
        options = app.options
        return cls(
            base_url=options.base_url,
            timeout=options.timeout,
            access_token=options.access_token,
            credentials_path=options.credentials_path,
        )

    @property
    def timeout(self) -> float | None:
        return self._timeout

    async def __aenter__(self) -> ProjectManagementRequestHandler:
        await self._ensure_client()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    async def _ensure_client(self) -> httpx.AsyncClient:
        """Ensure the HTTP client is initialized."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=f"{self._base_url}/{API_VERSION}",
                timeout=httpx.Timeout(self._timeout),
                headers={
                    "User-Agent": USER_AGENT,
                    "Content-Type": "application/json",
                },
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _request(
        self,
        method: str,
        endpoint: str,
        json_data: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Make a request to the API.

        Args:
            method: HTTP method.
            endpoint: Resource path, e.g. ``/projects/my-project/androidApps``.
            json_data: JSON body data.
            params: Query parameters.

        Returns:
            Parsed JSON response (``{}`` for empty bodies).

        Raises:
            APIError: On API errors.
            ConnectionError: On connection errors.
            TimeoutError: On timeout.
        """
        headers = self._auth.get_headers()
        client = await self._ensure_client()
        logger.debug("%s %s params=%s", method, endpoint, params)

        try:
            response = await client.request(
                method,
                endpoint,
                headers=headers,
                json=json_data,
                params=params,
            )
        except httpx.ConnectError as e:
            raise ConnectionError(f"Cannot connect to the project management API: {e}", e) from e
        except httpx.TimeoutException as e:
            raise TimeoutError(f"Request timed out after {self._timeout}s", self._timeout) from e

        # Handle empty responses
        if response.status_code == 204 or not response.content:
            raise_for_status(response.status_code, None)
            return {}

        try:
            data = response.json()
        except ValueError:
            raise_for_status(response.status_code, None)
            raise InvalidServerResponseError(
                f"Unexpected non-JSON response from {method} {endpoint}.",
                caller=endpoint,
                response=response.text,
            ) from None

        raise_for_status(response.status_code, data)
        return data

    # ==================== APPS ====================

    async def list_android_apps(self, parent: str, page_token: str | None = None) -> Any:
        """List one page of Android apps of ``parent`` (``projects/{id}``)."""
        return await self._list_apps(parent, ANDROID_APPS, page_token)

    async def list_ios_apps(self, parent: str, page_token: str | None = None) -> Any:
        """List one page of iOS apps of ``parent`` (``projects/{id}``)."""
        return await self._list_apps(parent, IOS_APPS, page_token)

    async def _list_apps(self, parent: str, collection: str, page_token: str | None) -> Any:
        assert_non_empty_string(parent, "parentResourceName")
        params: dict[str, Any] = {"pageSize": MAX_LIST_APPS_PAGE_SIZE}
        if page_token:
            params["pageToken"] = page_token
        return await self._request("GET", f"/{parent}/{collection}", params=params)

    async def list_app_metadata(self, parent: str) -> Any:
        """Search all apps of every platform in ``parent``, one page only."""
        assert_non_empty_string(parent, "parentResourceName")
        return await self._request(
            "GET", f"/{parent}:searchApps", params={"pageSize": MAX_LIST_APPS_PAGE_SIZE}
        )

    async def create_android_app(
        self, parent: str, package_name: str, display_name: str | None = None
    ) -> Any:
        """Create an Android app and wait for the creation operation to finish.

        Returns:
            The ``response`` payload of the finished operation.
        """
        assert_non_empty_string(parent, "parentResourceName")
        assert_non_empty_string(package_name, "packageName")
        body: dict[str, Any] = {"packageName": package_name}
        if display_name is not None:
            assert_non_empty_string(display_name, "displayName")
            body["displayName"] = display_name
        data = await self._request("POST", f"/{parent}/{ANDROID_APPS}", json_data=body)
        return await self._await_operation(data, "createAndroidApp()")

    async def create_ios_app(
        self, parent: str, bundle_id: str, display_name: str | None = None
    ) -> Any:
        """Create an iOS app and wait for the creation operation to finish.

        Returns:
            The ``response`` payload of the finished operation.
        """
        assert_non_empty_string(parent, "parentResourceName")
        assert_non_empty_string(bundle_id, "bundleId")
        body: dict[str, Any] = {"bundleId": bundle_id}
        if display_name is not None:
            assert_non_empty_string(display_name, "displayName")
            body["displayName"] = display_name
        data = await self._request("POST", f"/{parent}/{IOS_APPS}", json_data=body)
        return await self._await_operation(data, "createIosApp()")

    async def _await_operation(self, data: Any, caller: str) -> Any:
        """Poll a long-running operation with exponential backoff until it is done."""
        operation = parse_response(Operation, data, caller)
        attempts = 0
        while not operation.done:
            if attempts >= self.maximum_polling_attempts:
                raise DeadlineExceededError(
                    f"Polling deadline exceeded waiting for {operation.name}."
                )
            wait = self.poll_base_wait_seconds * (POLL_EXPONENTIAL_BACKOFF_FACTOR**attempts)
            logger.debug("Operation %s not done, polling again in %.2fs", operation.name, wait)
            await asyncio.sleep(wait)
            attempts += 1
            data = await self._request("GET", f"/{operation.name}")
            operation = parse_response(Operation, data, caller)

        if operation.error:
            raise OperationFailedError(
                f"{caller} operation {operation.name} failed: {operation.error}",
                operation=data,
            )
        if operation.response is None:
            raise InvalidServerResponseError(
                f'"response" field must be present in the {caller} response data.',
                caller=caller,
                response=data,
            )
        return operation.response

    async def get_android_app(self, app_id: str) -> Any:
        """Fetch metadata of one Android app."""
        return await self._get_app(ANDROID_APPS, app_id)

    async def get_ios_app(self, app_id: str) -> Any:
        """Fetch metadata of one iOS app."""
        return await self._get_app(IOS_APPS, app_id)

    async def _get_app(self, collection: str, app_id: str) -> Any:
        assert_non_empty_string(app_id, "appId")
        return await self._request("GET", f"/projects/-/{collection}/{app_id}")

    async def set_android_app_display_name(self, app_id: str, display_name: str) -> None:
        await self._set_app_display_name(ANDROID_APPS, app_id, display_name)

    async def set_ios_app_display_name(self, app_id: str, display_name: str) -> None:
        await self._set_app_display_name(IOS_APPS, app_id, display_name)

    async def _set_app_display_name(
        self, collection: str, app_id: str, display_name: str
    ) -> None:
        assert_non_empty_string(app_id, "appId")
        assert_non_empty_string(display_name, "displayName")
        await self._request(
            "PATCH",
            f"/projects/-/{collection}/{app_id}",
            json_data={"displayName": display_name},
            params={"updateMask": "displayName"},
        )

    async def get_android_app_config(self, app_id: str) -> Any:
        assert_non_empty_string(app_id, "appId")
        return await self._request("GET", f"/projects/-/{ANDROID_APPS}/{app_id}/config")

    async def get_ios_app_config(self, app_id: str) -> Any:
        assert_non_empty_string(app_id, "appId")
        return await self._request("GET", f"/projects/-/{IOS_APPS}/{app_id}/config")

    # ==================== SHA CERTIFICATES ====================

    async def get_sha_certificates(self, app_id: str) -> Any:
        """List SHA certificates registered for an Android app."""
        assert_non_empty_string(app_id, "appId")
        return await self._request("GET", f"/projects/-/{ANDROID_APPS}/{app_id}/sha")

    async def add_sha_certificate(self, app_id: str, sha_hash: str, cert_type: str) -> Any:
        """Register a SHA certificate.

        Args:
            app_id: Android app ID.
            sha_hash: Hex fingerprint.
            cert_type: Wire enum, ``SHA_1`` or ``SHA_256``.
        """
        assert_non_empty_string(app_id, "appId")
        assert_non_empty_string(sha_hash, "shaHash")
        return await self._request(
            "POST",
            f"/projects/-/{ANDROID_APPS}/{app_id}/sha",
            json_data={"shaHash": sha_hash, "certType": cert_type},
        )

    async def delete_sha_certificate(self, resource_name: str) -> None:
        """Delete a SHA certificate by its full resource name."""
        assert_non_empty_string(resource_name, "resourceName")
        await self._request("DELETE", f"/{resource_name}")

    # ==================== PROJECT ====================

    async def set_project_display_name(self, parent: str, display_name: str) -> None:
        assert_non_empty_string(parent, "parentResourceName")
        assert_non_empty_string(display_name, "displayName")
        await self._request(
            "PATCH",
            f"/{parent}",
            json_data={"displayName": display_name},
            params={"updateMask": "displayName"},
        )
