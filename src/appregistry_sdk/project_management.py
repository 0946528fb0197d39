"""Project management facade bound to a single backend project."""

from __future__ import annotations

import logging
from typing import Any

from .apps import AndroidApp, IosApp
from .config import App, AppOptions, resolve_project_id
from .exceptions import InvalidArgumentError, InvalidProjectIdError
from .models import AppMetadata, AppPlatform, ShaCertificate
from .pagination import AppIterable
from .request_handler import ProjectManagementRequestHandler
from .validator import CreatedApp, SearchAppsResponse, parse_response

logger = logging.getLogger(__name__)


class ProjectManagement:
    """Lists, creates and configures the apps of one backend project.

    Example:
        ```python
        import asyncio
        from appregistry_sdk import App, project_management

        async def main():
            app = App({"project_id": "my-project"})
            async with project_management(app) as project:
                android = await project.create_android_app("com.example.app", "Example")
                async for apps in project.iterate_android_apps():
                    for each in apps:
                        print(await each.get_metadata())

        asyncio.run(main())
        ```
    """

    def __init__(
        self,
        project_id: str,
        request_handler: ProjectManagementRequestHandler,
        owns_request_handler: bool = False,
    ) -> None:
        """Bind the facade to a resolved project.

        Args:
            project_id: Backend project ID.
            request_handler: Handler used for every remote call.
            owns_request_handler: Close the handler in :meth:`close`.

        Raises:
            InvalidProjectIdError: If ``project_id`` is not a non-empty string.
        """
        if not isinstance(project_id, str) or not project_id:
            raise InvalidProjectIdError()
        self._project_id = project_id
        self._resource_name = f"projects/{project_id}"
        self._request_handler = request_handler
        self._owns_request_handler = owns_request_handler

    @classmethod
    def from_app(cls, app: App) -> ProjectManagement:
        """Build a facade from an app handle, failing fast on bad configuration.

        Raises:
            InvalidArgumentError: If ``app`` is not a valid App handle.
            InvalidProjectIdError: If no project ID can be resolved.
        """
        if not isinstance(getattr(app, "options", None), AppOptions):
            raise InvalidArgumentError(
                "First argument passed to project_management() must be a valid App instance."
            )
        project_id = resolve_project_id(app)
        if not project_id:
            raise InvalidProjectIdError()
        return cls(
            project_id,
            ProjectManagementRequestHandler.from_app(app),
            owns_request_handler=True,
        )

    @property
    def project_id(self) -> str:
        return self._project_id

    @property
    def resource_name(self) -> str:
        return self._resource_name

    async def __aenter__(self) -> ProjectManagement:
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Release the request handler if this facade created it."""
        if self._owns_request_handler:
            await self._request_handler.close()

    # ==================== ITERATION ====================

    def iterate_android_apps(self) -> AppIterable[AndroidApp]:
        """Iterate the project's Android apps, one server page per batch."""

        async def fetch_page(page_token: str | None) -> Any:
            return await self._request_handler.list_android_apps(self._resource_name, page_token)

        return AppIterable(fetch_page, self.android_app, "iterateAndroidApps()")

    def iterate_ios_apps(self) -> AppIterable[IosApp]:
        """Iterate the project's iOS apps, one server page per batch."""

        async def fetch_page(page_token: str | None) -> Any:
            return await self._request_handler.list_ios_apps(self._resource_name, page_token)

        return AppIterable(fetch_page, self.ios_app, "iterateIosApps()")

    async def list_android_apps(self) -> list[AndroidApp]:
        """Fetch every Android app of the project, following all pages."""
        return await self.iterate_android_apps().collect()

    async def list_ios_apps(self) -> list[IosApp]:
        """Fetch every iOS app of the project, following all pages."""
        return await self.iterate_ios_apps().collect()

    # ==================== LOCAL HANDLES ====================

    def android_app(self, app_id: str) -> AndroidApp:
        """Return a handle for an existing Android app. No request is made."""
        return AndroidApp(app_id, self._request_handler)

    def ios_app(self, app_id: str) -> IosApp:
        """Return a handle for an existing iOS app. No request is made."""
        return IosApp(app_id, self._request_handler)

    def sha_certificate(self, sha_hash: str) -> ShaCertificate:
        """Build a ShaCertificate from a hash. No request is made.

        Raises:
            InvalidArgumentError: If the hash is not 40 or 64 hex characters.
        """
        return ShaCertificate.from_hash(sha_hash)

    # ==================== REMOTE OPERATIONS ====================

    async def create_android_app(
        self, package_name: str, display_name: str | None = None
    ) -> AndroidApp:
        """Register a new Android app in the project.

        Raises:
            AlreadyExistsError: If an app with this package name exists.
            InvalidServerResponseError: If the response lacks an app ID.
        """
        data = await self._request_handler.create_android_app(
            self._resource_name, package_name, display_name
        )
        created = parse_response(CreatedApp, data, "createAndroidApp()")
        logger.info("Created Android app %s in %s", created.app_id, self._resource_name)
        return AndroidApp(created.app_id, self._request_handler)

    async def create_ios_app(self, bundle_id: str, display_name: str | None = None) -> IosApp:
        """Register a new iOS app in the project.

        Raises:
            AlreadyExistsError: If an app with this bundle ID exists.
            InvalidServerResponseError: If the response lacks an app ID.
        """
        data = await self._request_handler.create_ios_app(
            self._resource_name, bundle_id, display_name
        )
        created = parse_response(CreatedApp, data, "createIosApp()")
        logger.info("Created iOS app %s in %s", created.app_id, self._resource_name)
        return IosApp(created.app_id, self._request_handler)

    async def list_app_metadata(self) -> list[AppMetadata]:
        """List metadata of up to 100 apps of every platform in one call.

        Unknown platform strings map to ``AppPlatform.PLATFORM_UNKNOWN``; a
        missing platform field is a malformed response.
        """
        data = await self._request_handler.list_app_metadata(self._resource_name)
        response = parse_response(SearchAppsResponse, data, "listAppMetadata()")

        metadata = []
        for entry in response.apps or []:
            platform = AppPlatform.parse(entry.platform)
            if platform is AppPlatform.PLATFORM_UNKNOWN:
                logger.warning("App %s has unknown platform %r", entry.app_id, entry.platform)
            metadata.append(
                AppMetadata(
                    app_id=entry.app_id,
                    platform=platform,
                    project_id=self._project_id,
                    resource_name=entry.name,
                    display_name=entry.display_name or None,
                )
            )
        return metadata

    async def set_display_name(self, new_display_name: str) -> None:
        """Update the project's display name."""
        await self._request_handler.set_project_display_name(
            self._resource_name, new_display_name
        )


def project_management(app: App) -> ProjectManagement:
    """Return a ProjectManagement facade for ``app``.

    Raises:
        InvalidArgumentError: If ``app`` is not a valid App handle.
        InvalidProjectIdError: If no project ID can be resolved.
    """
    return ProjectManagement.from_app(app)
