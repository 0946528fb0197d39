"""Python SDK for managing the mobile apps of a backend project.

This SDK lists, creates and configures the Android and iOS app registrations
of one project, and manages the SHA certificate fingerprints of Android apps.

Basic Usage:
    ```python
    from appregistry_sdk import App, project_management

    async with project_management(App({"project_id": "my-project"})) as project:
        app = await project.create_android_app("com.example.app", "Example")
        cert = project.sha_certificate("a" * 40)
        cert = await app.add_sha_certificate(cert)
        await app.delete_sha_certificate(cert)
    ```

Pagination:
    ```python
    async for apps in project.iterate_ios_apps():
        for app in apps:
            print(app.app_id)
    ```
"""

from .apps import AndroidApp, IosApp
from .auth import (
    AuthProvider,
    Credentials,
    get_access_token,
    load_credentials_from_file,
)
from .config import App, AppOptions, resolve_project_id
from .exceptions import (
    AlreadyExistsError,
    APIError,
    AuthenticationError,
    ConnectionError,
    DeadlineExceededError,
    InvalidArgumentError,
    InvalidProjectIdError,
    InvalidServerResponseError,
    NotFoundError,
    OperationFailedError,
    ProjectManagementError,
    RateLimitError,
    TimeoutError,
)
from .models import (
    AndroidAppMetadata,
    AppMetadata,
    AppPlatform,
    CertType,
    IosAppMetadata,
    ShaCertificate,
)
from .pagination import AppIterable, AppPageIterator, IterationStep
from .project_management import ProjectManagement, project_management
from .request_handler import ProjectManagementRequestHandler

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Entry points
    "App",
    "AppOptions",
    "ProjectManagement",
    "ProjectManagementRequestHandler",
    "project_management",
    "resolve_project_id",
    # Apps
    "AndroidApp",
    "IosApp",
    # Models
    "AppMetadata",
    "AndroidAppMetadata",
    "IosAppMetadata",
    "AppPlatform",
    "CertType",
    "ShaCertificate",
    # Pagination
    "AppIterable",
    "AppPageIterator",
    "IterationStep",
    # Auth
    "AuthProvider",
    "Credentials",
    "get_access_token",
    "load_credentials_from_file",
    # Exceptions
    "ProjectManagementError",
    "InvalidArgumentError",
    "InvalidProjectIdError",
    "InvalidServerResponseError",
    "APIError",
    "AuthenticationError",
    "NotFoundError",
    "AlreadyExistsError",
    "RateLimitError",
    "OperationFailedError",
    "DeadlineExceededError",
    "ConnectionError",
    "TimeoutError",
]
