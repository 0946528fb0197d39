"""App configuration and project ID resolution."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from .auth import DEFAULT_CREDENTIALS_PATH, load_credentials_from_file

# Default configuration
DEFAULT_BASE_URL = "https://api.appregistry.dev"
API_VERSION = "v1beta1"
DEFAULT_TIMEOUT = 30.0
USER_AGENT = "appregistry-sdk-python/0.1.0"
DEFAULT_APP_NAME = "[DEFAULT]"

# Listing endpoints never return more than this many apps per page
MAX_LIST_APPS_PAGE_SIZE = 100

# Long-running create operations
POLL_BASE_WAIT_TIME_SECONDS = 0.5
POLL_EXPONENTIAL_BACKOFF_FACTOR = 1.5
MAXIMUM_POLLING_ATTEMPTS = 8

PROJECT_ID_ENV_VARS = ("APPREGISTRY_PROJECT_ID", "GOOGLE_CLOUD_PROJECT", "GCLOUD_PROJECT")


class AppOptions(BaseModel):
    """Options an app handle is initialized with."""

    project_id: str | None = Field(None, description="Backend project ID")
    access_token: str | None = Field(None, description="Bearer token for the API")
    credentials_path: Path | None = Field(None, description="Path to credentials file")
    base_url: str = Field(DEFAULT_BASE_URL, description="Base URL of the API")
    timeout: float | None = Field(
        DEFAULT_TIMEOUT, gt=0, description="Request timeout in seconds, None to disable"
    )


class App:
    """Handle to one configured backend app.

    Example:
        ```python
        app = App({"project_id": "my-project"})
        ```
    """

    def __init__(
        self,
        options: AppOptions | dict[str, Any] | None = None,
        name: str = DEFAULT_APP_NAME,
    ) -> None:
        self.name = name
        self.options = (
            options if isinstance(options, AppOptions) else AppOptions.model_validate(options or {})
        )

    def __repr__(self) -> str:
        return f"App(name={self.name!r}, project_id={self.options.project_id!r})"


def resolve_project_id(app: App) -> str | None:
    """Resolve the project ID for an app.

    Checks in order of priority:
    1. ``project_id`` app option
    2. ``project_id`` stored in the credentials file
    3. APPREGISTRY_PROJECT_ID, GOOGLE_CLOUD_PROJECT, GCLOUD_PROJECT env vars

    Returns:
        The project ID if found, None otherwise.
    """
    options = app.options
    if options.project_id:
        return options.project_id

    creds = load_credentials_from_file(options.credentials_path or DEFAULT_CREDENTIALS_PATH)
    if creds and creds.project_id:
        return creds.project_id

    for env_var in PROJECT_ID_ENV_VARS:
        value = os.environ.get(env_var)
        if value:
            return value

    return None
