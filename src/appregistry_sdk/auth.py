"""Access token resolution for the project management SDK."""

from __future__ import annotations

import json
import os
from pathlib import Path

from pydantic import BaseModel, Field

from .exceptions import AuthenticationError


class Credentials(BaseModel):
    """Stored authentication credentials."""

    access_token: str = Field(..., description="Bearer token for the API")
    token_type: str = Field(default="Bearer", description="Token type")
    project_id: str | None = Field(None, description="Default project for this token")


# Environment variable name for the access token
ACCESS_TOKEN_ENV = "APPREGISTRY_ACCESS_TOKEN"

# Default credentials file path
DEFAULT_CREDENTIALS_PATH = Path.home() / ".appregistry" / "credentials.json"


def load_credentials_from_file(path: Path) -> Credentials | None:
    """Load credentials from a JSON file.

    Args:
        path: Path to the credentials file.

    Returns:
        Credentials if found and valid, None otherwise.
    """
    if not path.exists():
        return None

    try:
        data = json.loads(path.read_text())
    except (json.JSONDecodeError, OSError):
        return None
    if not isinstance(data, dict):
        return None

    # Handle different credential formats
    token = data.get("access_token") or data.get("token")
    if not token:
        return None

    return Credentials(
        access_token=token,
        token_type=data.get("token_type", "Bearer"),
        project_id=data.get("project_id") or data.get("projectId"),
    )


def get_access_token(
    access_token: str | None = None,
    credentials_path: Path | None = None,
) -> str | None:
    """Get the access token from various sources.

    Checks in order of priority:
    1. Explicitly provided access_token parameter
    2. APPREGISTRY_ACCESS_TOKEN environment variable
    3. ~/.appregistry/credentials.json file

    Args:
        access_token: Explicitly provided token.
        credentials_path: Path to credentials file.

    Returns:
        The access token if found, None otherwise.
    """
    if access_token:
        return access_token

    env_token = os.environ.get(ACCESS_TOKEN_ENV)
    if env_token:
        return env_token

    creds = load_credentials_from_file(credentials_path or DEFAULT_CREDENTIALS_PATH)
    if creds:
        return creds.access_token

    return None


class AuthProvider:
    """Provider for authentication headers.

    Resolves the access token lazily on first use and caches it.
    """

    def __init__(
        self,
        access_token: str | None = None,
        credentials_path: Path | None = None,
    ) -> None:
        self._access_token = access_token
        self._credentials_path = credentials_path
        self._resolved_token: str | None = None

    @property
    def access_token(self) -> str | None:
        """Get the resolved access token."""
        if self._resolved_token is None:
            self._resolved_token = get_access_token(
                access_token=self._access_token,
                credentials_path=self._credentials_path,
            )
        return self._resolved_token

    def get_headers(self) -> dict[str, str]:
        """Get authorization headers for requests.

        Raises:
            AuthenticationError: If no access token is available.
        """
        token = self.access_token
        if not token:
            raise AuthenticationError(
                "No access token found. Set the APPREGISTRY_ACCESS_TOKEN environment "
                "variable, pass access_token in the app options, or save credentials "
                "to ~/.appregistry/credentials.json"
            )

        return {"Authorization": f"Bearer {token}"}
