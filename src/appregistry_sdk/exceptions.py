"""Exception classes for the project management SDK."""

from __future__ import annotations

from typing import Any

ERROR_CODE_PREFIX = "project-management"


class ProjectManagementError(Exception):
    """Base exception for all project management errors.

    Attributes:
        code: Stable machine-readable error code, e.g.
            ``project-management/invalid-argument``.
        message: Human-readable error message.
    """

    def __init__(self, code: str, message: str) -> None:
        self.code = f"{ERROR_CODE_PREFIX}/{code}"
        self.message = message
        super().__init__(message)


class InvalidArgumentError(ProjectManagementError):
    """The caller passed an invalid argument.

    Always raised before any network call is made.
    """

    def __init__(self, message: str) -> None:
        super().__init__("invalid-argument", message)


class InvalidProjectIdError(ProjectManagementError):
    """No project ID could be resolved from the app configuration."""

    def __init__(
        self,
        message: str = (
            "Failed to determine project ID. Set project_id as an app option, store it "
            "in the credentials file, or set the APPREGISTRY_PROJECT_ID or "
            "GOOGLE_CLOUD_PROJECT environment variable."
        ),
    ) -> None:
        super().__init__("invalid-project-id", message)


class InvalidServerResponseError(ProjectManagementError):
    """The server returned a payload that does not match the expected shape.

    Attributes:
        caller: Label of the operation that received the response.
        response: The raw response payload, kept for diagnostics.
    """

    def __init__(self, message: str, caller: str = "", response: Any = None) -> None:
        self.caller = caller
        self.response = response
        super().__init__("invalid-server-response", message)

    def __str__(self) -> str:
        return f"{self.message} Response data: {self.response!r}"


class APIError(ProjectManagementError):
    """Error returned from the remote API.

    Attributes:
        status_code: HTTP status code from the API.
        message: Error message.
        details: Additional error details from the API.
    """

    def __init__(
        self,
        status_code: int,
        message: str,
        details: dict[str, Any] | None = None,
        code: str = "api-error",
    ) -> None:
        self.status_code = status_code
        self.details = details or {}
        super().__init__(code, f"[{status_code}] {message}")

    @property
    def is_retryable(self) -> bool:
        """Check if this error is retryable.

        Returns:
            True if the error could be resolved by retrying.
        """
        # 429 Too Many Requests, 500+ Server Errors
        return self.status_code == 429 or self.status_code >= 500


class AuthenticationError(APIError):
    """Authentication failed.

    This error is raised when:
    - No access token is configured
    - The access token is invalid or expired
    - The caller lacks permission on the project
    """

    def __init__(
        self,
        message: str = "Authentication failed",
        details: dict[str, Any] | None = None,
        status_code: int = 401,
    ) -> None:
        super().__init__(status_code, message, details, code="authentication-error")


class NotFoundError(APIError):
    """Resource not found.

    This error is raised when:
    - An app ID doesn't exist (or the app was deleted)
    - A SHA certificate resource name doesn't exist
    - The project doesn't exist
    """

    def __init__(
        self,
        message: str = "Resource not found",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(404, message, details, code="not-found")


class AlreadyExistsError(APIError):
    """The resource being created already exists.

    This error is raised when:
    - An app with the same package name or bundle ID already exists
    - A SHA certificate is already registered for the app
    """

    def __init__(
        self,
        message: str = "Resource already exists",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(409, message, details, code="already-exists")


class RateLimitError(APIError):
    """Rate limit exceeded.

    Attributes:
        retry_after: Seconds to wait before retrying (if provided by API).
    """

    def __init__(
        self,
        message: str = "Rate limit exceeded",
        retry_after: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.retry_after = retry_after
        super().__init__(429, message, details, code="rate-limited")


class OperationFailedError(ProjectManagementError):
    """A long-running create operation finished with an error."""

    def __init__(self, message: str, operation: dict[str, Any] | None = None) -> None:
        self.operation = operation or {}
        super().__init__("operation-failed", message)


class DeadlineExceededError(ProjectManagementError):
    """Polling a long-running operation gave up before it completed."""

    def __init__(self, message: str = "Polling deadline exceeded") -> None:
        super().__init__("deadline-exceeded", message)


class ConnectionError(ProjectManagementError):
    """Failed to connect to the API.

    This error is raised when:
    - Network is unavailable
    - API host is unreachable
    """

    def __init__(
        self,
        message: str = "Failed to connect to the project management API",
        cause: Exception | None = None,
    ) -> None:
        self.cause = cause
        super().__init__("connection-error", message)


class TimeoutError(ProjectManagementError):
    """Request timed out.

    This error is raised when a request takes longer than the configured timeout.
    """

    def __init__(
        self,
        message: str = "Request timed out",
        timeout_seconds: float | None = None,
    ) -> None:
        self.timeout_seconds = timeout_seconds
        super().__init__("timeout", message)


def _extract_error(data: dict[str, Any]) -> tuple[str, Any]:
    """Pull a message and details out of an error body.

    Understands both the nested ``{"error": {"message": ...}}`` envelope and flat
    ``message``/``detail`` bodies.
    """
    error = data.get("error")
    if isinstance(error, dict):
        return error.get("message") or error.get("status") or "Unknown error", error.get(
            "details"
        )
    message = data.get("message") or data.get("detail") or error or "Unknown error"
    return str(message), data.get("details")


def raise_for_status(status_code: int, response_data: dict[str, Any] | None = None) -> None:
    """Raise an appropriate exception for an HTTP status code.

    Args:
        status_code: HTTP status code.
        response_data: Parsed JSON response data.

    Raises:
        AuthenticationError: For 401 and 403 status.
        NotFoundError: For 404 status.
        AlreadyExistsError: For 409 status.
        RateLimitError: For 429 status.
        APIError: For other 4xx/5xx status codes.
    """
    if status_code < 400:
        return

    data = response_data if isinstance(response_data, dict) else {}
    message, details = _extract_error(data)
    if not isinstance(details, dict):
        details = {"details": details} if details else None

    if status_code in (401, 403):
        raise AuthenticationError(message, details, status_code=status_code)
    elif status_code == 404:
        raise NotFoundError(message, details)
    elif status_code == 409:
        raise AlreadyExistsError(message, details)
    elif status_code == 429:
        retry_after = data.get("retry_after")
        raise RateLimitError(message, retry_after, details)
    else:
        raise APIError(status_code, message, details)
