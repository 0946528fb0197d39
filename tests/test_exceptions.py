"""Tests for exception classes and status mapping."""

from __future__ import annotations

import pytest

from appregistry_sdk.exceptions import (
    AlreadyExistsError,
    APIError,
    AuthenticationError,
    ConnectionError,
    InvalidArgumentError,
    InvalidProjectIdError,
    InvalidServerResponseError,
    NotFoundError,
    ProjectManagementError,
    RateLimitError,
    TimeoutError,
    raise_for_status,
)


class TestErrorCodes:
    """Tests for the stable error codes."""

    @pytest.mark.parametrize(
        "error,code",
        [
            (InvalidArgumentError("x"), "invalid-argument"),
            (InvalidProjectIdError(), "invalid-project-id"),
            (InvalidServerResponseError("x"), "invalid-server-response"),
            (APIError(500, "x"), "api-error"),
            (AuthenticationError(), "authentication-error"),
            (NotFoundError(), "not-found"),
            (AlreadyExistsError(), "already-exists"),
            (RateLimitError(), "rate-limited"),
            (ConnectionError(), "connection-error"),
            (TimeoutError(), "timeout"),
        ],
    )
    def test_codes_are_prefixed(self, error, code):
        """Test every error carries a project-management code."""
        assert isinstance(error, ProjectManagementError)
        assert error.code == f"project-management/{code}"

    def test_api_error_message(self):
        """Test the status code is part of the message."""
        error = APIError(502, "Bad Gateway")

        assert str(error) == "[502] Bad Gateway"
        assert error.details == {}

    @pytest.mark.parametrize(
        "status_code,retryable", [(400, False), (404, False), (429, True), (503, True)]
    )
    def test_is_retryable(self, status_code, retryable):
        """Test rate limits and server errors are retryable."""
        assert APIError(status_code, "x").is_retryable is retryable


class TestRaiseForStatus:
    """Tests for raise_for_status."""

    def test_success_does_not_raise(self):
        """Test 2xx and 3xx are ignored."""
        raise_for_status(200, {"error": {"message": "ignored"}})
        raise_for_status(304)

    @pytest.mark.parametrize(
        "status_code,error_class",
        [
            (401, AuthenticationError),
            (403, AuthenticationError),
            (404, NotFoundError),
            (409, AlreadyExistsError),
            (429, RateLimitError),
            (400, APIError),
            (500, APIError),
        ],
    )
    def test_maps_status_codes(self, status_code, error_class):
        """Test status codes map to error classes."""
        with pytest.raises(error_class) as exc_info:
            raise_for_status(status_code, {"message": "boom"})

        assert exc_info.value.status_code == status_code
        assert "boom" in exc_info.value.message

    def test_nested_error_envelope(self):
        """Test the nested error body is understood."""
        body = {
            "error": {
                "code": 404,
                "message": "Requested entity was not found.",
                "status": "NOT_FOUND",
                "details": [{"reason": "APP_NOT_FOUND"}],
            }
        }

        with pytest.raises(NotFoundError) as exc_info:
            raise_for_status(404, body)

        assert exc_info.value.message == "[404] Requested entity was not found."
        assert exc_info.value.details == {"details": [{"reason": "APP_NOT_FOUND"}]}

    def test_status_fallback(self):
        """Test the status name is used when the message is missing."""
        with pytest.raises(APIError) as exc_info:
            raise_for_status(400, {"error": {"status": "INVALID_ARGUMENT"}})

        assert "INVALID_ARGUMENT" in exc_info.value.message

    def test_no_body(self):
        """Test errors without a body get a generic message."""
        with pytest.raises(APIError) as exc_info:
            raise_for_status(500, None)

        assert exc_info.value.message == "[500] Unknown error"

    def test_rate_limit_retry_after(self):
        """Test retry_after is passed through."""
        with pytest.raises(RateLimitError) as exc_info:
            raise_for_status(429, {"message": "slow down", "retry_after": 30})

        assert exc_info.value.retry_after == 30
