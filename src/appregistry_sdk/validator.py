"""Response schemas and validation for project management API payloads.

Every payload read from the server goes through :func:`parse_response`, which
either returns a typed schema instance or raises
:class:`~appregistry_sdk.exceptions.InvalidServerResponseError` carrying the
caller label and the raw payload.
"""

from __future__ import annotations

from typing import Annotated, Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, ValidationError
from pydantic.alias_generators import to_camel

from .exceptions import InvalidArgumentError, InvalidServerResponseError

NonEmptyStr = Annotated[str, StringConstraints(min_length=1)]


class _Schema(BaseModel):
    """Base for wire schemas: camelCase keys, unknown keys ignored."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class AppEntry(_Schema):
    """One entry of an ``androidApps``/``iosApps`` listing.

    Iteration only reads ``appId``; every other key is ignored.
    """

    app_id: NonEmptyStr


class ListAppsResponse(_Schema):
    apps: list[AppEntry] | None = None
    next_page_token: str | None = None


class SearchAppEntry(_Schema):
    """One entry of a ``searchApps`` listing; platform and resource name are required."""

    app_id: NonEmptyStr
    platform: NonEmptyStr
    name: NonEmptyStr
    display_name: str | None = None


class SearchAppsResponse(_Schema):
    apps: list[SearchAppEntry] | None = None
    next_page_token: str | None = None


class CreatedApp(_Schema):
    app_id: NonEmptyStr


class AndroidAppResponse(_Schema):
    name: NonEmptyStr
    app_id: NonEmptyStr
    project_id: NonEmptyStr
    package_name: NonEmptyStr
    display_name: str | None = None


class IosAppResponse(_Schema):
    name: NonEmptyStr
    app_id: NonEmptyStr
    project_id: NonEmptyStr
    bundle_id: NonEmptyStr
    display_name: str | None = None


class CertificateEntry(_Schema):
    name: NonEmptyStr
    sha_hash: NonEmptyStr
    cert_type: NonEmptyStr


class ShaCertificatesResponse(_Schema):
    certificates: list[CertificateEntry] = Field(default_factory=list)


class AddShaCertificateResponse(_Schema):
    name: NonEmptyStr


class AppConfigResponse(_Schema):
    config_file_contents: str
    config_filename: str | None = None


class Operation(_Schema):
    """A long-running operation envelope."""

    name: NonEmptyStr
    done: bool = False
    response: dict[str, Any] | None = None
    error: Any = None


_S = TypeVar("_S", bound=BaseModel)

# pydantic error type -> what the field is required to be
_REQUIREMENTS = {
    "missing": "must be present",
    "string_type": "must be a string",
    "string_too_short": "must be a non-empty string",
    "list_type": "must be an array",
    "dict_type": "must be an object",
    "model_type": "must be an object",
    "model_attributes_type": "must be an object",
    "bool_type": "must be a boolean",
    "bool_parsing": "must be a boolean",
}


def _field_path(loc: tuple[int | str, ...]) -> str:
    """Render an error location as ``apps[].appId``."""
    path = ""
    for part in loc:
        if isinstance(part, int):
            path += "[]"
        else:
            path = f"{path}.{part}" if path else str(part)
    return path


def assert_server_response(condition: bool, response: Any, message: str, caller: str = "") -> None:
    """Raise InvalidServerResponseError unless ``condition`` holds."""
    if not condition:
        raise InvalidServerResponseError(message, caller=caller, response=response)


def parse_response(schema: type[_S], data: Any, caller: str) -> _S:
    """Validate a raw server payload against ``schema``.

    Args:
        schema: Wire schema the payload must satisfy.
        data: Parsed JSON payload.
        caller: Operation label used in error messages, e.g. ``"listAppMetadata()"``.

    Returns:
        The validated schema instance.

    Raises:
        InvalidServerResponseError: If the payload is not an object or a
            required field is missing or has the wrong shape.
    """
    assert_server_response(
        isinstance(data, dict),
        data,
        f"{caller}'s responseData must be a non-null object.",
        caller,
    )
    try:
        return schema.model_validate(data)
    except ValidationError as e:
        error = e.errors()[0]
        field = _field_path(error["loc"]) or "responseData"
        requirement = _REQUIREMENTS.get(error["type"], "has an invalid value")
        raise InvalidServerResponseError(
            f'"{field}" field {requirement} in the {caller} response data.',
            caller=caller,
            response=data,
        ) from e


def assert_non_empty_string(value: Any, label: str) -> None:
    """Client-side argument check; raises InvalidArgumentError before any I/O."""
    if not isinstance(value, str) or not value:
        raise InvalidArgumentError(f"{label} must be a non-empty string.")
