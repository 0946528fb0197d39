"""Handles for Android and iOS apps registered in a project."""

from __future__ import annotations

import base64
import binascii
from typing import TYPE_CHECKING, Any

from .exceptions import InvalidArgumentError, InvalidServerResponseError
from .models import AndroidAppMetadata, CertType, IosAppMetadata, ShaCertificate, cert_type_for_hash
from .validator import (
    AddShaCertificateResponse,
    AndroidAppResponse,
    AppConfigResponse,
    IosAppResponse,
    ShaCertificatesResponse,
    assert_non_empty_string,
    parse_response,
)

if TYPE_CHECKING:
    from .request_handler import ProjectManagementRequestHandler


def _decode_config(data: Any, caller: str) -> str:
    config = parse_response(AppConfigResponse, data, caller)
    try:
        return base64.standard_b64decode(config.config_file_contents).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as e:
        raise InvalidServerResponseError(
            f'"configFileContents" field in the {caller} response data is not valid base64.',
            caller=caller,
            response=data,
        ) from e


class _PlatformApp:
    """Identity and equality shared by the platform app handles.

    A handle holds nothing but the app ID and a borrowed request handler; every
    method is a single round trip.
    """

    def __init__(self, app_id: str, request_handler: ProjectManagementRequestHandler) -> None:
        assert_non_empty_string(app_id, "appId")
        self._app_id = app_id
        self._request_handler = request_handler

    @property
    def app_id(self) -> str:
        return self._app_id

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._app_id == other._app_id  # type: ignore[attr-defined]

    def __hash__(self) -> int:
        return hash((type(self).__name__, self._app_id))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._app_id!r})"


class AndroidApp(_PlatformApp):
    """An Android app registered in a project.

    Do not construct directly; use ``ProjectManagement.android_app()``.
    """

    async def get_metadata(self) -> AndroidAppMetadata:
        """Fetch the app's metadata.

        Raises:
            NotFoundError: If the app no longer exists.
            InvalidServerResponseError: If the response is malformed.
        """
        data = await self._request_handler.get_android_app(self._app_id)
        response = parse_response(AndroidAppResponse, data, "getMetadata()")
        return AndroidAppMetadata(
            app_id=response.app_id,
            resource_name=response.name,
            project_id=response.project_id,
            display_name=response.display_name,
            package_name=response.package_name,
        )

    async def set_display_name(self, new_display_name: str) -> None:
        """Update the app's display name."""
        assert_non_empty_string(new_display_name, "displayName")
        await self._request_handler.set_android_app_display_name(self._app_id, new_display_name)

    async def get_sha_certificates(self) -> list[ShaCertificate]:
        """List the SHA certificates of this app, in server order."""
        caller = "getShaCertificates()"
        data = await self._request_handler.get_sha_certificates(self._app_id)
        response = parse_response(ShaCertificatesResponse, data, caller)
        certificates = []
        for entry in response.certificates:
            try:
                cert_type = CertType.from_wire(entry.cert_type)
            except ValueError as e:
                raise InvalidServerResponseError(
                    f'"certificates[].certType" field in the {caller} response data is '
                    f"not a known type: {entry.cert_type!r}.",
                    caller=caller,
                    response=data,
                ) from e
            certificates.append(
                ShaCertificate(
                    sha_hash=entry.sha_hash, cert_type=cert_type, resource_name=entry.name
                )
            )
        return certificates

    async def add_sha_certificate(self, certificate: ShaCertificate) -> ShaCertificate:
        """Register a SHA certificate for this app.

        The passed certificate is not modified; the returned copy carries the
        server-assigned ``resource_name`` and is the one that can be deleted.

        Raises:
            InvalidArgumentError: If ``certificate`` is not a valid ShaCertificate.
            AlreadyExistsError: If the certificate is already registered.
        """
        if not isinstance(certificate, ShaCertificate):
            raise InvalidArgumentError("certificate must be a ShaCertificate instance.")
        cert_type = cert_type_for_hash(certificate.sha_hash)
        data = await self._request_handler.add_sha_certificate(
            self._app_id, certificate.sha_hash, cert_type.wire_value
        )
        response = parse_response(AddShaCertificateResponse, data, "addShaCertificate()")
        return ShaCertificate(
            sha_hash=certificate.sha_hash, cert_type=cert_type, resource_name=response.name
        )

    async def delete_sha_certificate(self, certificate: ShaCertificate) -> None:
        """Delete a SHA certificate previously fetched from the server.

        Raises:
            InvalidArgumentError: If the certificate has no ``resource_name``;
                no request is made in that case.
        """
        if not isinstance(certificate, ShaCertificate):
            raise InvalidArgumentError("certificate must be a ShaCertificate instance.")
        if not certificate.resource_name:
            raise InvalidArgumentError(
                "Specified certificate does not include a resourceName. (Use "
                "AndroidApp.get_sha_certificates() to retrieve certificates with a "
                "resourceName.)"
            )
        await self._request_handler.delete_sha_certificate(certificate.resource_name)

    async def get_config(self) -> str:
        """Fetch the app's configuration file contents (``google-services.json`` style)."""
        data = await self._request_handler.get_android_app_config(self._app_id)
        return _decode_config(data, "getConfig()")


class IosApp(_PlatformApp):
    """An iOS app registered in a project.

    Do not construct directly; use ``ProjectManagement.ios_app()``.
    """

    async def get_metadata(self) -> IosAppMetadata:
        """Fetch the app's metadata.

        Raises:
            NotFoundError: If the app no longer exists.
            InvalidServerResponseError: If the response is malformed.
        """
        data = await self._request_handler.get_ios_app(self._app_id)
        response = parse_response(IosAppResponse, data, "getMetadata()")
        return IosAppMetadata(
            app_id=response.app_id,
            resource_name=response.name,
            project_id=response.project_id,
            display_name=response.display_name,
            bundle_id=response.bundle_id,
        )

    async def set_display_name(self, new_display_name: str) -> None:
        """Update the app's display name."""
        assert_non_empty_string(new_display_name, "displayName")
        await self._request_handler.set_ios_app_display_name(self._app_id, new_display_name)

    async def get_config(self) -> str:
        """Fetch the app's configuration file contents (plist style)."""
        data = await self._request_handler.get_ios_app_config(self._app_id)
        return _decode_config(data, "getConfig()")
