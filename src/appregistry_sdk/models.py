"""Pydantic models for app registrations and SHA certificates."""

from __future__ import annotations

import re
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from .exceptions import InvalidArgumentError

_SHA1_PATTERN = re.compile(r"[0-9a-fA-F]{40}")
_SHA256_PATTERN = re.compile(r"[0-9a-fA-F]{64}")


class AppPlatform(str, Enum):
    """Platform of a registered app."""

    ANDROID = "ANDROID"
    IOS = "IOS"
    PLATFORM_UNKNOWN = "PLATFORM_UNKNOWN"

    @classmethod
    def parse(cls, value: str) -> AppPlatform:
        """Map a server platform string, degrading unknown values to PLATFORM_UNKNOWN."""
        try:
            return cls(value)
        except ValueError:
            return cls.PLATFORM_UNKNOWN


class CertType(str, Enum):
    """SHA certificate type, derived from the hash length."""

    SHA_1 = "sha1"
    SHA_256 = "sha256"

    @property
    def wire_value(self) -> str:
        """Enum name used in request and response bodies."""
        return "SHA_1" if self is CertType.SHA_1 else "SHA_256"

    @classmethod
    def from_wire(cls, value: str) -> CertType:
        if value in ("SHA_1", "sha1"):
            return cls.SHA_1
        if value in ("SHA_256", "sha256"):
            return cls.SHA_256
        raise ValueError(f"Unknown certificate type: {value!r}")


class AppMetadata(BaseModel):
    """Metadata for one app, as returned by listing all apps of a project."""

    model_config = ConfigDict(frozen=True)

    app_id: str = Field(..., min_length=1, description="Server-assigned app ID")
    platform: AppPlatform = Field(..., description="App platform")
    resource_name: str = Field(..., description="Full resource name of the app")
    project_id: str = Field(..., description="Owning project ID")
    display_name: str | None = Field(None, description="User-assigned display name")


class AndroidAppMetadata(AppMetadata):
    """Metadata for an Android app."""

    platform: AppPlatform = AppPlatform.ANDROID
    package_name: str = Field(..., min_length=1, description="Android package name")


class IosAppMetadata(AppMetadata):
    """Metadata for an iOS app."""

    platform: AppPlatform = AppPlatform.IOS
    bundle_id: str = Field(..., min_length=1, description="iOS bundle ID")


def cert_type_for_hash(sha_hash: str) -> CertType:
    """Classify a SHA hash by its length.

    Raises:
        InvalidArgumentError: If the hash is neither 40 nor 64 hex characters.
    """
    if not isinstance(sha_hash, str):
        raise InvalidArgumentError("shaHash must be a string.")
    if _SHA1_PATTERN.fullmatch(sha_hash):
        return CertType.SHA_1
    if _SHA256_PATTERN.fullmatch(sha_hash):
        return CertType.SHA_256
    raise InvalidArgumentError(
        "shaHash must be either a sha256 hash or a sha1 hash. "
        f"Got {len(sha_hash)} characters."
    )


class ShaCertificate(BaseModel):
    """A SHA-1 or SHA-256 signing certificate fingerprint of an Android app.

    ``resource_name`` is only set on certificates returned by the server; a
    certificate built locally cannot be deleted until it has been fetched back.
    """

    model_config = ConfigDict(frozen=True)

    sha_hash: str = Field(..., description="Hex-encoded fingerprint")
    cert_type: CertType = Field(..., description="sha1 or sha256")
    resource_name: str | None = Field(None, description="Server-assigned resource name")

    @classmethod
    def from_hash(cls, sha_hash: str, resource_name: str | None = None) -> ShaCertificate:
        """Build a certificate from a raw hash, deriving its type.

        Raises:
            InvalidArgumentError: If the hash format is not accepted.
        """
        cert_type = cert_type_for_hash(sha_hash)
        return cls(sha_hash=sha_hash, cert_type=cert_type, resource_name=resource_name)
