"""
Data models for App Center requests and responses.

Configuration objects validate themselves at construction; response
DTOs are built from the JSON records returned by the API.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from config.constants import DEFAULT_API_URL, ErrorCode
from appcenter.errors import UserError, ValidationError


@dataclass(frozen=True)
class ApiConfig:
    """Credential and endpoint shared by every call."""

    api_token: str
    base_url: str = DEFAULT_API_URL
    debug: bool = False
    client_source: str = "fastlane"

    def __post_init__(self):
        if not self.api_token or not self.api_token.strip():
            raise ValidationError(
                "No API token for App Center given",
                error_code=ErrorCode.INVALID_CONFIG.value
            )
        if not self.base_url:
            raise ValidationError(
                "No base URL for App Center given",
                error_code=ErrorCode.INVALID_CONFIG.value
            )
        # frozen: object.__setattr__ para normalizar la URL
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))

    @classmethod
    def from_settings(cls, settings) -> "ApiConfig":
        """
        Build from application settings.

        Args:
            settings: config.settings.Settings instance

        Returns:
            ApiConfig instance
        """
        return cls(
            api_token=settings.appcenter.APPCENTER_API_TOKEN,
            base_url=settings.appcenter.APPCENTER_UPLOAD_URL,
            debug=settings.general.DEBUG,
            client_source=settings.appcenter.APPCENTER_CLIENT_SOURCE,
        )


@dataclass(frozen=True)
class AppIdentity:
    """(owner, app) pair; the owner may still be unresolved."""

    app_name: Optional[str] = None
    owner_name: Optional[str] = None

    def __post_init__(self):
        for label, value in (("app name", self.app_name), ("owner name", self.owner_name)):
            if value is not None and not value.strip():
                raise ValidationError(
                    f"No {label} for App Center given",
                    error_code=ErrorCode.INVALID_CONFIG.value
                )

    @property
    def is_resolved(self) -> bool:
        return bool(self.app_name and self.owner_name)

    def require_resolved(self) -> "AppIdentity":
        """
        Ensure both names are known before calling an endpoint that needs them.

        Raises:
            UserError: if owner or app name is missing
        """
        if not self.is_resolved:
            raise UserError(
                f"No app '{self.app_name}' found for owner {self.owner_name}",
                error_code=ErrorCode.MISSING_IDENTIFIER.value
            )
        return self


@dataclass
class UploadSession:
    """Server-issued upload handle."""

    upload_id: str
    upload_url: str
    expiration_date: Optional[str] = None

    @classmethod
    def from_release_upload(cls, data: dict) -> "UploadSession":
        """Create from a release_uploads response."""
        return cls(
            upload_id=data.get("upload_id") or data.get("id"),
            upload_url=data["upload_url"],
            expiration_date=data.get("expiration_date"),
        )

    @classmethod
    def from_symbol_upload(cls, data: dict) -> "UploadSession":
        """Create from a symbol_uploads response."""
        return cls(
            upload_id=data["symbol_upload_id"],
            upload_url=data["upload_url"],
            expiration_date=data.get("expiration_date"),
        )


@dataclass
class Release:
    """Release record as returned by App Center."""

    id: int
    short_version: Optional[str] = None
    version: Optional[str] = None
    download_url: Optional[str] = None
    metadata: dict = field(default_factory=dict)
    raw: dict = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: dict) -> "Release":
        """Create from a release JSON record."""
        return cls(
            id=int(data["id"]),
            short_version=data.get("short_version"),
            version=data.get("version"),
            download_url=data.get("download_url"),
            metadata=data.get("metadata") or {},
            raw=data,
        )


@dataclass
class DistributionDestination:
    """Distribution group or store."""

    type: str
    id: str
    name: Optional[str] = None

    @classmethod
    def from_dict(cls, destination_type: str, data: dict) -> "DistributionDestination":
        return cls(type=destination_type, id=data["id"], name=data.get("name"))


@dataclass
class UploadResult:
    """Outcome of an upload-commit workflow."""

    success: bool
    artifact: str
    status: Optional[str] = None
    status_code: int = 0
    message: str = ""
    data: Any = None
    release: Optional[Release] = None
    download_url: Optional[str] = None
