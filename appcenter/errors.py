"""
Error handling infrastructure for the App Center client.

Defines the error hierarchy used to signal fatal and recoverable failures
of API calls and upload workflows.
"""

from enum import Enum
from typing import Any, Optional


class ErrorType(Enum):
    """Error classification for callers."""
    FATAL = "FATAL"              # Abort the whole run
    RECOVERABLE = "RECOVERABLE"  # Caller decides whether to continue


class AppCenterError(Exception):
    """Base exception for all App Center errors."""

    def __init__(self, message: str, error_code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__


class FatalError(AppCenterError):
    """
    Error that aborts the whole run.

    Examples:
    - Invalid API token
    - App Center 5xx while creating or committing an upload
    - Missing owner or app name
    """
    pass


class RecoverableError(AppCenterError):
    """
    Error reported back to the caller, who decides whether to continue.

    Examples:
    - Unexpected status on a read operation
    """
    pass


# Specific error types

class AuthenticationError(FatalError):
    """App Center rejected the provided API token (401)."""
    pass


class ServiceError(FatalError):
    """App Center failed with a 5xx on an upload or release path."""

    def __init__(self, message: str, status_code: int, error_code: Optional[str] = None):
        super().__init__(message, error_code)
        self.status_code = status_code


class UserError(FatalError):
    """Required identifiers are missing or resolved to nothing."""
    pass


class ValidationError(FatalError):
    """A configuration object failed validation at construction."""
    pass


class ApiError(RecoverableError):
    """App Center answered with an unexpected status."""

    def __init__(
        self,
        message: str,
        status_code: int,
        body: Any = None,
        error_code: Optional[str] = None
    ):
        super().__init__(message, error_code)
        self.status_code = status_code
        self.body = body

    def __str__(self) -> str:
        return f"{self.message} ({self.status_code}): {self.body}"
