"""
Response classifier for App Center API calls.

Maps HTTP status codes to an outcome shared by every operation, and
exceptions to FATAL or RECOVERABLE error types.
"""

import logging
from enum import Enum

import httpx

from appcenter.errors import ErrorType, FatalError, RecoverableError

logger = logging.getLogger(__name__)


class Outcome(Enum):
    """Outcome of a single App Center response."""
    SUCCESS = "SUCCESS"
    AUTH_ERROR = "AUTH_ERROR"
    NOT_FOUND = "NOT_FOUND"
    SERVER_ERROR = "SERVER_ERROR"
    FAILURE = "FAILURE"


class ErrorClassifier:
    """
    Classifies responses and exceptions.

    Classification Rules:
    - 200-299: SUCCESS
    - 401: AUTH_ERROR (always fatal)
    - 404: NOT_FOUND (recoverable)
    - 500-599: SERVER_ERROR when the caller treats server errors as fatal,
      FAILURE otherwise
    - Anything else: FAILURE (recoverable, status and body reported)
    """

    def classify(self, status_code: int, server_errors_fatal: bool = False) -> Outcome:
        """
        Classify a status code.

        Args:
            status_code: HTTP status returned by App Center
            server_errors_fatal: Whether 5xx aborts the run for this endpoint

        Returns:
            Outcome enum value
        """
        if 200 <= status_code < 300:
            return Outcome.SUCCESS
        if status_code == 401:
            return Outcome.AUTH_ERROR
        if status_code == 404:
            return Outcome.NOT_FOUND
        if server_errors_fatal and 500 <= status_code < 600:
            return Outcome.SERVER_ERROR
        return Outcome.FAILURE

    def error_type(self, exception: Exception) -> ErrorType:
        """
        Classify exception into error type.

        Args:
            exception: The exception to classify

        Returns:
            ErrorType enum value (FATAL or RECOVERABLE)
        """
        if isinstance(exception, FatalError):
            return ErrorType.FATAL
        if isinstance(exception, RecoverableError):
            return ErrorType.RECOVERABLE

        # Transport errors surface as a failed call, the caller may continue
        if isinstance(exception, httpx.HTTPError):
            return ErrorType.RECOVERABLE

        logger.debug(f"Unknown exception type {type(exception).__name__}, defaulting to FATAL")
        return ErrorType.FATAL
