"""Custom exception hierarchy for the Devtul results service."""

from typing import Any, Dict, Optional


class AppException(Exception):
    """Base exception for application errors."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class ValidationError(AppException):
    """Raised when filter or pagination input is malformed."""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, status_code=400, details=details)


class ConfigurationInconsistencyError(AppException):
    """Raised when a request conflicts with the configured category filter mode."""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, status_code=400, details=details)


class NotFoundError(AppException):
    """Raised when a query matches nothing that can be reported."""

    def __init__(
        self,
        message: str = "Not found",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, status_code=404, details=details)


class StoreError(AppException):
    """Raised by store implementations when the backing store fails."""

    def __init__(
        self,
        message: str = "Store operation failed",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, status_code=500, details=details)


class ResultsFetchError(AppException):
    """Raised when scan results could not be fetched.

    Carries no store detail; the underlying cause is logged, not returned.
    """

    def __init__(
        self, message: str = "Failed to fetch accessibility results"
    ) -> None:
        super().__init__(message, status_code=500)
