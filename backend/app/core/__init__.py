"""Core utilities for the Devtul results service."""

from .config import settings
from .exceptions import (
    AppException,
    ConfigurationInconsistencyError,
    NotFoundError,
    ResultsFetchError,
    StoreError,
    ValidationError,
)
from .observability import configure_logging, logs

__all__ = [
    "settings",
    "logs",
    "configure_logging",
    "AppException",
    "ValidationError",
    "ConfigurationInconsistencyError",
    "NotFoundError",
    "StoreError",
    "ResultsFetchError",
]
