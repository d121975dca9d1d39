"""Structured logging facade used across the application."""

import logging
import sys
from typing import Any, Dict, Optional

from .config import settings

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


class _StderrHandler(logging.StreamHandler):
    """Writes to whatever ``sys.stderr`` is at emit time."""

    @property
    def stream(self):
        return sys.stderr

    @stream.setter
    def stream(self, value):
        pass


def configure_logging(level: Optional[str] = None) -> None:
    """Attach a stderr handler to the application logger (idempotent)."""
    logger = logging.getLogger(settings.APP_NAME)
    logger.setLevel((level or settings.LOG_LEVEL).upper())
    if not logger.handlers:
        handler = _StderrHandler()
        handler.setFormatter(logging.Formatter(_LOG_FORMAT))
        logger.addHandler(handler)
    logger.propagate = False


def _render(message: str, source: str, data: Optional[Dict[str, Any]]) -> str:
    text = f"[{source}] {message}"
    if data:
        pairs = " ".join(f"{key}={value!r}" for key, value in data.items())
        text = f"{text} {pairs}"
    return text


class Logs:
    """Thin wrapper around ``logging`` taking a source tag and a data dict."""

    def __init__(self, name: str) -> None:
        self._logger = logging.getLogger(name)

    def debug(
        self, message: str, source: str, data: Optional[Dict[str, Any]] = None
    ) -> None:
        self._logger.debug(_render(message, source, data))

    def info(
        self, message: str, source: str, data: Optional[Dict[str, Any]] = None
    ) -> None:
        self._logger.info(_render(message, source, data))

    def warning(
        self, message: str, source: str, data: Optional[Dict[str, Any]] = None
    ) -> None:
        self._logger.warning(_render(message, source, data))

    def security(
        self, message: str, source: str, data: Optional[Dict[str, Any]] = None
    ) -> None:
        self._logger.warning("[SECURITY] " + _render(message, source, data))

    def error(
        self,
        message: str,
        source: str,
        data: Optional[Dict[str, Any]] = None,
        exception: Optional[BaseException] = None,
    ) -> None:
        payload = dict(data or {})
        if exception is not None:
            payload["error_type"] = type(exception).__name__
            payload["error"] = str(exception)
        self._logger.error(_render(message, source, payload))


logs = Logs(settings.APP_NAME)
