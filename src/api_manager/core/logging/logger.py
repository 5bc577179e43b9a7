"""
Main logger for API Manager.

Thin wrapper over a standard ``logging.Logger``: structured extra fields,
masking of secrets, console/file handlers built from LoggingConfig.
"""

import logging
from typing import Any, List, Optional

from .config import LoggingConfig, LogLevel
from .formatters import get_formatter
from .filters import CorrelationIdFilter
from .handlers import create_console_handler, create_file_handler
from ...utils.sanitizer import mask_sensitive_data


class ApiManagerLogger:
    """
    Logger used by ApiManager for diagnostic records.

    With a config the logger adds its own handlers and does not propagate;
    handlers added by other instances sharing the name are left alone.
    Without a config it adds nothing and propagates to the ``api_manager``
    package logger (NullHandler by default), leaving output to the application.

    Example:
        >>> logger = ApiManagerLogger(LoggingConfig.create(format="json"))
        >>> logger.debug("Request finished", method="GET", status=200)
    """

    def __init__(self, config: Optional[LoggingConfig] = None, name: str = "api_manager"):
        self.config = config
        self.name = name
        self._closed = False
        self._logger = logging.getLogger(name)
        self._handlers: List[logging.Handler] = []

        if config is None:
            return

        level = self._get_level(config.level)
        self._logger.setLevel(level)
        self._logger.propagate = False

        filters = [CorrelationIdFilter()] if config.enable_correlation_id else []
        formatter = get_formatter(config.format.value)

        if config.enable_console:
            self._add_handler(create_console_handler(level, formatter, filters))

        if config.enable_file and config.file_path:
            self._add_handler(create_file_handler(
                file_path=config.file_path,
                level=level,
                formatter=formatter,
                max_bytes=config.max_bytes,
                backup_count=config.backup_count,
                filters=filters
            ))

    def _add_handler(self, handler: logging.Handler) -> None:
        self._handlers.append(handler)
        self._logger.addHandler(handler)

    def _get_level(self, level: LogLevel) -> int:
        return getattr(logging, level.value)

    def _log(self, level: int, message: str, fields: dict) -> None:
        if self._closed:
            return
        self._logger.log(level, message, extra=mask_sensitive_data(fields))

    def debug(self, message: str, **kwargs: Any) -> None:
        """
        Log debug message.

        Example:
            >>> logger.debug("upload progress", fraction=0.5)
        """
        self._log(logging.DEBUG, message, kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        self._log(logging.INFO, message, kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._log(logging.WARNING, message, kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self._log(logging.ERROR, message, kwargs)

    def close(self) -> None:
        """
        Flush and close owned handlers. Idempotent.

        A logger built without a config owns no handlers and only stops emitting.
        """
        if self._closed:
            return

        if self.config is not None:
            for handler in self._handlers:
                try:
                    handler.flush()
                    handler.close()
                except Exception:
                    # Ignore errors during cleanup
                    pass
                self._logger.removeHandler(handler)
            self._handlers = []

        self._closed = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
