"""
Logging system for API Manager.

Example:
    >>> from api_manager.core.logging import ApiManagerLogger, LoggingConfig
    >>> logger = ApiManagerLogger(LoggingConfig.create(format="json"))
    >>> logger.debug("Request finished", method="GET", status=200)
"""

from .config import LoggingConfig, LogLevel, LogFormat
from .logger import ApiManagerLogger
from .formatters import JSONFormatter, TextFormatter, get_formatter
from .filters import (
    CorrelationIdFilter,
    set_request_id,
    get_request_id,
    reset_request_id,
)
from .handlers import create_console_handler, create_file_handler

__all__ = [
    "LoggingConfig",
    "LogLevel",
    "LogFormat",
    "ApiManagerLogger",
    "JSONFormatter",
    "TextFormatter",
    "get_formatter",
    "CorrelationIdFilter",
    "set_request_id",
    "get_request_id",
    "reset_request_id",
    "create_console_handler",
    "create_file_handler",
]
