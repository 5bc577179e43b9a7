"""
Log formatters: JSON and plain text with extra fields.
"""

import json
import logging
from datetime import datetime
from typing import Any, Dict

# Attributes every LogRecord has; anything else came in through ``extra``
_STANDARD_FIELDS = frozenset({
    'name', 'msg', 'args', 'created', 'filename', 'funcName',
    'levelname', 'levelno', 'lineno', 'module', 'msecs',
    'message', 'pathname', 'process', 'processName', 'relativeCreated',
    'thread', 'threadName', 'exc_info', 'exc_text', 'stack_info',
    'asctime', 'taskName',
})


def extra_fields(record: logging.LogRecord) -> Dict[str, Any]:
    """Fields passed via ``extra`` (and added by filters)."""
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _STANDARD_FIELDS and not key.startswith('_')
    }


class JSONFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    Example output:
        {"timestamp": "2024-01-15T10:30:45.123", "level": "DEBUG",
         "logger": "api_manager", "message": "Request finished",
         "method": "GET", "url": "https://api.com/v1/items", "status": 200}
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        log_data.update(extra_fields(record))

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        # default=str: headers, enums and bytes are not JSON-native
        return json.dumps(log_data, default=str)


class TextFormatter(logging.Formatter):
    """
    Plain text formatter.

    Example output:
        [2024-01-15 10:30:45] [DEBUG] [api_manager] Request finished method=GET status=200
    """

    def __init__(self):
        super().__init__(
            fmt='[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

    def format(self, record: logging.LogRecord) -> str:
        base_msg = super().format(record)
        fields = [f"{key}={value}" for key, value in extra_fields(record).items()]
        if fields:
            base_msg += " " + " ".join(fields)
        return base_msg


def get_formatter(format_type: str) -> logging.Formatter:
    """
    Get formatter by type name ("json" or "text").

    Raises:
        ValueError: Unknown format
    """
    formatters = {
        "json": JSONFormatter,
        "text": TextFormatter,
    }
    try:
        return formatters[format_type.lower()]()
    except KeyError:
        raise ValueError(f"Unknown log format: {format_type!r}") from None
