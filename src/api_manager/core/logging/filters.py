"""
Log filters for request correlation.

The current request id lives in a ContextVar, so concurrent asyncio tasks
each see their own id.
"""

import logging
from contextvars import ContextVar, Token
from typing import Optional

_request_id: ContextVar[Optional[str]] = ContextVar("api_manager_request_id", default=None)


def set_request_id(request_id: str) -> Token:
    """
    Set request id for the current context.

    Returns:
        Token for reset_request_id()
    """
    return _request_id.set(request_id)


def get_request_id() -> Optional[str]:
    """Request id of the current context, or None."""
    return _request_id.get()


def reset_request_id(token: Token) -> None:
    """Restore the request id that was current before set_request_id()."""
    _request_id.reset(token)


class CorrelationIdFilter(logging.Filter):
    """
    Adds ``request_id`` to every record emitted inside a manager call.

    Example:
        >>> handler.addFilter(CorrelationIdFilter())
    """

    def filter(self, record: logging.LogRecord) -> bool:
        request_id = get_request_id()
        if request_id and not hasattr(record, "request_id"):
            record.request_id = request_id
        return True
