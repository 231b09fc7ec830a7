"""
Error Classification
====================
Maps an exception to a coarse error type by inspecting its message.

Classification is advisory. It feeds logs and metrics but never decides
whether an attempt is retried.
"""

from enum import Enum
from typing import Tuple


class ErrorType(str, Enum):
    """Error categories recognised by the resilience layer."""
    CONNECTION_TIMEOUT = "connection_timeout"
    DATABASE_UNAVAILABLE = "database_unavailable"
    NETWORK_ERROR = "network_error"
    RATE_LIMIT_EXCEEDED = "rate_limit_exceeded"
    SERVICE_UNAVAILABLE = "service_unavailable"
    UNKNOWN_ERROR = "unknown_error"


# Evaluated in order, first match wins
_RULES: Tuple[Tuple[Tuple[str, ...], ErrorType], ...] = (
    (("timeout", "connection"), ErrorType.CONNECTION_TIMEOUT),
    (("database", "relation"), ErrorType.DATABASE_UNAVAILABLE),
    (("network", "fetch"), ErrorType.NETWORK_ERROR),
    (("rate limit", "429"), ErrorType.RATE_LIMIT_EXCEEDED),
    (("service unavailable", "503"), ErrorType.SERVICE_UNAVAILABLE),
)


def error_message(error: BaseException) -> str:
    """
    Message used for classification and failure history.
    
    Falls back to the exception class name when the exception carries no
    message (e.g. a bare ``asyncio.TimeoutError``).
    """
    return str(error) or type(error).__name__


def classify_error(error: BaseException) -> ErrorType:
    """
    Classify an error by case-insensitive substring match on its message.
    
    Example:
        classify_error(Exception("Database connection timeout"))
        # ErrorType.CONNECTION_TIMEOUT ("timeout" outranks "database")
    """
    message = error_message(error).lower()
    
    for needles, error_type in _RULES:
        if any(needle in message for needle in needles):
            return error_type
    
    return ErrorType.UNKNOWN_ERROR
