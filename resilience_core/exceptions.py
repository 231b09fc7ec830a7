"""
Resilience Exceptions
=====================
Base exception for errors raised by the resilience layer itself.

Errors raised by wrapped operations are never converted into these; they
propagate unchanged once retries are exhausted.
"""


class ResilienceError(Exception):
    """Base class for errors originating in the resilience layer."""
    pass
