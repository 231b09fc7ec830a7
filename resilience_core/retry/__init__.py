"""
Retry Logic with Exponential Backoff
=====================================
Retry executor, backoff calculation and dependency presets.
"""

from .backoff import ErrorRecoveryConfig, calculate_delay
from .executor import execute_with_recovery, with_recovery
from .presets import (
    with_database_recovery,
    with_api_recovery,
    with_auth_recovery,
)

__all__ = [
    # Backoff
    "ErrorRecoveryConfig",
    "calculate_delay",
    # Executor
    "execute_with_recovery",
    "with_recovery",
    # Presets
    "with_database_recovery",
    "with_api_recovery",
    "with_auth_recovery",
]
