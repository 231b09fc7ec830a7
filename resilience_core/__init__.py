"""
Resilience Core Library
=======================
Circuit breakers, retry with backoff and a recovery manager for async
calls to downstream dependencies (database, external APIs, auth provider).
"""

__version__ = "0.1.0"

# Circuit breaker
from resilience_core.circuit_breaker import (
    CircuitState,
    CircuitBreaker,
    CircuitBreakerConfig,
    CircuitBreakerState,
    CircuitBreakerError,
    FailureRecord,
    BreakerStats,
    SystemHealth,
    RecoveryManager,
    get_recovery_manager,
)

# Retry
from resilience_core.retry import (
    ErrorRecoveryConfig,
    calculate_delay,
    execute_with_recovery,
    with_recovery,
    with_database_recovery,
    with_api_recovery,
    with_auth_recovery,
)

# Errors
from resilience_core.classification import ErrorType, classify_error
from resilience_core.exceptions import ResilienceError

__all__ = [
    "__version__",
    # Circuit breaker
    "CircuitState",
    "CircuitBreaker",
    "CircuitBreakerConfig",
    "CircuitBreakerState",
    "CircuitBreakerError",
    "FailureRecord",
    "BreakerStats",
    "SystemHealth",
    "RecoveryManager",
    "get_recovery_manager",
    # Retry
    "ErrorRecoveryConfig",
    "calculate_delay",
    "execute_with_recovery",
    "with_recovery",
    "with_database_recovery",
    "with_api_recovery",
    "with_auth_recovery",
    # Errors
    "ErrorType",
    "classify_error",
    "ResilienceError",
]
