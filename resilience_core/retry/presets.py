"""
Recovery Presets
================
Pre-tuned executor settings for common dependency classes.

    rows = await with_database_recovery(lambda: fetch_rows(user_id))
    
    # Share breaker state across calls by routing through a manager
    user = await with_auth_recovery(check_session, manager=manager)
"""

from typing import Awaitable, Callable, Optional, TypeVar

from resilience_core.circuit_breaker import CircuitBreakerConfig, RecoveryManager
from .backoff import ErrorRecoveryConfig
from .executor import execute_with_recovery

T = TypeVar("T")

DATABASE_BREAKER_CONFIG = CircuitBreakerConfig(failure_threshold=3, recovery_timeout=15.0)
DATABASE_RETRY_CONFIG = ErrorRecoveryConfig(max_retries=2, base_delay=0.5)

API_BREAKER_CONFIG = CircuitBreakerConfig(failure_threshold=5, recovery_timeout=30.0)
API_RETRY_CONFIG = ErrorRecoveryConfig(max_retries=3, base_delay=1.0)

AUTH_BREAKER_CONFIG = CircuitBreakerConfig(failure_threshold=2, recovery_timeout=10.0)
AUTH_RETRY_CONFIG = ErrorRecoveryConfig(max_retries=1, base_delay=0.2)


async def with_database_recovery(
    operation: Callable[[], Awaitable[T]],
    fallback: Optional[Callable[[], Awaitable[T]]] = None,
    context: str = "database",
    manager: Optional[RecoveryManager] = None,
) -> T:
    """Database calls: trips early, recovers fast, retries briefly."""
    return await execute_with_recovery(
        operation,
        context=context,
        fallback=fallback,
        circuit_breaker=DATABASE_BREAKER_CONFIG,
        retry=DATABASE_RETRY_CONFIG,
        manager=manager,
    )


async def with_api_recovery(
    operation: Callable[[], Awaitable[T]],
    fallback: Optional[Callable[[], Awaitable[T]]] = None,
    context: str = "api",
    manager: Optional[RecoveryManager] = None,
) -> T:
    """Outbound HTTP API calls."""
    return await execute_with_recovery(
        operation,
        context=context,
        fallback=fallback,
        circuit_breaker=API_BREAKER_CONFIG,
        retry=API_RETRY_CONFIG,
        manager=manager,
    )


async def with_auth_recovery(
    operation: Callable[[], Awaitable[T]],
    fallback: Optional[Callable[[], Awaitable[T]]] = None,
    context: str = "auth",
    manager: Optional[RecoveryManager] = None,
) -> T:
    """Auth provider calls: a single attempt, circuit trips after two failures."""
    return await execute_with_recovery(
        operation,
        context=context,
        fallback=fallback,
        circuit_breaker=AUTH_BREAKER_CONFIG,
        retry=AUTH_RETRY_CONFIG,
        manager=manager,
    )
