"""
Retry Executor
==============
Runs an async operation under a circuit breaker with retry and backoff.

Each call produces exactly one of: the operation's result, the fallback's
result, or an exception. Exhausted retries re-raise the operation's own last
exception; a rejected call raises ``CircuitBreakerError``.
"""

import asyncio
from functools import wraps
from typing import Any, Awaitable, Callable, Mapping, Optional, TypeVar, Union

import structlog

from resilience_core.circuit_breaker import (
    CircuitBreaker,
    CircuitBreakerConfig,
    CircuitBreakerError,
    RecoveryManager,
)
from resilience_core.classification import classify_error
from resilience_core.metrics import record_attempt, record_error, record_fallback
from .backoff import ErrorRecoveryConfig, calculate_delay

logger = structlog.get_logger(__name__)

T = TypeVar("T")

BreakerOverrides = Union[CircuitBreakerConfig, Mapping[str, Any], None]
RetryOverrides = Union[ErrorRecoveryConfig, Mapping[str, Any], None]


async def execute_with_recovery(
    operation: Callable[[], Awaitable[T]],
    context: str = "default",
    fallback: Optional[Callable[[], Awaitable[T]]] = None,
    circuit_breaker: BreakerOverrides = None,
    retry: RetryOverrides = None,
    manager: Optional[RecoveryManager] = None,
    breaker: Optional[CircuitBreaker] = None,
) -> T:
    """
    Execute ``operation`` with circuit breaker protection and retries.
    
    Args:
        operation: Zero-argument async callable, safe to call ``max_retries`` times
        context: Logical dependency name, used for logs and breaker lookup
        fallback: Awaited once when the circuit rejects the call or retries run out
        circuit_breaker: Breaker config or partial overrides of the defaults
        retry: Retry config or partial overrides of the defaults
        manager: Registry to take the named breaker from; without one a fresh
            breaker is scoped to this call
        breaker: Explicit breaker, takes precedence over ``manager``
        
    Returns:
        Result of ``operation`` or of ``fallback``
        
    Raises:
        CircuitBreakerError: If the circuit is open and no fallback is given
        Exception: The last error from ``operation`` once retries are exhausted
    """
    retry_config = ErrorRecoveryConfig().merged(retry)
    
    if breaker is None:
        if manager is not None:
            breaker_config = (
                CircuitBreakerConfig().merged(circuit_breaker)
                if circuit_breaker is not None else None
            )
            breaker = manager.get_breaker(context, breaker_config)
        else:
            breaker = CircuitBreaker(context, CircuitBreakerConfig().merged(circuit_breaker))
    
    if not breaker.can_execute():
        logger.warning("circuit_rejected", context=context, state=breaker.state.value)
        if fallback is not None:
            record_fallback(context, "circuit_open")
            return await fallback()
        raise CircuitBreakerError(context, breaker.state, breaker.retry_after())
    
    last_error: Optional[Exception] = None
    
    for attempt in range(1, retry_config.max_retries + 1):
        try:
            result = await _run_attempt(operation, retry_config.attempt_timeout)
        except Exception as e:
            last_error = e
            error_type = classify_error(e)
            breaker.on_failure(e)
            record_attempt(context, "failure")
            record_error(context, error_type.value)
            logger.warning(
                "recovery_attempt_failed",
                context=context,
                attempt=attempt,
                max_retries=retry_config.max_retries,
                error=str(e),
                error_type=error_type.value,
                circuit_state=breaker.state.value,
            )
            
            if attempt == retry_config.max_retries:
                break
            if not breaker.can_execute():
                break
            
            delay = calculate_delay(attempt, retry_config)
            logger.debug("recovery_backoff", context=context, attempt=attempt, delay=delay)
            await asyncio.sleep(delay)
            continue
        
        breaker.on_success()
        record_attempt(context, "success")
        logger.info("recovery_succeeded", context=context, attempt=attempt)
        return result
    
    if fallback is not None:
        logger.warning(
            "recovery_fallback",
            context=context,
            error=str(last_error),
            circuit_state=breaker.state.value,
        )
        record_fallback(context, "exhausted")
        return await fallback()
    
    logger.error(
        "recovery_exhausted",
        context=context,
        error=str(last_error),
        circuit_state=breaker.state.value,
    )
    raise last_error


async def _run_attempt(
    operation: Callable[[], Awaitable[T]],
    timeout: Optional[float],
) -> T:
    if timeout is None:
        return await operation()
    return await asyncio.wait_for(operation(), timeout)


def with_recovery(
    context: str,
    fallback: Optional[Callable[[], Awaitable[T]]] = None,
    circuit_breaker: BreakerOverrides = None,
    retry: RetryOverrides = None,
    manager: Optional[RecoveryManager] = None,
):
    """
    Decorator to run every call of an async function through the executor.
    
    Example:
        @with_recovery("profiles", manager=manager, retry={"max_retries": 2})
        async def load_profile(user_id: str):
            return await db.fetch_profile(user_id)
    """
    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @wraps(func)
        async def wrapper(*args, **kwargs) -> T:
            return await execute_with_recovery(
                lambda: func(*args, **kwargs),
                context=context,
                fallback=fallback,
                circuit_breaker=circuit_breaker,
                retry=retry,
                manager=manager,
            )
        return wrapper
    return decorator
