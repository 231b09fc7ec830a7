"""
Resilience Core - Circuit Breaker
=================================
Windowed circuit breaker and recovery manager.

Circuit breaker pattern prevents cascade failures when downstream services
are unavailable. States:

1. CLOSED: Normal operation, requests flow through
2. OPEN: Service is failing, requests are immediately rejected
3. HALF-OPEN: Testing if service has recovered

Usage:
    from resilience_core.circuit_breaker import RecoveryManager
    
    manager = RecoveryManager()
    breaker = manager.get_breaker("database")
    
    if breaker.can_execute():
        ...
"""

from .models import (
    CircuitState,
    CircuitBreakerError,
    CircuitBreakerConfig,
    CircuitBreakerState,
    FailureRecord,
    BreakerStats,
    SystemHealth,
)

from .breaker import CircuitBreaker

from .registry import RecoveryManager, get_recovery_manager

__all__ = [
    # Models
    "CircuitState",
    "CircuitBreakerError",
    "CircuitBreakerConfig",
    "CircuitBreakerState",
    "FailureRecord",
    "BreakerStats",
    "SystemHealth",
    # Breaker
    "CircuitBreaker",
    # Registry
    "RecoveryManager",
    "get_recovery_manager",
]
