"""
Circuit Breaker Registry
========================
Recovery manager mapping service names to shared circuit breakers.

Breakers obtained here persist for the lifetime of the manager, so every
call site using the same name shares one failure history. Construct a
``RecoveryManager`` per test (or per application) and pass it where needed;
``get_recovery_manager()`` returns a lazily created process-wide instance.
"""

from typing import Any, Awaitable, Callable, Dict, Optional, TypeVar

import structlog

from .breaker import CircuitBreaker
from .models import BreakerStats, CircuitBreakerConfig, CircuitState, SystemHealth

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class RecoveryManager:
    """Registry of named circuit breakers with health aggregation."""
    
    def __init__(self):
        self._breakers: Dict[str, CircuitBreaker] = {}
    
    def get_breaker(
        self,
        service_name: str,
        config: Optional[CircuitBreakerConfig] = None,
    ) -> CircuitBreaker:
        """
        Get or create a circuit breaker for a service.
        
        Args:
            service_name: Name of the downstream service
            config: Optional configuration (only used if creating new breaker)
            
        Returns:
            CircuitBreaker instance
        """
        breaker = self._breakers.get(service_name)
        if breaker is None:
            breaker = CircuitBreaker(name=service_name, config=config, report_metrics=True)
            self._breakers[service_name] = breaker
            logger.debug("breaker_registered", service=service_name)
        elif config is not None and config != breaker.config:
            logger.debug("breaker_config_ignored", service=service_name)
        return breaker
    
    def get_all_stats(self) -> Dict[str, BreakerStats]:
        """Get statistics for all registered circuit breakers."""
        return {
            name: breaker.get_stats()
            for name, breaker in self._breakers.items()
        }
    
    def reset_breaker(self, service_name: str) -> bool:
        """Reset one breaker to closed state. Returns False if unknown."""
        breaker = self._breakers.get(service_name)
        if breaker is None:
            return False
        breaker.reset()
        return True
    
    def reset_all(self) -> None:
        """Reset all circuit breakers to closed state."""
        for breaker in self._breakers.values():
            breaker.reset()
    
    def get_registered_breakers(self) -> Dict[str, CircuitBreaker]:
        """Get all registered circuit breakers."""
        return dict(self._breakers)
    
    def get_system_health(self) -> SystemHealth:
        """Share of registered breakers currently closed, as a percentage."""
        states = [breaker.state for breaker in self._breakers.values()]
        total = len(states)
        closed = states.count(CircuitState.CLOSED)
        return SystemHealth(
            total_breakers=total,
            closed=closed,
            open=states.count(CircuitState.OPEN),
            half_open=states.count(CircuitState.HALF_OPEN),
            health_percentage=(closed / total) * 100 if total else 100.0,
        )
    
    async def execute_with_recovery(
        self,
        operation: Callable[[], Awaitable[T]],
        context: str,
        **options: Any,
    ) -> T:
        """Run ``operation`` through the executor using this manager's breaker."""
        from resilience_core.retry.executor import execute_with_recovery
        
        return await execute_with_recovery(
            operation,
            context=context,
            manager=self,
            **options,
        )


_default_manager: Optional[RecoveryManager] = None


def get_recovery_manager() -> RecoveryManager:
    """Process-wide recovery manager, created on first use."""
    global _default_manager
    if _default_manager is None:
        _default_manager = RecoveryManager()
    return _default_manager
