"""
Unit Tests for Recovery Manager
===============================
Named breaker registry, statistics and system health.
"""

import pytest

from resilience_core.circuit_breaker import (
    CircuitBreakerConfig,
    CircuitState,
    RecoveryManager,
    get_recovery_manager,
)


def fail(breaker, count=1):
    for _ in range(count):
        breaker.on_failure(Exception("service unavailable"))


class TestGetBreaker:
    """Tests for lazy breaker registration."""
    
    def test_same_name_returns_same_instance(self, manager):
        """Both references should be the same object with shared state."""
        first = manager.get_breaker("auth")
        second = manager.get_breaker("auth")
        
        assert first is second
        
        fail(first, 2)
        assert second.get_state().failure_count == 2
    
    def test_config_applied_only_on_creation(self, manager):
        """A later config for an existing name is ignored."""
        original = CircuitBreakerConfig(failure_threshold=2)
        breaker = manager.get_breaker("database", original)
        
        again = manager.get_breaker("database", CircuitBreakerConfig(failure_threshold=9))
        
        assert again is breaker
        assert again.config.failure_threshold == 2
    
    def test_registries_are_isolated(self):
        """Separate managers never share breakers."""
        assert RecoveryManager().get_breaker("api") is not RecoveryManager().get_breaker("api")
    
    def test_default_manager_is_shared(self):
        assert get_recovery_manager() is get_recovery_manager()
    
    def test_get_registered_breakers_is_a_copy(self, manager):
        manager.get_breaker("api")
        
        breakers = manager.get_registered_breakers()
        breakers.clear()
        
        assert list(manager.get_registered_breakers()) == ["api"]


class TestStatsAndReset:
    """Tests for aggregated stats and manual reset."""
    
    def test_get_all_stats(self, manager):
        manager.get_breaker("api").on_success()
        fail(manager.get_breaker("database"))
        
        stats = manager.get_all_stats()
        
        assert set(stats) == {"api", "database"}
        assert stats["api"].success_rate == 100.0
        assert stats["database"].failure_count == 1
    
    def test_reset_all(self, manager):
        """Every breaker should be closed with cleared counters."""
        for name in ("api", "database"):
            fail(manager.get_breaker(name, CircuitBreakerConfig(failure_threshold=1)))
        
        manager.reset_all()
        
        for breaker in manager.get_registered_breakers().values():
            assert breaker.state == CircuitState.CLOSED
            assert breaker.get_state().total_requests == 0
    
    def test_reset_breaker(self, manager):
        """Resetting one breaker leaves the others untouched."""
        config = CircuitBreakerConfig(failure_threshold=1)
        fail(manager.get_breaker("api", config))
        fail(manager.get_breaker("auth", config))
        
        assert manager.reset_breaker("api") is True
        assert manager.reset_breaker("unknown") is False
        
        assert manager.get_breaker("api").state == CircuitState.CLOSED
        assert manager.get_breaker("auth").state == CircuitState.OPEN


class TestSystemHealth:
    """Tests for health aggregation."""
    
    def test_empty_registry_is_healthy(self, manager):
        health = manager.get_system_health()
        
        assert health.total_breakers == 0
        assert health.health_percentage == 100.0
    
    def test_health_percentage(self, manager):
        """Percentage of breakers in CLOSED state."""
        config = CircuitBreakerConfig(failure_threshold=1)
        manager.get_breaker("api", config)
        manager.get_breaker("auth", config)
        manager.get_breaker("cache", config)
        fail(manager.get_breaker("database", config))
        
        health = manager.get_system_health()
        
        assert health.total_breakers == 4
        assert health.closed == 3
        assert health.open == 1
        assert health.half_open == 0
        assert health.health_percentage == pytest.approx(75.0)


class TestManagerExecution:
    """Tests for routing the executor through a manager."""
    
    @pytest.mark.asyncio
    async def test_breaker_state_persists_across_calls(self, manager, sleeps):
        """Named breakers accumulate failures across separate calls."""
        calls = 0
        
        async def always_fails():
            nonlocal calls
            calls += 1
            raise ConnectionError("connection refused")
        
        options = {
            "circuit_breaker": {"failure_threshold": 2},
            "retry": {"max_retries": 1},
            "fallback": None,
        }
        
        for _ in range(2):
            with pytest.raises(ConnectionError):
                await manager.execute_with_recovery(always_fails, "crm", **options)
        
        assert manager.get_breaker("crm").state == CircuitState.OPEN
        assert manager.get_system_health().health_percentage == 0.0
        
        async def cached():
            return "cached"
        
        options["fallback"] = cached
        assert await manager.execute_with_recovery(always_fails, "crm", **options) == "cached"
        assert calls == 2
