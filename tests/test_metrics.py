"""
Unit Tests for Resilience Metrics
=================================
"""

import pytest

from resilience_core.circuit_breaker import CircuitBreaker, CircuitBreakerConfig, CircuitState
from resilience_core.metrics import RESILIENCE_REGISTRY, get_metrics_text
from resilience_core.retry import execute_with_recovery, with_database_recovery


def sample(name, **labels):
    return RESILIENCE_REGISTRY.get_sample_value(name, labels) or 0.0


class TestMetrics:
    """Tests for Prometheus metric recording."""
    
    def test_circuit_state_gauge(self, clock):
        """Gauge follows closed -> open -> half-open -> closed."""
        breaker = CircuitBreaker(
            "metrics-gauge",
            CircuitBreakerConfig(failure_threshold=1, recovery_timeout=1.0),
            clock=clock,
            report_metrics=True,
        )
        gauge = "resilience_circuit_breaker_state"
        
        assert sample(gauge, service="metrics-gauge") == 0
        
        breaker.on_failure(Exception("down"))
        assert sample(gauge, service="metrics-gauge") == 2
        
        clock.advance(1.0)
        breaker.can_execute()
        assert sample(gauge, service="metrics-gauge") == 1
        
        breaker.on_success()
        assert sample(gauge, service="metrics-gauge") == 0
    
    @pytest.mark.asyncio
    async def test_attempts_errors_and_fallbacks(self, sleeps):
        """Executor records each attempt, its error type and the fallback."""
        calls = 0
        
        async def flaky():
            nonlocal calls
            calls += 1
            raise Exception("HTTP 503 Service Unavailable")
        
        async def fallback():
            return None
        
        await execute_with_recovery(
            flaky,
            context="metrics-exec",
            fallback=fallback,
            retry={"max_retries": 2},
        )
        
        assert sample(
            "resilience_recovery_attempts_total",
            context="metrics-exec", outcome="failure",
        ) == 2
        assert sample(
            "resilience_recovery_errors_total",
            context="metrics-exec", error_type="service_unavailable",
        ) == 2
        assert sample(
            "resilience_recovery_fallbacks_total",
            context="metrics-exec", reason="exhausted",
        ) == 1
    
    def test_metrics_text(self, manager):
        manager.get_breaker("metrics-text")
        
        text = get_metrics_text().decode()
        
        assert 'resilience_circuit_breaker_state{service="metrics-text"} 0.0' in text
    
    @pytest.mark.asyncio
    async def test_ad_hoc_call_keeps_registry_gauge(self, manager, sleeps):
        """A per-call breaker must not overwrite the registry breaker's state."""
        breaker = manager.get_breaker(
            "metrics-db",
            CircuitBreakerConfig(failure_threshold=1, recovery_timeout=60.0),
        )
        breaker.on_failure(Exception("database unavailable"))
        gauge = "resilience_circuit_breaker_state"
        assert sample(gauge, service="metrics-db") == 2
        
        async def ok():
            return "ok"
        
        assert await with_database_recovery(ok, context="metrics-db") == "ok"
        
        assert sample(gauge, service="metrics-db") == 2
        assert breaker.state == CircuitState.OPEN
    
    @pytest.mark.asyncio
    async def test_ad_hoc_breaker_publishes_no_state(self, sleeps):
        """A tripped per-call breaker leaves no gauge series behind."""
        async def down():
            raise ConnectionError("connection refused")
        
        with pytest.raises(ConnectionError):
            await execute_with_recovery(
                down,
                context="metrics-ad-hoc",
                circuit_breaker={"failure_threshold": 1},
                retry={"max_retries": 1},
            )
        
        assert RESILIENCE_REGISTRY.get_sample_value(
            "resilience_circuit_breaker_state", {"service": "metrics-ad-hoc"},
        ) is None
