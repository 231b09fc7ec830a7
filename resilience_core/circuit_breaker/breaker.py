"""
Circuit Breaker Core
====================
Windowed circuit breaker deciding whether a dependency may be called.

State transitions:

    CLOSED    -> OPEN       failures in window reach failure_threshold
    OPEN      -> HALF_OPEN  recovery timeout elapsed and a call is attempted
    HALF_OPEN -> CLOSED     a trial call succeeds
    HALF_OPEN -> OPEN       a trial call fails

Bookkeeping methods are synchronous. Under asyncio they run without
suspension, so each update is atomic with respect to other tasks.
"""

import time
from dataclasses import replace
from typing import Callable, Optional

import structlog

from resilience_core.classification import error_message
from resilience_core.metrics import record_circuit_state
from .models import (
    BreakerStats,
    CircuitBreakerConfig,
    CircuitBreakerState,
    CircuitState,
    FailureRecord,
)

logger = structlog.get_logger(__name__)


class CircuitBreaker:
    """
    Per-dependency circuit breaker.
    
    Example:
        breaker = CircuitBreaker("database", CircuitBreakerConfig(failure_threshold=3))
        
        if breaker.can_execute():
            try:
                rows = await fetch_rows()
                breaker.on_success()
            except Exception as e:
                breaker.on_failure(e)
                raise
    
    Note:
        While HALF_OPEN every caller is admitted unless
        ``config.half_open_max_calls`` is set, so concurrent tasks may each
        issue a trial call right after the recovery timeout elapses.
    """
    
    def __init__(
        self,
        name: str,
        config: Optional[CircuitBreakerConfig] = None,
        clock: Callable[[], float] = time.time,
        report_metrics: bool = False,
    ):
        self.name = name
        self.config = config or CircuitBreakerConfig()
        self._clock = clock
        # Only registry-owned breakers publish the per-service state gauge
        self._report_metrics = report_metrics
        self._state = CircuitBreakerState()
        self._publish_state()
    
    @property
    def state(self) -> CircuitState:
        """Current circuit state."""
        return self._state.state
    
    def retry_after(self) -> float:
        """Seconds until an OPEN circuit admits a trial call."""
        if self._state.state != CircuitState.OPEN:
            return 0.0
        return max(0.0, self._state.next_attempt_time - self._clock())
    
    def can_execute(self) -> bool:
        """Check and possibly transition state. Returns True if allowed."""
        if self._state.state == CircuitState.CLOSED:
            return True
        
        if self._state.state == CircuitState.OPEN:
            if self._clock() < self._state.next_attempt_time:
                return False
            self._transition(CircuitState.HALF_OPEN)
            self._state.half_open_calls = 0
            logger.info("circuit_half_open", service=self.name)
        
        # HALF_OPEN
        limit = self.config.half_open_max_calls
        if limit is not None and self._state.half_open_calls >= limit:
            return False
        self._state.half_open_calls += 1
        return True
    
    def on_success(self) -> None:
        """Record a successful call."""
        self._state.success_count += 1
        self._state.total_requests += 1
        
        if self._state.state == CircuitState.HALF_OPEN:
            self._transition(CircuitState.CLOSED)
            self._state.failure_count = 0
            self._state.failure_history = []
            logger.info("circuit_closed", service=self.name)
    
    def on_failure(self, error: BaseException) -> None:
        """Record a failed call."""
        now = self._clock()
        self._state.total_requests += 1
        self._state.last_failure_time = now
        
        window_start = now - self.config.monitoring_window
        history = self._state.failure_history
        history.append(FailureRecord(now, error_message(error)))
        self._state.failure_history = [
            record for record in history if record.timestamp >= window_start
        ]
        self._state.failure_count = len(self._state.failure_history)
        
        if self._state.state == CircuitState.HALF_OPEN:
            self._open(now)
            logger.warning("circuit_reopened", service=self.name, error=str(error))
        
        elif self._state.state == CircuitState.CLOSED:
            if self._state.failure_count >= self.config.failure_threshold:
                self._open(now)
                logger.warning(
                    "circuit_opened",
                    service=self.name,
                    failures=self._state.failure_count,
                    retry_after=self.config.recovery_timeout,
                )
    
    def get_state(self) -> CircuitBreakerState:
        """Return a copy of the current state."""
        return replace(
            self._state,
            failure_history=list(self._state.failure_history),
        )
    
    def reset(self) -> None:
        """Return to CLOSED with all counters cleared. Manual use only."""
        self._state = CircuitBreakerState()
        self._publish_state()
        logger.info("circuit_reset", service=self.name)
    
    def get_stats(self) -> BreakerStats:
        """Get circuit breaker statistics."""
        total = self._state.total_requests
        success_rate = (self._state.success_count / total) * 100 if total else 0.0
        return BreakerStats(
            name=self.name,
            state=self._state.state,
            success_rate=success_rate,
            success_count=self._state.success_count,
            failure_count=self._state.failure_count,
            total_requests=total,
            last_failure_time=self._state.last_failure_time,
            next_attempt_time=self._state.next_attempt_time,
        )
    
    def _open(self, now: float) -> None:
        self._transition(CircuitState.OPEN)
        self._state.next_attempt_time = now + self.config.recovery_timeout
    
    def _transition(self, new_state: CircuitState) -> None:
        self._state.state = new_state
        self._publish_state()
    
    def _publish_state(self) -> None:
        if self._report_metrics:
            record_circuit_state(self.name, self._state.state.value)
