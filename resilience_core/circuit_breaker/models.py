"""
Circuit Breaker Models
======================
Data models and enums for the circuit breaker pattern.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, FrozenSet, List, Mapping, NamedTuple, Optional, Union

from pydantic import BaseModel

from resilience_core import config
from resilience_core.classification import ErrorType
from resilience_core.exceptions import ResilienceError


class CircuitState(str, Enum):
    """Circuit breaker states."""
    CLOSED = "closed"        # Normal operation
    OPEN = "open"            # Failing, reject requests
    HALF_OPEN = "half_open"  # Testing recovery


class CircuitBreakerError(ResilienceError):
    """Raised when circuit is open and request is rejected."""
    
    def __init__(self, service_name: str, state: CircuitState, retry_after: float):
        self.service_name = service_name
        self.state = state
        self.retry_after = retry_after
        super().__init__(
            f"Circuit breaker for '{service_name}' is {state.value}. "
            f"Retry after {retry_after:.1f}s"
        )


class FailureRecord(NamedTuple):
    """A single recorded failure."""
    timestamp: float
    message: str


@dataclass(frozen=True)
class CircuitBreakerConfig:
    """Configuration for a circuit breaker. Durations are in seconds."""
    failure_threshold: int = config.DEFAULT_FAILURE_THRESHOLD
    recovery_timeout: float = config.DEFAULT_RECOVERY_TIMEOUT
    monitoring_window: float = config.DEFAULT_MONITORING_WINDOW
    # Documentary only, classification never gates behaviour
    expected_errors: FrozenSet[ErrorType] = frozenset({
        ErrorType.CONNECTION_TIMEOUT,
        ErrorType.DATABASE_UNAVAILABLE,
        ErrorType.NETWORK_ERROR,
        ErrorType.RATE_LIMIT_EXCEEDED,
        ErrorType.SERVICE_UNAVAILABLE,
    })
    # None admits any number of concurrent trials while half-open
    half_open_max_calls: Optional[int] = None
    
    def __post_init__(self):
        if self.failure_threshold < 1:
            raise ValueError("failure_threshold must be >= 1")
        if self.recovery_timeout < 0:
            raise ValueError("recovery_timeout must be >= 0")
        if self.monitoring_window < 0:
            raise ValueError("monitoring_window must be >= 0")
        if self.half_open_max_calls is not None and self.half_open_max_calls < 1:
            raise ValueError("half_open_max_calls must be >= 1 or None")
    
    def merged(
        self,
        overrides: Union["CircuitBreakerConfig", Mapping[str, Any], None] = None,
    ) -> "CircuitBreakerConfig":
        """Return a config with ``overrides`` applied on top of this one."""
        if overrides is None:
            return self
        if isinstance(overrides, CircuitBreakerConfig):
            return overrides
        return replace(self, **dict(overrides))


@dataclass
class CircuitBreakerState:
    """Runtime state of a circuit breaker."""
    state: CircuitState = CircuitState.CLOSED
    failure_count: int = 0
    last_failure_time: float = 0
    next_attempt_time: float = 0
    success_count: int = 0
    total_requests: int = 0
    # Insertion ordered, pruned to the monitoring window on each failure
    failure_history: List[FailureRecord] = field(default_factory=list)
    half_open_calls: int = 0


class BreakerStats(BaseModel):
    """Point-in-time statistics for one breaker."""
    name: str
    state: CircuitState
    success_rate: float
    success_count: int
    failure_count: int
    total_requests: int
    last_failure_time: float
    next_attempt_time: float


class SystemHealth(BaseModel):
    """Aggregated health across every registered breaker."""
    total_breakers: int
    closed: int
    open: int
    half_open: int
    health_percentage: float
