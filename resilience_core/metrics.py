"""
Resilience Metrics
==================
Prometheus metrics for circuit breakers and recovery attempts.

Metrics live in a dedicated registry so the host application decides
whether and where to expose them:

    from resilience_core.metrics import get_metrics_text
    
    body = get_metrics_text()

Every distinct context or service name adds permanent label series, so
names should come from a fixed set of dependencies rather than per-request
values. The state gauge is published only by breakers owned by a
``RecoveryManager``.
"""

from prometheus_client import (
    CollectorRegistry,
    Counter,
    Gauge,
    generate_latest,
)

RESILIENCE_REGISTRY = CollectorRegistry()

CIRCUIT_BREAKER_STATE = Gauge(
    name="resilience_circuit_breaker_state",
    documentation="Circuit breaker state (0=closed, 1=half-open, 2=open)",
    labelnames=["service"],
    registry=RESILIENCE_REGISTRY,
)

RECOVERY_ATTEMPTS = Counter(
    name="resilience_recovery_attempts_total",
    documentation="Operation attempts made by the retry executor",
    labelnames=["context", "outcome"],
    registry=RESILIENCE_REGISTRY,
)

RECOVERY_ERRORS = Counter(
    name="resilience_recovery_errors_total",
    documentation="Failed attempts by classified error type",
    labelnames=["context", "error_type"],
    registry=RESILIENCE_REGISTRY,
)

RECOVERY_FALLBACKS = Counter(
    name="resilience_recovery_fallbacks_total",
    documentation="Fallback invocations by reason",
    labelnames=["context", "reason"],
    registry=RESILIENCE_REGISTRY,
)

_STATE_VALUES = {"closed": 0, "half_open": 1, "open": 2}


def record_circuit_state(service: str, state: str) -> None:
    """
    Record circuit breaker state change.
    
    Args:
        service: Breaker name
        state: State value (closed, half_open, open)
    """
    CIRCUIT_BREAKER_STATE.labels(service=service).set(_STATE_VALUES[state])


def record_attempt(context: str, outcome: str) -> None:
    """Record one attempt outcome (success, failure)."""
    RECOVERY_ATTEMPTS.labels(context=context, outcome=outcome).inc()


def record_error(context: str, error_type: str) -> None:
    """Record a failed attempt under its classified error type."""
    RECOVERY_ERRORS.labels(context=context, error_type=error_type).inc()


def record_fallback(context: str, reason: str) -> None:
    """Record a fallback invocation (circuit_open, exhausted)."""
    RECOVERY_FALLBACKS.labels(context=context, reason=reason).inc()


def get_metrics_text() -> bytes:
    """Render all resilience metrics in Prometheus exposition format."""
    return generate_latest(RESILIENCE_REGISTRY)
