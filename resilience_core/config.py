"""
Resilience Configuration
========================
Configuration constants and environment variables.
"""

import os


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


# Circuit breaker defaults
DEFAULT_FAILURE_THRESHOLD = int(os.getenv("RESILIENCE_FAILURE_THRESHOLD", "5"))
DEFAULT_RECOVERY_TIMEOUT = float(os.getenv("RESILIENCE_RECOVERY_TIMEOUT", "30"))
DEFAULT_MONITORING_WINDOW = float(os.getenv("RESILIENCE_MONITORING_WINDOW", "60"))

# Retry defaults
DEFAULT_MAX_RETRIES = int(os.getenv("RESILIENCE_MAX_RETRIES", "3"))
DEFAULT_BASE_DELAY = float(os.getenv("RESILIENCE_BASE_DELAY", "1.0"))
DEFAULT_MAX_DELAY = float(os.getenv("RESILIENCE_MAX_DELAY", "10.0"))
DEFAULT_BACKOFF_MULTIPLIER = float(os.getenv("RESILIENCE_BACKOFF_MULTIPLIER", "2.0"))
DEFAULT_JITTER = _env_bool("RESILIENCE_JITTER", "true")

# Upper bound on jitter as a fraction of the computed delay
JITTER_RATIO = 0.1
