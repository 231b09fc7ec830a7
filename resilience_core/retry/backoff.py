"""
Retry Backoff
=============
Retry configuration and exponential backoff delay calculation.
"""

import random
from dataclasses import dataclass, replace
from typing import Any, Mapping, Optional, Union

from resilience_core import config


@dataclass(frozen=True)
class ErrorRecoveryConfig:
    """Retry policy for one logical operation. Durations are in seconds."""
    max_retries: int = config.DEFAULT_MAX_RETRIES        # Total attempts, not extra ones
    base_delay: float = config.DEFAULT_BASE_DELAY
    max_delay: float = config.DEFAULT_MAX_DELAY
    backoff_multiplier: float = config.DEFAULT_BACKOFF_MULTIPLIER
    jitter: bool = config.DEFAULT_JITTER
    # Per-attempt deadline, None waits on the operation indefinitely
    attempt_timeout: Optional[float] = None
    
    def __post_init__(self):
        if self.max_retries < 1:
            raise ValueError("max_retries must be >= 1")
        if self.base_delay < 0 or self.max_delay < 0:
            raise ValueError("delays must be >= 0")
        if self.backoff_multiplier < 1:
            raise ValueError("backoff_multiplier must be >= 1")
        if self.attempt_timeout is not None and self.attempt_timeout <= 0:
            raise ValueError("attempt_timeout must be > 0 or None")
    
    def merged(
        self,
        overrides: Union["ErrorRecoveryConfig", Mapping[str, Any], None] = None,
    ) -> "ErrorRecoveryConfig":
        """Return a config with ``overrides`` applied on top of this one."""
        if overrides is None:
            return self
        if isinstance(overrides, ErrorRecoveryConfig):
            return overrides
        return replace(self, **dict(overrides))


def calculate_delay(attempt: int, retry_config: ErrorRecoveryConfig) -> float:
    """
    Delay to wait after failed attempt number ``attempt`` (1-indexed).
    
    The first retry waits ``base_delay``; each later one multiplies by
    ``backoff_multiplier`` up to ``max_delay``. Jitter adds up to 10% on top.
    
    Example:
        cfg = ErrorRecoveryConfig(base_delay=1.0, max_delay=10.0, jitter=False)
        [calculate_delay(n, cfg) for n in range(1, 6)]
        # [1.0, 2.0, 4.0, 8.0, 10.0]
    """
    delay = min(
        retry_config.base_delay * (retry_config.backoff_multiplier ** (attempt - 1)),
        retry_config.max_delay,
    )
    
    if retry_config.jitter:
        delay += random.uniform(0, config.JITTER_RATIO * delay)
    
    return delay
