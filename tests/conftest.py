import asyncio

import pytest

from resilience_core.circuit_breaker import RecoveryManager


class FakeClock:
    """Manually advanced replacement for time.time()."""
    
    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now
    
    def __call__(self) -> float:
        return self.now
    
    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def manager():
    return RecoveryManager()


@pytest.fixture
def sleeps(monkeypatch):
    """Record backoff delays instead of sleeping."""
    delays = []
    
    async def fake_sleep(delay, *args, **kwargs):
        delays.append(delay)
    
    monkeypatch.setattr(asyncio, "sleep", fake_sleep)
    return delays
