"""Service test fixtures — in-memory store and a scripted prober.

Design Decisions:
    - FakeProber replaces HttpProber at the orchestrator boundary: service tests
      exercise orchestration, not HTTP (prober has its own tests)
"""

import asyncio

import pytest

from sentinelnav.core.domain_types import SiteStatus
from sentinelnav.infrastructure.prober import ProbeResult
from sentinelnav.infrastructure.stores.memory_store import MemoryStore
from sentinelnav.services.monitoring import MonitoringOrchestrator

NOW_MS = 1_700_000_000_000


class FakeProber:
    """Returns a per-URL result; unknown URLs are online in 10ms."""

    def __init__(self):
        self.results: dict[str, ProbeResult] = {}
        self.calls: list[str] = []
        self.gate: asyncio.Event | None = None

    async def probe(self, url: str, timeout_ms: int | None = None) -> ProbeResult:
        self.calls.append(url)
        if self.gate is not None:
            await self.gate.wait()
        return self.results.get(url, ProbeResult(SiteStatus.ONLINE, 10, 200))

    async def close(self) -> None:
        return None


@pytest.fixture
async def store():
    instance = MemoryStore()
    await instance.initialize()
    return instance


@pytest.fixture
def prober():
    return FakeProber()


@pytest.fixture
def now_ms():
    return NOW_MS


@pytest.fixture
def orchestrator(store, prober, now_ms):
    return MonitoringOrchestrator(store, prober, clock=lambda: now_ms)
