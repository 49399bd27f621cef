"""API test fixtures — FastAPI app wired to an in-memory store and a mocked network.

Invariants:
    - Every test gets a fresh MemoryStore, TokenIssuer and orchestrator on app.state
    - Outbound probes never leave the process (httpx.MockTransport)
    - Settings dependency overridden so login has a known password hash

Design Decisions:
    - app.state populated directly: ASGITransport does not run the lifespan, and the
      lifespan itself is covered by main's own wiring, not by route tests
"""

import httpx
import pytest
from httpx import ASGITransport, AsyncClient
from werkzeug.security import generate_password_hash

from sentinelnav.api.dependencies import get_settings_dep
from sentinelnav.config import Settings
from sentinelnav.core.tokens import TokenIssuer
from sentinelnav.infrastructure.prober import HttpProber
from sentinelnav.infrastructure.stores.memory_store import MemoryStore
from sentinelnav.main import app
from sentinelnav.services.monitoring import MonitoringOrchestrator

ADMIN_PASSWORD = "correct horse"
ADMIN_PASSWORD_HASH = generate_password_hash(ADMIN_PASSWORD)


def _network(request: httpx.Request) -> httpx.Response:
    if request.url.host == "down.example":
        return httpx.Response(503)
    return httpx.Response(200)


@pytest.fixture
async def store():
    instance = MemoryStore()
    await instance.initialize()
    return instance


@pytest.fixture
def issuer():
    return TokenIssuer("test-session-secret", "test-challenge-secret")


@pytest.fixture
async def client(store, issuer):
    prober = HttpProber(
        timeout_ms=1000,
        client=httpx.AsyncClient(transport=httpx.MockTransport(_network)),
    )
    app.state.store = store
    app.state.token_issuer = issuer
    app.state.orchestrator = MonitoringOrchestrator(store, prober)
    app.dependency_overrides[get_settings_dep] = lambda: Settings(
        admin_username="admin", admin_password_hash=ADMIN_PASSWORD_HASH,
    )
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(issuer):
    return {"Authorization": f"Bearer {issuer.issue_session('admin')}"}


@pytest.fixture
def admin_password():
    return ADMIN_PASSWORD
