"""Store fixtures — every PersistenceStore backend behind one parametrized fixture.

Invariants:
    - Each test gets a fresh, initialized store (default category seeded)
    - No external services: SQLite file in tmp_path, fakeredis, httpx.MockTransport

Design Decisions:
    - FakeObjectServer mimics an ETag-aware object store (GET/PUT, If-Match,
      If-None-Match) so the blob backend exercises its conditional writes
"""

import json

import fakeredis
import httpx
import pytest

from sentinelnav.infrastructure.stores.blob_store import BlobStore
from sentinelnav.infrastructure.stores.file_store import FileStore
from sentinelnav.infrastructure.stores.memory_store import MemoryStore
from sentinelnav.infrastructure.stores.redis_store import RedisStore
from sentinelnav.infrastructure.stores.sql_store import SqlStore

BLOB_URL = "https://blob.test/sentinel.json"


class FakeObjectServer:
    """Single-object HTTP store with strong ETags."""

    def __init__(self):
        self.body: bytes | None = None
        self.version = 0
        self.puts = 0
        self.fail_with: int | None = None
        self.race_next_put = False

    @property
    def etag(self) -> str:
        return f'"v{self.version}"'

    def handler(self, request: httpx.Request) -> httpx.Response:
        if self.fail_with is not None:
            return httpx.Response(self.fail_with)
        if request.method == "GET":
            if self.body is None:
                return httpx.Response(404)
            return httpx.Response(200, content=self.body, headers={
                "ETag": self.etag, "Content-Type": "application/json",
            })
        if request.method == "PUT":
            if self.race_next_put:
                self.race_next_put = False
                self.version += 1
            if_match = request.headers.get("if-match")
            if_none_match = request.headers.get("if-none-match")
            if if_none_match == "*" and self.body is not None:
                return httpx.Response(412)
            if if_match is not None and if_match != self.etag:
                return httpx.Response(412)
            self.body = request.content
            self.version += 1
            self.puts += 1
            return httpx.Response(200, headers={"ETag": self.etag})
        return httpx.Response(405)

    def document(self) -> dict:
        return json.loads(self.body)


@pytest.fixture
def object_server():
    return FakeObjectServer()


@pytest.fixture
async def blob_client(object_server):
    client = httpx.AsyncClient(transport=httpx.MockTransport(object_server.handler))
    yield client
    await client.aclose()


@pytest.fixture
def redis_client():
    return fakeredis.FakeAsyncRedis(server=fakeredis.FakeServer(), decode_responses=True)


def build_store(backend: str, tmp_path, redis_client, blob_client):
    if backend == "memory":
        return MemoryStore()
    if backend == "file":
        return FileStore(tmp_path / "data" / "sentinel.json")
    if backend == "sql":
        return SqlStore(f"sqlite+aiosqlite:///{tmp_path / 'sentinel.db'}")
    if backend == "redis":
        return RedisStore(redis_client, key_prefix="test")
    if backend == "blob":
        return BlobStore(BLOB_URL, client=blob_client)
    raise ValueError(backend)


@pytest.fixture(params=["memory", "file", "sql", "redis", "blob"])
async def store(request, tmp_path, redis_client, blob_client):
    instance = build_store(request.param, tmp_path, redis_client, blob_client)
    await instance.initialize()
    yield instance
    await instance.close()
