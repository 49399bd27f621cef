"""Store factory tests — settings select exactly one initialized backend."""

import pytest

from sentinelnav.config import Settings
from sentinelnav.core.domain_types import DEFAULT_CATEGORY_ID
from sentinelnav.core.errors import StoreUnavailableError
from sentinelnav.infrastructure.stores import create_store
from sentinelnav.infrastructure.stores.file_store import FileStore
from sentinelnav.infrastructure.stores.memory_store import MemoryStore
from sentinelnav.infrastructure.stores.sql_store import SqlStore


async def test_memory_backend_by_default():
    store = await create_store(Settings(store_backend="memory"))
    assert isinstance(store, MemoryStore)
    assert [c.id for c in await store.list_categories()] == [DEFAULT_CATEGORY_ID]


async def test_file_backend(tmp_path):
    store = await create_store(
        Settings(store_backend="file", data_file=str(tmp_path / "s.json")),
    )
    assert isinstance(store, FileStore)
    assert (tmp_path / "s.json").exists()


async def test_sql_backend(tmp_path):
    store = await create_store(Settings(
        store_backend="sql", database_url=f"sqlite+aiosqlite:///{tmp_path / 's.db'}",
    ))
    try:
        assert isinstance(store, SqlStore)
        assert await store.health_check() is True
    finally:
        await store.close()


async def test_blob_backend_without_url_fails():
    with pytest.raises(StoreUnavailableError):
        await create_store(Settings(store_backend="blob", blob_url=""))


def test_postgres_url_rewritten_for_asyncpg():
    settings = Settings(database_url="postgresql://u:p@db/sentinel")
    assert settings.database_url == "postgresql+asyncpg://u:p@db/sentinel"
