"""Store Factory — builds the configured PersistenceStore once at startup.

Invariants:
    - Exactly one backend per process, chosen by settings.store_backend
    - create_store() returns an initialized store (default category seeded)
    - Nothing outside this module branches on the backend identity
"""

import logging
from collections.abc import Callable

from sentinelnav.config import Settings
from sentinelnav.core.domain_types import StoreBackend
from sentinelnav.core.store_protocol import PersistenceStore
from sentinelnav.infrastructure.stores.blob_store import BlobStore
from sentinelnav.infrastructure.stores.file_store import FileStore
from sentinelnav.infrastructure.stores.memory_store import MemoryStore
from sentinelnav.infrastructure.stores.redis_store import RedisStore
from sentinelnav.infrastructure.stores.sql_store import SqlStore

logger = logging.getLogger(__name__)


def _build_sql(settings: Settings) -> SqlStore:
    return SqlStore(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        create_tables=settings.database_create_tables,
    )


def _build_blob(settings: Settings) -> BlobStore:
    return BlobStore(
        settings.blob_url,
        token=settings.blob_token,
        timeout_seconds=settings.blob_timeout_seconds,
    )


_BUILDERS: dict[StoreBackend, Callable[[Settings], PersistenceStore]] = {
    StoreBackend.MEMORY: lambda settings: MemoryStore(),
    StoreBackend.FILE: lambda settings: FileStore(settings.data_file),
    StoreBackend.SQL: _build_sql,
    StoreBackend.REDIS: lambda settings: RedisStore.from_url(
        settings.redis_url, settings.redis_key_prefix,
    ),
    StoreBackend.BLOB: _build_blob,
}


async def create_store(settings: Settings) -> PersistenceStore:
    """Construct and initialize the store selected by configuration."""
    backend = StoreBackend(settings.store_backend)
    store = _BUILDERS[backend](settings)
    try:
        await store.initialize()
    except Exception:
        await store.close()
        raise
    logger.info("Store ready", extra={"backend": backend.value})
    return store
