"""Whole-document backend tests — file persistence, legacy documents, blob ETags.

Invariants:
    - FileStore survives a restart and never leaves temp files behind
    - Corrupt or unreadable documents surface as StoreUnavailableError
    - Legacy sites without categoryId are attached to the fallback on load
    - BlobStore writes are conditional; a lost race is StoreConflictError
"""

import json

import httpx
import pytest

from sentinelnav.core.domain_types import DEFAULT_CATEGORY_ID, Theme
from sentinelnav.core.errors import (
    StoreConflictError, StoreUnavailableError, ValidationError,
)
from sentinelnav.infrastructure.stores.blob_store import BlobStore
from sentinelnav.infrastructure.stores.document import DocumentStore
from sentinelnav.infrastructure.stores.file_store import FileStore
from sentinelnav.infrastructure.stores.memory_store import MemoryStore

BLOB_URL = "https://blob.test/sentinel.json"

LEGACY_DOCUMENT = {
    "websites": [
        {"id": "w1", "title": "Old", "url": "https://old.example", "status": "online",
         "lastChecked": 5},
    ],
    "categories": [],
}


# --- File ---------------------------------------------------------------------

async def test_file_store_persists_across_instances(tmp_path):
    path = tmp_path / "sentinel.json"
    first = FileStore(path)
    await first.initialize()
    site = await first.create_site({"title": "A", "url": "a.com"})
    await first.set_theme(Theme.VIBE)

    second = FileStore(path)
    await second.initialize()
    assert [s.id for s in await second.list_sites()] == [site.id]
    assert await second.get_theme() == Theme.VIBE


async def test_file_store_writes_camel_case_document(tmp_path):
    path = tmp_path / "sentinel.json"
    store = FileStore(path)
    await store.initialize()
    await store.create_site({"title": "A", "url": "a.com"})

    raw = json.loads(path.read_text(encoding="utf-8"))
    assert set(raw) == {"websites", "categories", "config"}
    assert raw["websites"][0]["categoryId"] == DEFAULT_CATEGORY_ID
    assert raw["websites"][0]["lastChecked"] == 0
    assert raw["config"] == {"theme": "minimal"}


async def test_file_store_leaves_no_temp_files(tmp_path):
    store = FileStore(tmp_path / "sentinel.json")
    await store.initialize()
    await store.create_site({"title": "A", "url": "a.com"})
    assert [p.name for p in tmp_path.iterdir()] == ["sentinel.json"]


async def test_corrupt_file_is_store_unavailable(tmp_path):
    path = tmp_path / "sentinel.json"
    path.write_text("{not json", encoding="utf-8")
    store = FileStore(path)
    with pytest.raises(StoreUnavailableError):
        await store.list_sites()
    assert await store.health_check() is False


async def test_failed_mutation_keeps_previous_file(tmp_path):
    path = tmp_path / "sentinel.json"
    store = FileStore(path)
    await store.initialize()
    before = path.read_text(encoding="utf-8")
    with pytest.raises(ValidationError):
        await store.create_site({"title": "", "url": "a.com"})
    assert path.read_text(encoding="utf-8") == before


# --- Legacy documents ---------------------------------------------------------

async def test_legacy_sites_attach_to_seeded_category():
    store = MemoryStore(LEGACY_DOCUMENT)
    await store.initialize()
    [site] = await store.list_sites()
    assert site.category_id == DEFAULT_CATEGORY_ID
    assert site.last_checked == 5


async def test_only_remaining_custom_category_cannot_be_deleted():
    store = MemoryStore({"websites": [], "categories": [{"id": "x", "name": "Only"}]})
    await store.initialize()
    assert await store.delete_category("x") is False
    assert [c.id for c in await store.list_categories()] == ["x"]


def test_document_store_without_save_hook_cannot_be_built():
    class ReadOnly(DocumentStore):
        async def _load(self):
            return None, None

    with pytest.raises(TypeError):
        ReadOnly()


async def test_memory_store_hands_out_copies():
    initial = {"websites": [], "categories": [{"id": "default", "name": "General"}]}
    store = MemoryStore(initial)
    await store.create_category("News")
    assert len(initial["categories"]) == 1


# --- Blob ---------------------------------------------------------------------

async def test_blob_first_write_requires_absent_object(object_server, blob_client):
    store = BlobStore(BLOB_URL, client=blob_client)
    await store.initialize()
    assert object_server.puts == 1
    assert object_server.document()["categories"][0]["id"] == DEFAULT_CATEGORY_ID


async def test_blob_unchanged_document_is_not_rewritten(object_server, blob_client):
    store = BlobStore(BLOB_URL, client=blob_client)
    await store.initialize()
    await store.initialize()
    await store.delete_site("nope")
    assert object_server.puts == 1


async def test_blob_lost_race_is_conflict(object_server, blob_client):
    store = BlobStore(BLOB_URL, client=blob_client)
    await store.initialize()

    object_server.race_next_put = True
    with pytest.raises(StoreConflictError) as exc:
        await store.create_site({"title": "A", "url": "a.com"})
    assert exc.value.http_status == 409
    assert isinstance(exc.value, StoreUnavailableError)


async def test_blob_server_error_is_unavailable(object_server, blob_client):
    store = BlobStore(BLOB_URL, client=blob_client)
    await store.initialize()
    object_server.fail_with = 500
    with pytest.raises(StoreUnavailableError) as exc:
        await store.list_sites()
    assert exc.value.code == "STORE_UNAVAILABLE"
    assert await store.health_check() is False


async def test_blob_sends_bearer_token():
    seen = []

    def handler(request):
        seen.append(request.headers.get("authorization"))
        return httpx.Response(404) if request.method == "GET" else httpx.Response(201)

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    store = BlobStore(BLOB_URL, token="secret", client=client)
    await store.initialize()
    await client.aclose()
    assert seen == ["Bearer secret", "Bearer secret"]


def test_blob_requires_url():
    with pytest.raises(StoreUnavailableError):
        BlobStore("")
