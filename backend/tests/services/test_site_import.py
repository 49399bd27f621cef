"""Bulk import tests — skipping incomplete entries and category resolution by name."""

from sentinelnav.core.domain_types import DEFAULT_CATEGORY_ID
from sentinelnav.services.site_import import import_sites


async def test_import_creates_missing_category_by_name(store):
    count = await import_sites(store, [
        {"title": "A", "url": "a.com", "category_name": "Tools"},
    ])

    assert count == 1
    tools = [c for c in await store.list_categories() if c.name == "Tools"]
    assert len(tools) == 1
    [site] = await store.list_sites()
    assert site.category_id == tools[0].id


async def test_import_reuses_category_case_insensitively(store):
    existing = await store.create_category("Tools")

    await import_sites(store, [
        {"title": "A", "url": "a.com", "category_name": "tools"},
        {"title": "B", "url": "b.com", "category_name": "TOOLS"},
    ])

    assert len(await store.list_categories()) == 2
    assert {s.category_id for s in await store.list_sites()} == {existing.id}


async def test_import_creates_each_new_name_once(store):
    await import_sites(store, [
        {"title": "A", "url": "a.com", "category_name": "Tools"},
        {"title": "B", "url": "b.com", "category_name": "Tools"},
    ])
    names = [c.name for c in await store.list_categories()]
    assert names.count("Tools") == 1


async def test_import_prefers_resolvable_category_id(store):
    news = await store.create_category("News")
    await import_sites(store, [
        {"title": "A", "url": "a.com", "category_id": news.id, "category_name": "Tools"},
    ])
    [site] = await store.list_sites()
    assert site.category_id == news.id
    assert "Tools" not in [c.name for c in await store.list_categories()]


async def test_import_skips_entries_without_title_or_url(store):
    count = await import_sites(store, [
        {"title": "A"},
        {"url": "b.com"},
        {"title": "  ", "url": "c.com"},
        {"title": "D", "url": "d.com"},
    ])
    assert count == 1
    assert [s.title for s in await store.list_sites()] == ["D"]


async def test_import_without_category_uses_fallback(store):
    await import_sites(store, [{"title": "A", "url": "a.com"}])
    [site] = await store.list_sites()
    assert site.category_id == DEFAULT_CATEGORY_ID


async def test_import_assigns_fresh_ids_and_resets_status(store):
    await import_sites(store, [
        {"title": "A", "url": "a.com", "id": "old-id", "status": "online"},
    ])
    [site] = await store.list_sites()
    assert site.id != "old-id"
    assert site.status.value == "unknown"


async def test_import_accepts_a_generator(store):
    entries = ({"title": t, "url": f"{t.lower()}.com"} for t in ["A", "B"])
    assert await import_sites(store, entries) == 2
    assert [s.title for s in await store.list_sites()] == ["A", "B"]
