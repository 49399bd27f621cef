"""Whole-Document Store — shared logic for backends that persist one JSON document.

Invariants:
    - Every mutation is read → modify → single write of the ENTIRE document,
      serialized by one asyncio.Lock per store instance
    - A mutation that raises never writes: the previous document stays in place
    - Readers see either the previous or the next document, never a mix
      (the category cascade is one write)
    - Loaded documents are repaired in memory: categories seeded, orphan sites attached

Design Decisions:
    - Subclasses only implement _load/_save; semantics live here and in core/site_rules.py
    - _load returns an opaque version (ETag for blob) handed back to _save so remote
      backends can make the write conditional
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator, Iterable, Mapping
from contextlib import asynccontextmanager
from dataclasses import replace

from sentinelnav.core import site_rules
from sentinelnav.core.domain_types import Theme
from sentinelnav.core.entities import Category, Site, StoreDocument

logger = logging.getLogger(__name__)


class DocumentStore(ABC):
    """Base class: PersistenceStore over a single serialized document."""

    backend_name = "document"

    def __init__(self):
        self._lock = asyncio.Lock()

    # ─── Backend hooks ───────────────────────────────────────────

    @abstractmethod
    async def _load(self) -> tuple[dict | None, str | None]:
        """Return (raw document or None when absent, version)."""

    @abstractmethod
    async def _save(self, raw: dict, version: str | None) -> None: ...

    async def close(self) -> None:
        return None

    async def health_check(self) -> bool:
        try:
            await self._load()
            return True
        except Exception as e:
            logger.error(f"Store health check failed: {e}", extra={"backend": self.backend_name})
            return False

    # ─── Document plumbing ───────────────────────────────────────

    async def _read(self) -> tuple[StoreDocument, str | None]:
        raw, version = await self._load()
        return _repair(raw), version

    @asynccontextmanager
    async def _mutate(self) -> AsyncIterator[StoreDocument]:
        async with self._lock:
            raw, version = await self._load()
            doc = _repair(raw)
            yield doc
            updated = doc.to_dict()
            if updated != raw:
                await self._save(updated, version)

    async def initialize(self) -> None:
        async with self._lock:
            raw, version = await self._load()
            if raw and raw.get("categories"):
                return
            await self._save(_repair(raw).to_dict(), version)
        logger.info("Seeded default category", extra={"backend": self.backend_name})

    # ─── Sites ───────────────────────────────────────────────────

    async def list_sites(self) -> list[Site]:
        doc, _ = await self._read()
        return doc.sites

    async def create_site(self, fields: Mapping[str, object]) -> Site:
        async with self._mutate() as doc:
            category_id = site_rules.resolve_category_id(
                fields.get("category_id"), doc.categories,
            )
            site = site_rules.new_site(fields, category_id)
            doc.sites.append(site)
        return site

    async def update_site(self, site_id: str, updates: Mapping[str, object]) -> bool:
        cleaned = site_rules.clean_updates(updates)
        async with self._mutate() as doc:
            index = _index_of(doc.sites, site_id)
            if index is None:
                return False
            site_rules.check_category_reference(cleaned, doc.categories)
            doc.sites[index] = site_rules.apply_site_updates(doc.sites[index], cleaned)
        return True

    async def delete_site(self, site_id: str) -> bool:
        async with self._mutate() as doc:
            index = _index_of(doc.sites, site_id)
            if index is None:
                return False
            del doc.sites[index]
        return True

    async def import_sites(self, entries: Iterable[Mapping[str, object]]) -> int:
        async with self._mutate() as doc:
            created, sites = site_rules.plan_import(entries, doc.categories)
            doc.categories.extend(created)
            doc.sites.extend(sites)
        return len(sites)

    # ─── Categories ──────────────────────────────────────────────

    async def list_categories(self) -> list[Category]:
        doc, _ = await self._read()
        return doc.categories

    async def create_category(self, name: str) -> Category:
        async with self._mutate() as doc:
            category = site_rules.new_category(name)
            doc.categories.append(category)
        return category

    async def rename_category(self, category_id: str, name: str) -> bool:
        new_name = site_rules.require_text(name, "name")
        async with self._mutate() as doc:
            index = _index_of(doc.categories, category_id)
            if index is None:
                return False
            doc.categories[index] = replace(doc.categories[index], name=new_name)
        return True

    async def delete_category(self, category_id: str) -> bool:
        async with self._mutate() as doc:
            if not site_rules.can_delete_category(doc.categories, category_id):
                return False
            fallback = site_rules.fallback_category(doc.categories, excluding=category_id)
            doc.sites = site_rules.reassign_sites(doc.sites, category_id, fallback.id)
            doc.categories = [c for c in doc.categories if c.id != category_id]
        logger.info(
            f"Deleted category, sites moved to '{fallback.id}'",
            extra={"category_id": category_id, "backend": self.backend_name},
        )
        return True

    # ─── Theme ───────────────────────────────────────────────────

    async def get_theme(self) -> Theme:
        doc, _ = await self._read()
        return doc.theme

    async def set_theme(self, theme: Theme) -> None:
        async with self._mutate() as doc:
            doc.theme = Theme(theme)


def _repair(raw: dict | None) -> StoreDocument:
    doc = StoreDocument.from_dict(raw)
    doc.categories = site_rules.seed_categories(doc.categories)
    doc.sites = site_rules.attach_orphans(doc.sites, doc.categories)
    return doc


def _index_of(items: list, item_id: str) -> int | None:
    for index, item in enumerate(items):
        if item.id == item_id:
            return index
    return None
