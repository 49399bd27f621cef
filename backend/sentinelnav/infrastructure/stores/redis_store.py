"""Redis Store — key-value backend over redis.asyncio hashes.

Keys (prefix defaults to "sentinel"):
    {prefix}:sites          hash  site id → site JSON
    {prefix}:site_ids       list  site ids in enumeration order
    {prefix}:categories     hash  category id → category JSON
    {prefix}:category_ids   list  category ids in enumeration order
    {prefix}:config         hash  "theme" → theme value

Invariants:
    - Reads fetch order list + hash in one MULTI/EXEC, so each read is a snapshot
    - Mutations WATCH every key they read and write in one MULTI/EXEC: the category
      cascade (reassign sites + remove category) and bulk import are each applied
      as a single unit
    - RedisError surfaces as StoreUnavailableError

Design Decisions:
    - Redis.transaction() re-runs the callable when a WATCHed key changed; that is
      optimistic concurrency control, not a retry of a failed operation
    - Client injectable so tests can run against fakeredis
"""

import json
import logging
from collections.abc import Iterable, Mapping
from contextlib import asynccontextmanager

import redis.asyncio as redis
from redis.exceptions import RedisError

from sentinelnav.core import site_rules
from sentinelnav.core.domain_types import Theme, DEFAULT_THEME
from sentinelnav.core.entities import Category, Site
from sentinelnav.core.errors import StoreUnavailableError

logger = logging.getLogger(__name__)


def _dump(entity: Site | Category) -> str:
    return json.dumps(entity.to_dict(), ensure_ascii=False)


def _ordered(ids: list[str], raw: dict[str, str], factory) -> list:
    return [factory(json.loads(raw[i])) for i in ids if i in raw]


class RedisStore:
    backend_name = "redis"

    def __init__(self, client: redis.Redis, key_prefix: str = "sentinel"):
        self._client = client
        self._sites = f"{key_prefix}:sites"
        self._site_ids = f"{key_prefix}:site_ids"
        self._categories = f"{key_prefix}:categories"
        self._category_ids = f"{key_prefix}:category_ids"
        self._config = f"{key_prefix}:config"

    @classmethod
    def from_url(cls, url: str, key_prefix: str = "sentinel") -> "RedisStore":
        return cls(redis.from_url(url, decode_responses=True), key_prefix)

    @asynccontextmanager
    async def _guard(self, operation: str):
        try:
            yield
        except RedisError as e:
            logger.error(f"Redis {operation} failed: {e}", extra={"backend": self.backend_name})
            raise StoreUnavailableError(str(e), operation, self.backend_name)

    async def _transaction(self, operation: str, func, *watches: str):
        async with self._guard(operation):
            return await self._client.transaction(
                func, *watches, value_from_callable=True,
            )

    async def initialize(self) -> None:
        async def seed(pipe) -> bool:
            if await pipe.hlen(self._categories):
                return False
            category = site_rules.default_category()
            pipe.multi()
            pipe.hset(self._categories, category.id, _dump(category))
            pipe.delete(self._category_ids)
            pipe.rpush(self._category_ids, category.id)
            return True

        if await self._transaction("initialize", seed, self._categories, self._category_ids):
            logger.info("Seeded default category", extra={"backend": self.backend_name})

    async def close(self) -> None:
        await self._client.aclose()

    async def health_check(self) -> bool:
        try:
            return bool(await self._client.ping())
        except RedisError as e:
            logger.error(f"Redis health check failed: {e}", extra={"backend": self.backend_name})
            return False

    async def _read_categories(self, pipe) -> list[Category]:
        ids = await pipe.lrange(self._category_ids, 0, -1)
        raw = await pipe.hgetall(self._categories)
        return site_rules.seed_categories(_ordered(ids, raw, Category.from_dict))

    # ─── Sites ───────────────────────────────────────────────────

    async def list_sites(self) -> list[Site]:
        async with self._guard("read"):
            async with self._client.pipeline(transaction=True) as pipe:
                pipe.lrange(self._site_ids, 0, -1)
                pipe.hgetall(self._sites)
                ids, raw = await pipe.execute()
        return _ordered(ids, raw, Site.from_dict)

    async def create_site(self, fields: Mapping[str, object]) -> Site:
        async def create(pipe) -> Site:
            categories = await self._read_categories(pipe)
            category_id = site_rules.resolve_category_id(fields.get("category_id"), categories)
            site = site_rules.new_site(fields, category_id)
            pipe.multi()
            pipe.hset(self._sites, site.id, _dump(site))
            pipe.rpush(self._site_ids, site.id)
            return site

        return await self._transaction(
            "write", create, self._categories, self._category_ids,
        )

    async def update_site(self, site_id: str, updates: Mapping[str, object]) -> bool:
        cleaned = site_rules.clean_updates(updates)

        async def apply(pipe) -> bool:
            raw = await pipe.hget(self._sites, site_id)
            if raw is None:
                return False
            if "category_id" in cleaned:
                site_rules.check_category_reference(cleaned, await self._read_categories(pipe))
            updated = site_rules.apply_site_updates(Site.from_dict(json.loads(raw)), cleaned)
            pipe.multi()
            pipe.hset(self._sites, site_id, _dump(updated))
            return True

        return await self._transaction(
            "write", apply, self._sites, self._categories, self._category_ids,
        )

    async def delete_site(self, site_id: str) -> bool:
        async def remove(pipe) -> bool:
            if not await pipe.hexists(self._sites, site_id):
                return False
            pipe.multi()
            pipe.hdel(self._sites, site_id)
            pipe.lrem(self._site_ids, 0, site_id)
            return True

        return await self._transaction("write", remove, self._sites, self._site_ids)

    async def import_sites(self, entries: Iterable[Mapping[str, object]]) -> int:
        pending = list(entries)

        async def load(pipe) -> int:
            created, sites = site_rules.plan_import(pending, await self._read_categories(pipe))
            pipe.multi()
            for category in created:
                pipe.hset(self._categories, category.id, _dump(category))
                pipe.rpush(self._category_ids, category.id)
            for site in sites:
                pipe.hset(self._sites, site.id, _dump(site))
                pipe.rpush(self._site_ids, site.id)
            return len(sites)

        return await self._transaction(
            "write", load, self._categories, self._category_ids, self._site_ids,
        )

    # ─── Categories ──────────────────────────────────────────────

    async def list_categories(self) -> list[Category]:
        async with self._guard("read"):
            async with self._client.pipeline(transaction=True) as pipe:
                pipe.lrange(self._category_ids, 0, -1)
                pipe.hgetall(self._categories)
                ids, raw = await pipe.execute()
        return site_rules.seed_categories(_ordered(ids, raw, Category.from_dict))

    async def create_category(self, name: str) -> Category:
        category = site_rules.new_category(name)
        async with self._guard("write"):
            async with self._client.pipeline(transaction=True) as pipe:
                pipe.hset(self._categories, category.id, _dump(category))
                pipe.rpush(self._category_ids, category.id)
                await pipe.execute()
        return category

    async def rename_category(self, category_id: str, name: str) -> bool:
        new_name = site_rules.require_text(name, "name")

        async def rename(pipe) -> bool:
            if not await pipe.hexists(self._categories, category_id):
                return False
            pipe.multi()
            pipe.hset(self._categories, category_id, _dump(Category(category_id, new_name)))
            return True

        return await self._transaction("write", rename, self._categories)

    async def delete_category(self, category_id: str) -> bool:
        async def cascade(pipe) -> str | None:
            categories = await self._read_categories(pipe)
            if not site_rules.can_delete_category(categories, category_id):
                return None
            fallback = site_rules.fallback_category(categories, excluding=category_id)
            raw_sites = await pipe.hgetall(self._sites)
            affected = [
                site for site in (Site.from_dict(json.loads(v)) for v in raw_sites.values())
                if site.category_id == category_id
            ]
            pipe.multi()
            for site in site_rules.reassign_sites(affected, category_id, fallback.id):
                pipe.hset(self._sites, site.id, _dump(site))
            pipe.hdel(self._categories, category_id)
            pipe.lrem(self._category_ids, 0, category_id)
            return fallback.id

        fallback_id = await self._transaction(
            "write", cascade, self._sites, self._categories, self._category_ids,
        )
        if fallback_id is None:
            return False
        logger.info(
            f"Deleted category, sites moved to '{fallback_id}'",
            extra={"category_id": category_id, "backend": self.backend_name},
        )
        return True

    # ─── Theme ───────────────────────────────────────────────────

    async def get_theme(self) -> Theme:
        async with self._guard("read"):
            value = await self._client.hget(self._config, "theme")
        try:
            return Theme(value) if value else DEFAULT_THEME
        except ValueError:
            return DEFAULT_THEME

    async def set_theme(self, theme: Theme) -> None:
        async with self._guard("write"):
            await self._client.hset(self._config, "theme", Theme(theme).value)
