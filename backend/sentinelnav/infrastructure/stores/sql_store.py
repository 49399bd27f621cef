"""SQL Store — relational backend over SQLAlchemy 2.0 async (SQLite, PostgreSQL).

Invariants:
    - Every mutation runs in exactly one transaction (session.begin())
    - import_sites: new categories and sites in ONE transaction
    - delete_category: reassign sites + delete category in ONE transaction; any failure
      rolls both back, so no committed state ever has a site pointing at a deleted category
    - Enumeration order = seq (insertion order)
    - SQLAlchemy failures surface as StoreUnavailableError via DatabaseSessionManager

Design Decisions:
    - Business rules come from core/site_rules.py; rows are converted to entities at the edge
    - Tables are created on initialize() when create_tables is set; Alembic migrations
      (backend/alembic) cover managed deployments
"""

import logging
from collections.abc import Iterable, Mapping

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from sentinelnav.core import site_rules
from sentinelnav.core.domain_types import CategoryId, SiteId, SiteStatus, Theme, DEFAULT_THEME
from sentinelnav.core.entities import Category, Site
from sentinelnav.db.base import Base
from sentinelnav.infrastructure.database import DatabaseSessionManager
from sentinelnav.models import CategoryRecord, ConfigEntry, SiteRecord

logger = logging.getLogger(__name__)

_THEME_KEY = "theme"


def _to_site(row: SiteRecord) -> Site:
    return Site(
        id=SiteId(row.id),
        title=row.title,
        url=row.url,
        category_id=CategoryId(row.category_id),
        description=row.description,
        icon_url=row.icon_url,
        status=SiteStatus(row.status),
        last_checked=row.last_checked,
        latency=row.latency,
    )


def _to_category(row: CategoryRecord) -> Category:
    return Category(id=CategoryId(row.id), name=row.name)


def _to_record(site: Site) -> SiteRecord:
    return SiteRecord(
        id=site.id,
        title=site.title,
        url=site.url,
        description=site.description,
        icon_url=site.icon_url,
        status=site.status.value,
        last_checked=site.last_checked,
        latency=site.latency,
        category_id=site.category_id,
    )


class SqlStore:
    backend_name = "sql"

    def __init__(
        self,
        database_url: str,
        pool_size: int = 20,
        max_overflow: int = 10,
        create_tables: bool = True,
    ):
        self._db = DatabaseSessionManager(
            database_url, pool_size=pool_size, max_overflow=max_overflow,
        )
        self._create_tables = create_tables

    async def initialize(self) -> None:
        if self._create_tables:
            await self._db.create_tables(Base.metadata)
        async with self._db.session() as db:
            async with db.begin():
                count = await db.scalar(select(func.count()).select_from(CategoryRecord))
                if not count:
                    seed = site_rules.default_category()
                    db.add(CategoryRecord(id=seed.id, name=seed.name))
                    logger.info("Seeded default category", extra={"backend": self.backend_name})

    async def close(self) -> None:
        await self._db.dispose()

    async def health_check(self) -> bool:
        return await self._db.health_check()

    async def _categories(self, db: AsyncSession) -> list[Category]:
        rows = await db.scalars(select(CategoryRecord).order_by(CategoryRecord.seq))
        return [_to_category(r) for r in rows]

    async def _site_row(self, db: AsyncSession, site_id: str) -> SiteRecord | None:
        return await db.scalar(select(SiteRecord).where(SiteRecord.id == site_id))

    # ─── Sites ───────────────────────────────────────────────────

    async def list_sites(self) -> list[Site]:
        async with self._db.session() as db:
            rows = await db.scalars(select(SiteRecord).order_by(SiteRecord.seq))
            return [_to_site(r) for r in rows]

    async def create_site(self, fields: Mapping[str, object]) -> Site:
        async with self._db.session() as db:
            async with db.begin():
                categories = await self._categories(db)
                category_id = site_rules.resolve_category_id(
                    fields.get("category_id"), categories,
                )
                site = site_rules.new_site(fields, category_id)
                db.add(_to_record(site))
        return site

    async def update_site(self, site_id: str, updates: Mapping[str, object]) -> bool:
        cleaned = site_rules.clean_updates(updates)
        async with self._db.session() as db:
            async with db.begin():
                row = await self._site_row(db, site_id)
                if row is None:
                    return False
                if "category_id" in cleaned:
                    site_rules.check_category_reference(cleaned, await self._categories(db))
                updated = site_rules.apply_site_updates(_to_site(row), cleaned)
                row.title = updated.title
                row.url = updated.url
                row.description = updated.description
                row.icon_url = updated.icon_url
                row.status = updated.status.value
                row.last_checked = updated.last_checked
                row.latency = updated.latency
                row.category_id = updated.category_id
        return True

    async def delete_site(self, site_id: str) -> bool:
        async with self._db.session() as db:
            async with db.begin():
                result = await db.execute(delete(SiteRecord).where(SiteRecord.id == site_id))
        return result.rowcount > 0

    async def import_sites(self, entries: Iterable[Mapping[str, object]]) -> int:
        async with self._db.session() as db:
            async with db.begin():
                created, sites = site_rules.plan_import(entries, await self._categories(db))
                db.add_all(CategoryRecord(id=c.id, name=c.name) for c in created)
                # categories must exist before sites reference them
                await db.flush()
                db.add_all(_to_record(s) for s in sites)
        return len(sites)

    # ─── Categories ──────────────────────────────────────────────

    async def list_categories(self) -> list[Category]:
        async with self._db.session() as db:
            return await self._categories(db)

    async def create_category(self, name: str) -> Category:
        category = site_rules.new_category(name)
        async with self._db.session() as db:
            async with db.begin():
                db.add(CategoryRecord(id=category.id, name=category.name))
        return category

    async def rename_category(self, category_id: str, name: str) -> bool:
        new_name = site_rules.require_text(name, "name")
        async with self._db.session() as db:
            async with db.begin():
                result = await db.execute(
                    update(CategoryRecord)
                    .where(CategoryRecord.id == category_id)
                    .values(name=new_name),
                )
        return result.rowcount > 0

    async def delete_category(self, category_id: str) -> bool:
        async with self._db.session() as db:
            async with db.begin():
                categories = await self._categories(db)
                if not site_rules.can_delete_category(categories, category_id):
                    return False
                fallback = site_rules.fallback_category(categories, excluding=category_id)
                await db.execute(
                    update(SiteRecord)
                    .where(SiteRecord.category_id == category_id)
                    .values(category_id=fallback.id),
                )
                await db.execute(
                    delete(CategoryRecord).where(CategoryRecord.id == category_id),
                )
        logger.info(
            f"Deleted category, sites moved to '{fallback.id}'",
            extra={"category_id": category_id, "backend": self.backend_name},
        )
        return True

    # ─── Theme ───────────────────────────────────────────────────

    async def get_theme(self) -> Theme:
        async with self._db.session() as db:
            value = await db.scalar(
                select(ConfigEntry.value).where(ConfigEntry.key == _THEME_KEY),
            )
        try:
            return Theme(value) if value else DEFAULT_THEME
        except ValueError:
            return DEFAULT_THEME

    async def set_theme(self, theme: Theme) -> None:
        value = Theme(theme).value
        async with self._db.session() as db:
            async with db.begin():
                entry = await db.get(ConfigEntry, _THEME_KEY)
                if entry is None:
                    db.add(ConfigEntry(key=_THEME_KEY, value=value))
                else:
                    entry.value = value
