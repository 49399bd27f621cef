"""Site & Category Rules — the backend-independent part of every store operation.

Invariants:
    - All functions are PURE: no IO, no async, no side effects
    - Validation raises ValidationError before a caller mutates anything
    - A site built or updated here always carries a normalized url (scheme present)
    - Fallback category = first category in enumeration order other than the excluded one
    - The default category is never deletable; neither is the last remaining category

Design Decisions:
    - Every backend calls these functions instead of re-implementing the rules, so
      the memory, file, SQL, Redis and blob stores agree on semantics
    - None in an update means "field absent": update never clears a field it was not given
"""

import re
import uuid
from collections.abc import Callable, Iterable, Mapping
from dataclasses import replace
from urllib.parse import urlsplit

from sentinelnav.core.domain_types import (
    CategoryId, SiteId, SiteStatus,
    DEFAULT_CATEGORY_ID, DEFAULT_CATEGORY_NAME,
)
from sentinelnav.core.entities import Category, Site
from sentinelnav.core.errors import ValidationError

_SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.\-]*://")

SITE_UPDATABLE_FIELDS = frozenset({
    "title", "url", "description", "icon_url",
    "status", "last_checked", "latency", "category_id",
})


def new_id() -> str:
    return str(uuid.uuid4())


# ─── Field Validation ────────────────────────────────────────────

def require_text(value: object, field: str) -> str:
    """Return value stripped, or raise if it is missing or blank."""
    if value is None or not isinstance(value, str) or not value.strip():
        raise ValidationError(f"Missing {field}", field)
    return value.strip()


def normalize_url(url: object) -> str:
    """Strip and ensure a scheme: 'example.com' -> 'https://example.com'."""
    text = require_text(url, "url")
    if not _SCHEME_RE.match(text):
        text = f"https://{text}"
    return text


def favicon_url(url: str) -> str | None:
    """Conventional favicon location for a site, or None if url has no host."""
    parts = urlsplit(url)
    if not parts.scheme or not parts.netloc:
        return None
    return f"{parts.scheme}://{parts.netloc}/favicon.ico"


def _non_negative_int(value: object, field: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValidationError(f"{field} must be a non-negative integer", field)
    return value


def _coerce_update(key: str, value: object) -> object:
    if key == "title":
        return require_text(value, "title")
    if key == "url":
        return normalize_url(value)
    if key == "status":
        try:
            return SiteStatus(value)
        except ValueError:
            raise ValidationError(f"Unknown status '{value}'", "status")
    if key in ("last_checked", "latency"):
        return _non_negative_int(value, key)
    if key == "category_id":
        return CategoryId(require_text(value, "category_id"))
    return value


# ─── Sites ───────────────────────────────────────────────────────

def new_site(
    fields: Mapping[str, object],
    category_id: CategoryId,
    id_factory: Callable[[], str] = new_id,
) -> Site:
    """Build a fresh site: status unknown, never checked, category already resolved."""
    title = require_text(fields.get("title"), "title")
    url = normalize_url(fields.get("url"))
    icon_url = fields.get("icon_url") or favicon_url(url)
    return Site(
        id=SiteId(id_factory()),
        title=title,
        url=url,
        category_id=category_id,
        description=fields.get("description") or None,
        icon_url=icon_url,
        status=SiteStatus.UNKNOWN,
        last_checked=0,
        latency=None,
    )


def clean_updates(updates: Mapping[str, object]) -> dict[str, object]:
    """Drop absent (None) fields and validate the rest."""
    unknown = set(updates) - SITE_UPDATABLE_FIELDS
    if unknown:
        field = sorted(unknown)[0]
        raise ValidationError(f"Field '{field}' cannot be updated", field)
    return {
        key: _coerce_update(key, value)
        for key, value in updates.items()
        if value is not None
    }


def apply_site_updates(site: Site, updates: Mapping[str, object]) -> Site:
    """Return site with only the given fields changed."""
    cleaned = clean_updates(updates)
    return replace(site, **cleaned) if cleaned else site


def check_category_reference(
    updates: Mapping[str, object], categories: Iterable[Category],
) -> None:
    """An explicit category_id in an update must name an existing category."""
    category_id = updates.get("category_id")
    if category_id is None:
        return
    if category_id not in {c.id for c in categories}:
        raise ValidationError(f"Category '{category_id}' does not exist", "category_id")


# ─── Categories ──────────────────────────────────────────────────

def default_category() -> Category:
    return Category(id=DEFAULT_CATEGORY_ID, name=DEFAULT_CATEGORY_NAME)


def seed_categories(categories: list[Category]) -> list[Category]:
    """A store never has zero categories."""
    return categories if categories else [default_category()]


def new_category(name: object, id_factory: Callable[[], str] = new_id) -> Category:
    return Category(id=CategoryId(id_factory()), name=require_text(name, "name"))


def fallback_category(
    categories: Iterable[Category], excluding: str | None = None,
) -> Category | None:
    for category in categories:
        if category.id != excluding:
            return category
    return None


def resolve_category_id(
    requested: object, categories: list[Category],
) -> CategoryId:
    """Requested id if it resolves, else the fallback category."""
    if requested and any(c.id == requested for c in categories):
        return CategoryId(str(requested))
    fallback = fallback_category(categories)
    if fallback is None:
        raise ValidationError("No category available", "category_id")
    return fallback.id


def can_delete_category(categories: list[Category], category_id: str) -> bool:
    if category_id == DEFAULT_CATEGORY_ID:
        return False
    if not any(c.id == category_id for c in categories):
        return False
    return len(categories) > 1


def reassign_sites(
    sites: Iterable[Site], from_id: str, to_id: CategoryId,
) -> list[Site]:
    return [
        replace(s, category_id=to_id) if s.category_id == from_id else s
        for s in sites
    ]


def attach_orphans(sites: Iterable[Site], categories: list[Category]) -> list[Site]:
    """Point sites with a missing or dangling category at the fallback."""
    known = {c.id for c in categories}
    fallback = fallback_category(categories)
    if fallback is None:
        return list(sites)
    return [
        s if s.category_id in known else replace(s, category_id=fallback.id)
        for s in sites
    ]


def match_category_by_name(
    categories: Iterable[Category], name: str,
) -> Category | None:
    """First category whose name matches case-insensitively."""
    wanted = name.strip().casefold()
    for category in categories:
        if category.name.strip().casefold() == wanted:
            return category
    return None


# ─── Bulk Import ─────────────────────────────────────────────────

def _has_text(value: object) -> bool:
    return isinstance(value, str) and bool(value.strip())


def plan_import(
    entries: Iterable[Mapping[str, object]], categories: list[Category],
) -> tuple[list[Category], list[Site]]:
    """Categories to create and sites to add for an import, without touching a store.

    Entries missing a title or url are skipped. category_id wins when it
    resolves; otherwise category_name is matched case-insensitively (first
    match) or planned as a new category, once per distinct name.
    """
    known = list(categories)
    created: list[Category] = []
    sites: list[Site] = []
    for entry in entries:
        if not _has_text(entry.get("title")) or not _has_text(entry.get("url")):
            continue
        requested = entry.get("category_id")
        name = entry.get("category_name")
        if requested and any(c.id == requested for c in known):
            category_id = CategoryId(str(requested))
        elif _has_text(name):
            match = match_category_by_name(known, name)
            if match is None:
                match = new_category(name)
                known.append(match)
                created.append(match)
            category_id = match.id
        else:
            category_id = resolve_category_id(None, known)
        sites.append(new_site(entry, category_id))
    return created, sites
