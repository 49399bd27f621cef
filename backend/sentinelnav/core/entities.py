"""Entities — Site, Category and the whole-store document.

Invariants:
    - Entities are frozen: every change produces a new instance (dataclasses.replace)
    - to_dict() emits the camelCase document form used by the JSON-backed stores
    - from_dict() accepts documents written by older versions (missing optional keys)
"""

from dataclasses import dataclass, field

from sentinelnav.core.domain_types import (
    CategoryId, SiteId, SiteStatus, Theme, DEFAULT_THEME,
)


@dataclass(frozen=True)
class Category:
    id: CategoryId
    name: str

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name}

    @classmethod
    def from_dict(cls, data: dict) -> "Category":
        return cls(id=CategoryId(str(data["id"])), name=str(data.get("name", "")))


@dataclass(frozen=True)
class Site:
    """A monitored external URL with display metadata and reachability status."""
    id: SiteId
    title: str
    url: str
    category_id: CategoryId
    description: str | None = None
    icon_url: str | None = None
    status: SiteStatus = SiteStatus.UNKNOWN
    last_checked: int = 0
    latency: int | None = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "url": self.url,
            "description": self.description,
            "iconUrl": self.icon_url,
            "status": self.status.value,
            "lastChecked": self.last_checked,
            "latency": self.latency,
            "categoryId": self.category_id,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Site":
        latency = data.get("latency")
        return cls(
            id=SiteId(str(data["id"])),
            title=str(data.get("title", "")),
            url=str(data.get("url", "")),
            category_id=CategoryId(str(data.get("categoryId") or "")),
            description=data.get("description"),
            icon_url=data.get("iconUrl"),
            status=SiteStatus(data.get("status") or SiteStatus.UNKNOWN.value),
            last_checked=int(data.get("lastChecked") or 0),
            latency=int(latency) if latency is not None else None,
        )


@dataclass
class StoreDocument:
    """Everything a whole-document backend persists, in enumeration order."""
    sites: list[Site] = field(default_factory=list)
    categories: list[Category] = field(default_factory=list)
    theme: Theme = DEFAULT_THEME

    def to_dict(self) -> dict:
        return {
            "websites": [s.to_dict() for s in self.sites],
            "categories": [c.to_dict() for c in self.categories],
            "config": {"theme": self.theme.value},
        }

    @classmethod
    def from_dict(cls, data: dict | None) -> "StoreDocument":
        if not data:
            return cls()
        config = data.get("config") or {}
        try:
            theme = Theme(config.get("theme", DEFAULT_THEME.value))
        except ValueError:
            theme = DEFAULT_THEME
        return cls(
            sites=[Site.from_dict(s) for s in data.get("websites") or []],
            categories=[Category.from_dict(c) for c in data.get("categories") or []],
            theme=theme,
        )
