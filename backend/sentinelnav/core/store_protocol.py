"""Boundary Protocols — the persistence contract between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - Every backend (memory, file, SQL, Redis, blob) implements PersistenceStore exactly
    - IO failures surface as StoreUnavailableError; nothing is retried inside a store
    - delete_category reassigns sites and removes the category as one observable unit
    - import_sites adds its new categories and sites as one unit, or nothing at all

Design Decisions:
    - Protocol over ABC: backends share no mandatory base class
    - Field mappings use snake_case keys (title, url, description, icon_url,
      status, last_checked, latency, category_id)
"""

from collections.abc import Iterable, Mapping
from typing import Protocol

from sentinelnav.core.domain_types import Theme
from sentinelnav.core.entities import Category, Site


class PersistenceStore(Protocol):
    """Contract for site/category/theme persistence — implemented by shell."""

    backend_name: str

    async def initialize(self) -> None: ...
    async def close(self) -> None: ...
    async def health_check(self) -> bool: ...

    async def list_sites(self) -> list[Site]: ...
    async def create_site(self, fields: Mapping[str, object]) -> Site: ...
    async def update_site(
        self, site_id: str, updates: Mapping[str, object],
    ) -> bool: ...
    async def delete_site(self, site_id: str) -> bool: ...
    async def import_sites(
        self, entries: Iterable[Mapping[str, object]],
    ) -> int: ...

    async def list_categories(self) -> list[Category]: ...
    async def create_category(self, name: str) -> Category: ...
    async def rename_category(self, category_id: str, name: str) -> bool: ...
    async def delete_category(self, category_id: str) -> bool: ...

    async def get_theme(self) -> Theme: ...
    async def set_theme(self, theme: Theme) -> None: ...
