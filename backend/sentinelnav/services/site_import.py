"""Bulk Site Import — adds many sites at once, resolving categories by id or name.

Invariants:
    - Entries without a title or url are skipped and not counted
    - categoryId wins when it resolves; otherwise categoryName is matched
      case-insensitively (first match) or created on the fly
    - The whole import is one store mutation: a failure part-way leaves neither
      new categories nor new sites behind

Design Decisions:
    - Category planning lives in core/site_rules.plan_import so every backend
      applies it inside its own lock, transaction or MULTI/EXEC
"""

import logging
from collections.abc import Iterable, Mapping

from sentinelnav.core.store_protocol import PersistenceStore

logger = logging.getLogger(__name__)


async def import_sites(
    store: PersistenceStore, entries: Iterable[Mapping[str, object]],
) -> int:
    """Create a site per valid entry. Returns how many were created."""
    count = await store.import_sites(list(entries))
    logger.info(
        f"Imported {count} sites",
        extra={"site_count": count, "backend": store.backend_name},
    )
    return count
