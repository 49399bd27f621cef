"""In-Memory Store — transient whole-document backend for development and tests.

Invariants:
    - State lives only in this process and is lost on restart
    - Callers never receive references into the held document (deep copies both ways)
"""

import copy

from sentinelnav.infrastructure.stores.document import DocumentStore


class MemoryStore(DocumentStore):
    backend_name = "memory"

    def __init__(self, initial: dict | None = None):
        super().__init__()
        self._raw: dict | None = copy.deepcopy(initial)

    async def _load(self) -> tuple[dict | None, str | None]:
        return copy.deepcopy(self._raw), None

    async def _save(self, raw: dict, version: str | None) -> None:
        self._raw = copy.deepcopy(raw)
