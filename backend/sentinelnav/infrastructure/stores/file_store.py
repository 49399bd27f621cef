"""File Store — whole-document backend persisted as one JSON file on disk.

Invariants:
    - Writes go to a temporary file in the same directory, then os.replace():
      readers see the old file or the new file, never a partial one
    - Blocking file IO runs in a worker thread (asyncio.to_thread)
    - OSError and undecodable JSON surface as StoreUnavailableError

Design Decisions:
    - A missing file is an empty store, seeded by initialize()
"""

import asyncio
import json
import logging
import os
import tempfile
from pathlib import Path

from sentinelnav.core.errors import StoreUnavailableError
from sentinelnav.infrastructure.stores.document import DocumentStore

logger = logging.getLogger(__name__)


class FileStore(DocumentStore):
    backend_name = "file"

    def __init__(self, path: str | Path):
        super().__init__()
        self.path = Path(path)

    async def _load(self) -> tuple[dict | None, str | None]:
        try:
            return await asyncio.to_thread(self._read_file), None
        except (OSError, ValueError) as e:
            logger.error(f"Failed to read store file: {e}", extra={"backend": self.backend_name})
            raise StoreUnavailableError(str(e), "read", self.backend_name)

    async def _save(self, raw: dict, version: str | None) -> None:
        try:
            await asyncio.to_thread(self._write_file, raw)
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Failed to write store file: {e}", extra={"backend": self.backend_name})
            raise StoreUnavailableError(str(e), "write", self.backend_name)

    def _read_file(self) -> dict | None:
        if not self.path.exists():
            return None
        with self.path.open("r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"{self.path} does not hold a JSON object")
        return data

    def _write_file(self, raw: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent,
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(raw, f, ensure_ascii=False, indent=2)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
