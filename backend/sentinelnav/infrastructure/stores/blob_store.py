"""Blob Store — whole-document backend kept as one JSON object in a remote object store.

Invariants:
    - The object is only ever replaced whole (PUT); there are no partial updates
    - Writes are conditional on the ETag that was read: If-Match, or
      If-None-Match: * when the object did not exist yet
    - 412 Precondition Failed → StoreConflictError (another writer won); no retry here
    - Transport errors and other non-2xx responses → StoreUnavailableError

Design Decisions:
    - Plain HTTP via httpx: any object store exposing GET/PUT with ETags on one URL works
      (pre-signed S3 URLs, Vercel Blob, MinIO, a static WebDAV share)
    - Client injectable so tests run against httpx.MockTransport
"""

import logging

import httpx

from sentinelnav.core.errors import StoreConflictError, StoreUnavailableError
from sentinelnav.infrastructure.stores.document import DocumentStore

logger = logging.getLogger(__name__)


class BlobStore(DocumentStore):
    backend_name = "blob"

    def __init__(
        self,
        url: str,
        token: str = "",
        timeout_seconds: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ):
        super().__init__()
        if not url:
            raise StoreUnavailableError("BLOB_URL is not configured", "initialize", self.backend_name)
        self.url = url
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout_seconds)
        self._headers = headers

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _load(self) -> tuple[dict | None, str | None]:
        try:
            response = await self._client.get(self.url, headers=self._headers)
        except httpx.HTTPError as e:
            logger.error(f"Blob read failed: {e}", extra={"backend": self.backend_name})
            raise StoreUnavailableError(str(e), "read", self.backend_name)
        if response.status_code == 404:
            return None, None
        if not response.is_success:
            raise StoreUnavailableError(
                f"HTTP {response.status_code}", "read", self.backend_name,
            )
        try:
            data = response.json()
        except ValueError as e:
            raise StoreUnavailableError(f"Invalid document: {e}", "read", self.backend_name)
        if not isinstance(data, dict):
            raise StoreUnavailableError("Document is not a JSON object", "read", self.backend_name)
        return data, response.headers.get("etag")

    async def _save(self, raw: dict, version: str | None) -> None:
        headers = dict(self._headers)
        if version:
            headers["If-Match"] = version
        else:
            headers["If-None-Match"] = "*"
        try:
            response = await self._client.put(self.url, json=raw, headers=headers)
        except httpx.HTTPError as e:
            logger.error(f"Blob write failed: {e}", extra={"backend": self.backend_name})
            raise StoreUnavailableError(str(e), "write", self.backend_name)
        if response.status_code == 412:
            logger.warning(
                "Blob write lost to a concurrent writer",
                extra={"backend": self.backend_name},
            )
            raise StoreConflictError(
                "Document changed since it was read", "write", self.backend_name,
            )
        if not response.is_success:
            raise StoreUnavailableError(
                f"HTTP {response.status_code}", "write", self.backend_name,
            )
