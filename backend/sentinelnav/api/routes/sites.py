"""Site Routes — public listing, authenticated create/update/delete/import.

Invariants:
    - Reads are public; every write requires a valid session
    - Unknown site ids are 404 on update and delete
    - Request bodies validated by Pydantic before reaching the store
"""

import logging

from fastapi import APIRouter, Depends, status

from sentinelnav.api.dependencies import get_store, require_session
from sentinelnav.core.errors import NotFoundError
from sentinelnav.core.store_protocol import PersistenceStore
from sentinelnav.schemas.site import (
    ImportResult, SiteCreate, SiteImportItem, SiteResponse, SiteUpdate, SuccessResponse,
)
from sentinelnav.services.site_import import import_sites

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/sites", tags=["sites"])


@router.get("", response_model=list[SiteResponse])
async def list_sites(store: PersistenceStore = Depends(get_store)):
    return [SiteResponse.from_entity(s) for s in await store.list_sites()]


@router.post(
    "", response_model=SiteResponse, status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_session)],
)
async def create_site(body: SiteCreate, store: PersistenceStore = Depends(get_store)):
    site = await store.create_site(body.model_dump())
    logger.info("Site created", extra={"site_id": site.id, "category_id": site.category_id})
    return SiteResponse.from_entity(site)


@router.post(
    "/import", response_model=ImportResult,
    dependencies=[Depends(require_session)],
)
async def import_site_list(
    body: list[SiteImportItem], store: PersistenceStore = Depends(get_store),
):
    """Bulk-add sites; entries missing title or url are skipped."""
    count = await import_sites(store, [item.model_dump() for item in body])
    return ImportResult(message="Import successful", count=count)


@router.put(
    "/{site_id}", response_model=SuccessResponse,
    dependencies=[Depends(require_session)],
)
async def update_site(
    site_id: str, body: SiteUpdate, store: PersistenceStore = Depends(get_store),
):
    if not await store.update_site(site_id, body.model_dump(exclude_unset=True)):
        raise NotFoundError("Site", site_id)
    return SuccessResponse(success=True)


@router.delete(
    "/{site_id}", response_model=SuccessResponse,
    dependencies=[Depends(require_session)],
)
async def delete_site(site_id: str, store: PersistenceStore = Depends(get_store)):
    if not await store.delete_site(site_id):
        raise NotFoundError("Site", site_id)
    logger.info("Site deleted", extra={"site_id": site_id})
    return SuccessResponse(success=True)
