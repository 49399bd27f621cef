"""Category Routes — public listing, authenticated create/rename/delete.

Invariants:
    - Deleting moves the category's sites to the fallback category in the same unit
    - A rejected delete (default, last, unknown) is 400 CATEGORY_DELETE_REJECTED
"""

import logging

from fastapi import APIRouter, Depends, status

from sentinelnav.api.dependencies import get_store, require_session
from sentinelnav.core.errors import CategoryDeleteRejectedError, NotFoundError
from sentinelnav.core.store_protocol import PersistenceStore
from sentinelnav.schemas.category import CategoryBody, CategoryResponse
from sentinelnav.schemas.site import SuccessResponse

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/categories", tags=["categories"])


@router.get("", response_model=list[CategoryResponse])
async def list_categories(store: PersistenceStore = Depends(get_store)):
    return [CategoryResponse(id=c.id, name=c.name) for c in await store.list_categories()]


@router.post(
    "", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_session)],
)
async def create_category(body: CategoryBody, store: PersistenceStore = Depends(get_store)):
    category = await store.create_category(body.name)
    logger.info("Category created", extra={"category_id": category.id})
    return CategoryResponse(id=category.id, name=category.name)


@router.put(
    "/{category_id}", response_model=SuccessResponse,
    dependencies=[Depends(require_session)],
)
async def rename_category(
    category_id: str, body: CategoryBody, store: PersistenceStore = Depends(get_store),
):
    if not await store.rename_category(category_id, body.name):
        raise NotFoundError("Category", category_id)
    return SuccessResponse(success=True)


@router.delete(
    "/{category_id}", response_model=SuccessResponse,
    dependencies=[Depends(require_session)],
)
async def delete_category(category_id: str, store: PersistenceStore = Depends(get_store)):
    if not await store.delete_category(category_id):
        raise CategoryDeleteRejectedError(category_id)
    return SuccessResponse(success=True)
