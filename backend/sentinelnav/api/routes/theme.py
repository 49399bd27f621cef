"""Theme Routes — the global display theme chosen by the administrator."""

from fastapi import APIRouter, Depends

from sentinelnav.api.dependencies import get_store, require_session
from sentinelnav.core.store_protocol import PersistenceStore
from sentinelnav.schemas.theme import ThemeBody

router = APIRouter(prefix="/api/v1/config", tags=["config"])


@router.get("/theme", response_model=ThemeBody)
async def get_theme(store: PersistenceStore = Depends(get_store)):
    return ThemeBody(theme=await store.get_theme())


@router.post(
    "/theme", response_model=ThemeBody, dependencies=[Depends(require_session)],
)
async def set_theme(body: ThemeBody, store: PersistenceStore = Depends(get_store)):
    await store.set_theme(body.theme)
    return body
