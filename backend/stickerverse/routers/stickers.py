"""
# `stickerverse/routers/stickers.py` - Catalog

## Public endpoints

### `GET /stickers/`
Lists the catalog ordered by name.
**Optional parameters:**
- `search`: case-insensitive substring of the name
- `category`: exact category

### `GET /stickers/materials`
Material options a sticker can be printed on.

### `GET /stickers/{sticker_id}`
One sticker, `404` if it does not exist.

## Admin endpoints (prefix `/admin`)

Each one is a gated mutation: the bearer token goes through the role authorization check
before the single store write. Failures come back as
`{"detail": {"reason": ..., "message": ...}}`:
- `401` missing / invalid token
- `403` not an admin (`record-missing`, `insufficient-role`, `local-admin-unverifiable`)
- `404` the sticker does not exist (update / delete)
- `502` any other store failure

### `POST /admin/stickers/` -> `201 {"id": ...}`
### `PATCH /admin/stickers/{sticker_id}` -> `{"ok": true}` (only the fields sent are written)
### `DELETE /admin/stickers/{sticker_id}` -> `{"ok": true}`
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from stickerverse.core.security import (
    get_admin_context,
    get_bearer_token,
    get_user_store,
    mutation_http_error,
)
from stickerverse.schemas.sticker import (
    STICKER_MATERIALS,
    MaterialOption,
    StickerCreate,
    StickerCreated,
    StickerOut,
    StickerUpdate,
)
from stickerverse.services import admin_mutations
from stickerverse.services.admin_mutations import STICKERS, AdminContext

router = APIRouter(prefix="/stickers", tags=["Stickers"])


@router.get("/", response_model=List[StickerOut], summary="List Stickers")
def list_stickers(
    search: Optional[str] = Query(None, description="Name contains (case-insensitive)"),
    category: Optional[str] = Query(None, description="Category (exact)"),
    store=Depends(get_user_store),
):
    where = [("category", "==", category)] if category else []
    docs = store.query(STICKERS, where=where, order_by="name")
    if search:
        needle = search.strip().lower()
        docs = [d for d in docs if needle in str(d.get("name", "")).lower()]
    return [StickerOut(**d) for d in docs]


@router.get("/materials", response_model=List[MaterialOption], summary="Material options")
def list_materials():
    return STICKER_MATERIALS


@router.get("/{sticker_id}", response_model=StickerOut, summary="Get Sticker")
def get_sticker(sticker_id: str, store=Depends(get_user_store)):
    doc = store.get(f"{STICKERS}/{sticker_id}")
    if doc is None:
        raise HTTPException(status_code=404, detail="Sticker not found")
    return StickerOut(**doc)


# Admin sub-router for inventory management
admin_router = APIRouter(prefix="/stickers", tags=["Admin: Stickers"])


@admin_router.post("/", response_model=StickerCreated, status_code=status.HTTP_201_CREATED, summary="Create Sticker")
def create_sticker(
    sticker: StickerCreate,
    token: str = Depends(get_bearer_token),
    ctx: AdminContext = Depends(get_admin_context),
):
    result = admin_mutations.create_sticker(token, sticker, ctx)
    if not result.ok:
        raise mutation_http_error(result)
    return StickerCreated(id=result.value)


@admin_router.patch("/{sticker_id}", summary="Update Sticker")
def update_sticker(
    sticker_id: str,
    changes: StickerUpdate,
    token: str = Depends(get_bearer_token),
    ctx: AdminContext = Depends(get_admin_context),
):
    result = admin_mutations.update_sticker(token, sticker_id, changes, ctx)
    if not result.ok:
        raise mutation_http_error(result)
    return {"ok": True}


@admin_router.delete("/{sticker_id}", summary="Delete Sticker")
def delete_sticker(
    sticker_id: str,
    token: str = Depends(get_bearer_token),
    ctx: AdminContext = Depends(get_admin_context),
):
    result = admin_mutations.delete_sticker(token, sticker_id, ctx)
    if not result.ok:
        raise mutation_http_error(result)
    return {"ok": True}
