"""
# `stickerverse/routers/users.py` - Profile, address and user management

## Signed-in principal
All of these read and write through the caller's restricted store view, so a principal only
ever sees its own `users/{uid}` subtree and its own orders.

### `GET /users/me`
The caller's `users/{uid}` document.

### `GET /users/me/address` / `PUT /users/me/address`
The single shipping address at `users/{uid}/profile/address`. `PUT` is an upsert; `GET`
returns `404` until one has been saved. The static admin has no user record and gets `403`.

### `GET /users/me/orders`
The caller's orders, newest first.

## Admin (prefix `/admin`)

### `GET /admin/users`
Every user record, ordered by email. Read-only, so the static admin may use it.

### `PUT /admin/users/{uid}/role`
Role change through the gated mutation. An admin cannot demote itself (`403 self-demotion`).
"""
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from stickerverse.core.security import (
    get_admin_context,
    get_bearer_token,
    get_session,
    get_store,
    get_user_store,
    mutation_http_error,
    require_admin_view,
)
from stickerverse.core.store import UserScopedStore
from stickerverse.schemas.order import OrderOut
from stickerverse.schemas.principal import LocalAdminPrincipal, Session
from stickerverse.schemas.user import Address, RoleChange, UserDocument
from stickerverse.services import admin_mutations
from stickerverse.services.admin_mutations import AdminContext

logger = logging.getLogger("stickerverse.auth")

router = APIRouter(prefix="/users", tags=["Users"])


def address_path(uid: str) -> str:
    return f"users/{uid}/profile/address"


def _provider_session(session: Session = Depends(get_session)) -> Session:
    if isinstance(session.principal, LocalAdminPrincipal):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="The static admin has no user profile")
    return session


@router.get("/me", response_model=UserDocument)
def get_my_profile(
    session: Session = Depends(_provider_session),
    store: UserScopedStore = Depends(get_user_store),
):
    uid = session.principal.uid
    doc = store.get(f"users/{uid}")
    if doc is None:
        raise HTTPException(status_code=404, detail="User record not found")
    doc.setdefault("uid", uid)
    return UserDocument(**doc)


@router.get("/me/address", response_model=Address)
def get_my_address(
    session: Session = Depends(_provider_session),
    store: UserScopedStore = Depends(get_user_store),
):
    doc = store.get(address_path(session.principal.uid))
    if doc is None:
        raise HTTPException(status_code=404, detail="No address saved")
    return Address(**doc)


@router.put("/me/address", response_model=Address)
def save_my_address(
    address: Address,
    session: Session = Depends(_provider_session),
    store: UserScopedStore = Depends(get_user_store),
):
    store.set(address_path(session.principal.uid), address.model_dump())
    logger.info("Saved address for %s", session.principal.uid)
    return address


@router.get("/me/orders", response_model=List[OrderOut])
def list_my_orders(
    session: Session = Depends(_provider_session),
    store: UserScopedStore = Depends(get_user_store),
):
    docs = store.query(
        "orders",
        where=[("user_id", "==", session.principal.uid)],
        order_by="order_date",
        descending=True,
    )
    return [OrderOut(**d) for d in docs]


# Admin sub-router for user management
admin_router = APIRouter(prefix="/users", tags=["Admin: Users"])


@admin_router.get("", response_model=List[UserDocument], summary="List users")
def list_users(_: Session = Depends(require_admin_view), store=Depends(get_store)):
    docs = store.query("users", order_by="email")
    out = []
    for d in docs:
        d.setdefault("uid", d.get("id"))
        out.append(UserDocument(**d))
    return out


@admin_router.put("/{uid}/role", summary="Change a user's role")
def change_user_role(
    uid: str,
    body: RoleChange,
    token: str = Depends(get_bearer_token),
    ctx: AdminContext = Depends(get_admin_context),
):
    result = admin_mutations.change_role(token, uid, body.role, ctx)
    if not result.ok:
        raise mutation_http_error(result)
    return {"ok": True, "uid": uid, "role": body.role}
