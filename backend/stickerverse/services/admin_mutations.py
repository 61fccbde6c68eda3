"""
stickerverse/services/admin_mutations.py - Role-gated administrative writes.

Every operation follows the same contract:
1. run the role authorization check; a rejection becomes the result and the store is
   never touched,
2. perform exactly one write with service credentials (the store stamps the timestamps),
3. return a `MutationResult`: the new id (create) or True (update/delete/role change) on
   success, otherwise an error that says whether the caller was not authorized or the
   store write failed.

Nothing is retried and nothing raises past this module; the caller may resubmit.
"""
import logging
from dataclasses import dataclass
from typing import Callable, Optional, TypeVar, Union

from pydantic import BaseModel

from stickerverse.core.authorization import (
    AuthorizationDenied,
    authorize_admin,
    check_role_change,
    require_admin_role,
    role_record_path,
    verify_assertion,
)
from stickerverse.core.store import StoreError
from stickerverse.schemas.principal import Role
from stickerverse.schemas.sticker import StickerCreate, StickerUpdate

logger = logging.getLogger("stickerverse.admin")

STICKERS = "stickers"
STORE_FAILURE = "store-failure"

T = TypeVar("T")


@dataclass
class AdminContext:
    """Collaborators an administrative operation needs; passed explicitly to each call."""
    identity: object
    store: object


class MutationResult(BaseModel):
    ok: bool
    operation: str
    value: Optional[Union[bool, str]] = None
    reason: Optional[str] = None
    error: Optional[str] = None
    store_code: Optional[str] = None

    @property
    def not_authorized(self) -> bool:
        return not self.ok and self.reason not in (None, STORE_FAILURE)


def _run(operation: str, step: Callable[[], T]) -> MutationResult:
    try:
        value = step()
    except AuthorizationDenied as denied:
        return MutationResult(
            ok=False,
            operation=operation,
            reason=denied.reason.value,
            error=f"Not authorized ({denied.reason.value}): {denied.message}",
        )
    except StoreError as exc:
        logger.error("%s: store %s failed (%s): %s", operation, exc.action, exc.code, exc.message)
        return MutationResult(
            ok=False,
            operation=operation,
            reason=STORE_FAILURE,
            store_code=exc.code,
            error=f"Store {exc.action} failed: {exc}",
        )
    return MutationResult(ok=True, operation=operation, value=value)


def create_sticker(id_token: str, sticker: StickerCreate, ctx: AdminContext) -> MutationResult:
    operation = "create_sticker"

    def step() -> str:
        uid = authorize_admin(id_token, operation, identity=ctx.identity, store=ctx.store)
        new_id = ctx.store.add(STICKERS, sticker.model_dump())
        logger.info("%s: %s added sticker %s", operation, uid, new_id)
        return new_id

    return _run(operation, step)


def update_sticker(id_token: str, sticker_id: str, changes: StickerUpdate, ctx: AdminContext) -> MutationResult:
    """An empty `changes` still writes, touching only `updated_at`."""
    operation = "update_sticker"

    def step() -> bool:
        uid = authorize_admin(id_token, operation, identity=ctx.identity, store=ctx.store)
        fields = changes.model_dump(exclude_unset=True, exclude_none=True)
        ctx.store.update(f"{STICKERS}/{sticker_id}", fields)
        logger.info("%s: %s updated sticker %s (%s)", operation, uid, sticker_id, ", ".join(fields) or "timestamp only")
        return True

    return _run(operation, step)


def delete_sticker(id_token: str, sticker_id: str, ctx: AdminContext) -> MutationResult:
    operation = "delete_sticker"

    def step() -> bool:
        uid = authorize_admin(id_token, operation, identity=ctx.identity, store=ctx.store)
        ctx.store.delete(f"{STICKERS}/{sticker_id}")
        logger.info("%s: %s deleted sticker %s", operation, uid, sticker_id)
        return True

    return _run(operation, step)


def change_role(id_token: str, target_uid: str, new_role: Role, ctx: AdminContext) -> MutationResult:
    """Self-demotion is rejected before the acting principal's own role is looked up."""
    operation = "change_role"

    def step() -> bool:
        uid = verify_assertion(id_token, operation, ctx.identity)
        check_role_change(uid, target_uid, new_role, operation)
        require_admin_role(uid, operation, ctx.store)
        ctx.store.update(role_record_path(target_uid), {"role": new_role})
        logger.info("%s: %s set role of %s to %s", operation, uid, target_uid, new_role)
        return True

    return _run(operation, step)
