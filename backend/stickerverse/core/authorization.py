"""
# `stickerverse/core/authorization.py` - Role authorization check

Decides whether a privileged request may proceed. Every administrative write goes through
`authorize_admin` before it touches the store.

## Steps

1. Empty assertion -> `missing-token`. A local admin token -> `local-admin-unverifiable`
   (that principal kind has no provider identity to verify). An assertion the identity
   provider rejects -> `invalid-token`. None of these are retried.
2. The principal id comes from the verified assertion.
3. The Role Record `users/{uid}` is read with service credentials.
4. Missing record -> `record-missing`; `role != "admin"` -> `insufficient-role`.
5. Otherwise the verified principal id is returned as proof of authorization.

`check_role_change` adds the self-modification rule of the role-change operation: an acting
principal may never demote itself, whatever its current role (`self-demotion`).

The check only reads. Every rejection raises `AuthorizationDenied` with one of the reasons
above; callers turn it into a result at their own boundary.
"""
import logging
from enum import Enum
from typing import Optional

from stickerverse.core.identity import InvalidTokenError

logger = logging.getLogger("stickerverse.admin")

LOCAL_ADMIN_TOKEN_PREFIX = "local_admin_"
ROLE_RECORD_COLLECTION = "users"


class DenialReason(str, Enum):
    MISSING_TOKEN = "missing-token"
    INVALID_TOKEN = "invalid-token"
    RECORD_MISSING = "record-missing"
    INSUFFICIENT_ROLE = "insufficient-role"
    SELF_DEMOTION = "self-demotion"
    LOCAL_ADMIN = "local-admin-unverifiable"

    @property
    def is_authentication(self) -> bool:
        return self in (DenialReason.MISSING_TOKEN, DenialReason.INVALID_TOKEN)


_MESSAGES = {
    DenialReason.MISSING_TOKEN: "No identity token was supplied. Please sign in again.",
    DenialReason.INVALID_TOKEN: "The identity token could not be verified. Please sign in again.",
    DenialReason.RECORD_MISSING: "No user record exists for this account, so it has no admin rights.",
    DenialReason.INSUFFICIENT_ROLE: "You are not an admin.",
    DenialReason.SELF_DEMOTION: "Admins cannot revoke their own admin status.",
    DenialReason.LOCAL_ADMIN: (
        "The static admin cannot perform this operation. It requires an admin signed in "
        "through the identity provider whose user record has role 'admin'."
    ),
}


class AuthorizationDenied(Exception):
    def __init__(self, reason: DenialReason, operation: str, uid: Optional[str] = None, detail: str = ""):
        self.reason = reason
        self.operation = operation
        self.uid = uid
        self.detail = detail
        super().__init__(self.message)

    @property
    def message(self) -> str:
        text = _MESSAGES[self.reason]
        return f"{text} ({self.detail})" if self.detail else text


def role_record_path(uid: str) -> str:
    return f"{ROLE_RECORD_COLLECTION}/{uid}"


def _deny(reason: DenialReason, operation: str, uid: Optional[str] = None, detail: str = "") -> AuthorizationDenied:
    logger.warning("%s denied for %s: %s", operation, uid or "unknown principal", reason.value)
    return AuthorizationDenied(reason, operation, uid, detail)


def verify_assertion(id_token: str, operation: str, identity) -> str:
    """Steps 1-2: returns the principal id of a verified assertion."""
    if not id_token:
        raise _deny(DenialReason.MISSING_TOKEN, operation)
    if id_token.startswith(LOCAL_ADMIN_TOKEN_PREFIX):
        raise _deny(DenialReason.LOCAL_ADMIN, operation)
    try:
        verified = identity.verify(id_token)
    except InvalidTokenError as exc:
        raise _deny(DenialReason.INVALID_TOKEN, operation, detail=str(exc)) from exc
    return verified.uid


def require_admin_role(uid: str, operation: str, store) -> str:
    """Steps 3-4. A failed read surfaces as the store's own StoreError."""
    record = store.get(role_record_path(uid))
    if record is None:
        raise _deny(DenialReason.RECORD_MISSING, operation, uid)
    if record.get("role") != "admin":
        raise _deny(DenialReason.INSUFFICIENT_ROLE, operation, uid, detail=f"role: {record.get('role')}")
    return uid


def check_role_change(acting_uid: str, target_uid: str, new_role: str, operation: str) -> None:
    if acting_uid == target_uid and new_role == "user":
        raise _deny(DenialReason.SELF_DEMOTION, operation, acting_uid)


def authorize_admin(id_token: str, operation: str, *, identity, store) -> str:
    """Full check; returns the acting admin's principal id."""
    uid = verify_assertion(id_token, operation, identity)
    require_admin_role(uid, operation, store)
    logger.info("%s: %s verified as admin", operation, uid)
    return uid
