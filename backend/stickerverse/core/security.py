"""
# `stickerverse/core/security.py` - FastAPI dependencies for identity, sessions and stores

## Security scheme
`HTTPBearer(auto_error=False)` reads `Authorization: Bearer <token>`; a missing header is
handled here rather than by FastAPI so the role check can report `missing-token` itself.
The token is either a Firebase ID token or a static admin session token.

## Dependencies
- `get_store` / `get_identity` / `get_session_manager`: process-wide collaborators
  (overridden in tests).
- `get_admin_context`: identity + service store bundle handed to administrative operations.
- `get_bearer_token`: raw token string, `""` when absent.
- `get_optional_session` / `get_session`: the caller's `Session` (401 on a bad token).
- `require_admin_view`: read-only admin screens; any admin principal, the static admin
  included.
- `get_user_store`: the caller's restricted store view.

`mutation_http_error` maps a failed `MutationResult` to the HTTP error returned to the client.
"""
from functools import lru_cache
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from stickerverse.config import get_firebase_app, get_firestore_client, settings
from stickerverse.core.authorization import DenialReason
from stickerverse.core.identity import FirebaseIdentityProvider, InvalidTokenError
from stickerverse.core.session import SessionManager
from stickerverse.core.store import DocumentStore, UserScopedStore
from stickerverse.schemas.principal import Session
from stickerverse.services.admin_mutations import STORE_FAILURE, AdminContext, MutationResult

# HTTPBearer is a FastAPI provided security scheme for "Authorization: Bearer <token>" header
oauth2_scheme = HTTPBearer(auto_error=False)


@lru_cache(maxsize=1)
def get_store() -> DocumentStore:
    return DocumentStore(get_firestore_client(), prefix=settings.collection_prefix)


@lru_cache(maxsize=1)
def get_identity() -> FirebaseIdentityProvider:
    return FirebaseIdentityProvider(app=get_firebase_app())


@lru_cache(maxsize=1)
def get_session_manager() -> SessionManager:
    return SessionManager(get_identity(), get_store(), settings.local_admin_password)


def get_admin_context(identity=Depends(get_identity), store=Depends(get_store)) -> AdminContext:
    return AdminContext(identity=identity, store=store)


def get_bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(oauth2_scheme),
) -> str:
    if not credentials or not credentials.credentials:
        return ""
    return credentials.credentials


def get_optional_session(
    token: str = Depends(get_bearer_token),
    sessions: SessionManager = Depends(get_session_manager),
) -> Optional[Session]:
    """Token optional: resolves it when present, None otherwise."""
    if not token:
        return None
    try:
        return sessions.resolve(token)
    except InvalidTokenError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"reason": DenialReason.INVALID_TOKEN.value, "message": str(exc)},
            headers={"WWW-Authenticate": "Bearer"},
        )


def get_session(session: Optional[Session] = Depends(get_optional_session)) -> Session:
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"reason": DenialReason.MISSING_TOKEN.value, "message": "Authentication credentials were not provided"},
            headers={"WWW-Authenticate": "Bearer"},
        )
    return session


def require_admin_view(session: Session = Depends(get_session)) -> Session:
    if not session.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={"reason": DenialReason.INSUFFICIENT_ROLE.value, "message": "Admin access required"},
        )
    return session


def get_user_store(
    session: Optional[Session] = Depends(get_optional_session),
    store=Depends(get_store),
) -> UserScopedStore:
    return UserScopedStore(store, session.principal.uid if session else None)


def mutation_http_error(result: MutationResult) -> HTTPException:
    if result.reason == STORE_FAILURE:
        code = status.HTTP_404_NOT_FOUND if result.store_code == "not-found" else status.HTTP_502_BAD_GATEWAY
    elif result.reason in (DenialReason.MISSING_TOKEN.value, DenialReason.INVALID_TOKEN.value):
        code = status.HTTP_401_UNAUTHORIZED
    else:
        code = status.HTTP_403_FORBIDDEN
    return HTTPException(status_code=code, detail={"reason": result.reason, "message": result.error})
