"""
stickerverse/core/session.py - Explicit sign-in / sign-out lifecycle.

A `Session` is created by `sign_in` (identity provider) or `admin_login` (static admin
sentinel) and invalidated by `sign_out`. Request handlers rebuild it from the bearer token
with `resolve` and pass it on explicitly; nothing here is ambient.

Provider sessions are the Firebase ID token itself, so sign-out revokes refresh tokens at the
provider. Local admin sessions are opaque tokens held in this process only.
"""
import hmac
import logging
import secrets
import threading
from datetime import datetime, timezone
from typing import Dict, Optional

from stickerverse.core.authorization import LOCAL_ADMIN_TOKEN_PREFIX, role_record_path
from stickerverse.core.identity import InvalidTokenError, VerifiedIdentity
from stickerverse.core.store import StoreError
from stickerverse.schemas.principal import LocalAdminPrincipal, ProviderPrincipal, Session

logger = logging.getLogger("stickerverse.auth")


def _now() -> datetime:
    return datetime.now(timezone.utc)


def post_sign_in_redirect(is_admin: bool, redirect: Optional[str]) -> str:
    """Admins land in the admin area, everybody else anywhere but there (or /profile)."""
    if is_admin:
        return redirect if redirect and redirect.startswith("/admin") else "/admin/dashboard"
    if redirect and not redirect.startswith("/admin") and redirect != "/login":
        return redirect
    return "/profile"


class SessionManager:
    def __init__(self, identity, store, local_admin_password: Optional[str] = None):
        self._identity = identity
        self._store = store
        self._local_admin_password = local_admin_password
        self._local_tokens: Dict[str, datetime] = {}
        self._lock = threading.Lock()

    # ---------- provider principals ----------
    def _ensure_user_document(self, ident: VerifiedIdentity) -> ProviderPrincipal:
        """Create the principal (role 'user') on first sign-in; refresh profile fields later."""
        path = role_record_path(ident.uid)
        doc = self._store.get(path)
        profile = {
            "display_name": ident.display_name,
            "photo_url": ident.photo_url,
            "last_login": _now(),
        }
        if doc is None:
            try:
                self._store.create(path, {"uid": ident.uid, "email": ident.email, "role": "user", **profile})
            except StoreError as exc:
                if exc.code != "already-exists":
                    raise
                # a concurrent first sign-in created it
                logger.info("User record for %s already created, refreshing it", ident.uid)
                doc = self._store.get(path) or {}
                self._store.update(path, profile)
            else:
                logger.info("Created user record for %s", ident.uid)
        else:
            self._store.update(path, profile)
        if doc is None:
            role = "user"
        else:
            role = doc.get("role") if doc.get("role") in ("user", "admin") else "user"
        return ProviderPrincipal(
            uid=ident.uid,
            role=role,
            email=ident.email,
            display_name=ident.display_name,
            photo_url=ident.photo_url,
        )

    def sign_in(self, id_token: str) -> Session:
        ident = self._identity.verify(id_token)
        principal = self._ensure_user_document(ident)
        logger.info("Signed in %s (role=%s)", principal.uid, principal.role)
        return Session(token=id_token, principal=principal, opened_at=_now())

    # ---------- static admin ----------
    @property
    def local_admin_enabled(self) -> bool:
        return bool(self._local_admin_password)

    def admin_login(self, password: str) -> Optional[Session]:
        if not self.local_admin_enabled:
            return None
        if not hmac.compare_digest(password.encode("utf-8"), self._local_admin_password.encode("utf-8")):
            logger.warning("Static admin login rejected")
            return None
        token = f"{LOCAL_ADMIN_TOKEN_PREFIX}{secrets.token_urlsafe(32)}"
        opened = _now()
        with self._lock:
            self._local_tokens[token] = opened
        logger.info("Static admin signed in")
        return Session(token=token, principal=LocalAdminPrincipal(), opened_at=opened)

    # ---------- per request ----------
    def resolve(self, token: str) -> Session:
        if token.startswith(LOCAL_ADMIN_TOKEN_PREFIX):
            with self._lock:
                opened = self._local_tokens.get(token)
            if opened is None:
                raise InvalidTokenError("Unknown or expired static admin session")
            return Session(token=token, principal=LocalAdminPrincipal(), opened_at=opened)

        ident = self._identity.verify(token)
        doc = self._store.get(role_record_path(ident.uid)) or {}
        role = "admin" if doc.get("role") == "admin" else "user"
        principal = ProviderPrincipal(
            uid=ident.uid,
            role=role,
            email=ident.email or doc.get("email"),
            display_name=ident.display_name or doc.get("display_name"),
            photo_url=ident.photo_url or doc.get("photo_url"),
        )
        return Session(token=token, principal=principal, opened_at=_now())

    def sign_out(self, session: Session) -> Session:
        if isinstance(session.principal, LocalAdminPrincipal):
            with self._lock:
                self._local_tokens.pop(session.token, None)
        else:
            self._identity.sign_out(session.principal.uid)
        logger.info("Signed out %s", session.principal.uid)
        return session.model_copy(update={"active": False})
