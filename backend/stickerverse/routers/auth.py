"""
# stickerverse/routers/auth.py - Sign-in / sign-out

## Endpoints

### POST /auth/session
Signs a user in with the Firebase ID token obtained by the client SDK (Google sign-in).
1. The token is verified (revocation checked).
2. `users/{uid}` is created on first sign-in with role `user`; later sign-ins refresh
   display name, avatar and last login.
3. Returns the session plus the page to redirect to.

### POST /auth/admin-login
Static admin sign-in with a password (form). Only available when `LOCAL_ADMIN_PASSWORD` is
configured. The returned token opens the read-only admin screens; privileged writes made
with it are rejected.

### POST /auth/logout
Invalidates the caller's session (refresh tokens revoked at Firebase, or the static admin
token forgotten). The client should also call `signOut()` in the Firebase SDK.

### GET /auth/me
The caller's principal.
"""
import logging

from fastapi import APIRouter, Depends, Form, HTTPException, status

from stickerverse.core.authorization import DenialReason
from stickerverse.core.identity import InvalidTokenError
from stickerverse.core.security import get_session, get_session_manager
from stickerverse.core.session import SessionManager, post_sign_in_redirect
from stickerverse.schemas.principal import Principal, Session, SessionOut, SignInRequest

logger = logging.getLogger("stickerverse.auth")

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/session", response_model=SessionOut, summary="Sign in with a Firebase ID token")
def sign_in(payload: SignInRequest, sessions: SessionManager = Depends(get_session_manager)):
    try:
        session = sessions.sign_in(payload.id_token)
    except InvalidTokenError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"reason": DenialReason.INVALID_TOKEN.value, "message": str(exc)},
        )
    return SessionOut(session=session, redirect_to=post_sign_in_redirect(session.is_admin, payload.redirect))


@router.post("/admin-login", response_model=SessionOut, summary="Static admin sign-in")
def admin_login(
    password: str = Form(..., min_length=1, description="Static admin password"),
    sessions: SessionManager = Depends(get_session_manager),
):
    if not sessions.local_admin_enabled:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Static admin login is disabled")
    session = sessions.admin_login(password)
    if session is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid admin password")
    return SessionOut(session=session, redirect_to=post_sign_in_redirect(True, None))


@router.post("/logout", summary="Sign out")
def logout(
    session: Session = Depends(get_session),
    sessions: SessionManager = Depends(get_session_manager),
):
    sessions.sign_out(session)
    return {"detail": "Logged out"}


@router.get("/me", response_model=Principal)
def whoami(session: Session = Depends(get_session)):
    return session.principal
