# stickerverse/core/identity.py
from typing import Optional

from firebase_admin import auth as fb_auth
from firebase_admin import exceptions as fb_exceptions
from pydantic import BaseModel


class IdentityError(Exception):
    """The identity assertion could not be accepted."""


class InvalidTokenError(IdentityError):
    pass


class VerifiedIdentity(BaseModel):
    uid: str
    email: Optional[str] = None
    display_name: Optional[str] = None
    photo_url: Optional[str] = None


class FirebaseIdentityProvider:
    """
    Firebase Authentication client.
    verify() -> VerifiedIdentity or InvalidTokenError; sign_out() revokes refresh tokens.
    """

    def __init__(self, app=None, check_revoked: bool = True):
        self._app = app
        self._check_revoked = check_revoked

    def verify(self, id_token: str) -> VerifiedIdentity:
        if not id_token:
            raise InvalidTokenError("Authentication credentials were not provided")
        try:
            # check_revoked=True -> tokens issued before sign-out are rejected
            decoded = fb_auth.verify_id_token(id_token, app=self._app, check_revoked=self._check_revoked)
        except fb_auth.ExpiredIdTokenError as exc:
            raise InvalidTokenError("Token expired") from exc
        except fb_auth.RevokedIdTokenError as exc:
            raise InvalidTokenError("Session revoked") from exc
        except (ValueError, fb_exceptions.FirebaseError) as exc:
            raise InvalidTokenError(f"Invalid Firebase ID token: {exc}") from exc

        uid = decoded.get("uid") or decoded.get("user_id")
        if not uid:
            raise InvalidTokenError("Token missing uid.")
        return VerifiedIdentity(
            uid=uid,
            email=decoded.get("email"),
            display_name=decoded.get("name"),
            photo_url=decoded.get("picture"),
        )

    def sign_out(self, uid: str) -> None:
        try:
            fb_auth.revoke_refresh_tokens(uid, app=self._app)
        except fb_auth.UserNotFoundError:
            # Account already gone; nothing left to revoke.
            pass
