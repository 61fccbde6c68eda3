"""
stickerverse/schemas/principal.py
Roles, the two principal kinds and the explicit Session object.
"""
from datetime import datetime
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field

Role = Literal["user", "admin"]

LOCAL_ADMIN_UID = "admin-static-id"


class ProviderPrincipal(BaseModel):
    """A principal verified by the identity provider; role comes from its Role Record."""
    kind: Literal["provider"] = "provider"
    uid: str = Field(..., description="Firebase UID")
    role: Role = Field("user", description="user | admin")
    email: Optional[str] = Field(None, description="E-mail (if any)")
    display_name: Optional[str] = Field(None, description="Display name (if any)")
    photo_url: Optional[str] = Field(None, description="Avatar reference (if any)")


class LocalAdminPrincipal(BaseModel):
    """The static admin sentinel. Not known to the identity provider."""
    kind: Literal["local_admin"] = "local_admin"
    uid: Literal["admin-static-id"] = LOCAL_ADMIN_UID
    role: Literal["admin"] = "admin"
    email: str = "admin@stickerverse.local"
    display_name: str = "Admin User (Static)"
    photo_url: Optional[str] = None


Principal = Annotated[Union[ProviderPrincipal, LocalAdminPrincipal], Field(discriminator="kind")]


class Session(BaseModel):
    """Created at sign-in, invalidated at sign-out."""
    token: str = Field(..., description="Bearer token to send with later requests")
    principal: Principal
    opened_at: datetime
    active: bool = True

    @property
    def is_admin(self) -> bool:
        return self.principal.role == "admin"


class SignInRequest(BaseModel):
    id_token: str = Field(..., min_length=1, description="Firebase ID token from the client SDK")
    redirect: Optional[str] = Field(None, description="Page the user was heading to")


class SessionOut(BaseModel):
    session: Session
    redirect_to: str
