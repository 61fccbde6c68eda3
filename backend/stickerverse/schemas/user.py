"""
stickerverse/schemas/user.py - Principal records and the per-user address.

- `UserDocument`: the `users/{uid}` document. Its `role` field is the only field consulted
  for authorization.
- `Address`: one per principal, stored at `users/{uid}/profile/address`, upsert-only.
- `RoleChange`: body of the admin role-change request.
"""
from datetime import datetime
from typing import Annotated, Optional

from pydantic import BaseModel, Field, StringConstraints

from stickerverse.schemas.principal import Role

NameStr = Annotated[str, StringConstraints(min_length=1, strip_whitespace=True)]


class UserDocument(BaseModel):
    uid: str = Field(..., description="User unique ID (UID from Firebase)")
    email: Optional[str] = None
    display_name: Optional[str] = None
    photo_url: Optional[str] = None
    role: Role = Field("user", description="Role of the user (user, admin)")
    created_at: Optional[datetime] = None
    last_login: Optional[datetime] = None

    model_config = {
        "json_schema_extra": {
            "example": {
                "uid": "12345UID",
                "email": "alice@example.com",
                "display_name": "Alice Example",
                "photo_url": "https://example.com/alice.png",
                "role": "user",
            }
        }
    }


class Address(BaseModel):
    name:    NameStr = Field(..., description="Recipient name")
    street:  NameStr = Field(..., description="Street and number")
    city:    NameStr = Field(..., description="City")
    state:   NameStr = Field(..., description="State / province")
    zip:     NameStr = Field(..., description="Postal code")
    country: NameStr = Field(..., description="Country")


class RoleChange(BaseModel):
    role: Role = Field(..., description="New role for the target user")
