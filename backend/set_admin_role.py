#!/usr/bin/env python3
"""
Writes a role onto a user's role record (users/{uid}) with service credentials.
Used to bootstrap the first admin; later role changes go through the admin panel.
"""
import sys

from firebase_admin import auth

from stickerverse.config import get_firebase_app, get_firestore_client, settings
from stickerverse.core.authorization import role_record_path
from stickerverse.core.store import DocumentStore, StoreError

ROLES = ("admin", "user")


def set_admin_role(user_email: str, role: str = "admin") -> bool:
    """Looks the account up in Firebase Authentication and sets `role` on its record."""
    try:
        app = get_firebase_app()
        store = DocumentStore(get_firestore_client(), prefix=settings.collection_prefix)
        print("✅ Firebase Admin SDK initialized")
    except Exception as e:
        print(f"❌ Firebase initialization failed: {e}")
        return False

    try:
        user = auth.get_user_by_email(user_email, app=app)
        print(f"✅ User found: {user.uid} - {user.email}")
    except auth.UserNotFoundError:
        print(f"❌ User not found: {user_email}")
        return False

    path = role_record_path(user.uid)
    try:
        if store.get(path) is None:
            store.create(path, {
                "uid": user.uid,
                "email": user.email,
                "display_name": user.display_name,
                "photo_url": user.photo_url,
                "role": role,
            })
        else:
            store.update(path, {"role": role})
    except StoreError as e:
        print(f"❌ Error setting role: {e}")
        return False

    print(f"✅ Role '{role}' written to {path}")
    return True


if __name__ == "__main__":
    if len(sys.argv) not in (2, 3) or (len(sys.argv) == 3 and sys.argv[2] not in ROLES):
        print("Usage: python set_admin_role.py <user_email> [admin|user]")
        print("Example: python set_admin_role.py alice@example.com admin")
        sys.exit(1)

    user_email = sys.argv[1]
    role = sys.argv[2] if len(sys.argv) == 3 else "admin"
    print(f"Setting role '{role}' for: {user_email}")

    if set_admin_role(user_email, role):
        print("🎉 Role set successfully!")
        print("The change applies to the user's next request; no sign-out needed.")
    else:
        print("💥 Failed to set role")
        sys.exit(1)
