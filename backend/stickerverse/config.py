"""
stickerverse/config.py - Application configuration and Firebase initialization.

This module defines a pydantic BaseSettings class to load configuration from environment,
and lazily initializes the Firebase Admin SDK (Auth + Firestore) from the provided credentials.
All other modules import `settings` from here and ask for the Firebase app / Firestore client
through `get_firebase_app()` / `get_firestore_client()`.
"""
from functools import lru_cache
from typing import Optional

import firebase_admin
from firebase_admin import credentials, firestore
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""
    firebase_cred_file: str = "firebase_service_account.json"
    firebase_project_id: str = ""

    # Firebase credentials from environment variables (for Cloud Run)
    firebase_private_key_id: Optional[str] = None
    firebase_private_key: Optional[str] = None
    firebase_client_email: Optional[str] = None
    firebase_client_id: Optional[str] = None
    firebase_auth_uri: Optional[str] = None
    firebase_token_uri: Optional[str] = None
    firebase_auth_provider_x509_cert_url: Optional[str] = None
    firebase_client_x509_cert_url: Optional[str] = None

    collection_prefix: str = ""

    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.0-flash"
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    ai_timeout_seconds: float = 20.0
    recommendation_debounce_ms: int = 400

    custom_sticker_min_width: int = 300
    custom_sticker_min_height: int = 300
    custom_sticker_unit_price: float = 5.0
    custom_sticker_max_bytes: int = 10 * 1024 * 1024

    # Static admin sentinel; unset means the admin-login entry point is disabled
    local_admin_password: Optional[str] = None

    debug: bool = False
    log_level: str = "INFO"
    allowed_origins: str = "*"  # Comma-separated list or '*' for all

    model_config = {"env_file": ".env", "case_sensitive": False, "extra": "ignore"}

    @property
    def env_credentials_complete(self) -> bool:
        return all([
            self.firebase_private_key_id,
            self.firebase_private_key,
            self.firebase_client_email,
            self.firebase_client_id,
            self.firebase_auth_uri,
            self.firebase_token_uri,
            self.firebase_auth_provider_x509_cert_url,
            self.firebase_client_x509_cert_url,
        ])


# Load settings from environment (.env file, etc.)
settings = Settings()


def _build_credential() -> credentials.Certificate:
    if settings.env_credentials_complete:
        # Use environment variables for Firebase credentials (Cloud Run).
        # Single-line env vars carry the key with escaped newlines.
        cred_dict = {
            "type": "service_account",
            "project_id": settings.firebase_project_id,
            "private_key_id": settings.firebase_private_key_id,
            "private_key": settings.firebase_private_key.replace("\\n", "\n"),
            "client_email": settings.firebase_client_email,
            "client_id": settings.firebase_client_id,
            "auth_uri": settings.firebase_auth_uri,
            "token_uri": settings.firebase_token_uri,
            "auth_provider_x509_cert_url": settings.firebase_auth_provider_x509_cert_url,
            "client_x509_cert_url": settings.firebase_client_x509_cert_url,
        }
        return credentials.Certificate(cred_dict)
    # Use service account file (local development)
    return credentials.Certificate(settings.firebase_cred_file)


@lru_cache(maxsize=1)
def get_firebase_app() -> firebase_admin.App:
    """Initialize the default Firebase app once; reuse it if someone else already did."""
    try:
        return firebase_admin.get_app()
    except ValueError:
        pass
    options = {"projectId": settings.firebase_project_id} if settings.firebase_project_id else None
    return firebase_admin.initialize_app(_build_credential(), options)


@lru_cache(maxsize=1)
def get_firestore_client():
    """Firestore client with service (elevated) credentials."""
    return firestore.client(app=get_firebase_app())
