import httpx
import pytest
from fastapi.testclient import TestClient

from fakes import LOCAL_ADMIN_PASSWORD, FakeIdentityProvider, GeminiStub, MemoryDocumentStore
from stickerverse.config import settings
from stickerverse.core.security import get_identity, get_session_manager, get_store
from stickerverse.core.session import SessionManager
from stickerverse.integrations.ai_helpers import get_ai_http_client
from stickerverse.main import app
from stickerverse.services.admin_mutations import AdminContext
from stickerverse.services.recommendations import RecommendationDebouncer, get_recommender


@pytest.fixture
def store():
    s = MemoryDocumentStore()
    s.seed("users/admin-1", {"uid": "admin-1", "email": "admin-1@example.com", "role": "admin"})
    s.seed("users/user-1", {"uid": "user-1", "email": "user-1@example.com", "role": "user"})
    return s


@pytest.fixture
def identity():
    return FakeIdentityProvider()


@pytest.fixture
def ctx(identity, store):
    return AdminContext(identity=identity, store=store)


@pytest.fixture
def gemini(monkeypatch):
    monkeypatch.setattr(settings, "gemini_api_key", "test-key")
    return GeminiStub(payload={"width": 800, "height": 600})


@pytest.fixture
def recommendation_calls():
    return []


@pytest.fixture
def client(store, identity, gemini, recommendation_calls):
    sessions = SessionManager(identity, store, LOCAL_ADMIN_PASSWORD)

    async def fake_fetch(names):
        recommendation_calls.append(list(names))
        return [f"More like {n}" for n in names]

    async def ai_client():
        async with httpx.AsyncClient(transport=gemini.transport()) as c:
            yield c

    recommender = RecommendationDebouncer(fake_fetch, delay=0)

    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_identity] = lambda: identity
    app.dependency_overrides[get_session_manager] = lambda: sessions
    app.dependency_overrides[get_recommender] = lambda: recommender
    app.dependency_overrides[get_ai_http_client] = ai_client
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def sticker_payload():
    return {
        "name": "Happy Cat",
        "description": "A very happy cat sticker",
        "price": 3.5,
        "stock": 20,
        "category": "animals",
        "tags": ["cat", " cute "],
        "available_materials": ["vinyl-glossy", "holographic"],
    }
