import pytest

from fakes import FailingStore
from stickerverse.schemas.sticker import StickerCreate, StickerUpdate
from stickerverse.services.admin_mutations import (
    STORE_FAILURE,
    AdminContext,
    change_role,
    create_sticker,
    delete_sticker,
    update_sticker,
)


@pytest.fixture
def sticker(sticker_payload):
    return StickerCreate(**sticker_payload)


def _stickers(store):
    return store.query("stickers")


@pytest.mark.parametrize(
    "token, reason",
    [
        ("", "missing-token"),
        ("not-a-token", "invalid-token"),
        ("token-nobody", "record-missing"),
        ("token-user-1", "insufficient-role"),
        ("local_admin_xyz", "local-admin-unverifiable"),
    ],
)
def test_rejected_create_writes_nothing(ctx, store, sticker, token, reason):
    result = create_sticker(token, sticker, ctx)
    assert not result.ok
    assert result.not_authorized
    assert result.reason == reason
    assert result.error.startswith(f"Not authorized ({reason})")
    assert store.writes == 0
    assert _stickers(store) == []


def test_create_returns_new_id_and_stamps(ctx, store, sticker):
    result = create_sticker("token-admin-1", sticker, ctx)
    assert result.ok and isinstance(result.value, str)
    doc = store.get(f"stickers/{result.value}")
    assert doc["name"] == "Happy Cat"
    assert doc["tags"] == ["cat", "cute"]
    assert doc["created_at"] == doc["updated_at"]


def test_update_advances_updated_at(ctx, store, sticker):
    new_id = create_sticker("token-admin-1", sticker, ctx).value
    before = store.get(f"stickers/{new_id}")

    result = update_sticker("token-admin-1", new_id, StickerUpdate(price=4.25), ctx)
    assert result.ok and result.value is True

    after = store.get(f"stickers/{new_id}")
    assert after["price"] == 4.25
    assert after["name"] == before["name"]
    assert after["updated_at"] > before["updated_at"]
    assert after["created_at"] == before["created_at"]


def test_empty_update_only_touches_timestamp(ctx, store, sticker):
    new_id = create_sticker("token-admin-1", sticker, ctx).value
    before = store.get(f"stickers/{new_id}")

    assert update_sticker("token-admin-1", new_id, StickerUpdate(), ctx).ok

    after = store.get(f"stickers/{new_id}")
    assert after["updated_at"] > before["updated_at"]
    assert {k: v for k, v in after.items() if k != "updated_at"} == {
        k: v for k, v in before.items() if k != "updated_at"
    }


def test_update_missing_sticker_is_store_failure(ctx):
    result = update_sticker("token-admin-1", "nope", StickerUpdate(price=1), ctx)
    assert not result.ok
    assert not result.not_authorized
    assert result.reason == STORE_FAILURE
    assert result.store_code == "not-found"


def test_delete_twice(ctx, store, sticker):
    new_id = create_sticker("token-admin-1", sticker, ctx).value
    assert delete_sticker("token-admin-1", new_id, ctx).ok
    assert store.get(f"stickers/{new_id}") is None

    again = delete_sticker("token-admin-1", new_id, ctx)
    assert not again.ok
    assert again.store_code == "not-found"


def test_non_admin_cannot_delete(ctx, store):
    store.seed("stickers/s1", {"name": "Keep me"})
    result = delete_sticker("token-user-1", "s1", ctx)
    assert result.reason == "insufficient-role"
    assert store.get("stickers/s1") is not None


def test_store_failure_is_reported_not_raised(identity, store, sticker):
    failing = FailingStore("unavailable")
    failing.docs.update(store.docs)
    result = create_sticker("token-admin-1", sticker, AdminContext(identity=identity, store=failing))
    assert not result.ok
    assert result.reason == STORE_FAILURE
    assert result.store_code == "unavailable"
    assert "Firestore error (Code: unavailable)" in result.error


def test_admin_promotes_user(ctx, store):
    result = change_role("token-admin-1", "user-1", "admin", ctx)
    assert result.ok
    assert store.get("users/user-1")["role"] == "admin"


def test_user_cannot_promote_self(ctx, store):
    result = change_role("token-user-1", "user-1", "admin", ctx)
    assert result.reason == "insufficient-role"
    assert store.get("users/user-1")["role"] == "user"


def test_admin_cannot_demote_self(ctx, store):
    result = change_role("token-admin-1", "admin-1", "user", ctx)
    assert result.reason == "self-demotion"
    assert store.get("users/admin-1")["role"] == "admin"
    assert store.writes == 0


def test_admin_demotes_another_admin(ctx, store):
    store.seed("users/admin-2", {"role": "admin"})
    assert change_role("token-admin-1", "admin-2", "user", ctx).ok
    assert store.get("users/admin-2")["role"] == "user"


def test_role_change_for_unknown_user_is_not_found(ctx):
    result = change_role("token-admin-1", "ghost", "admin", ctx)
    assert result.store_code == "not-found"


def test_role_is_read_on_every_call(ctx, store):
    store.seed("users/admin-1", {"role": "user"})
    first = change_role("token-admin-1", "user-1", "admin", ctx)
    assert first.reason == "insufficient-role"
    assert store.get("users/user-1")["role"] == "user"
