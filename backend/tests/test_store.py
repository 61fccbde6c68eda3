from unittest.mock import MagicMock

import pytest
from google.api_core import exceptions as gexc
from google.cloud import firestore as gcf

from stickerverse.core.store import DocumentStore, StoreError, UserScopedStore


@pytest.fixture
def fs():
    return MagicMock(name="firestore_client")


def test_update_stamps_server_timestamp(fs):
    DocumentStore(fs).update("stickers/s1", {"price": 2})
    fs.document.assert_called_once_with("stickers/s1")
    fs.document.return_value.update.assert_called_once_with({"price": 2, "updated_at": gcf.SERVER_TIMESTAMP})


def test_collection_prefix(fs):
    DocumentStore(fs, prefix="test_").get("users/u1/profile/address")
    fs.document.assert_called_once_with("test_users/u1/profile/address")


def test_missing_document_reads_as_none(fs):
    fs.document.return_value.get.return_value.exists = False
    assert DocumentStore(fs).get("stickers/nope") is None


def test_delete_requires_existence(fs):
    DocumentStore(fs).delete("stickers/s1")
    fs.write_option.assert_called_once_with(exists=True)
    fs.document.return_value.delete.assert_called_once_with(option=fs.write_option.return_value)


@pytest.mark.parametrize(
    "error, code",
    [
        (gexc.NotFound("no such document"), "not-found"),
        (gexc.PermissionDenied("nope"), "permission-denied"),
        (gexc.ServiceUnavailable("down"), "unavailable"),
        (gexc.InternalServerError("boom"), "unknown"),
    ],
)
def test_firestore_errors_are_wrapped(fs, error, code):
    fs.document.return_value.update.side_effect = error
    with pytest.raises(StoreError) as info:
        DocumentStore(fs).update("stickers/s1", {})
    assert info.value.code == code
    assert str(info.value).startswith(f"Firestore error (Code: {code})")


def test_document_path_shape_is_checked(fs):
    with pytest.raises(ValueError):
        DocumentStore(fs).get("stickers")


class TestUserScopedStore:
    @pytest.fixture
    def inner(self):
        return MagicMock(name="store")

    def test_catalog_is_public(self, inner):
        UserScopedStore(inner, None).get("stickers/s1")
        UserScopedStore(inner, None).query("stickers", order_by="name")
        assert inner.get.called and inner.query.called

    def test_own_subtree_only(self, inner):
        view = UserScopedStore(inner, "u1")
        view.set("users/u1/profile/address", {"city": "X"})
        view.get("users/u1")
        for path in ("users/u2", "users/u2/profile/address"):
            with pytest.raises(StoreError) as info:
                view.get(path)
            assert info.value.code == "permission-denied"
        with pytest.raises(StoreError):
            view.set("stickers/s1", {"price": 0})

    def test_anonymous_has_no_subtree(self, inner):
        with pytest.raises(StoreError):
            UserScopedStore(inner, None).set("users/None/profile/address", {})

    def test_orders_need_owner_filter(self, inner):
        view = UserScopedStore(inner, "u1")
        view.query("orders", where=[("user_id", "==", "u1")])
        with pytest.raises(StoreError):
            view.query("orders")
        with pytest.raises(StoreError):
            view.query("orders", where=[("user_id", "==", "u2")])
