"""
stickerverse/core/store.py - Document store client.

Path-addressed document access over Firestore, in two credential tiers:

- `DocumentStore`: service (elevated) credentials. Used for every privileged write and
  for the role lookup during authorization.
- `UserScopedStore`: restricted view for one signed-in principal (or an anonymous visitor).
  It mirrors the access rules the store itself enforces for browser sessions: the catalog
  is public, a principal only touches its own `users/{uid}` subtree, and order queries must
  be filtered to the principal's own `user_id`.

Every write stamps `updated_at` (and `created_at` for new documents) with the server
timestamp. Firestore failures are re-raised as `StoreError` carrying the store's code.
"""
import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from google.api_core import exceptions as gexc
from google.cloud import firestore as gcf
from google.cloud.firestore_v1 import FieldFilter

logger = logging.getLogger("stickerverse.store")

Where = Sequence[Tuple[str, str, Any]]

_CODES = {
    gexc.NotFound: "not-found",
    gexc.PermissionDenied: "permission-denied",
    gexc.AlreadyExists: "already-exists",
    gexc.FailedPrecondition: "failed-precondition",
    gexc.Unauthenticated: "unauthenticated",
    gexc.DeadlineExceeded: "deadline-exceeded",
    gexc.ServiceUnavailable: "unavailable",
}


class StoreError(Exception):
    """A read or write the document store rejected or could not complete."""

    def __init__(self, code: str, message: str, action: str = "write"):
        super().__init__(message)
        self.code = code
        self.message = message
        self.action = action

    def __str__(self) -> str:
        return f"Firestore error (Code: {self.code}): {self.message}"


def _wrap(exc: gexc.GoogleAPICallError, action: str) -> StoreError:
    code = next((c for cls, c in _CODES.items() if isinstance(exc, cls)), "unknown")
    return StoreError(code, getattr(exc, "message", None) or str(exc), action)


def split_path(path: str) -> List[str]:
    parts = [p for p in path.strip("/").split("/") if p]
    if not parts:
        raise ValueError("empty document path")
    return parts


class DocumentStore:
    """Firestore access with service credentials."""

    tier = "service"

    def __init__(self, client, prefix: str = ""):
        self._client = client
        self._prefix = prefix

    # ---------- path helpers ----------
    def _full(self, path: str) -> str:
        parts = split_path(path)
        parts[0] = f"{self._prefix}{parts[0]}"
        return "/".join(parts)

    def _doc(self, path: str):
        if len(split_path(path)) % 2:
            raise ValueError(f"not a document path: {path}")
        return self._client.document(self._full(path))

    def _col(self, path: str):
        if not len(split_path(path)) % 2:
            raise ValueError(f"not a collection path: {path}")
        return self._client.collection(self._full(path))

    # ---------- reads ----------
    def get(self, path: str) -> Optional[Dict[str, Any]]:
        try:
            snap = self._doc(path).get()
        except gexc.GoogleAPICallError as exc:
            raise _wrap(exc, "read") from exc
        if not snap.exists:
            return None
        data = snap.to_dict() or {}
        data.setdefault("id", snap.id)
        return data

    def query(
        self,
        collection: str,
        where: Where = (),
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        q = self._col(collection)
        for field, op, value in where:
            q = q.where(filter=FieldFilter(field, op, value))
        if order_by:
            direction = gcf.Query.DESCENDING if descending else gcf.Query.ASCENDING
            q = q.order_by(order_by, direction=direction)
        if limit:
            q = q.limit(limit)
        out: List[Dict[str, Any]] = []
        try:
            for d in q.stream():
                data = d.to_dict() or {}
                data.setdefault("id", d.id)
                out.append(data)
        except gexc.GoogleAPICallError as exc:
            raise _wrap(exc, "read") from exc
        return out

    # ---------- writes ----------
    def add(self, collection: str, fields: Dict[str, Any]) -> str:
        """Create a document with a generated id and return that id."""
        ref = self._col(collection).document()
        data = {**fields, "created_at": gcf.SERVER_TIMESTAMP, "updated_at": gcf.SERVER_TIMESTAMP}
        try:
            ref.create(data)
        except gexc.GoogleAPICallError as exc:
            raise _wrap(exc, "write") from exc
        return ref.id

    def create(self, path: str, fields: Dict[str, Any]) -> None:
        """Create a document at a known path; fails with already-exists."""
        data = {**fields, "created_at": gcf.SERVER_TIMESTAMP, "updated_at": gcf.SERVER_TIMESTAMP}
        try:
            self._doc(path).create(data)
        except gexc.GoogleAPICallError as exc:
            raise _wrap(exc, "write") from exc

    def set(self, path: str, fields: Dict[str, Any]) -> None:
        """Upsert: replaces the whole document."""
        data = {**fields, "updated_at": gcf.SERVER_TIMESTAMP}
        try:
            self._doc(path).set(data)
        except gexc.GoogleAPICallError as exc:
            raise _wrap(exc, "write") from exc

    def update(self, path: str, fields: Dict[str, Any]) -> None:
        """Partial update of an existing document; not-found when it is missing."""
        data = {**fields, "updated_at": gcf.SERVER_TIMESTAMP}
        try:
            self._doc(path).update(data)
        except gexc.GoogleAPICallError as exc:
            raise _wrap(exc, "write") from exc

    def delete(self, path: str) -> None:
        """Delete an existing document; not-found when it is already gone."""
        try:
            self._doc(path).delete(option=self._client.write_option(exists=True))
        except gexc.GoogleAPICallError as exc:
            raise _wrap(exc, "write") from exc


PUBLIC_COLLECTIONS = ("stickers",)


class UserScopedStore:
    """Restricted view of a store for one principal (uid=None for anonymous visitors)."""

    tier = "user"

    def __init__(self, store, uid: Optional[str]):
        self._store = store
        self.uid = uid

    def _owns(self, path: str) -> bool:
        parts = split_path(path)
        return self.uid is not None and parts[0] == "users" and len(parts) > 1 and parts[1] == self.uid

    def _deny(self, path: str, action: str) -> StoreError:
        logger.warning("Rejected %s of %s for %s", action, path, self.uid or "anonymous")
        return StoreError("permission-denied", f"Missing or insufficient permissions for {path}", action)

    def get(self, path: str) -> Optional[Dict[str, Any]]:
        if split_path(path)[0] not in PUBLIC_COLLECTIONS and not self._owns(path):
            raise self._deny(path, "read")
        return self._store.get(path)

    def query(self, collection: str, where: Where = (), **kwargs) -> List[Dict[str, Any]]:
        if collection not in PUBLIC_COLLECTIONS and not self._owns(collection):
            owner_filter = ("user_id", "==", self.uid)
            if collection != "orders" or self.uid is None or owner_filter not in list(where):
                raise self._deny(collection, "read")
        return self._store.query(collection, where=where, **kwargs)

    def set(self, path: str, fields: Dict[str, Any]) -> None:
        if not self._owns(path):
            raise self._deny(path, "write")
        self._store.set(path, fields)
