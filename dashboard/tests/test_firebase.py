"""
test_firebase.py – Firestore store and Firebase identity provider.

Both run against in-memory stand-ins for the Firestore client and the
Identity Toolkit endpoint; firebase_admin itself must be installed.
"""

import httpx
import pytest

pytest.importorskip("firebase_admin")

from google.api_core import exceptions as google_exceptions  # noqa: E402

from dashboard.authentication import firebase_provider  # noqa: E402
from dashboard.authentication.firebase_provider import FirebaseIdentityProvider  # noqa: E402
from dashboard.exceptions import DocumentNotFound, InvalidCredentials, ProviderUnavailable, StoreError  # noqa: E402
from dashboard.store.firestore_store import FirestoreDocumentStore  # noqa: E402


# ────────────────────────────────
# Firestore client stand-in
# ────────────────────────────────
class FakeSnapshot:
    def __init__(self, doc_id, data):
        self.id = doc_id
        self._data = data
        self.exists = data is not None

    def to_dict(self):
        return dict(self._data)


class FakeDocument:
    def __init__(self, docs, doc_id):
        self.docs = docs
        self.id = doc_id

    def get(self):
        return FakeSnapshot(self.id, self.docs.get(self.id))

    def update(self, fields):
        if self.id not in self.docs:
            raise google_exceptions.NotFound(f"No document {self.id}")
        self.docs[self.id].update(fields)

    def delete(self):
        self.docs.pop(self.id, None)


class FakeCollection:
    def __init__(self, docs, fail=False):
        self.docs = docs
        self.fail = fail

    def stream(self):
        if self.fail:
            raise google_exceptions.ServiceUnavailable("backend down")
        return [FakeSnapshot(k, v) for k, v in self.docs.items()]

    def document(self, doc_id):
        return FakeDocument(self.docs, doc_id)

    def add(self, fields):
        doc_id = f"n{len(self.docs) + 1}"
        self.docs[doc_id] = dict(fields)
        return None, FakeDocument(self.docs, doc_id)


class FakeClient:
    def __init__(self):
        self.collections = {}
        self.failing = set()

    def collection(self, path):
        return FakeCollection(self.collections.setdefault(path, {}), fail=path in self.failing)


@pytest.fixture
def firestore_client():
    client = FakeClient()
    client.collections["users"] = {"u1": {"name": "Bob", "status": "active"}}
    return client


@pytest.fixture
def firestore_store(firestore_client):
    return FirestoreDocumentStore(client=firestore_client)


def test_firestore_read_all_tags_ids(firestore_store):
    assert firestore_store.read_all("users") == [{"id": "u1", "name": "Bob", "status": "active"}]


def test_firestore_read_one_missing(firestore_store):
    assert firestore_store.read_one("users", "ghost") is None


def test_firestore_update_stamps(firestore_store, firestore_client):
    firestore_store.update_fields("users", "u1", {"status": "banned"})
    doc = firestore_client.collections["users"]["u1"]
    assert doc["status"] == "banned"
    assert "updatedAt" in doc


def test_firestore_update_maps_field_deletion(firestore_store, firestore_client):
    from firebase_admin import firestore

    from dashboard.store.base import DELETE_FIELD

    firestore_store.update_fields("users", "u1", {"banUntil": DELETE_FIELD, "status": "active"})
    doc = firestore_client.collections["users"]["u1"]
    assert doc["banUntil"] is firestore.DELETE_FIELD
    assert doc["status"] == "active"


def test_firestore_update_missing(firestore_store):
    with pytest.raises(DocumentNotFound):
        firestore_store.update_fields("users", "ghost", {"status": "banned"})


def test_firestore_api_error_wrapped(firestore_store, firestore_client):
    firestore_client.failing.add("reports")
    with pytest.raises(StoreError):
        firestore_store.read_all("reports")


def test_firestore_create_in_subcollection(firestore_store, firestore_client):
    doc_id = firestore_store.create("notifications", {"title": "Hi"}, parent="users/u1")
    assert firestore_client.collections["users/u1/notifications"][doc_id] == {"title": "Hi"}


def test_firestore_delete(firestore_store, firestore_client):
    firestore_store.delete_by_id("users", "u1")
    assert firestore_client.collections["users"] == {}


# ────────────────────────────────
# Firebase Authentication
# ────────────────────────────────
def _provider(handler):
    return FirebaseIdentityProvider(api_key="k", http_client=httpx.Client(transport=httpx.MockTransport(handler)))


def test_firebase_sign_in():
    def handler(request):
        assert request.url.params["key"] == "k"
        return httpx.Response(200, json={
            "localId": "admin1", "email": "ada@events.test", "idToken": "id-token", "expiresIn": "3600",
        })

    provider = _provider(handler)
    session = provider.sign_in("ada@events.test", "pw")
    assert session.user_id == "admin1"
    assert session.token == "id-token"
    assert provider.current_session() == session


def test_firebase_sign_in_rejected():
    provider = _provider(lambda request: httpx.Response(400, json={"error": {"message": "INVALID_PASSWORD"}}))
    with pytest.raises(InvalidCredentials):
        provider.sign_in("ada@events.test", "bad")


def test_firebase_unreachable():
    def handler(request):
        raise httpx.ConnectError("down", request=request)

    with pytest.raises(ProviderUnavailable):
        _provider(handler).sign_in("ada@events.test", "pw")


def test_firebase_verify_token(monkeypatch):
    monkeypatch.setattr(
        firebase_provider.firebase_auth, "verify_id_token",
        lambda token, app=None, check_revoked=False: {"uid": "admin1", "email": "ada@events.test", "exp": 1754049600},
    )
    session = _provider(lambda r: httpx.Response(500)).verify_token("tok")
    assert session.user_id == "admin1"
    assert session.expires_at.year == 2025


def test_firebase_verify_token_invalid(monkeypatch):
    def reject(token, app=None, check_revoked=False):
        raise ValueError("malformed")

    monkeypatch.setattr(firebase_provider.firebase_auth, "verify_id_token", reject)
    with pytest.raises(InvalidCredentials):
        _provider(lambda r: httpx.Response(500)).verify_token("tok")


def test_firebase_sign_out_revokes(monkeypatch):
    revoked = []
    monkeypatch.setattr(
        firebase_provider.firebase_auth, "revoke_refresh_tokens",
        lambda uid, app=None: revoked.append(uid),
    )
    provider = _provider(lambda r: httpx.Response(200, json={"localId": "u1", "idToken": "t"}))
    provider.sign_in("bob@events.test", "pw")
    provider.sign_out()
    assert revoked == ["u1"]
    assert provider.current_session() is None
