"""
Shared fixtures: a temporary JSON document store seeded with a small events
platform, a write-recording store wrapper for failure injection, and an
app client whose collaborators all point at the temporary store.
"""

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from dashboard import dependencies
from dashboard.authentication.gate import SessionStore
from dashboard.authentication.provider import LocalIdentityProvider, hash_password
from dashboard.authentication.schemas import Session
from dashboard.authentication.security import get_current_session
from dashboard.exceptions import StoreError
from dashboard.main import app
from dashboard.moderation.dispatcher import ModerationDispatcher
from dashboard.store.base import EVENTS, REPORTS, USERS, DocumentStore
from dashboard.store.json_store import JsonDocumentStore

FIXED_NOW = datetime(2025, 8, 1, 12, 0, tzinfo=timezone.utc)
ADMIN_PASSWORD = "AdminPass1"
USER_PASSWORD = "UserPass1"


# ────────────────────────────────
# Store helpers
# ────────────────────────────────
class RecordingStore(DocumentStore):
    """Passes everything through to ``inner``, recording successful writes.

    ``fail_on_write=n`` makes the n-th write attempt raise StoreError once.
    """

    def __init__(self, inner: DocumentStore, fail_on_write=None):
        self.inner = inner
        self.fail_on_write = fail_on_write
        self.attempts = 0
        self.writes = []

    def _attempt(self, kind, collection, doc_id):
        self.attempts += 1
        if self.attempts == self.fail_on_write:
            raise StoreError(f"simulated failure on {kind} {collection}/{doc_id}")

    def read_all(self, collection):
        return self.inner.read_all(collection)

    def read_one(self, collection, doc_id):
        return self.inner.read_one(collection, doc_id)

    def update_fields(self, collection, doc_id, fields):
        self._attempt("update", collection, doc_id)
        self.inner.update_fields(collection, doc_id, fields)
        self.writes.append(("update", collection, doc_id))

    def delete_by_id(self, collection, doc_id):
        self._attempt("delete", collection, doc_id)
        self.inner.delete_by_id(collection, doc_id)
        self.writes.append(("delete", collection, doc_id))

    def create(self, collection, fields, parent=None):
        self._attempt("create", collection, parent)
        doc_id = self.inner.create(collection, fields, parent)
        self.writes.append(("create", collection, doc_id))
        return doc_id


def _ts(days_ago: int) -> str:
    return (FIXED_NOW - timedelta(days=days_ago)).isoformat()


@pytest.fixture
def store(tmp_path):
    """Empty store under pytest's tmp dir."""
    return JsonDocumentStore(str(tmp_path / "data"))


@pytest.fixture
def seeded_store(store):
    """Store holding an admin, three members, seven events and three reports."""
    store._save(USERS, [
        {"id": "admin1", "name": "Ada Admin", "email": "ada@events.test", "role": "admin",
         "status": "active", "passwordHash": hash_password(ADMIN_PASSWORD), "createdAt": _ts(30)},
        {"id": "u1", "name": "Bob Host", "email": "bob@events.test", "role": "user",
         "status": "active", "passwordHash": hash_password(USER_PASSWORD), "createdAt": _ts(3)},
        {"id": "u2", "name": "Carol Smith", "email": "carol@events.test", "role": "user",
         "status": "disabled", "createdAt": _ts(2)},
        {"id": "u3", "displayName": "Dan Brown", "email": "dan@mail.test", "role": "user",
         "status": "banned", "createdAt": _ts(1)},
    ])
    store._save(EVENTS, [
        {"id": f"e{i}", "title": f"Event {i}", "description": "A community meetup",
         "location": "Berlin" if i % 2 else "Lisbon", "type": "Public" if i <= 4 else "private",
         "date": "2025-08-04 _ 2025-08-05", "hostId": "u1", "hostName": "Bob Host",
         "time": "18:00", "capacity": 50, "currentAttendees": i, "createdAt": _ts(10 - i)}
        for i in range(1, 8)
    ])
    store._save(REPORTS, [
        {"id": "r1", "reason": "Spam", "description": "Posting ads everywhere",
         "eventId": "e1", "eventTitle": "Event 1", "eventHostId": "u1",
         "reporterId": "u2", "reporterName": "Carol Smith", "status": "pending", "createdAt": _ts(1)},
        {"id": "r2", "reason": "Harassment", "description": "Rude host",
         "eventId": "e2", "eventTitle": "Event 2", "eventHostId": "u1",
         "reporterId": "u3", "reporterName": "Dan Brown", "status": "pending", "createdAt": _ts(2)},
        {"id": "r3", "reason": "Fake event", "description": "Never happened",
         "eventId": "e3", "eventTitle": "Event 3", "eventHostId": "u1",
         "reporterId": "u2", "reporterName": "Carol Smith", "status": "resolved",
         "action": "review_event", "actionTakenAt": _ts(1), "createdAt": _ts(5)},
    ])
    return store


@pytest.fixture
def recording_store(seeded_store):
    def _make(fail_on_write=None):
        return RecordingStore(seeded_store, fail_on_write=fail_on_write)
    return _make


@pytest.fixture
def dispatcher(seeded_store):
    return ModerationDispatcher(seeded_store, clock=lambda: FIXED_NOW)


@pytest.fixture
def provider(seeded_store):
    return LocalIdentityProvider(seeded_store, secret="test-secret")


@pytest.fixture
def session_store(provider, seeded_store):
    sessions = SessionStore(provider, seeded_store)
    sessions.mount()
    yield sessions
    sessions.unmount()


# ────────────────────────────────
# App client
# ────────────────────────────────
@pytest.fixture
def client(seeded_store, provider, session_store, dispatcher):
    """TestClient with every collaborator pointed at the seeded store."""
    app.dependency_overrides[dependencies.get_store] = lambda: seeded_store
    app.dependency_overrides[dependencies.get_provider] = lambda: provider
    app.dependency_overrides[dependencies.get_session_store] = lambda: session_store
    app.dependency_overrides[dependencies.get_dispatcher] = lambda: dispatcher
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_user(client):
    """
    Override ``get_current_session`` to act as a signed-in user.
    Admission still runs for real, so only ``admin1`` gets through.
    """
    def _set_user(user_id: str = "admin1"):
        session = Session(user_id=user_id, token=f"token-{user_id}")
        app.dependency_overrides[get_current_session] = lambda: session
        return session

    return _set_user
