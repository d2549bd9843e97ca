"""
test_store.py – JSON document store.
"""

import os
import threading
import time

import pytest

from dashboard.exceptions import DocumentNotFound, StoreError
from dashboard.store.base import DELETE_FIELD, NOTIFICATIONS, USERS, subcollection


def test_missing_collection_reads_empty(store):
    assert store.read_all("events") == []
    assert store.read_one("events", "e1") is None


def test_read_all_returns_tagged_documents(seeded_store):
    users = seeded_store.read_all(USERS)
    assert [u["id"] for u in users] == ["admin1", "u1", "u2", "u3"]


def test_read_returns_copies(seeded_store):
    doc = seeded_store.read_one(USERS, "u1")
    doc["status"] = "banned"
    assert seeded_store.read_one(USERS, "u1")["status"] == "active"


def test_update_merges_and_stamps(seeded_store):
    seeded_store.update_fields(USERS, "u1", {"name": "Robert"})
    doc = seeded_store.read_one(USERS, "u1")
    assert doc["name"] == "Robert"
    assert doc["email"] == "bob@events.test"
    assert doc["updatedAt"]


def test_update_removes_fields_marked_for_deletion(seeded_store):
    seeded_store.update_fields(USERS, "u1", {"banUntil": "2025-09-01", "bannedAt": "2025-08-01"})
    seeded_store.update_fields(USERS, "u1", {"banUntil": DELETE_FIELD, "bannedAt": DELETE_FIELD, "ghost": DELETE_FIELD})
    doc = seeded_store.read_one(USERS, "u1")
    assert "banUntil" not in doc
    assert "bannedAt" not in doc
    assert "ghost" not in doc


def test_concurrent_updates_do_not_drop_each_other(monkeypatch, seeded_store):
    original = seeded_store._save

    def slow_save(collection, docs):
        time.sleep(0.05)
        original(collection, docs)

    monkeypatch.setattr(seeded_store, "_save", slow_save)
    threads = [
        threading.Thread(target=seeded_store.update_fields, args=(USERS, "u1", {"status": "banned"})),
        threading.Thread(target=seeded_store.update_fields, args=(USERS, "u2", {"name": "Caroline"})),
        threading.Thread(target=seeded_store.create, args=(USERS, {"name": "Eve"})),
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    users = {u["id"]: u for u in seeded_store.read_all(USERS)}
    assert users["u1"]["status"] == "banned"
    assert users["u2"]["name"] == "Caroline"
    assert len(users) == 5


def test_update_missing_document(seeded_store):
    with pytest.raises(DocumentNotFound) as exc:
        seeded_store.update_fields(USERS, "ghost", {"name": "x"})
    assert exc.value.doc_id == "ghost"


def test_delete(seeded_store):
    seeded_store.delete_by_id("events", "e1")
    assert seeded_store.read_one("events", "e1") is None
    with pytest.raises(DocumentNotFound):
        seeded_store.delete_by_id("events", "e1")


def test_create_in_subcollection(store):
    doc_id = store.create(NOTIFICATIONS, {"title": "Hi"}, parent="users/u1")
    docs = store.read_all(subcollection(USERS, "u1", NOTIFICATIONS))
    assert docs == [{"id": doc_id, "title": "Hi"}]
    assert os.path.exists(os.path.join(store.data_dir, "users", "u1", "notifications.json"))


def test_corrupted_file_raises_store_error(store):
    with open(os.path.join(store.data_dir, "reports.json"), "w") as f:
        f.write("{not json")
    with pytest.raises(StoreError):
        store.read_all("reports")


def test_non_list_file_raises_store_error(store):
    with open(os.path.join(store.data_dir, "reports.json"), "w") as f:
        f.write('{"id": "r1"}')
    with pytest.raises(StoreError):
        store.read_all("reports")


def test_empty_file_reads_empty(store):
    open(os.path.join(store.data_dir, "users.json"), "w").close()
    assert store.read_all(USERS) == []
