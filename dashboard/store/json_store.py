"""
File-backed document store.

Each collection path maps to one JSON file under ``data_dir``
(``users/u1/notifications`` → ``<data_dir>/users/u1/notifications.json``)
holding a list of documents. Writes go through a temp file and a move so a
crash never leaves a half-written collection behind, and every
read-modify-write holds the store lock so concurrent requests cannot drop
each other's changes.
"""

import json
import logging
import os
import shutil
import tempfile
import threading
import uuid
from datetime import date, datetime
from typing import Any, Dict, List, Mapping, Optional

from dashboard.exceptions import DocumentNotFound, StoreError
from dashboard.store.base import DELETE_FIELD, DocumentStore, utcnow

logger = logging.getLogger(__name__)


def _convert_datetime_to_string(data: Any) -> Any:
    """Recursively turn datetimes into ISO strings so they survive json.dump."""
    if isinstance(data, dict):
        return {k: _convert_datetime_to_string(v) for k, v in data.items()}
    if isinstance(data, list):
        return [_convert_datetime_to_string(v) for v in data]
    if isinstance(data, (datetime, date)):
        return data.isoformat()
    return data


class JsonDocumentStore(DocumentStore):

    def __init__(self, data_dir: str):
        self.data_dir = data_dir
        self._lock = threading.RLock()
        os.makedirs(self.data_dir, exist_ok=True)

    # ────────────────────────────────
    # JSON helpers
    # ────────────────────────────────
    def _path(self, collection: str) -> str:
        return os.path.join(self.data_dir, *collection.split("/")) + ".json"

    def _load(self, collection: str) -> List[Dict[str, Any]]:
        path = self._path(collection)
        if not os.path.exists(path):
            return []
        try:
            with open(path, "r", encoding="utf-8") as f:
                content = f.read().strip()
        except OSError as e:
            raise StoreError(f"Could not read {collection}: {e}") from e
        if not content:
            return []
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            logger.error("Corrupted collection file %s", path)
            raise StoreError(f"Collection {collection} is corrupted") from e
        if not isinstance(data, list):
            raise StoreError(f"Collection {collection} is not a list of documents")
        return data

    def _save(self, collection: str, docs: List[Dict[str, Any]]) -> None:
        path = self._path(collection)
        try:
            os.makedirs(os.path.dirname(path), exist_ok=True)
            tmp_fd, tmp_path = tempfile.mkstemp(dir=os.path.dirname(path))
            os.close(tmp_fd)
            try:
                with open(tmp_path, "w", encoding="utf-8") as f:
                    json.dump(_convert_datetime_to_string(docs), f, indent=2)
                shutil.move(tmp_path, path)
            finally:
                if os.path.exists(tmp_path):
                    os.remove(tmp_path)
        except OSError as e:
            raise StoreError(f"Could not write {collection}: {e}") from e

    # ────────────────────────────────
    # DocumentStore
    # ────────────────────────────────
    def read_all(self, collection: str) -> List[Dict[str, Any]]:
        return [dict(doc) for doc in self._load(collection)]

    def read_one(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        for doc in self._load(collection):
            if doc.get("id") == doc_id:
                return dict(doc)
        return None

    def update_fields(self, collection: str, doc_id: str, fields: Mapping[str, Any]) -> None:
        with self._lock:
            docs = self._load(collection)
            for doc in docs:
                if doc.get("id") == doc_id:
                    for key, value in fields.items():
                        if value is DELETE_FIELD:
                            doc.pop(key, None)
                        else:
                            doc[key] = value
                    doc["updatedAt"] = utcnow()
                    self._save(collection, docs)
                    return
        raise DocumentNotFound(collection, doc_id)

    def delete_by_id(self, collection: str, doc_id: str) -> None:
        with self._lock:
            docs = self._load(collection)
            remaining = [d for d in docs if d.get("id") != doc_id]
            if len(remaining) == len(docs):
                raise DocumentNotFound(collection, doc_id)
            self._save(collection, remaining)

    def create(self, collection: str, fields: Mapping[str, Any], parent: Optional[str] = None) -> str:
        path = self._collection_path(collection, parent)
        doc_id = uuid.uuid4().hex
        with self._lock:
            docs = self._load(path)
            docs.append({"id": doc_id, **fields})
            self._save(path, docs)
        return doc_id
