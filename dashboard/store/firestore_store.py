"""
Cloud Firestore document store, reached through firebase_admin.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional

import firebase_admin
from firebase_admin import credentials, firestore
from google.api_core import exceptions as google_exceptions

from dashboard.exceptions import DocumentNotFound, StoreError
from dashboard.store.base import DELETE_FIELD, DocumentStore, utcnow

logger = logging.getLogger(__name__)


def init_firebase_app(credentials_path: Optional[str] = None, project_id: Optional[str] = None):
    """Initialize the default firebase_admin app once and return it."""
    try:
        return firebase_admin.get_app()
    except ValueError:
        cred = credentials.Certificate(credentials_path) if credentials_path else None
        options = {"projectId": project_id} if project_id else None
        return firebase_admin.initialize_app(cred, options)


class FirestoreDocumentStore(DocumentStore):

    def __init__(self, client=None):
        self._db = client if client is not None else firestore.client()

    def read_all(self, collection: str) -> List[Dict[str, Any]]:
        try:
            return [{"id": snap.id, **snap.to_dict()} for snap in self._db.collection(collection).stream()]
        except google_exceptions.GoogleAPICallError as e:
            logger.error("Error fetching %s: %s", collection, e)
            raise StoreError(f"Could not read {collection}") from e

    def read_one(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        try:
            snap = self._db.collection(collection).document(doc_id).get()
        except google_exceptions.GoogleAPICallError as e:
            logger.error("Error fetching %s/%s: %s", collection, doc_id, e)
            raise StoreError(f"Could not read {collection}/{doc_id}") from e
        if not snap.exists:
            return None
        return {"id": snap.id, **snap.to_dict()}

    def update_fields(self, collection: str, doc_id: str, fields: Mapping[str, Any]) -> None:
        payload = {
            key: firestore.DELETE_FIELD if value is DELETE_FIELD else value
            for key, value in fields.items()
        }
        payload["updatedAt"] = utcnow()
        try:
            self._db.collection(collection).document(doc_id).update(payload)
        except google_exceptions.NotFound as e:
            raise DocumentNotFound(collection, doc_id) from e
        except google_exceptions.GoogleAPICallError as e:
            logger.error("Error updating %s/%s: %s", collection, doc_id, e)
            raise StoreError(f"Could not update {collection}/{doc_id}") from e

    def delete_by_id(self, collection: str, doc_id: str) -> None:
        try:
            self._db.collection(collection).document(doc_id).delete()
        except google_exceptions.GoogleAPICallError as e:
            logger.error("Error deleting %s/%s: %s", collection, doc_id, e)
            raise StoreError(f"Could not delete {collection}/{doc_id}") from e

    def create(self, collection: str, fields: Mapping[str, Any], parent: Optional[str] = None) -> str:
        path = self._collection_path(collection, parent)
        try:
            _, ref = self._db.collection(path).add(dict(fields))
        except google_exceptions.GoogleAPICallError as e:
            logger.error("Error creating document in %s: %s", path, e)
            raise StoreError(f"Could not create document in {path}") from e
        return ref.id
