"""
Data access layer contract.

Every list operation returns the whole collection; filtering, ordering and
pagination happen in ``dashboard.listing``. Each returned document is a plain
dict tagged with its identifier under ``"id"``.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

USERS = "users"
EVENTS = "events"
REPORTS = "reports"
NOTIFICATIONS = "notifications"


class _DeleteField:
    def __repr__(self):
        return "DELETE_FIELD"


# Passed as a value to update_fields to remove the key instead of setting it
DELETE_FIELD = _DeleteField()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def subcollection(parent_collection: str, parent_id: str, name: str) -> str:
    """Path of a sub-collection, e.g. ``users/u1/notifications``."""
    return f"{parent_collection}/{parent_id}/{name}"


class DocumentStore(ABC):

    @abstractmethod
    def read_all(self, collection: str) -> List[Dict[str, Any]]:
        """Return every document of ``collection``."""

    @abstractmethod
    def read_one(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        """Return one document, or None when it does not exist."""

    @abstractmethod
    def update_fields(self, collection: str, doc_id: str, fields: Mapping[str, Any]) -> None:
        """Merge ``fields`` into an existing document and stamp ``updatedAt``.

        Keys whose value is ``DELETE_FIELD`` are removed from the document.
        Raises DocumentNotFound when the document does not exist.
        """

    @abstractmethod
    def delete_by_id(self, collection: str, doc_id: str) -> None:
        """Hard-delete a document."""

    @abstractmethod
    def create(self, collection: str, fields: Mapping[str, Any], parent: Optional[str] = None) -> str:
        """Add a document and return its new id.

        ``parent`` is a document path (``users/u1``) under which ``collection``
        lives as a sub-collection.
        """

    @staticmethod
    def _collection_path(collection: str, parent: Optional[str]) -> str:
        return f"{parent}/{collection}" if parent else collection
