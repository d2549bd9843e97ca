"""
Create-only notifications delivered to ``users/{user_id}/notifications``.
"""

import logging

from dashboard.notifications import schemas
from dashboard.store.base import DocumentStore, NOTIFICATIONS, USERS, utcnow

logger = logging.getLogger(__name__)


def send_notification_to_user(store: DocumentStore, user_id: str, notification: schemas.Notification) -> schemas.Notification:
    """Persist a notification for ``user_id`` and return it with its new id."""
    fields = notification.model_dump(by_alias=True, exclude={"id", "read", "created_at"})
    fields["createdAt"] = utcnow()
    fields["read"] = False
    doc_id = store.create(NOTIFICATIONS, fields, parent=f"{USERS}/{user_id}")
    logger.info("Sent %s notification %s to user %s", notification.type, doc_id, user_id)
    return schemas.Notification(id=doc_id, **fields)


def build_warning(reason: str, report_id: str, event_id: str) -> schemas.Notification:
    return schemas.Notification(
        type="warning",
        title="Warning: Content Violation",
        message=(
            f"Your content has been reported for: {reason}. "
            "Please review our community guidelines."
        ),
        report_id=report_id,
        event_id=event_id,
        severity="medium",
    )


def send_warning_notification(store: DocumentStore, user_id: str, reason: str,
                              report_id: str, event_id: str) -> schemas.Notification:
    """Warn the host of a reported event about the report."""
    return send_notification_to_user(store, user_id, build_warning(reason, report_id, event_id))
