"""
Moderation action dispatcher.

Maps one staff action onto its group of store writes and, only once every
write has succeeded, onto a patched snapshot. The store has no transactions:
when a write in the group fails, field updates already applied are written
back to their previous values, the action raises ActionFailed and the
caller's snapshot stays exactly as it was.
"""

import logging
import re
import threading
from contextlib import contextmanager
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Mapping, Optional, Set, Tuple, Union

from dashboard.events.schemas import Event
from dashboard.exceptions import (
    ActionFailed,
    ActionInProgress,
    DocumentNotFound,
    InvalidAction,
    InvalidUserData,
    ReportAlreadyClosed,
    StoreError,
)
from dashboard.moderation import snapshot as snapshots
from dashboard.moderation.schemas import OUTCOMES, ModerationAction
from dashboard.moderation.snapshot import Snapshot
from dashboard.reports.schemas import Report
from dashboard.store.base import DELETE_FIELD, EVENTS, REPORTS, USERS, DocumentStore, utcnow
from dashboard.users.schemas import User, UserStatus

logger = logging.getLogger(__name__)

DEFAULT_BAN_DAYS = 30
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class WriteGroup:
    """Writes issued for one action, remembering how to undo field updates."""

    def __init__(self, store: DocumentStore):
        self.store = store
        self.writes = 0
        self._undo: List[Tuple[str, str, Dict[str, Any]]] = []

    def update(self, collection: str, doc_id: str, fields: Mapping[str, Any]) -> None:
        current = self.store.read_one(collection, doc_id)
        if current is None:
            raise DocumentNotFound(collection, doc_id)
        # Keys the document lacked are removed again on rollback
        previous = {key: current.get(key, DELETE_FIELD) for key in fields}
        self.store.update_fields(collection, doc_id, fields)
        self.writes += 1
        self._undo.append((collection, doc_id, previous))

    def delete(self, collection: str, doc_id: str) -> None:
        # Irreversible, so always issued last in a group
        self.store.delete_by_id(collection, doc_id)
        self.writes += 1

    def rollback(self) -> None:
        for collection, doc_id, previous in reversed(self._undo):
            try:
                self.store.update_fields(collection, doc_id, previous)
            except StoreError:
                logger.exception("Could not restore %s/%s after a failed action", collection, doc_id)
        self._undo.clear()


class ModerationDispatcher:

    def __init__(self, store: DocumentStore, ban_days: int = DEFAULT_BAN_DAYS,
                 clock: Callable[[], datetime] = utcnow):
        self.store = store
        self.ban_days = ban_days
        self.clock = clock
        self._in_flight: Set[Tuple[str, str]] = set()
        self._claim_lock = threading.Lock()

    # ────────────────────────────────
    # Helpers
    # ────────────────────────────────
    @contextmanager
    def _claim(self, *targets: Tuple[str, str]):
        """Refuse a second action on a target while the first is still writing."""
        with self._claim_lock:
            if any(t in self._in_flight for t in targets):
                raise ActionInProgress()
            self._in_flight.update(targets)
        try:
            yield
        finally:
            with self._claim_lock:
                self._in_flight.difference_update(targets)

    def _execute(self, description: str, writes: Callable[[WriteGroup], None]) -> None:
        group = WriteGroup(self.store)
        try:
            writes(group)
        except StoreError as e:
            logger.error("%s failed after %d write(s): %s", description, group.writes, e)
            group.rollback()
            raise ActionFailed() from e
        logger.info("%s succeeded (%d write(s))", description, group.writes)

    def status_fields(self, status: UserStatus, now: datetime) -> Dict[str, Any]:
        """Fields written for a status change; banning also stamps the ban window."""
        fields: Dict[str, Any] = {"status": status.value}
        if status == UserStatus.BANNED:
            fields["bannedAt"] = now
            fields["banUntil"] = now + timedelta(days=self.ban_days)
        return fields

    @staticmethod
    def _require(snapshot: Snapshot, collection: str, doc_id: str):
        item = snapshot.get(doc_id)
        if item is None:
            raise DocumentNotFound(collection, doc_id)
        return item

    # ────────────────────────────────
    # Report resolution
    # ────────────────────────────────
    def resolve_report(self, reports: Snapshot[Report], report_id: str,
                       action: Union[ModerationAction, str]) -> Snapshot[Report]:
        """Close a pending report with one of the staff actions."""
        try:
            action = ModerationAction(action)
        except ValueError:
            raise InvalidAction(f"Unsupported moderation action: {action}") from None

        report = self._require(reports, REPORTS, report_id)
        if not report.is_actionable:
            raise ReportAlreadyClosed(report_id, report.status.value)

        targets = [(REPORTS, report_id)]
        if action == ModerationAction.ban_user:
            if not report.event_host_id:
                raise InvalidAction("Report has no event host to ban.")
            targets.append((USERS, report.event_host_id))
        elif action == ModerationAction.delete_event:
            if not report.event_id:
                raise InvalidAction("Report has no event to delete.")
            targets.append((EVENTS, report.event_id))

        status, outcome = OUTCOMES[action]

        with self._claim(*targets):
            self._ensure_still_pending(report_id)
            now = self.clock()
            report_fields = {"status": status.value, "action": outcome.value, "actionTakenAt": now}

            def writes(group: WriteGroup) -> None:
                if action == ModerationAction.ban_user:
                    group.update(USERS, report.event_host_id, self.status_fields(UserStatus.BANNED, now))
                    group.update(REPORTS, report_id, report_fields)
                elif action == ModerationAction.delete_event:
                    group.update(REPORTS, report_id, report_fields)
                    group.delete(EVENTS, report.event_id)
                else:
                    group.update(REPORTS, report_id, report_fields)

            self._execute(f"{action.value} on report {report_id}", writes)

        return snapshots.with_report_resolution(reports, report_id, status, outcome, now)

    def _ensure_still_pending(self, report_id: str) -> None:
        # Another staff session may have closed it since the snapshot was read
        try:
            current = self.store.read_one(REPORTS, report_id)
        except StoreError as e:
            logger.error("Could not re-read report %s: %s", report_id, e)
            raise ActionFailed() from e
        if current is None:
            raise DocumentNotFound(REPORTS, report_id)
        report = Report(**current)
        if not report.is_actionable:
            raise ReportAlreadyClosed(report_id, report.status.value)

    # ────────────────────────────────
    # Direct actions
    # ────────────────────────────────
    def set_user_status(self, users: Snapshot[User], user_id: str,
                        status: Union[UserStatus, str]) -> Snapshot[User]:
        status = UserStatus(status)
        self._require(users, USERS, user_id)

        with self._claim((USERS, user_id)):
            now = self.clock()
            fields = self.status_fields(status, now)
            self._execute(
                f"set status {status.value} on user {user_id}",
                lambda group: group.update(USERS, user_id, fields),
            )

        return snapshots.with_user_status(
            users, user_id, status, now,
            banned_at=fields.get("bannedAt"), ban_until=fields.get("banUntil"),
        )

    def delete_event(self, events: Snapshot[Event], event_id: str) -> Snapshot[Event]:
        """Permanently remove an event. There is no soft delete."""
        self._require(events, EVENTS, event_id)

        with self._claim((EVENTS, event_id)):
            self._execute(f"delete event {event_id}", lambda group: group.delete(EVENTS, event_id))

        return snapshots.without_event(events, event_id)

    def update_user(self, users: Snapshot[User], user_id: str, name: Optional[str], email: Optional[str],
                    status: Optional[Union[UserStatus, str]] = None) -> Snapshot[User]:
        """Edit a user's name and email, optionally changing status in the same group."""
        name = (name or "").strip()
        email = (email or "").strip()
        if not name or not email:
            raise InvalidUserData("Please fill in all required fields")
        if not EMAIL_PATTERN.match(email):
            raise InvalidUserData("Please enter a valid email address")
        status = UserStatus(status) if status is not None else None
        self._require(users, USERS, user_id)

        with self._claim((USERS, user_id)):
            now = self.clock()
            status_fields = self.status_fields(status, now) if status is not None else {}

            def writes(group: WriteGroup) -> None:
                group.update(USERS, user_id, {"name": name, "email": email})
                if status_fields:
                    group.update(USERS, user_id, status_fields)

            self._execute(f"update user {user_id}", writes)

        users = snapshots.with_user_profile(users, user_id, name, email, now)
        if status is not None:
            users = snapshots.with_user_status(
                users, user_id, status, now,
                banned_at=status_fields.get("bannedAt"), ban_until=status_fields.get("banUntil"),
            )
        return users
