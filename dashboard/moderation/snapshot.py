"""
Immutable, screen-scoped copies of a collection.

A moderation action never edits a snapshot: once every external write has
succeeded, one of the typed update functions below returns a new snapshot
with the written fields applied.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Generic, Iterable, Iterator, Optional, Tuple, TypeVar

from dashboard.events.schemas import Event
from dashboard.reports.schemas import Report, ReportAction, ReportStatus
from dashboard.users.schemas import User, UserStatus

T = TypeVar("T")


@dataclass(frozen=True)
class Snapshot(Generic[T]):
    items: Tuple[T, ...] = ()

    @classmethod
    def of(cls, items: Iterable[T]) -> "Snapshot[T]":
        return cls(tuple(items))

    def __iter__(self) -> Iterator[T]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def get(self, doc_id: str) -> Optional[T]:
        return next((i for i in self.items if i.id == doc_id), None)

    def replace(self, doc_id: str, **changes) -> "Snapshot[T]":
        if self.get(doc_id) is None:
            raise KeyError(doc_id)
        return Snapshot(tuple(
            i.model_copy(update=changes) if i.id == doc_id else i
            for i in self.items
        ))

    def remove(self, doc_id: str) -> "Snapshot[T]":
        if self.get(doc_id) is None:
            raise KeyError(doc_id)
        return Snapshot(tuple(i for i in self.items if i.id != doc_id))


# ────────────────────────────────
# Typed updates
# ────────────────────────────────
def with_user_status(snapshot: Snapshot[User], user_id: str, status: UserStatus, updated_at: datetime,
                     banned_at: Optional[datetime] = None, ban_until: Optional[datetime] = None) -> Snapshot[User]:
    changes = {"status": status, "updated_at": updated_at}
    if status == UserStatus.BANNED:
        changes.update(banned_at=banned_at, ban_until=ban_until)
    return snapshot.replace(user_id, **changes)


def with_user_profile(snapshot: Snapshot[User], user_id: str, name: str, email: str,
                      updated_at: datetime) -> Snapshot[User]:
    return snapshot.replace(user_id, name=name, email=email, updated_at=updated_at)


def with_report_resolution(snapshot: Snapshot[Report], report_id: str, status: ReportStatus,
                           action: ReportAction, taken_at: datetime) -> Snapshot[Report]:
    return snapshot.replace(report_id, status=status, action=action,
                            action_taken_at=taken_at, updated_at=taken_at)


def without_event(snapshot: Snapshot[Event], event_id: str) -> Snapshot[Event]:
    return snapshot.remove(event_id)
