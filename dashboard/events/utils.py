from collections import Counter
from typing import Dict, List, Optional, Sequence
from dashboard.events import schemas
from dashboard.moderation.snapshot import Snapshot
from dashboard.store.base import EVENTS, DocumentStore


def load_events(store: DocumentStore) -> List[schemas.Event]:
    return [schemas.Event(**doc) for doc in store.read_all(EVENTS)]


def events_snapshot(store: DocumentStore) -> Snapshot[schemas.Event]:
    return Snapshot.of(load_events(store))


def get_event(store: DocumentStore, event_id: str) -> Optional[schemas.Event]:
    doc = store.read_one(EVENTS, event_id)
    return schemas.Event(**doc) if doc else None


def count_by_type(events: Sequence[schemas.Event]) -> Dict[str, int]:
    """Public/private counts; the type field is compared case-insensitively."""
    counts = Counter((e.type or "").lower() for e in events)
    return {t.value: counts.get(t.value, 0) for t in schemas.EventType}


def total_attendees(events: Sequence[schemas.Event]) -> int:
    return sum(e.attendees or 0 for e in events)
