from collections import Counter
from typing import Dict, List, Optional, Sequence
from dashboard.moderation.snapshot import Snapshot
from dashboard.store.base import USERS, DocumentStore
from dashboard.users import schemas


def load_users(store: DocumentStore) -> List[schemas.User]:
    """Every user document, admins included."""
    return [schemas.User(**doc) for doc in store.read_all(USERS)]


def users_snapshot(store: DocumentStore) -> Snapshot[schemas.User]:
    """Users staff may manage; admin accounts are left out."""
    return Snapshot.of(u for u in load_users(store) if not u.is_admin)


def get_user(store: DocumentStore, user_id: str) -> Optional[schemas.User]:
    doc = store.read_one(USERS, user_id)
    return schemas.User(**doc) if doc else None


def count_by_status(users: Sequence[schemas.User]) -> Dict[str, int]:
    counts = Counter(u.status.value for u in users)
    return {s.value: counts.get(s.value, 0) for s in schemas.UserStatus}


def is_active(user: schemas.User) -> bool:
    return user.status not in (schemas.UserStatus.BANNED, schemas.UserStatus.DISABLED)
