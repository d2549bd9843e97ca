"""
Aggregate statistics and the recent-activity feed of the dashboard home.
"""

from datetime import datetime, timezone
from typing import List, Optional, Sequence
from dashboard.events.schemas import Event, EventType
from dashboard.reports.schemas import Report, ReportStatus
from dashboard.stats import schemas
from dashboard.users.schemas import User
from dashboard.users.utils import is_active

# How many of the newest items of each kind feed the activity list
RECENT_USERS = 2
RECENT_EVENTS = 2
RECENT_REPORTS = 1
MAX_ACTIVITY = 5


def compute_stats(users: Sequence[User], events: Sequence[Event], reports: Sequence[Report]) -> schemas.DashboardStats:
    return schemas.DashboardStats(
        total_users=len(users),
        active_users=sum(1 for u in users if is_active(u)),
        total_events=len(events),
        public_events=sum(1 for e in events if (e.type or "").lower() == EventType.PUBLIC.value),
        private_events=sum(1 for e in events if (e.type or "").lower() == EventType.PRIVATE.value),
        total_reports=len(reports),
        pending_reports=sum(1 for r in reports if r.status == ReportStatus.pending),
    )


def _aware(ts: datetime) -> datetime:
    return ts if ts.tzinfo else ts.replace(tzinfo=timezone.utc)


def _newest(items, count: int) -> list:
    dated = [i for i in items if i.created_at]
    return sorted(dated, key=lambda i: _aware(i.created_at), reverse=True)[:count]


def _plural(n: int, unit: str) -> str:
    return f"{n} {unit}{'s' if n > 1 else ''} ago"


def time_ago(timestamp: Optional[datetime], now: Optional[datetime] = None) -> str:
    if not timestamp:
        return "Unknown time"
    now = now or datetime.now(timezone.utc)
    seconds = (_aware(now) - _aware(timestamp)).total_seconds()
    hours = int(seconds // 3600)
    days = hours // 24
    if days > 0:
        return _plural(days, "day")
    if hours > 0:
        return _plural(hours, "hour")
    minutes = int(seconds // 60)
    return _plural(minutes, "minute") if minutes > 0 else "Just now"


def recent_activity(users: Sequence[User], events: Sequence[Event], reports: Sequence[Report],
                    now: Optional[datetime] = None) -> List[schemas.Activity]:
    activities = []

    for user in _newest(users, RECENT_USERS):
        activities.append(("user", f"New user registered: {user.display_name or user.email or 'Unknown User'}", user.created_at))

    for event in _newest(events, RECENT_EVENTS):
        kind = event.type or "event"
        label = f" ({event.type})" if event.type else ""
        date = event.date_label if event.date else "No date set"
        activities.append((
            "event",
            f'New {kind} created: "{event.title or "Untitled Event"}"{label} - {date}',
            event.created_at,
        ))

    for report in _newest(reports, RECENT_REPORTS):
        activities.append(("report", f"New report submitted: {report.reason or 'Content violation'}", report.created_at))

    activities.sort(key=lambda a: _aware(a[2]), reverse=True)
    return [
        schemas.Activity(type=kind, message=message, timestamp=ts, time_ago=time_ago(ts, now))
        for kind, message, ts in activities[:MAX_ACTIVITY]
    ]
