from fastapi import APIRouter, Depends
from dashboard.authentication.schemas import Admitted
from dashboard.authentication.security import require_admin
from dashboard.dependencies import get_store
from dashboard.events.utils import load_events
from dashboard.reports.utils import load_reports
from dashboard.stats import schemas, utils
from dashboard.store.base import DocumentStore
from dashboard.users.utils import load_users

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("/stats", response_model=schemas.DashboardHome)
def get_dashboard(admin: Admitted = Depends(require_admin), store: DocumentStore = Depends(get_store)):
    """Totals across users, events and reports plus the latest activity."""
    users, events, reports = load_users(store), load_events(store), load_reports(store)
    return {
        "stats": utils.compute_stats(users, events, reports),
        "recent_activity": utils.recent_activity(users, events, reports),
    }
