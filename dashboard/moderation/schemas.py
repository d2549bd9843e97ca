from enum import Enum
from typing import Dict, Tuple
from dashboard.reports.schemas import ReportAction, ReportStatus


class ModerationAction(str, Enum):
    """Staff actions that close a pending report."""
    review_event = "review_event"
    ban_user = "ban_user"
    delete_event = "delete_event"
    reject = "reject"


# Resulting report status and recorded action, per staff action
OUTCOMES: Dict[ModerationAction, Tuple[ReportStatus, ReportAction]] = {
    ModerationAction.review_event: (ReportStatus.resolved, ReportAction.review_event),
    ModerationAction.ban_user: (ReportStatus.resolved, ReportAction.user_banned),
    ModerationAction.delete_event: (ReportStatus.resolved, ReportAction.event_deleted),
    ModerationAction.reject: (ReportStatus.rejected, ReportAction.no_action),
}
