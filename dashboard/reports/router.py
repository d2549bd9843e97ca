"""
Report listing and moderation actions. Every route requires an admitted admin.
"""

from fastapi import APIRouter, Depends, HTTPException, Query, status
from typing import Optional
from dashboard.authentication.schemas import Admitted
from dashboard.authentication.security import require_admin
from dashboard.config import Settings, get_settings
from dashboard.dependencies import get_dispatcher, get_store
from dashboard.listing.controller import ALL, ListController
from dashboard.moderation.dispatcher import ModerationDispatcher
from dashboard.notifications import utils as notification_utils
from dashboard.notifications.schemas import Notification
from dashboard.reports import schemas, utils
from dashboard.store.base import REPORTS, DocumentStore

router = APIRouter(prefix="/reports", tags=["Reports"])


@router.get("/", response_model=schemas.ReportPage)
def get_all_reports(
    q: str = Query("", description="Search by reason, description, event title or reporter"),
    status: str = Query(ALL, description="all, pending, resolved or rejected"),
    page: int = Query(1, ge=1),
    page_size: Optional[int] = Query(None, ge=1, le=100),
    admin: Admitted = Depends(require_admin),
    store: DocumentStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    """Filtered, paginated reports with counts for the filtered set."""
    controller = ListController(utils.load_reports(store), REPORTS, page_size or settings.reports_page_size)
    controller.set_query(q)
    controller.set_category_filter(status)
    controller.go_to_page(page)
    view = controller.view()
    return schemas.ReportPage(**dict(view), summary=utils.summarize(controller.filtered_items))


@router.get("/summary", response_model=schemas.ReportSummary)
def get_summary(admin: Admitted = Depends(require_admin), store: DocumentStore = Depends(get_store)):
    return utils.summarize(utils.load_reports(store))


@router.get("/{report_id}", response_model=schemas.Report)
def get_report(report_id: str, admin: Admitted = Depends(require_admin), store: DocumentStore = Depends(get_store)):
    report = utils.get_report(store, report_id)
    if not report:
        raise HTTPException(status_code=404, detail="Report not found.")
    return report


@router.post("/{report_id}/actions", response_model=schemas.Report)
def take_action(
    report_id: str,
    request: schemas.ReportActionRequest,
    admin: Admitted = Depends(require_admin),
    store: DocumentStore = Depends(get_store),
    dispatcher: ModerationDispatcher = Depends(get_dispatcher),
):
    """Close a pending report: review_event, ban_user, delete_event or reject."""
    reports = dispatcher.resolve_report(utils.reports_snapshot(store), report_id, request.action)
    return reports.get(report_id)


@router.post("/{report_id}/warn", response_model=Notification, status_code=status.HTTP_201_CREATED)
def warn_host(report_id: str, admin: Admitted = Depends(require_admin), store: DocumentStore = Depends(get_store)):
    """Send the reported event's host a content-violation warning."""
    report = utils.get_report(store, report_id)
    if not report:
        raise HTTPException(status_code=404, detail="Report not found.")
    if not report.event_host_id:
        raise HTTPException(status_code=422, detail="Report has no event host to warn.")
    return notification_utils.send_warning_notification(
        store,
        report.event_host_id,
        reason=report.reason or "Content violation",
        report_id=report.id,
        event_id=report.event_id,
    )
