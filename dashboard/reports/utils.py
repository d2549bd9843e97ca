"""
Loading and summarizing report documents.
"""

from typing import List, Optional, Sequence
from dashboard.moderation.snapshot import Snapshot
from dashboard.reports import schemas
from dashboard.store.base import REPORTS, DocumentStore


def load_reports(store: DocumentStore) -> List[schemas.Report]:
    """Return all reports as Pydantic models."""
    return [schemas.Report(**doc) for doc in store.read_all(REPORTS)]


def reports_snapshot(store: DocumentStore) -> Snapshot[schemas.Report]:
    return Snapshot.of(load_reports(store))


def get_report(store: DocumentStore, report_id: str) -> Optional[schemas.Report]:
    """Fetch specific report by ID."""
    doc = store.read_one(REPORTS, report_id)
    return schemas.Report(**doc) if doc else None


def filter_reports_by_status(reports: Sequence[schemas.Report], status: schemas.ReportStatus) -> List[schemas.Report]:
    return [r for r in reports if r.status == status]


def summarize(reports: Sequence[schemas.Report]) -> schemas.ReportSummary:
    return schemas.ReportSummary(
        total_reports=len(reports),
        pending=len(filter_reports_by_status(reports, schemas.ReportStatus.pending)),
        resolved=len(filter_reports_by_status(reports, schemas.ReportStatus.resolved)),
        rejected=len(filter_reports_by_status(reports, schemas.ReportStatus.rejected)),
        users_banned=sum(1 for r in reports if r.action == schemas.ReportAction.user_banned),
    )
