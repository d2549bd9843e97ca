"""
Defines the data models and enums for report moderation.
"""

from pydantic import BaseModel, ConfigDict, Field, model_validator
from enum import Enum
from typing import Optional
from datetime import datetime
from dashboard.listing.schemas import PageView


class ReportStatus(str, Enum):
    pending = "pending"
    resolved = "resolved"
    rejected = "rejected"


class ReportAction(str, Enum):
    """Outcome recorded on a closed report."""
    review_event = "review_event"
    user_banned = "user_banned"
    event_deleted = "event_deleted"
    no_action = "no_action"


class Report(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    reason: Optional[str] = None
    description: Optional[str] = None
    evidence_url: Optional[str] = Field(None, alias="evidenceImageUrl")
    event_id: Optional[str] = Field(None, alias="eventId")
    event_title: Optional[str] = Field(None, alias="eventTitle")  # denormalized
    event_host_id: Optional[str] = Field(None, alias="eventHostId")
    reporter_id: Optional[str] = Field(None, alias="reporterId")
    reporter_name: Optional[str] = Field(None, alias="reporterName")  # denormalized
    status: ReportStatus = ReportStatus.pending
    action: Optional[ReportAction] = None
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    action_taken_at: Optional[datetime] = Field(None, alias="actionTakenAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")

    @model_validator(mode="before")
    @classmethod
    def _tolerate_unknown_values(cls, data):
        # Documents written by other clients may carry statuses or actions we do not know
        if isinstance(data, dict):
            data = dict(data)
            if data.get("status") not in {s.value for s in ReportStatus}:
                data["status"] = ReportStatus.pending.value
            if data.get("action") not in {a.value for a in ReportAction}:
                data["action"] = None
        return data

    @property
    def is_actionable(self) -> bool:
        """Action controls are only offered while the report is pending."""
        return self.status == ReportStatus.pending


class ReportSummary(BaseModel):
    total_reports: int
    pending: int
    resolved: int
    rejected: int
    users_banned: int


class ReportActionRequest(BaseModel):
    action: str  # one of dashboard.moderation.schemas.ModerationAction


class ReportPage(PageView[Report]):
    summary: ReportSummary  # of the filtered set
