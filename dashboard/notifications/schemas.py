from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime


class Notification(BaseModel):
    """A message delivered to a user's ``notifications`` sub-collection."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: Optional[str] = None
    type: str  # "warning", ...
    title: str
    message: str
    report_id: Optional[str] = Field(None, alias="reportId")
    event_id: Optional[str] = Field(None, alias="eventId")
    severity: str = "low"  # "low", "medium", "high"
    read: bool = False
    created_at: Optional[datetime] = Field(None, alias="createdAt")
