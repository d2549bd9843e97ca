from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime


class DashboardStats(BaseModel):
    total_users: int
    active_users: int  # neither banned nor disabled
    total_events: int
    public_events: int
    private_events: int
    total_reports: int
    pending_reports: int


class Activity(BaseModel):
    type: str  # "user", "event" or "report"
    message: str
    timestamp: Optional[datetime] = None
    time_ago: str


class DashboardHome(BaseModel):
    stats: DashboardStats
    recent_activity: List[Activity]
