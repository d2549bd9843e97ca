from pydantic import BaseModel, ConfigDict, Field, computed_field
from enum import Enum
from typing import Dict, Optional, Tuple, Union
from datetime import datetime
from dashboard.listing.schemas import PageView

DATE_RANGE_SEPARATOR = "_"  # "2025-08-04 _ 2025-08-05"


class EventType(str, Enum):
    PUBLIC = "public"
    PRIVATE = "private"


class Event(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    title: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    date: Optional[Union[datetime, str]] = None  # timestamp or "start _ end" string
    time: Optional[str] = None
    type: Optional[str] = None  # "public" / "private", any case
    category: Optional[str] = None
    capacity: Optional[int] = None
    attendees: Optional[int] = Field(None, alias="currentAttendees")
    host_id: Optional[str] = Field(None, alias="hostId")
    host_name: Optional[str] = Field(None, alias="hostName")
    banner_url: Optional[str] = Field(None, alias="bannerUrl")
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")

    @computed_field
    @property
    def normalized_type(self) -> str:
        return (self.type or EventType.PUBLIC.value).lower()

    @property
    def date_range(self) -> Optional[Tuple[str, Optional[str]]]:
        """(start, end) of a delimited date string; end is None for a single date."""
        if not isinstance(self.date, str) or DATE_RANGE_SEPARATOR not in self.date:
            return None
        start, _, end = (part.strip() for part in self.date.partition(DATE_RANGE_SEPARATOR))
        return start, end or None

    @computed_field
    @property
    def date_label(self) -> str:
        if not self.date:
            return "N/A"
        dates = self.date_range
        if dates:
            start, end = dates
            return start + (f" to {end}" if end else "")
        if isinstance(self.date, datetime):
            return self.date.strftime("%Y-%m-%d %H:%M")
        return self.date


class EventPage(PageView[Event]):
    type_counts: Dict[str, int]  # of the filtered set
    total_attendees: int
