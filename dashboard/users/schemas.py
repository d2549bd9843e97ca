from pydantic import BaseModel, ConfigDict, Field, model_validator
from enum import Enum
from typing import Dict, Optional
from datetime import datetime
from dashboard.listing.schemas import PageView


class UserStatus(str, Enum):
    ACTIVE = "active"
    DISABLED = "disabled"
    BANNED = "banned"


ADMIN_ROLE = "admin"


class User(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    name: Optional[str] = None
    display_name: Optional[str] = Field(None, alias="displayName")
    email: Optional[str] = None
    role: Optional[str] = None  # "admin" or an ordinary role
    status: UserStatus = UserStatus.ACTIVE
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")
    banned_at: Optional[datetime] = Field(None, alias="bannedAt")
    ban_until: Optional[datetime] = Field(None, alias="banUntil")

    @model_validator(mode="before")
    @classmethod
    def _fill_defaults(cls, data):
        if isinstance(data, dict):
            data = dict(data)
            # Older documents carry displayName instead of name
            if not data.get("name") and data.get("displayName"):
                data["name"] = data["displayName"]
            if data.get("status") not in {s.value for s in UserStatus}:
                data["status"] = UserStatus.ACTIVE.value
        return data

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE


# EDIT-USER CONTRACT (validated by the moderation dispatcher, not here,
# so a malformed email never reaches the store)
class UserUpdate(BaseModel):
    name: str = ""
    email: str = ""
    status: Optional[UserStatus] = None


class UserStatusUpdate(BaseModel):
    status: UserStatus


class UserPage(PageView[User]):
    status_counts: Dict[str, int]  # of the filtered set
