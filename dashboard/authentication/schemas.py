from pydantic import BaseModel
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Union
from datetime import datetime


# SESSION LIFECYCLE
class SessionState(str, Enum):
    LOADING = "loading"                          # ⏳ Waiting for the first provider notification
    UNAUTHENTICATED = "unauthenticated"          # 🚪 Sent to the sign-in screen
    AUTHENTICATED_ADMIN = "authenticated_admin"  # 🛡️ May reach management screens


# SESSION CONTRACT (what the identity provider hands back)
class Session(BaseModel):
    user_id: str
    email: Optional[str] = None
    token: str
    expires_at: Optional[datetime] = None


# ADMIN ROLE CHECK RESULT
class AdminCheck(BaseModel):
    success: bool
    is_admin: bool = False
    admin_data: Optional[Dict[str, Any]] = None
    error: Optional[str] = None


# ADMISSION OUTCOME
@dataclass(frozen=True)
class Admitted:
    session: Session
    admin_data: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Denied:
    reason: str
    signed_in: bool = True  # False when the provider rejected the credentials


SessionOutcome = Union[Admitted, Denied]


# LOGIN CONTRACT
class LoginRequest(BaseModel):
    email: str
    password: str


# TOKEN RESPONSE CONTRACT
class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


# WHO AM I
class AdminProfile(BaseModel):
    user_id: str
    email: Optional[str] = None
    name: Optional[str] = None
    role: Optional[str] = None
