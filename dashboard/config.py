"""
Dashboard configuration.

All settings can be overridden with ``DASHBOARD_``-prefixed environment
variables or a ``.env`` file, e.g. ``DASHBOARD_STORE_BACKEND=firestore``.
"""

import os
from functools import lru_cache
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="DASHBOARD_",
        env_file=".env",
        extra="ignore",
    )

    # Data store
    store_backend: Literal["json", "firestore"] = "json"
    data_dir: str = os.path.join(os.path.dirname(__file__), "data")

    # Firebase
    firebase_credentials: Optional[str] = None  # service account JSON path
    firebase_project_id: Optional[str] = None
    firebase_api_key: Optional[str] = None  # web API key for password sign-in

    # Authentication
    auth_backend: Literal["local", "firebase"] = "local"
    jwt_secret: str = "change-me"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60

    # Moderation
    ban_duration_days: int = 30

    # Pagination
    users_page_size: int = 5
    events_page_size: int = 6
    reports_page_size: int = 2

    log_level: str = "INFO"


@lru_cache()
def get_settings() -> Settings:
    return Settings()
