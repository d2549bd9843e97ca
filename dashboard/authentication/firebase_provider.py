"""
Firebase Authentication identity provider.

Password sign-in goes through the Identity Toolkit REST endpoint; tokens are
verified and revoked with firebase_admin.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import httpx
from firebase_admin import auth as firebase_auth
from firebase_admin import exceptions as firebase_exceptions

from dashboard.authentication.provider import IdentityProvider
from dashboard.authentication.schemas import Session
from dashboard.exceptions import InvalidCredentials, ProviderUnavailable

logger = logging.getLogger(__name__)

SIGN_IN_URL = "https://identitytoolkit.googleapis.com/v1/accounts:signInWithPassword"


class FirebaseIdentityProvider(IdentityProvider):

    def __init__(self, api_key: str, http_client: Optional[httpx.Client] = None, app=None):
        super().__init__()
        self.api_key = api_key
        self.http = http_client or httpx.Client(timeout=10.0)
        self.app = app

    def _authenticate(self, email: str, password: str) -> Session:
        try:
            response = self.http.post(
                SIGN_IN_URL,
                params={"key": self.api_key},
                json={"email": email, "password": password, "returnSecureToken": True},
            )
        except httpx.HTTPError as e:
            logger.error("Firebase sign-in request failed: %s", e)
            raise ProviderUnavailable() from e
        if response.status_code != 200:
            raise InvalidCredentials()
        body = response.json()
        expires_in = int(body.get("expiresIn", 3600))
        return Session(
            user_id=body["localId"],
            email=body.get("email"),
            token=body["idToken"],
            expires_at=datetime.now(timezone.utc) + timedelta(seconds=expires_in),
        )

    def verify_token(self, token: str) -> Session:
        try:
            decoded = firebase_auth.verify_id_token(token, app=self.app, check_revoked=True)
        except (ValueError, firebase_exceptions.FirebaseError):
            raise InvalidCredentials("Invalid or expired token")
        return Session(
            user_id=decoded["uid"],
            email=decoded.get("email"),
            token=token,
            expires_at=datetime.fromtimestamp(decoded["exp"], tz=timezone.utc) if "exp" in decoded else None,
        )

    def _revoke(self, session: Session) -> None:
        try:
            firebase_auth.revoke_refresh_tokens(session.user_id, app=self.app)
        except (ValueError, firebase_exceptions.FirebaseError):
            logger.exception("Could not revoke Firebase session for %s", session.user_id)
