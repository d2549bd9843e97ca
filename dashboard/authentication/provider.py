"""
Identity providers.

Sign-in, sign-out and session-change notifications are delegated to an
external provider. ``LocalIdentityProvider`` keeps password hashes on the
user documents of the configured store and issues its own JWTs, for
development and tests. The Firebase Authentication provider lives in
``dashboard.authentication.firebase_provider``.
"""

import logging
import threading
import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional, Set

from jose import JWTError, jwt
from passlib.context import CryptContext

from dashboard.authentication.schemas import Session
from dashboard.exceptions import InvalidCredentials
from dashboard.store.base import USERS, DocumentStore

logger = logging.getLogger(__name__)

SessionCallback = Callable[[Optional[Session]], None]

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    return pwd_context.verify(password, hashed)


class IdentityProvider(ABC):
    """Holds the current session and notifies subscribers when it changes."""

    def __init__(self):
        self._current: Optional[Session] = None
        self._listeners: List[SessionCallback] = []
        # Callbacks always run outside the lock
        self._lock = threading.Lock()

    def on_session_change(self, callback: SessionCallback) -> Callable[[], None]:
        """Subscribe; the callback fires immediately with the current session."""
        with self._lock:
            self._listeners.append(callback)
            current = self._current
        callback(current)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._listeners:
                    self._listeners.remove(callback)

        return unsubscribe

    def current_session(self) -> Optional[Session]:
        return self._current

    def _set_current(self, session: Optional[Session]) -> None:
        with self._lock:
            self._current = session
            listeners = list(self._listeners)
        for callback in listeners:
            callback(session)

    def sign_in(self, email: str, password: str) -> Session:
        session = self._authenticate(email, password)
        self._set_current(session)
        return session

    def sign_out(self, session: Optional[Session] = None) -> None:
        """End ``session`` (the current one by default) so its token stops working."""
        target = session or self._current
        if target is None:
            return
        self._revoke(target)
        with self._lock:
            was_current = self._current is not None and self._current.token == target.token
        if was_current:
            self._set_current(None)

    @abstractmethod
    def _authenticate(self, email: str, password: str) -> Session:
        """Return a session or raise InvalidCredentials."""

    @abstractmethod
    def verify_token(self, token: str) -> Session:
        """Return the session a bearer token belongs to or raise InvalidCredentials."""

    @abstractmethod
    def _revoke(self, session: Session) -> None:
        ...


# ────────────────────────────────
# Local (store-backed) provider
# ────────────────────────────────
class LocalIdentityProvider(IdentityProvider):

    def __init__(self, store: DocumentStore, secret: str, algorithm: str = "HS256",
                 expire_minutes: int = 60):
        super().__init__()
        self.store = store
        self.secret = secret
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes
        self._revoked: Set[str] = set()

    def _authenticate(self, email: str, password: str) -> Session:
        wanted = (email or "").strip().lower()
        user = next(
            (u for u in self.store.read_all(USERS) if (u.get("email") or "").lower() == wanted),
            None,
        )
        if not user or not user.get("passwordHash") or not verify_password(password, user["passwordHash"]):
            logger.info("Failed sign-in for %s", wanted)
            raise InvalidCredentials()
        return self._issue(user["id"], user.get("email"))

    def _issue(self, user_id: str, email: Optional[str]) -> Session:
        expires_at = datetime.now(timezone.utc) + timedelta(minutes=self.expire_minutes)
        claims = {"sub": user_id, "email": email, "jti": uuid.uuid4().hex, "exp": expires_at}
        token = jwt.encode(claims, self.secret, algorithm=self.algorithm)
        return Session(user_id=user_id, email=email, token=token, expires_at=expires_at)

    def verify_token(self, token: str) -> Session:
        try:
            claims = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except JWTError:
            raise InvalidCredentials("Invalid or expired token")
        if claims.get("jti") in self._revoked:
            raise InvalidCredentials("Token has been revoked")
        return Session(
            user_id=claims["sub"],
            email=claims.get("email"),
            token=token,
            expires_at=datetime.fromtimestamp(claims["exp"], tz=timezone.utc),
        )

    def _revoke(self, session: Session) -> None:
        try:
            claims = jwt.get_unverified_claims(session.token)
        except JWTError:
            return
        if claims.get("jti"):
            self._revoked.add(claims["jti"])

