"""
Admin-only session gate.

A session that fails the admin role check is signed out entirely; hiding
the management screens alone is never enough.
"""

import logging
import threading
from typing import Callable, Optional

from dashboard.authentication.provider import IdentityProvider
from dashboard.authentication.schemas import (
    AdminCheck,
    Admitted,
    Denied,
    Session,
    SessionOutcome,
    SessionState,
)
from dashboard.exceptions import AccessDenied, InvalidCredentials, StoreError
from dashboard.store.base import USERS, DocumentStore
from dashboard.users.schemas import ADMIN_ROLE

logger = logging.getLogger(__name__)


def check_admin_status(store: DocumentStore, user_id: str) -> AdminCheck:
    """Look up the role stored on the user's document."""
    try:
        user = store.read_one(USERS, user_id)
    except StoreError as e:
        logger.error("Error checking admin status for %s: %s", user_id, e)
        return AdminCheck(success=False, error=str(e))
    if user is None:
        return AdminCheck(success=True, is_admin=False)
    is_admin = user.get("role") == ADMIN_ROLE
    data = None
    if is_admin:
        data = {k: v for k, v in user.items() if k != "passwordHash"}
    return AdminCheck(success=True, is_admin=is_admin, admin_data=data)


class SessionStore:
    """Process-wide session state with a single writer: the provider callback.

    Route guards and ``login`` never read ``state``/``session``; they admit the
    session they were handed, since other requests move the shared state.
    """

    def __init__(self, provider: IdentityProvider, store: DocumentStore):
        self.provider = provider
        self.store = store
        self.state = SessionState.LOADING
        self.session: Optional[Session] = None
        self.admin_data: Optional[dict] = None
        self._lock = threading.RLock()
        self._unsubscribe: Optional[Callable[[], None]] = None

    # ────────────────────────────────
    # Lifecycle
    # ────────────────────────────────
    def mount(self) -> None:
        with self._lock:
            if self._unsubscribe is None:
                self._unsubscribe = self.provider.on_session_change(self._on_session_change)

    def unmount(self) -> None:
        with self._lock:
            if self._unsubscribe is not None:
                self._unsubscribe()
                self._unsubscribe = None
            self._clear(SessionState.LOADING)

    @property
    def is_admitted(self) -> bool:
        return self.state == SessionState.AUTHENTICATED_ADMIN

    def _clear(self, state: SessionState) -> None:
        with self._lock:
            self.state = state
            self.session = None
            self.admin_data = None

    def _on_session_change(self, session: Optional[Session]) -> None:
        if session is None:
            self._clear(SessionState.UNAUTHENTICATED)
            return
        outcome = self.admit(session)
        if isinstance(outcome, Admitted):
            with self._lock:
                self.state = SessionState.AUTHENTICATED_ADMIN
                self.session = outcome.session
                self.admin_data = outcome.admin_data
        else:
            self._clear(SessionState.UNAUTHENTICATED)

    # ────────────────────────────────
    # Admission
    # ────────────────────────────────
    def admit(self, session: Session) -> SessionOutcome:
        """Admit an admin session; sign anything else out."""
        check = check_admin_status(self.store, session.user_id)
        if check.success and check.is_admin:
            return Admitted(session=session, admin_data=check.admin_data or {})

        reason = AccessDenied.message if check.success else "Could not verify administrator access."
        logger.warning("Denied session for user %s: %s", session.user_id, reason)
        self.provider.sign_out(session)
        return Denied(reason=reason)

    def login(self, email: str, password: str) -> SessionOutcome:
        self.mount()
        try:
            session = self.provider.sign_in(email, password)
        except InvalidCredentials as e:
            return Denied(reason=e.message, signed_in=False)
        outcome = self.admit(session)
        if isinstance(outcome, Admitted):
            logger.info("Admin %s signed in", session.user_id)
        return outcome

    def logout(self) -> None:
        self.provider.sign_out()
