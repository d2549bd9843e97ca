from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from typing import Optional
from dashboard.authentication.gate import SessionStore
from dashboard.authentication.provider import IdentityProvider
from dashboard.authentication.schemas import Admitted, Denied, Session
from dashboard.dependencies import get_provider, get_session_store
from dashboard.exceptions import InvalidCredentials

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_session(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    provider: IdentityProvider = Depends(get_provider),
) -> Session:
    """Resolve the bearer token into a provider session."""
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        return provider.verify_token(credentials.credentials)
    except InvalidCredentials as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
            headers={"WWW-Authenticate": "Bearer"},
        )


def require_admin(
    session: Session = Depends(get_current_session),
    session_store: SessionStore = Depends(get_session_store),
) -> Admitted:
    """Only admitted admins get through; any other session is signed out."""
    outcome = session_store.admit(session)
    if isinstance(outcome, Denied):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=outcome.reason)
    return outcome
