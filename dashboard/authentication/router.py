from fastapi import APIRouter, HTTPException, Depends, status
from dashboard.authentication import schemas
from dashboard.authentication.gate import SessionStore
from dashboard.authentication.provider import IdentityProvider
from dashboard.authentication.security import get_current_session, require_admin
from dashboard.dependencies import get_provider, get_session_store

router = APIRouter(prefix="/auth", tags=["authentication"])


# Login
@router.post('/login', response_model=schemas.Token)
def login(credentials: schemas.LoginRequest, session_store: SessionStore = Depends(get_session_store)):
    outcome = session_store.login(credentials.email, credentials.password)
    if isinstance(outcome, schemas.Denied):
        if not outcome.signed_in:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=outcome.reason)
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=outcome.reason)
    return {"access_token": outcome.session.token, "token_type": "bearer"}


# Logout
@router.post('/logout')
def logout(
    session: schemas.Session = Depends(get_current_session),
    provider: IdentityProvider = Depends(get_provider),
):
    provider.sign_out(session)
    return {"message": "Successfully logged out."}


# Who Am I
@router.get("/whoami", response_model=schemas.AdminProfile)
def whoami(admin: schemas.Admitted = Depends(require_admin)):
    data = admin.admin_data
    return {
        "user_id": admin.session.user_id,
        "email": data.get("email") or admin.session.email,
        "name": data.get("name") or data.get("displayName"),
        "role": data.get("role"),
    }
