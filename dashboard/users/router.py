from fastapi import APIRouter, Depends, HTTPException, Query
from typing import Optional
from dashboard.authentication.schemas import Admitted
from dashboard.authentication.security import require_admin
from dashboard.config import Settings, get_settings
from dashboard.dependencies import get_dispatcher, get_store
from dashboard.listing.controller import ALL, ListController
from dashboard.moderation.dispatcher import ModerationDispatcher
from dashboard.store.base import USERS, DocumentStore
from dashboard.users import schemas, utils

router = APIRouter(prefix="/users", tags=["Users"])


# Admin: List users (admins are never listed)
@router.get("/", response_model=schemas.UserPage)
def list_users(
    q: str = Query("", description="Search by name or email"),
    status: str = Query(ALL, description="all, active, disabled or banned"),
    page: int = Query(1, ge=1),
    page_size: Optional[int] = Query(None, ge=1, le=100),
    admin: Admitted = Depends(require_admin),
    store: DocumentStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    controller = ListController(utils.load_users(store), USERS, page_size or settings.users_page_size)
    controller.set_query(q)
    controller.set_category_filter(status)
    controller.go_to_page(page)
    view = controller.view()
    return schemas.UserPage(**dict(view), status_counts=utils.count_by_status(controller.filtered_items))


# Admin: Get one user
@router.get("/{user_id}", response_model=schemas.User)
def get_user(user_id: str, admin: Admitted = Depends(require_admin), store: DocumentStore = Depends(get_store)):
    user = utils.get_user(store, user_id)
    if not user or user.is_admin:
        raise HTTPException(status_code=404, detail="User not found")
    return user


# Admin: Edit name/email (and optionally status)
@router.patch("/{user_id}", response_model=schemas.User)
def update_user(
    user_id: str,
    update: schemas.UserUpdate,
    admin: Admitted = Depends(require_admin),
    store: DocumentStore = Depends(get_store),
    dispatcher: ModerationDispatcher = Depends(get_dispatcher),
):
    users = utils.users_snapshot(store)
    patched = dispatcher.update_user(users, user_id, update.name, update.email, update.status)
    return patched.get(user_id)


# Admin: Enable / disable / ban
@router.patch("/{user_id}/status", response_model=schemas.User)
def update_user_status(
    user_id: str,
    status_update: schemas.UserStatusUpdate,
    admin: Admitted = Depends(require_admin),
    store: DocumentStore = Depends(get_store),
    dispatcher: ModerationDispatcher = Depends(get_dispatcher),
):
    users = utils.users_snapshot(store)
    patched = dispatcher.set_user_status(users, user_id, status_update.status)
    return patched.get(user_id)
