from fastapi import APIRouter, Depends, HTTPException, Query
from typing import Optional
from dashboard.authentication.schemas import Admitted
from dashboard.authentication.security import require_admin
from dashboard.config import Settings, get_settings
from dashboard.dependencies import get_dispatcher, get_store
from dashboard.events import schemas, utils
from dashboard.listing.controller import ALL, ListController
from dashboard.moderation.dispatcher import ModerationDispatcher
from dashboard.store.base import EVENTS, DocumentStore

router = APIRouter(prefix="/events", tags=["Events"])


@router.get("/", response_model=schemas.EventPage)
def list_events(
    q: str = Query("", description="Search by title, description or location"),
    type: str = Query(ALL, description="all, public or private"),
    page: int = Query(1, ge=1),
    page_size: Optional[int] = Query(None, ge=1, le=100),
    admin: Admitted = Depends(require_admin),
    store: DocumentStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    controller = ListController(utils.load_events(store), EVENTS, page_size or settings.events_page_size)
    controller.set_query(q)
    controller.set_category_filter(type)
    controller.go_to_page(page)
    view = controller.view()
    filtered = controller.filtered_items
    return schemas.EventPage(
        **dict(view),
        type_counts=utils.count_by_type(filtered),
        total_attendees=utils.total_attendees(filtered),
    )


@router.get("/{event_id}", response_model=schemas.Event)
def get_event(event_id: str, admin: Admitted = Depends(require_admin), store: DocumentStore = Depends(get_store)):
    event = utils.get_event(store, event_id)
    if not event:
        raise HTTPException(status_code=404, detail="Event not found")
    return event


@router.delete("/{event_id}")
def delete_event(
    event_id: str,
    admin: Admitted = Depends(require_admin),
    store: DocumentStore = Depends(get_store),
    dispatcher: ModerationDispatcher = Depends(get_dispatcher),
):
    """Permanently delete an event. This cannot be undone."""
    dispatcher.delete_event(utils.events_snapshot(store), event_id)
    return {"message": f"Event {event_id} deleted."}
