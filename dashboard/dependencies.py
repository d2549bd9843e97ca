"""
Process-wide collaborators, built once from settings and injected into
routes with ``Depends``. Tests swap them through ``app.dependency_overrides``.
"""

from functools import lru_cache

from dashboard.authentication.gate import SessionStore
from dashboard.authentication.provider import IdentityProvider, LocalIdentityProvider
from dashboard.config import get_settings
from dashboard.moderation.dispatcher import ModerationDispatcher
from dashboard.store.base import DocumentStore
from dashboard.store.json_store import JsonDocumentStore


@lru_cache()
def get_store() -> DocumentStore:
    settings = get_settings()
    if settings.store_backend == "firestore":
        from dashboard.store.firestore_store import FirestoreDocumentStore, init_firebase_app

        init_firebase_app(settings.firebase_credentials, settings.firebase_project_id)
        return FirestoreDocumentStore()
    return JsonDocumentStore(settings.data_dir)


@lru_cache()
def get_provider() -> IdentityProvider:
    settings = get_settings()
    if settings.auth_backend == "firebase":
        from dashboard.authentication.firebase_provider import FirebaseIdentityProvider
        from dashboard.store.firestore_store import init_firebase_app

        app = init_firebase_app(settings.firebase_credentials, settings.firebase_project_id)
        return FirebaseIdentityProvider(api_key=settings.firebase_api_key or "", app=app)
    return LocalIdentityProvider(
        store=get_store(),
        secret=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        expire_minutes=settings.access_token_expire_minutes,
    )


@lru_cache()
def get_session_store() -> SessionStore:
    session_store = SessionStore(get_provider(), get_store())
    session_store.mount()
    return session_store


@lru_cache()
def get_dispatcher() -> ModerationDispatcher:
    return ModerationDispatcher(get_store(), ban_days=get_settings().ban_duration_days)
