import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from dashboard.authentication import router as auth_router
from dashboard.config import get_settings
from dashboard.events import router as events_router
from dashboard.exceptions import (
    AccessDenied,
    ActionFailed,
    ActionInProgress,
    DashboardError,
    DocumentNotFound,
    InvalidAction,
    InvalidCredentials,
    InvalidUserData,
    ProviderUnavailable,
    ReportAlreadyClosed,
    StoreError,
)
from dashboard.logging_config import configure_logging
from dashboard.reports import router as reports_router
from dashboard.stats import router as stats_router
from dashboard.users import router as users_router

configure_logging(get_settings().log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title="Events Admin Dashboard")

app.include_router(auth_router.router)
app.include_router(stats_router.router)
app.include_router(users_router.router)
app.include_router(events_router.router)
app.include_router(reports_router.router)

# Most specific first: DocumentNotFound is also a StoreError
ERROR_STATUS = [
    (InvalidUserData, 422),
    (InvalidAction, 422),
    (DocumentNotFound, 404),
    (ReportAlreadyClosed, 409),
    (ActionInProgress, 409),
    (InvalidCredentials, 401),
    (AccessDenied, 403),
    (ActionFailed, 502),
    (ProviderUnavailable, 502),
    (StoreError, 502),
]

STORE_FAILURE_MESSAGE = "Failed to load data. Please try again."


def status_for(exc: DashboardError) -> int:
    return next((code for cls, code in ERROR_STATUS if isinstance(exc, cls)), 500)


@app.exception_handler(DashboardError)
async def handle_dashboard_error(request: Request, exc: DashboardError):
    code = status_for(exc)
    message = exc.message
    if isinstance(exc, StoreError) and not isinstance(exc, DocumentNotFound):
        logger.error("Store failure on %s %s: %s", request.method, request.url.path, exc)
        message = STORE_FAILURE_MESSAGE
    elif code >= 500:
        logger.error("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc)
    return JSONResponse(status_code=code, content={"detail": message})


@app.get("/health")
def health():
    return {"status": "ok"}
