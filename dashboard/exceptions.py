"""
Error taxonomy for the admin dashboard.

Validation errors are raised before any external call and shown inline.
External-call failures leave local snapshots untouched.
Authorization failures always end the offending session.
"""

from typing import Optional


class DashboardError(Exception):
    """Base class for every error raised by the dashboard."""

    message = "Something went wrong."

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)
        self.message = message or self.message


# ────────────────────────────────
# Validation
# ────────────────────────────────
class InvalidUserData(DashboardError):
    message = "Please fill in all required fields"


class InvalidAction(DashboardError):
    message = "Unsupported moderation action."


# ────────────────────────────────
# External store
# ────────────────────────────────
class StoreError(DashboardError):
    message = "The data store could not complete the request."


class DocumentNotFound(StoreError):
    def __init__(self, collection: str, doc_id: str):
        super().__init__(f"{collection}/{doc_id} not found")
        self.collection = collection
        self.doc_id = doc_id


class ActionFailed(DashboardError):
    message = "Action failed. Please try again."


# ────────────────────────────────
# Conflicts
# ────────────────────────────────
class ReportAlreadyClosed(DashboardError):
    def __init__(self, report_id: str, status: str):
        super().__init__(f"Report {report_id} is already {status}.")
        self.report_id = report_id
        self.status = status


class ActionInProgress(DashboardError):
    message = "Another action on this item is still in progress."


# ────────────────────────────────
# Authorization
# ────────────────────────────────
class InvalidCredentials(DashboardError):
    message = "Invalid email or password"


class AccessDenied(DashboardError):
    message = "Access denied. Only administrators can access this dashboard."


class ProviderUnavailable(DashboardError):
    message = "The identity provider could not be reached."
