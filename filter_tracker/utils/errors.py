"""
Centralized error types for the availability and booking core.

Services raise these; the app maps them onto HTTP responses in one place so
routers stay thin.
"""
from __future__ import annotations

from typing import List, Optional

from fastapi import status

# ---------------------------------------------------------------------------
# User-facing messages
# ---------------------------------------------------------------------------

MSG_STORAGE_FAILURE = "Storage failure, reload and try again"
MSG_CAPACITY_EXCEEDED = "Requested accessories exceed current availability"


class FilterTrackerError(Exception):
    """Base class for errors the API reports back to the caller."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_detail(self):
        return self.message


class InvalidRequestError(FilterTrackerError):
    """Malformed or missing fields. Nothing was mutated."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(FilterTrackerError):
    """Referenced filter, accessory or booking does not exist."""

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, entity: str, entity_id):
        super().__init__(f"{entity} {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id


class CapacityViolationError(FilterTrackerError):
    """
    A booking submission asks for more of an accessory than is available on
    at least one day. Carries every violation so the caller can show them all.
    """

    status_code = status.HTTP_409_CONFLICT

    def __init__(self, violations: List[dict], message: Optional[str] = None):
        super().__init__(message or MSG_CAPACITY_EXCEEDED)
        self.violations = violations

    def to_detail(self):
        return {"message": self.message, "violations": self.violations}
