"""
Booking Session

Per-client editing context for one filter: the current date selection, the
accessory quantities chosen for it, the list of confirmed-but-unsaved
bookings and whether editing is unlocked. A session is thrown away once its
pending bookings are committed.
"""

from datetime import date
from typing import Dict, Iterable, List, Optional

from ..models.booking import BookingType
from ..schemas.booking import (
    AccessoryRequest, BookingCommitRequest, PendingBooking, SERVICE_LOCATION
)
from ..utils.dates import group_contiguous, iter_days
from ..utils.errors import InvalidRequestError
from ..utils.sanitization import clean_text


class BookingSession:

    def __init__(self, filter_id: int, booked_dates: Iterable[date] = (), unlocked: bool = False):
        self.filter_id = filter_id
        self.booked_dates = set(booked_dates)
        self.unlocked = unlocked
        self.selected_dates: List[date] = []
        self.allocations: Dict[int, int] = {}
        self.pending: List[PendingBooking] = []

    def _require_unlocked(self):
        if not self.unlocked:
            raise InvalidRequestError("Unlock editing before changing bookings")

    def _pending_dates(self) -> set:
        return {d for item in self.pending for d in item.dates}

    def unlock(self):
        self.unlocked = True

    def lock(self):
        self.unlocked = False

    def select_range(self, start: date, end: date, today: Optional[date] = None) -> List[date]:
        """
        Select every day of [start, end] (either order) that is not in the
        past, not already booked and not already pending.
        """
        self._require_unlocked()
        today = today or date.today()
        if end < start:
            start, end = end, start

        taken = self.booked_dates | self._pending_dates()
        self.selected_dates = [d for d in iter_days(start, end) if d >= today and d not in taken]
        return self.selected_dates

    def set_allocation(self, accessory_id: int, quantity: int):
        """Quantity per day for the current selection. Zero removes the entry."""
        self._require_unlocked()
        if quantity < 0:
            raise InvalidRequestError("Quantity must not be negative")
        if quantity == 0:
            self.allocations.pop(accessory_id, None)
        else:
            self.allocations[accessory_id] = quantity

    def add_pending(self, location: Optional[str], type: BookingType = BookingType.BOOKING) -> PendingBooking:
        """Move the current selection and its allocations into the pending list."""
        self._require_unlocked()
        if not self.selected_dates:
            raise InvalidRequestError("Select dates first")

        location = clean_text(location)
        if not location:
            if type != BookingType.SERVICE:
                raise InvalidRequestError("A job location is required")
            location = SERVICE_LOCATION

        item = PendingBooking(
            dates=list(self.selected_dates),
            location=location,
            type=type,
            accessories=[
                AccessoryRequest(accessory_id=accessory_id, quantity=quantity)
                for accessory_id, quantity in sorted(self.allocations.items())
            ],
        )
        self.pending.append(item)
        self.selected_dates = []
        self.allocations = {}
        return item

    def schedule_service(self, today: Optional[date] = None) -> PendingBooking:
        """Pending service booking for today."""
        self._require_unlocked()
        today = today or date.today()
        if today in self.booked_dates or today in self._pending_dates():
            raise InvalidRequestError(f"{today.isoformat()} is already booked")

        item = PendingBooking(dates=[today], location=SERVICE_LOCATION, type=BookingType.SERVICE)
        self.pending.append(item)
        return item

    def remove_pending(self, index: int) -> PendingBooking:
        self._require_unlocked()
        if not 0 <= index < len(self.pending):
            raise InvalidRequestError(f"No pending booking at position {index}")
        return self.pending.pop(index)

    def pending_ranges(self) -> List[List[List[date]]]:
        """Each pending booking's dates split into consecutive runs, for display."""
        return [group_contiguous(item.dates) for item in self.pending]

    def to_commit_request(self) -> BookingCommitRequest:
        if not self.pending:
            raise InvalidRequestError("Nothing to save")
        return BookingCommitRequest(bookings=list(self.pending))

    def clear(self):
        self.selected_dates = []
        self.allocations = {}
        self.pending = []
