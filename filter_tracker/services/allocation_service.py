"""
Daily Allocation Aggregator

Sums what every booking, on every filter, has already committed of an
accessory on a given day. The pool is shared, so the scan is never limited to
the filter being asked about.
"""

from collections import defaultdict
from datetime import date
from typing import Dict, Iterable, List, Tuple

from sqlalchemy.orm import Session

from ..models.booking import Booking


def allocated_quantity(accessory_id: int, day: date, bookings: Iterable[Booking]) -> int:
    """Quantity of `accessory_id` allocated on `day` across all given bookings."""
    total = 0
    for booking in bookings:
        if booking.date != day:
            continue
        for allocation in booking.accessories or []:
            if allocation.accessory_id == accessory_id:
                total += allocation.quantity
    return total


def load_bookings(
    db: Session,
    start: date,
    end: date
) -> List[Booking]:
    """All persisted bookings of every filter dated within [start, end]."""
    query = db.query(Booking).filter(
        Booking.date >= start,
        Booking.date <= end
    )
    return query.order_by(Booking.date).all()


class DailyAllocationAggregator:
    """
    Indexes a set of bookings once so repeated (accessory, day) lookups during
    a range read do not rescan every booking.

    Gives the same answer as allocated_quantity() over the same bookings.
    """

    def __init__(self, bookings: Iterable[Booking]):
        self._index: Dict[Tuple[int, date], int] = defaultdict(int)
        count = 0
        for booking in bookings:
            count += 1
            for allocation in booking.accessories or []:
                self._index[(allocation.accessory_id, booking.date)] += allocation.quantity
        self.booking_count = count

    @classmethod
    def from_db(cls, db: Session, start: date, end: date) -> "DailyAllocationAggregator":
        return cls(load_bookings(db, start, end))

    def allocated_quantity(self, accessory_id: int, day: date) -> int:
        return self._index.get((accessory_id, day), 0)
