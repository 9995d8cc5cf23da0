"""
Booking Service

Commits pending selections as one booking row per day, with accessory
allocations snapshotted by name and unit, and removes bookings singly or by
date range.

A commit is all-or-nothing: validation and the accessory capacity check run
before anything is added to the session.
"""

from collections import defaultdict
from datetime import date
from typing import Dict, Iterable, List, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..models.accessory import Accessory
from ..models.booking import Booking, BookingAccessory
from ..models.filter import Filter
from ..schemas.booking import PendingBooking
from ..utils.errors import CapacityViolationError, InvalidRequestError, NotFoundError
from ..utils.logging_config import get_logger
from .booking_validator import BookingAccessoryValidator
from .filter_service import FilterService

logger = get_logger(__name__)


def advance_last_service_date(current: Optional[date], service_dates: Iterable[date]) -> Optional[date]:
    """Monotonic watermark: only a later service date moves it."""
    latest = current
    for day in service_dates:
        if latest is None or day > latest:
            latest = day
    return latest


def merge_accessory_requests(item: PendingBooking) -> Dict[int, int]:
    merged: Dict[int, int] = defaultdict(int)
    for request in item.accessories:
        merged[request.accessory_id] += request.quantity
    return dict(merged)


class BookingService:

    def __init__(self, db: Session):
        self.db = db

    def _check_dates(self, filter_: Filter, pending: List[PendingBooking]) -> None:
        seen = set()
        for item in pending:
            for day in item.dates:
                if day in seen:
                    raise InvalidRequestError(f"{day.isoformat()} is selected more than once")
                seen.add(day)

        taken = sorted(b.date for b in filter_.bookings if b.date in seen)
        if taken:
            listed = ", ".join(d.isoformat() for d in taken)
            raise InvalidRequestError(f"{filter_.name} is already booked on {listed}")

    def commit_bookings(
        self,
        filter_id: int,
        pending: List[PendingBooking]
    ) -> Tuple[Filter, List[Booking], List[dict]]:
        """
        Persist every pending booking or none of them.

        Returns (filter, created bookings, critical-shortfall warnings).
        Raises CapacityViolationError when any accessory would be over-committed.
        """
        filter_ = FilterService(self.db).get_filter(filter_id)
        self._check_dates(filter_, pending)

        try:
            warnings = BookingAccessoryValidator(self.db).validate(filter_id, pending)
        except CapacityViolationError as e:
            logger.capacity_rejected(filter_id, e.violations)
            raise

        accessory_ids = {r.accessory_id for item in pending for r in item.accessories}
        accessories = {
            a.id: a
            for a in self.db.query(Accessory).filter(Accessory.id.in_(accessory_ids)).all()
        } if accessory_ids else {}

        created: List[Booking] = []
        service_dates: List[date] = []
        for item in pending:
            requests = merge_accessory_requests(item)
            for day in item.dates:
                booking = Booking(
                    filter_id=filter_id,
                    date=day,
                    location=item.location,
                    type=item.type.value,
                )
                for accessory_id, quantity in requests.items():
                    accessory = accessories[accessory_id]
                    booking.accessories.append(BookingAccessory(
                        accessory_id=accessory_id,
                        accessory_name=accessory.name,
                        unit=accessory.unit,
                        quantity=quantity,
                    ))
                filter_.bookings.append(booking)
                created.append(booking)
                if booking.is_service:
                    service_dates.append(day)

        filter_.last_service_date = advance_last_service_date(filter_.last_service_date, service_dates)

        try:
            self.db.commit()
        except IntegrityError:
            # Another writer booked one of these days since we checked
            self.db.rollback()
            raise InvalidRequestError(f"{filter_.name} was booked on one of these dates by another user")

        self.db.refresh(filter_)
        logger.bookings_committed(filter_id, len(created), [d.isoformat() for d in service_dates])
        return filter_, created, warnings

    def remove_booking(self, filter_id: int, booking_id: str) -> None:
        booking = self.db.query(Booking).filter(
            Booking.id == booking_id,
            Booking.filter_id == filter_id
        ).first()
        if not booking:
            raise NotFoundError("Booking", booking_id)

        self.db.delete(booking)
        self.db.commit()
        logger.info(f"Removed booking {booking_id} ({booking.date}) from filter {filter_id}")

    def remove_bookings_in_range(self, filter_id: int, start: date, end: date) -> int:
        """Remove a date-contiguous group of bookings. Returns how many were removed."""
        if end < start:
            raise InvalidRequestError("end_date must not be before start_date")
        FilterService(self.db).get_filter(filter_id)

        bookings = self.db.query(Booking).filter(
            Booking.filter_id == filter_id,
            Booking.date >= start,
            Booking.date <= end
        ).all()
        for booking in bookings:
            self.db.delete(booking)
        self.db.commit()

        logger.info(f"Removed {len(bookings)} bookings from filter {filter_id} between {start} and {end}")
        return len(bookings)
