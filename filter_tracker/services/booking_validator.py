"""
Booking Accessory Validator

Final server-side guard run when pending bookings are committed. Two clients
may both have read availability before either saved; this re-derives each
day's capacity from what is persisted right now and refuses the whole
submission if any (day, accessory) would be over-committed. It rejects, it
does not lock or queue.
"""

import logging
from collections import defaultdict
from datetime import date
from typing import Dict, List, Tuple

from sqlalchemy.orm import Session

from ..models.accessory import Accessory
from ..models.booking import BookingType
from ..schemas.booking import CapacityViolation, PendingBooking
from ..utils.errors import CapacityViolationError, NotFoundError
from .allocation_service import DailyAllocationAggregator
from .availability_service import daily_capacity, has_critical_shortfall
from .pool_service import is_visible_to, pool_for

logger = logging.getLogger(__name__)


def requested_quantities(pending: List[PendingBooking]) -> Dict[Tuple[date, int], int]:
    """Total quantity asked for each (day, accessory) across the submission."""
    requested: Dict[Tuple[date, int], int] = defaultdict(int)
    for item in pending:
        for day in item.dates:
            for request in item.accessories:
                requested[(day, request.accessory_id)] += request.quantity
    return dict(requested)


class BookingAccessoryValidator:

    def __init__(self, db: Session):
        self.db = db

    def _load_accessories(self, accessory_ids) -> Dict[int, Accessory]:
        ids = sorted(set(accessory_ids))
        if not ids:
            return {}
        found = {
            a.id: a
            for a in self.db.query(Accessory).filter(Accessory.id.in_(ids)).all()
        }
        for accessory_id in ids:
            if accessory_id not in found:
                raise NotFoundError("Accessory", accessory_id)
        return found

    def find_violations(self, filter_id: int, pending: List[PendingBooking]) -> List[dict]:
        """
        Compare every requested (day, accessory) against current capacity.
        The pending bookings are not persisted yet, so they never count
        against themselves.
        """
        requested = requested_quantities(pending)
        if not requested:
            return []

        accessories = self._load_accessories(accessory_id for _, accessory_id in requested)
        days = [day for day, _ in requested]
        allocations = DailyAllocationAggregator.from_db(self.db, min(days), max(days))

        violations = []
        for (day, accessory_id), quantity in sorted(requested.items()):
            accessory = accessories[accessory_id]
            if is_visible_to(filter_id, accessory):
                available = max(0, daily_capacity(accessory, day, allocations).capacity)
            else:
                available = 0

            if quantity > available:
                violations.append(CapacityViolation(
                    accessory_id=accessory_id,
                    accessory_name=accessory.name,
                    date=day,
                    requested=quantity,
                    available=available,
                ).model_dump(mode="json"))
        return violations

    def critical_warnings(self, filter_id: int, pending: List[PendingBooking]) -> List[dict]:
        """
        Critical accessories of the filter's pool requested below their
        per-booking requirement. Never blocks a commit.
        """
        critical = self.db.query(Accessory).filter(
            Accessory.pool == pool_for(filter_id).value,
            Accessory.is_critical == True  # noqa: E712
        ).order_by(Accessory.id).all()

        warnings = []
        for item in pending:
            if item.type == BookingType.SERVICE or not item.dates:
                continue
            asked = defaultdict(int)
            for request in item.accessories:
                asked[request.accessory_id] += request.quantity
            for accessory in critical:
                quantity = asked.get(accessory.id, 0)
                if has_critical_shortfall(accessory, quantity):
                    warnings.append({
                        "accessory_id": accessory.id,
                        "accessory_name": accessory.name,
                        "date": item.dates[0],
                        "requested": quantity,
                        "required_per_booking": accessory.required_per_booking,
                    })
        return warnings

    def validate(self, filter_id: int, pending: List[PendingBooking]) -> List[dict]:
        """
        Raise CapacityViolationError listing every over-committed
        (day, accessory); otherwise return the non-blocking warnings.
        """
        violations = self.find_violations(filter_id, pending)
        if violations:
            logger.warning(
                f"Capacity check failed for filter {filter_id}: "
                f"{len(violations)} violations"
            )
            raise CapacityViolationError(violations)
        return self.critical_warnings(filter_id, pending)
