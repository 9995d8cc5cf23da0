"""
Availability Calculator

Computes how many units of an accessory a filter may still take for a date
range. Capacity is evaluated day by day:

    capacity(d) = total_quantity - removed_quantity(d) - allocated_quantity(d)

and the range is only good for the tightest ("binding") day, because an
allocation on a multi-day booking is consumed again on every one of its days.

Nothing is cached: each read rebuilds the picture from persisted bookings and
out-of-service windows.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from ..config import settings
from ..models.accessory import Accessory
from ..utils.dates import days_between
from ..utils.errors import InvalidRequestError, NotFoundError
from .allocation_service import DailyAllocationAggregator
from .out_of_service import removed_quantity
from .pool_service import accessories_visible_to, is_visible_to, pool_for

logger = logging.getLogger(__name__)


@dataclass
class DailyCapacity:
    """Capacity breakdown for a single day"""
    date: date
    total_quantity: int
    removed: int
    allocated: int

    @property
    def capacity(self) -> int:
        # May be negative when history over-committed; clamped by callers
        return self.total_quantity - self.removed - self.allocated


@dataclass
class AccessoryAvailability:
    """Result of an availability read for one accessory over a range"""
    accessory_id: int
    available_quantity: int
    is_out_of_service_during_period: bool
    allocated_count: int
    binding_date: Optional[date] = None
    days: List[DailyCapacity] = field(default_factory=list)


def daily_capacity(accessory, day: date, allocations: DailyAllocationAggregator) -> DailyCapacity:
    return DailyCapacity(
        date=day,
        total_quantity=accessory.total_quantity or 0,
        removed=removed_quantity(accessory, day),
        allocated=allocations.allocated_quantity(accessory.id, day),
    )


def compute_availability(
    filter_id: int,
    accessory,
    start: date,
    end: date,
    allocations: DailyAllocationAggregator
) -> Optional[AccessoryAvailability]:
    """
    Minimum capacity of `accessory` over every day in [start, end].

    Returns None for an empty range (end before start). An accessory outside
    the filter's pool reads as zero available.
    """
    days = days_between(start, end)
    if not days:
        return None

    if not is_visible_to(filter_id, accessory):
        return AccessoryAvailability(
            accessory_id=accessory.id,
            available_quantity=0,
            is_out_of_service_during_period=False,
            allocated_count=0,
        )

    daily = [daily_capacity(accessory, d, allocations) for d in days]
    binding = min(daily, key=lambda entry: entry.capacity)

    return AccessoryAvailability(
        accessory_id=accessory.id,
        available_quantity=max(0, binding.capacity),
        is_out_of_service_during_period=any(entry.removed > 0 for entry in daily),
        allocated_count=max(entry.allocated for entry in daily),
        binding_date=binding.date,
        days=daily,
    )


def has_critical_shortfall(accessory, quantity: int) -> bool:
    """Advisory only: critical equipment may be sourced externally."""
    return bool(accessory.is_critical) and quantity < (accessory.required_per_booking or 0)


class AvailabilityService:
    """
    Database-backed entry point for availability reads.
    """

    def __init__(self, db: Session):
        self.db = db

    def _check_range(self, start: date, end: date) -> None:
        span = (end - start).days + 1
        if span > settings.max_availability_range_days:
            raise InvalidRequestError(
                f"Date range too long ({span} days, maximum {settings.max_availability_range_days})"
            )

    def get_accessory(self, accessory_id: int) -> Accessory:
        accessory = self.db.query(Accessory).filter(Accessory.id == accessory_id).first()
        if not accessory:
            raise NotFoundError("Accessory", accessory_id)
        return accessory

    def availability(
        self,
        filter_id: int,
        accessory_id: int,
        start: date,
        end: date
    ) -> Optional[AccessoryAvailability]:
        pool_for(filter_id)
        accessory = self.get_accessory(accessory_id)
        if end < start:
            return None
        self._check_range(start, end)

        allocations = DailyAllocationAggregator.from_db(self.db, start, end)
        return compute_availability(filter_id, accessory, start, end, allocations)

    def get_available_accessories(
        self,
        filter_id: int,
        start: date,
        end: date
    ) -> List[Tuple[Accessory, AccessoryAvailability]]:
        """
        Every accessory of the filter's pool annotated with its availability.
        Empty when end is before start.
        """
        pool = pool_for(filter_id)
        if end < start:
            return []
        self._check_range(start, end)

        accessories = accessories_visible_to(
            filter_id,
            self.db.query(Accessory).filter(Accessory.pool == pool.value).order_by(Accessory.id).all()
        )
        allocations = DailyAllocationAggregator.from_db(self.db, start, end)

        results = [
            (accessory, compute_availability(filter_id, accessory, start, end, allocations))
            for accessory in accessories
        ]
        logger.debug(
            f"Availability for filter {filter_id} {start}..{end}: "
            f"{len(results)} accessories, {allocations.booking_count} bookings scanned"
        )
        return results
