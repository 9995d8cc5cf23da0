# Services package
from .pool_service import pool_for, is_visible_to, accessories_visible_to
from .out_of_service import removed_quantity
from .allocation_service import allocated_quantity, DailyAllocationAggregator
from .availability_service import (
    AvailabilityService, AccessoryAvailability, DailyCapacity,
    compute_availability, has_critical_shortfall
)
from .booking_validator import BookingAccessoryValidator, requested_quantities
from .booking_service import BookingService, advance_last_service_date
from .booking_session import BookingSession
from .filter_service import FilterService, capability_label, service_status
from .accessory_service import AccessoryService
from .report_service import weekly_summary

__all__ = [
    "pool_for", "is_visible_to", "accessories_visible_to",
    "removed_quantity",
    "allocated_quantity", "DailyAllocationAggregator",
    "AvailabilityService", "AccessoryAvailability", "DailyCapacity",
    "compute_availability", "has_critical_shortfall",
    "BookingAccessoryValidator", "requested_quantities",
    "BookingService", "advance_last_service_date",
    "BookingSession",
    "FilterService", "capability_label", "service_status",
    "AccessoryService",
    "weekly_summary",
]
