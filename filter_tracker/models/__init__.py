# Models package
from .filter import Filter, FILTER_IDS
from .booking import Booking, BookingAccessory, BookingType
from .accessory import Accessory, AccessoryPool, OutOfServiceWindow

__all__ = [
    "Filter", "FILTER_IDS",
    "Booking", "BookingAccessory", "BookingType",
    "Accessory", "AccessoryPool", "OutOfServiceWindow",
]
