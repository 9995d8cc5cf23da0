"""
Out-of-Service Calendar

Maintenance windows remove units of an accessory from the pool for an
inclusive date range. Overlapping windows stack day by day.
"""

from datetime import date


def removed_quantity(accessory, day: date) -> int:
    """Units of `accessory` out of service on `day`."""
    return sum(
        window.quantity
        for window in (accessory.out_of_service or [])
        if window.covers(day)
    )
