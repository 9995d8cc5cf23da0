"""
Weekly summary data: for each filter, its capability, location, service
status, notes and the bookings of an eight-day window (the start day plus the
seven after it). A filter with any booking in the window is Scheduled, one
without is Available. Text formatting is left to the consumer.
"""

import logging
from datetime import date, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from ..models.booking import Booking
from ..schemas.booking import BookingResponse
from ..schemas.report import WeeklyFilterSummary, WeeklySummaryResponse
from .filter_service import FilterService, capability_label, service_status

logger = logging.getLogger(__name__)

REPORT_DAYS = 8

STATUS_AVAILABLE = "Available"
STATUS_SCHEDULED = "Scheduled"


def weekly_summary(db: Session, start: date, today: Optional[date] = None) -> WeeklySummaryResponse:
    end = start + timedelta(days=REPORT_DAYS - 1)
    today = today or date.today()

    bookings = db.query(Booking).filter(
        Booking.date >= start,
        Booking.date <= end
    ).order_by(Booking.filter_id, Booking.date).all()

    by_filter = {}
    for booking in bookings:
        by_filter.setdefault(booking.filter_id, []).append(booking)

    summaries = []
    services_due = []
    for filter_ in FilterService(db).list_filters():
        is_due, next_service = service_status(filter_, today)
        if is_due:
            services_due.append(filter_.id)

        filter_bookings = by_filter.get(filter_.id, [])

        summaries.append(WeeklyFilterSummary(
            filter_id=filter_.id,
            name=filter_.name,
            location=filter_.location,
            capability=capability_label(filter_),
            uv_capability=bool(filter_.uv_capability),
            ten_micron_capability=bool(filter_.ten_micron_capability),
            notes=(filter_.notes or "").strip(),
            status=STATUS_SCHEDULED if filter_bookings else STATUS_AVAILABLE,
            last_service_date=filter_.last_service_date,
            service_frequency_days=filter_.service_frequency_days,
            next_service_date=next_service,
            is_service_due=is_due,
            bookings=[BookingResponse.model_validate(b) for b in filter_bookings],
        ))

    logger.debug(f"Weekly summary {start}..{end}: {len(bookings)} bookings, due={services_due}")
    return WeeklySummaryResponse(
        start_date=start,
        end_date=end,
        filters=summaries,
        services_due=services_due,
        total_bookings=len(bookings),
        available_count=sum(1 for s in summaries if s.status == STATUS_AVAILABLE),
        scheduled_count=sum(1 for s in summaries if s.status == STATUS_SCHEDULED),
    )
