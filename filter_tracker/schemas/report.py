from pydantic import BaseModel
from typing import Optional, List
from datetime import date

from .booking import BookingResponse


class WeeklyFilterSummary(BaseModel):
    filter_id: int
    name: str
    location: str
    capability: str
    uv_capability: bool = False
    ten_micron_capability: bool = False
    notes: str = ""
    status: str = "Available"
    last_service_date: Optional[date] = None
    service_frequency_days: int
    next_service_date: Optional[date] = None
    is_service_due: bool = False
    bookings: List[BookingResponse] = []


class WeeklySummaryResponse(BaseModel):
    start_date: date
    end_date: date
    filters: List[WeeklyFilterSummary]
    services_due: List[int] = []
    total_bookings: int = 0
    available_count: int = 0
    scheduled_count: int = 0
