from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import date

from .booking import BookingResponse, CriticalShortfallWarning
from ..utils.sanitization import clean_text


class FilterUpdate(BaseModel):
    """Partial update: only the fields present are merged into the filter."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    location: Optional[str] = Field(None, max_length=255)
    uv_capability: Optional[bool] = None
    ten_micron_capability: Optional[bool] = None
    notes: Optional[str] = Field(None, max_length=5000)
    service_frequency_days: Optional[int] = Field(None, ge=1, le=365)
    last_service_date: Optional[date] = None

    @field_validator('name', 'location', 'notes', mode='after')
    @classmethod
    def sanitize_text_fields(cls, v):
        return clean_text(v)

    @field_validator('name', 'location', mode='after')
    @classmethod
    def not_blank(cls, v):
        if v is not None and not v:
            raise ValueError('must not be blank')
        return v


class FilterResponse(BaseModel):
    id: int
    name: str
    location: str
    uv_capability: bool
    ten_micron_capability: bool
    capability: str
    notes: str = ""
    service_frequency_days: int
    last_service_date: Optional[date] = None
    next_service_date: Optional[date] = None
    is_service_due: bool = False
    bookings: List[BookingResponse] = []


class BookingCommitResponse(BaseModel):
    filter: FilterResponse
    created: List[BookingResponse]
    warnings: List[CriticalShortfallWarning] = []
