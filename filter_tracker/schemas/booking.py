from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional, List
from datetime import date

from ..models.booking import BookingType
from ..utils.sanitization import clean_text

SERVICE_LOCATION = "Service"


class AccessoryRequest(BaseModel):
    accessory_id: int = Field(..., ge=1)
    quantity: int = Field(..., ge=1, description="Units needed on each day of the booking")


class PendingBooking(BaseModel):
    """A confirmed selection waiting to be committed: same location and
    accessories on every listed date."""
    dates: List[date] = Field(..., min_length=1)
    location: Optional[str] = Field(None, max_length=255)
    type: BookingType = BookingType.BOOKING
    accessories: List[AccessoryRequest] = []

    @field_validator('location', mode='after')
    @classmethod
    def sanitize_location(cls, v):
        return clean_text(v)

    @model_validator(mode='after')
    def validate_location(self):
        if not self.location:
            if self.type == BookingType.SERVICE:
                self.location = SERVICE_LOCATION
            else:
                raise ValueError('A job location is required')
        # One row per day; repeated days in a selection collapse
        self.dates = sorted(set(self.dates))
        return self


class BookingCommitRequest(BaseModel):
    bookings: List[PendingBooking] = Field(..., min_length=1)


class BookingAccessoryResponse(BaseModel):
    accessory_id: int
    accessory_name: str
    unit: Optional[str] = None
    quantity: int

    class Config:
        from_attributes = True


class BookingResponse(BaseModel):
    id: str
    filter_id: int
    date: date
    location: str
    type: BookingType
    accessories: List[BookingAccessoryResponse] = []

    class Config:
        from_attributes = True


class CapacityViolation(BaseModel):
    accessory_id: int
    accessory_name: str
    date: date
    requested: int
    available: int


class CriticalShortfallWarning(BaseModel):
    """Non-blocking: critical equipment below its per-booking requirement."""
    accessory_id: int
    accessory_name: str
    date: date
    requested: int
    required_per_booking: int
