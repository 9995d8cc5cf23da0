from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional, List
from datetime import date

from ..models.accessory import AccessoryPool
from ..utils.sanitization import clean_text


class OutOfServiceWindowIn(BaseModel):
    start_date: date
    end_date: date
    quantity: int = Field(1, ge=1, description="Units removed from the pool on each day")
    reason: str = Field("", max_length=255)

    @field_validator('reason', mode='after')
    @classmethod
    def sanitize_reason(cls, v):
        return clean_text(v) or ""

    @model_validator(mode='after')
    def validate_dates(self):
        if self.end_date < self.start_date:
            raise ValueError('end_date must not be before start_date')
        return self


class OutOfServiceWindowResponse(BaseModel):
    id: str
    start_date: date
    end_date: date
    quantity: int
    reason: str = ""

    class Config:
        from_attributes = True


class AccessoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=150)
    pool: AccessoryPool = AccessoryPool.POOL_A
    total_quantity: int = Field(..., ge=0)
    unit: Optional[str] = Field(None, max_length=50)
    notes: str = Field("", max_length=5000)
    is_critical: bool = False
    required_per_booking: int = Field(0, ge=0)
    out_of_service: List[OutOfServiceWindowIn] = []

    @field_validator('name', 'unit', 'notes', mode='after')
    @classmethod
    def sanitize_text_fields(cls, v):
        return clean_text(v)

    @field_validator('name', mode='after')
    @classmethod
    def name_not_blank(cls, v):
        if not v:
            raise ValueError('Accessory name is required')
        return v


class AccessoryUpdate(BaseModel):
    """Partial update. When out_of_service is given it replaces every window."""
    name: Optional[str] = Field(None, min_length=1, max_length=150)
    pool: Optional[AccessoryPool] = None
    total_quantity: Optional[int] = Field(None, ge=0)
    unit: Optional[str] = Field(None, max_length=50)
    notes: Optional[str] = Field(None, max_length=5000)
    is_critical: Optional[bool] = None
    required_per_booking: Optional[int] = Field(None, ge=0)
    out_of_service: Optional[List[OutOfServiceWindowIn]] = None

    @field_validator('name', 'unit', 'notes', mode='after')
    @classmethod
    def sanitize_text_fields(cls, v):
        return clean_text(v)

    @field_validator('name', mode='after')
    @classmethod
    def name_not_blank(cls, v):
        if v is not None and not v:
            raise ValueError('Accessory name is required')
        return v


class AccessoryResponse(BaseModel):
    id: int
    name: str
    pool: AccessoryPool
    total_quantity: int
    unit: Optional[str] = None
    notes: str = ""
    is_critical: bool = False
    required_per_booking: int = 0
    out_of_service: List[OutOfServiceWindowResponse] = []

    class Config:
        from_attributes = True


class AccessoryWithAvailability(AccessoryResponse):
    available_quantity: int
    allocated_count: int
    is_out_of_service_during_period: bool
    critical_shortfall: bool = False
    binding_date: Optional[date] = None


class AccessoryAvailabilityResponse(BaseModel):
    accessory_id: int
    filter_id: int
    start_date: date
    end_date: date
    available_quantity: int
    allocated_count: int
    is_out_of_service_during_period: bool
    binding_date: Optional[date] = None
