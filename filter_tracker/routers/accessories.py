from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date

from ..database import get_db
from ..schemas.accessory import (
    AccessoryCreate, AccessoryUpdate, AccessoryResponse,
    AccessoryWithAvailability, AccessoryAvailabilityResponse
)
from ..services.accessory_service import AccessoryService
from ..services.availability_service import AvailabilityService, has_critical_shortfall
from ..utils.rate_limiter import limiter, get_rate_limit

router = APIRouter(prefix="/api/accessories", tags=["Accessories"])


@router.get("")
@router.get("/", response_model=List[AccessoryResponse])
async def list_accessories(db: Session = Depends(get_db)):
    """Every accessory of both pools"""
    return [AccessoryResponse.model_validate(a) for a in AccessoryService(db).list_accessories()]


@router.get("/available")
@router.get("/available/", response_model=List[AccessoryWithAvailability])
async def get_available_accessories(
    filter_id: int = Query(..., description="Filter the accessories would go out with"),
    start_date: date = Query(...),
    end_date: date = Query(...),
    db: Session = Depends(get_db)
):
    """
    Accessories of the filter's pool with how many units are free on every
    day of [start_date, end_date]. Empty when end_date is before start_date.
    """
    results = []
    for accessory, availability in AvailabilityService(db).get_available_accessories(
        filter_id, start_date, end_date
    ):
        results.append(AccessoryWithAvailability(
            **AccessoryResponse.model_validate(accessory).model_dump(),
            available_quantity=availability.available_quantity,
            allocated_count=availability.allocated_count,
            is_out_of_service_during_period=availability.is_out_of_service_during_period,
            binding_date=availability.binding_date,
            critical_shortfall=has_critical_shortfall(accessory, availability.available_quantity),
        ))
    return results


@router.get("/{accessory_id}/availability")
@router.get("/{accessory_id}/availability/", response_model=Optional[AccessoryAvailabilityResponse])
async def get_accessory_availability(
    accessory_id: int,
    filter_id: int = Query(...),
    start_date: date = Query(...),
    end_date: date = Query(...),
    db: Session = Depends(get_db)
):
    """Null when end_date is before start_date"""
    availability = AvailabilityService(db).availability(filter_id, accessory_id, start_date, end_date)
    if availability is None:
        return None
    return AccessoryAvailabilityResponse(
        accessory_id=accessory_id,
        filter_id=filter_id,
        start_date=start_date,
        end_date=end_date,
        available_quantity=availability.available_quantity,
        allocated_count=availability.allocated_count,
        is_out_of_service_during_period=availability.is_out_of_service_during_period,
        binding_date=availability.binding_date,
    )


@router.post("", status_code=status.HTTP_201_CREATED)
@router.post("/", response_model=AccessoryResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(get_rate_limit("accessory_write"))
async def create_accessory(
    request: Request,
    data: AccessoryCreate,
    db: Session = Depends(get_db)
):
    """Add an accessory. Its id is the next integer never used before."""
    accessory = AccessoryService(db).create_accessory(data)
    return AccessoryResponse.model_validate(accessory)


@router.put("/{accessory_id}")
@router.put("/{accessory_id}/", response_model=AccessoryResponse)
@limiter.limit(get_rate_limit("accessory_write"))
async def update_accessory(
    request: Request,
    accessory_id: int,
    updates: AccessoryUpdate,
    db: Session = Depends(get_db)
):
    """Partial update. A given out_of_service list replaces the stored one."""
    accessory = AccessoryService(db).update_accessory(accessory_id, updates)
    return AccessoryResponse.model_validate(accessory)


@router.delete("/{accessory_id}")
@router.delete("/{accessory_id}/")
@limiter.limit(get_rate_limit("accessory_write"))
async def delete_accessory(
    request: Request,
    accessory_id: int,
    db: Session = Depends(get_db)
):
    """Existing bookings keep their snapshot of the accessory"""
    AccessoryService(db).delete_accessory(accessory_id)
    return {"message": "Accessory deleted", "id": accessory_id}
