from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session
from typing import List
from datetime import date

from ..database import get_db
from ..models.filter import Filter
from ..schemas.booking import BookingCommitRequest, BookingResponse
from ..schemas.filter import FilterResponse, FilterUpdate, BookingCommitResponse
from ..services.booking_service import BookingService
from ..services.filter_service import FilterService, capability_label, service_status
from ..utils.rate_limiter import limiter, get_rate_limit

router = APIRouter(prefix="/api/filters", tags=["Filters"])


def to_filter_response(filter_: Filter) -> FilterResponse:
    is_due, next_service = service_status(filter_)
    return FilterResponse(
        id=filter_.id,
        name=filter_.name,
        location=filter_.location,
        uv_capability=filter_.uv_capability,
        ten_micron_capability=filter_.ten_micron_capability,
        capability=capability_label(filter_),
        notes=filter_.notes or "",
        service_frequency_days=filter_.service_frequency_days,
        last_service_date=filter_.last_service_date,
        next_service_date=next_service,
        is_service_due=is_due,
        bookings=[BookingResponse.model_validate(b) for b in filter_.bookings],
    )


@router.get("")
@router.get("/", response_model=List[FilterResponse])
async def list_filters(db: Session = Depends(get_db)):
    """All four filters with their bookings and service status"""
    return [to_filter_response(f) for f in FilterService(db).list_filters()]


@router.get("/{filter_id}")
@router.get("/{filter_id}/", response_model=FilterResponse)
async def get_filter(filter_id: int, db: Session = Depends(get_db)):
    return to_filter_response(FilterService(db).get_filter(filter_id))


@router.put("/{filter_id}")
@router.put("/{filter_id}/", response_model=FilterResponse)
@limiter.limit(get_rate_limit("filter_update"))
async def update_filter(
    request: Request,
    filter_id: int,
    updates: FilterUpdate,
    db: Session = Depends(get_db)
):
    """
    Partial update: fields left out of the body keep their stored values.
    Bookings are not editable here.
    """
    return to_filter_response(FilterService(db).update_filter(filter_id, updates))


@router.post("/{filter_id}/bookings", status_code=status.HTTP_201_CREATED)
@router.post("/{filter_id}/bookings/", response_model=BookingCommitResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(get_rate_limit("booking_commit"))
async def commit_bookings(
    request: Request,
    filter_id: int,
    payload: BookingCommitRequest,
    db: Session = Depends(get_db)
):
    """
    Save pending bookings. Every requested accessory is re-checked against
    current availability; any shortfall rejects the whole submission (409).
    Critical accessories requested below their requirement come back as
    warnings only.
    """
    filter_, created, warnings = BookingService(db).commit_bookings(filter_id, payload.bookings)
    return BookingCommitResponse(
        filter=to_filter_response(filter_),
        created=[BookingResponse.model_validate(b) for b in created],
        warnings=warnings,
    )


@router.delete("/{filter_id}/bookings")
@router.delete("/{filter_id}/bookings/")
@limiter.limit(get_rate_limit("booking_delete"))
async def remove_bookings_in_range(
    request: Request,
    filter_id: int,
    start_date: date = Query(...),
    end_date: date = Query(...),
    db: Session = Depends(get_db)
):
    """Remove every booking of the filter dated within [start_date, end_date]"""
    removed = BookingService(db).remove_bookings_in_range(filter_id, start_date, end_date)
    return {"removed": removed}


@router.delete("/{filter_id}/bookings/{booking_id}")
@router.delete("/{filter_id}/bookings/{booking_id}/")
@limiter.limit(get_rate_limit("booking_delete"))
async def remove_booking(
    request: Request,
    filter_id: int,
    booking_id: str,
    db: Session = Depends(get_db)
):
    BookingService(db).remove_booking(filter_id, booking_id)
    return {"message": "Booking removed", "id": booking_id}
