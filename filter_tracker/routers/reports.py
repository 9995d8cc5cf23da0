from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session
from typing import Optional
from datetime import date

from ..database import get_db
from ..schemas.report import WeeklySummaryResponse
from ..services.report_service import weekly_summary
from ..utils.rate_limiter import limiter, get_rate_limit

router = APIRouter(prefix="/api/reports", tags=["Reports"])


@router.get("/weekly")
@router.get("/weekly/", response_model=WeeklySummaryResponse)
@limiter.limit(get_rate_limit("report"))
async def get_weekly_summary(
    request: Request,
    start_date: Optional[date] = Query(None, description="First day of the week, defaults to today"),
    db: Session = Depends(get_db)
):
    """
    Seven days of bookings per filter with capability, location and service
    status, plus the filters that are due for service.
    """
    return weekly_summary(db, start_date or date.today())
