"""
Filter Service

The fleet is fixed at four filters, created on first startup and then only
ever updated field by field (last write wins).
"""

import logging
from datetime import date, timedelta
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from ..config import settings
from ..models.filter import Filter, FILTER_IDS
from ..schemas.filter import FilterUpdate
from ..utils.errors import NotFoundError

logger = logging.getLogger(__name__)

CAPABILITY_TEN_MICRON_UV = "10 Micron + UV"
CAPABILITY_TEN_MICRON = "10 Micron"
CAPABILITY_BASE = "25 Micron"


def capability_label(filter_) -> str:
    """Three-level capability derived from the two hardware flags."""
    if filter_.uv_capability and filter_.ten_micron_capability:
        return CAPABILITY_TEN_MICRON_UV
    if filter_.ten_micron_capability:
        return CAPABILITY_TEN_MICRON
    return CAPABILITY_BASE


def service_status(filter_, today: Optional[date] = None) -> Tuple[bool, Optional[date]]:
    """
    (is_due, next_service_date). Without a recorded service or a cadence there
    is nothing to schedule.
    """
    if not filter_.last_service_date or not filter_.service_frequency_days:
        return False, None

    today = today or date.today()
    next_service = filter_.last_service_date + timedelta(days=filter_.service_frequency_days)
    return today >= next_service, next_service


class FilterService:

    def __init__(self, db: Session):
        self.db = db

    def list_filters(self) -> List[Filter]:
        return self.db.query(Filter).order_by(Filter.id).all()

    def get_filter(self, filter_id: int) -> Filter:
        filter_ = self.db.query(Filter).filter(Filter.id == filter_id).first()
        if not filter_:
            raise NotFoundError("Filter", filter_id)
        return filter_

    def update_filter(self, filter_id: int, updates: FilterUpdate) -> Filter:
        """Merge only the fields the caller sent."""
        filter_ = self.get_filter(filter_id)
        fields = updates.model_dump(exclude_unset=True)
        for name, value in fields.items():
            if value is None and name != "last_service_date":
                continue
            setattr(filter_, name, value)

        self.db.commit()
        self.db.refresh(filter_)
        logger.info(f"Updated filter {filter_id}: {sorted(fields)}")
        return filter_

    def init_filters(self) -> int:
        """Create the four filters if the table is empty. Returns how many were created."""
        if self.db.query(Filter).count() > 0:
            return 0

        for filter_id in FILTER_IDS:
            self.db.add(Filter(
                id=filter_id,
                name=f"Filter {filter_id}",
                location=settings.default_filter_location,
                uv_capability=True,
                ten_micron_capability=True,
                notes="",
                service_frequency_days=settings.default_service_frequency_days,
                last_service_date=None,
            ))
        self.db.commit()
        logger.info(f"Created default filters {list(FILTER_IDS)}")
        return len(FILTER_IDS)
