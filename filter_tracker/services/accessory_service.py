"""
Accessory Service

CRUD over the shared accessory inventory and its out-of-service windows.

Deleting an accessory never touches historical allocations: bookings keep
their name/unit snapshot and the accessory id stays retired.
"""

import logging
from typing import List

from sqlalchemy import func
from sqlalchemy.orm import Session

from ..models.accessory import Accessory, OutOfServiceWindow
from ..models.booking import BookingAccessory
from ..schemas.accessory import AccessoryCreate, AccessoryUpdate, OutOfServiceWindowIn
from ..utils.errors import NotFoundError

logger = logging.getLogger(__name__)


def build_windows(windows: List[OutOfServiceWindowIn]) -> List[OutOfServiceWindow]:
    return [
        OutOfServiceWindow(
            start_date=w.start_date,
            end_date=w.end_date,
            quantity=w.quantity,
            reason=w.reason,
        )
        for w in windows
    ]


class AccessoryService:

    def __init__(self, db: Session):
        self.db = db

    def next_accessory_id(self) -> int:
        """
        Next unused integer id. Allocations of deleted accessories still hold
        their old ids, so those count as used too.
        """
        highest_accessory = self.db.query(func.max(Accessory.id)).scalar() or 0
        highest_allocated = self.db.query(func.max(BookingAccessory.accessory_id)).scalar() or 0
        return max(highest_accessory, highest_allocated) + 1

    def list_accessories(self) -> List[Accessory]:
        return self.db.query(Accessory).order_by(Accessory.id).all()

    def get_accessory(self, accessory_id: int) -> Accessory:
        accessory = self.db.query(Accessory).filter(Accessory.id == accessory_id).first()
        if not accessory:
            raise NotFoundError("Accessory", accessory_id)
        return accessory

    def create_accessory(self, data: AccessoryCreate) -> Accessory:
        accessory = Accessory(
            id=self.next_accessory_id(),
            name=data.name,
            pool=data.pool.value,
            total_quantity=data.total_quantity,
            unit=data.unit,
            notes=data.notes or "",
            is_critical=data.is_critical,
            required_per_booking=data.required_per_booking,
        )
        accessory.out_of_service = build_windows(data.out_of_service)

        self.db.add(accessory)
        self.db.commit()
        self.db.refresh(accessory)
        logger.info(f"Created accessory {accessory.id} '{accessory.name}' in {accessory.pool}")
        return accessory

    def update_accessory(self, accessory_id: int, updates: AccessoryUpdate) -> Accessory:
        accessory = self.get_accessory(accessory_id)
        fields = updates.model_dump(mode="json", exclude_unset=True, exclude={"out_of_service"})

        for name, value in fields.items():
            # unit is the only nullable column
            if value is None and name != "unit":
                continue
            setattr(accessory, name, value)

        if updates.out_of_service is not None:
            # Replaces the whole window list
            accessory.out_of_service = build_windows(updates.out_of_service)

        self.db.commit()
        self.db.refresh(accessory)
        logger.info(f"Updated accessory {accessory_id}")
        return accessory

    def delete_accessory(self, accessory_id: int) -> None:
        accessory = self.get_accessory(accessory_id)
        self.db.delete(accessory)
        self.db.commit()
        logger.info(f"Deleted accessory {accessory_id} '{accessory.name}'")
