"""
Accessory Model

Shared equipment lent out with filters. Each accessory lives in exactly one
pool and may carry out-of-service windows that temporarily remove units.
"""

import uuid
from datetime import datetime
from sqlalchemy import Column, Integer, String, Text, Boolean, Date, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship
from ..database import Base
import enum


class AccessoryPool(str, enum.Enum):
    POOL_A = "pool_a"  # serves filters 1-3
    POOL_B = "pool_b"  # serves filter 4 only


class Accessory(Base):
    __tablename__ = "accessories"

    # Assigned by the service as the next unused integer
    id = Column(Integer, primary_key=True, autoincrement=False)
    name = Column(String(150), nullable=False)
    pool = Column(String(20), nullable=False, default=AccessoryPool.POOL_A.value)

    # Ceiling owned, never reduced by allocation
    total_quantity = Column(Integer, nullable=False, default=0)
    unit = Column(String(50), nullable=True)
    notes = Column(Text, default="", nullable=False)

    # Critical equipment advisory
    is_critical = Column(Boolean, default=False, nullable=False)
    required_per_booking = Column(Integer, default=0, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    out_of_service = relationship(
        "OutOfServiceWindow",
        back_populates="accessory",
        cascade="all, delete-orphan",
        order_by="OutOfServiceWindow.start_date",
        lazy="selectin",
    )

    __table_args__ = (
        Index("ix_accessory_pool", "pool"),
    )

    def __repr__(self):
        return f"<Accessory {self.id} {self.name} x{self.total_quantity} ({self.pool})>"


class OutOfServiceWindow(Base):
    """
    Inclusive date range during which `quantity` units are unusable.
    Overlapping windows stack.
    """
    __tablename__ = "accessory_out_of_service"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    accessory_id = Column(Integer, ForeignKey("accessories.id", ondelete="CASCADE"), nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    quantity = Column(Integer, nullable=False, default=1)
    reason = Column(String(255), default="", nullable=False)

    accessory = relationship("Accessory", back_populates="out_of_service")

    __table_args__ = (
        Index("ix_out_of_service_accessory_dates", "accessory_id", "start_date", "end_date"),
    )

    def covers(self, day) -> bool:
        return self.start_date <= day <= self.end_date

    def __repr__(self):
        return f"<OutOfServiceWindow {self.start_date}..{self.end_date} -{self.quantity}>"
