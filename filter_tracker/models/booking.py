import uuid
from datetime import datetime
from sqlalchemy import Column, String, Integer, Date, DateTime, ForeignKey, Index, UniqueConstraint
from sqlalchemy.orm import relationship
from ..database import Base
import enum


class BookingType(str, enum.Enum):
    BOOKING = "booking"
    SERVICE = "service"


class Booking(Base):
    """
    One calendar day of a filter's schedule.

    Multi-day jobs are stored as one row per day; accessory allocations hang
    off each row and their quantity is consumed on that day only.
    """
    __tablename__ = "bookings"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    filter_id = Column(Integer, ForeignKey("filters.id", ondelete="CASCADE"), nullable=False)
    date = Column(Date, nullable=False)
    location = Column(String(255), nullable=False)
    type = Column(String(20), default=BookingType.BOOKING.value, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)

    filter = relationship("Filter", back_populates="bookings")
    accessories = relationship(
        "BookingAccessory",
        back_populates="booking",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    __table_args__ = (
        UniqueConstraint("filter_id", "date", name="uq_booking_filter_date"),
        Index("ix_booking_date", "date"),
    )

    @property
    def is_service(self) -> bool:
        return self.type == BookingType.SERVICE.value

    def __repr__(self):
        return f"<Booking filter={self.filter_id} {self.date} {self.type}>"


class BookingAccessory(Base):
    """
    Accessory allocated to a booking day.

    accessory_id is not a foreign key: deleting an accessory keeps
    historical allocations, which render from the name/unit snapshot.
    """
    __tablename__ = "booking_accessories"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    booking_id = Column(String(36), ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False)
    accessory_id = Column(Integer, nullable=False)

    # Snapshot taken at booking time
    accessory_name = Column(String(150), nullable=False)
    unit = Column(String(50), nullable=True)

    quantity = Column(Integer, nullable=False)

    booking = relationship("Booking", back_populates="accessories")

    __table_args__ = (
        Index("ix_booking_accessory_accessory", "accessory_id"),
    )

    def __repr__(self):
        return f"<BookingAccessory {self.accessory_name} x{self.quantity}>"
