from datetime import datetime
from sqlalchemy import Column, Integer, String, Text, Boolean, Date, DateTime
from sqlalchemy.orm import relationship
from ..database import Base


# The fleet is fixed: filters 1-4 are created once and never deleted
FILTER_IDS = (1, 2, 3, 4)


class Filter(Base):
    __tablename__ = "filters"

    id = Column(Integer, primary_key=True, autoincrement=False)
    name = Column(String(100), nullable=False)
    location = Column(String(255), nullable=False, default="Storage")
    uv_capability = Column(Boolean, default=True, nullable=False)
    ten_micron_capability = Column(Boolean, default=True, nullable=False)
    notes = Column(Text, default="", nullable=False)

    # Service tracking
    service_frequency_days = Column(Integer, default=90, nullable=False)
    last_service_date = Column(Date, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    bookings = relationship(
        "Booking",
        back_populates="filter",
        order_by="Booking.date",
        cascade="all, delete-orphan",
    )

    def __repr__(self):
        return f"<Filter {self.id} {self.name} @ {self.location}>"
