"""
Shared fixtures: an in-memory SQLite database per test, seeded with the four
filters, and a TestClient whose get_db points at it.
"""

import os

# Must be set before filter_tracker.config is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["RATE_LIMIT_ENABLED"] = "false"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from filter_tracker.database import Base, get_db
from filter_tracker.main import app
from filter_tracker.models import Accessory, Booking, BookingAccessory, OutOfServiceWindow
from filter_tracker.services.filter_service import FilterService


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    FilterService(session).init_filters()
    yield session
    session.close()


@pytest.fixture
def client(db, session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def add_accessory(db):
    """Persist an accessory; windows are (start, end, quantity) tuples."""
    def _add(accessory_id, total, pool="pool_a", name=None, windows=(), is_critical=False,
             required_per_booking=0, unit=None):
        accessory = Accessory(
            id=accessory_id,
            name=name or f"Accessory {accessory_id}",
            pool=pool,
            total_quantity=total,
            unit=unit,
            notes="",
            is_critical=is_critical,
            required_per_booking=required_per_booking,
        )
        accessory.out_of_service = [
            OutOfServiceWindow(start_date=start, end_date=end, quantity=quantity, reason="")
            for start, end, quantity in windows
        ]
        db.add(accessory)
        db.commit()
        return accessory
    return _add


@pytest.fixture
def add_booking(db):
    """Persist a booking day; allocations map accessory_id -> quantity."""
    def _add(filter_id, day, allocations=None, location="Site", type="booking"):
        booking = Booking(filter_id=filter_id, date=day, location=location, type=type)
        for accessory_id, quantity in (allocations or {}).items():
            booking.accessories.append(BookingAccessory(
                accessory_id=accessory_id,
                accessory_name=f"Accessory {accessory_id}",
                quantity=quantity,
            ))
        db.add(booking)
        db.commit()
        return booking
    return _add
