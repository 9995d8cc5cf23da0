"""
Tests for the per-client booking session
"""

import pytest
from datetime import date, timedelta

from filter_tracker.models.booking import BookingType
from filter_tracker.services.booking_session import BookingSession
from filter_tracker.utils.errors import InvalidRequestError


TODAY = date(2026, 7, 1)


def day(offset):
    return TODAY + timedelta(days=offset)


@pytest.fixture
def session():
    return BookingSession(filter_id=2, booked_dates=[day(3)], unlocked=True)


class TestBookingSession:

    def test_locked_session_refuses_edits(self):
        locked = BookingSession(filter_id=1)

        with pytest.raises(InvalidRequestError):
            locked.select_range(day(1), day(2), today=TODAY)

        locked.unlock()
        assert locked.select_range(day(1), day(2), today=TODAY) == [day(1), day(2)]

    def test_select_range_skips_booked_and_past_days(self, session):
        selected = session.select_range(day(-2), day(4), today=TODAY)
        assert selected == [day(0), day(1), day(2), day(4)]

    def test_select_range_accepts_reversed_ends(self, session):
        assert session.select_range(day(2), day(1), today=TODAY) == [day(1), day(2)]

    def test_add_pending_moves_selection_and_allocations(self, session):
        session.select_range(day(1), day(2), today=TODAY)
        session.set_allocation(5, 2)
        session.set_allocation(6, 1)
        session.set_allocation(6, 0)

        item = session.add_pending("Quay 4")

        assert item.dates == [day(1), day(2)]
        assert [(a.accessory_id, a.quantity) for a in item.accessories] == [(5, 2)]
        assert session.selected_dates == []
        assert session.allocations == {}

    def test_pending_days_cannot_be_selected_again(self, session):
        session.select_range(day(1), day(2), today=TODAY)
        session.add_pending("Quay 4")

        assert session.select_range(day(0), day(2), today=TODAY) == [day(0)]

    def test_location_required_unless_service(self, session):
        session.select_range(day(1), day(1), today=TODAY)
        with pytest.raises(InvalidRequestError):
            session.add_pending("   ")

        item = session.add_pending(None, type=BookingType.SERVICE)
        assert item.location == "Service"

    def test_add_pending_without_selection(self, session):
        with pytest.raises(InvalidRequestError):
            session.add_pending("Quay 4")

    def test_schedule_service_for_today(self, session):
        item = session.schedule_service(today=TODAY)

        assert item.type == BookingType.SERVICE
        assert item.dates == [TODAY]
        with pytest.raises(InvalidRequestError):
            session.schedule_service(today=TODAY)

    def test_remove_pending(self, session):
        session.select_range(day(1), day(1), today=TODAY)
        session.add_pending("A")

        with pytest.raises(InvalidRequestError):
            session.remove_pending(3)
        session.remove_pending(0)
        assert session.pending == []

    def test_pending_ranges_split_on_gaps(self, session):
        session.select_range(day(1), day(4), today=TODAY)
        session.add_pending("A")

        assert session.pending_ranges() == [[[day(1), day(2)], [day(4)]]]

    def test_commit_request_and_clear(self, session):
        with pytest.raises(InvalidRequestError):
            session.to_commit_request()

        session.select_range(day(1), day(1), today=TODAY)
        session.add_pending("A")
        request = session.to_commit_request()

        assert len(request.bookings) == 1
        session.clear()
        assert session.pending == []
