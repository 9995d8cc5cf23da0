"""
Tests for committing and removing bookings

Test Coverage:
1. Capacity violations reject the whole submission, nothing persisted
2. Requests are summed per day and accessory before comparison
3. Last-service watermark only moves forward
4. Date validation: duplicates, already booked days, missing location
5. Critical accessory warnings never block
6. Removal of single bookings and date ranges
"""

import pytest
from datetime import date, timedelta

from pydantic import ValidationError

from filter_tracker.models import Booking, BookingAccessory, Filter
from filter_tracker.schemas.booking import PendingBooking
from filter_tracker.services.booking_service import (
    BookingService, advance_last_service_date, merge_accessory_requests
)
from filter_tracker.services.booking_validator import BookingAccessoryValidator, requested_quantities
from filter_tracker.utils.errors import CapacityViolationError, InvalidRequestError, NotFoundError


DAY1 = date(2026, 5, 4)
DAY2 = DAY1 + timedelta(days=1)
DAY3 = DAY1 + timedelta(days=2)


def pending(dates, accessories=None, location="Harbour site", type="booking"):
    return PendingBooking(
        dates=dates,
        location=location,
        type=type,
        accessories=[
            {"accessory_id": accessory_id, "quantity": quantity}
            for accessory_id, quantity in (accessories or {}).items()
        ],
    )


def booking_count(db):
    return db.query(Booking).count()


class TestCapacityRejection:

    # ========== Scenario 5: over-request on the binding day ==========

    def test_over_request_is_rejected_without_writes(self, db, add_accessory, add_booking):
        add_accessory(1, total=2, name="Transfer Pump")
        add_booking(2, DAY2, {1: 1})
        before = booking_count(db)

        with pytest.raises(CapacityViolationError) as exc_info:
            BookingService(db).commit_bookings(1, [pending([DAY1, DAY2, DAY3], {1: 2})])

        violations = exc_info.value.violations
        assert len(violations) == 1
        assert violations[0]["accessory_name"] == "Transfer Pump"
        assert violations[0]["date"] == DAY2.isoformat()
        assert violations[0]["requested"] == 2
        assert violations[0]["available"] == 1

        db.expire_all()
        assert booking_count(db) == before

    def test_repeated_accessory_lines_are_summed_per_day(self, db, add_accessory):
        """Two lines for the same accessory cannot each take the last unit"""
        add_accessory(1, total=1)
        item = PendingBooking(
            dates=[DAY1],
            location="Harbour site",
            accessories=[{"accessory_id": 1, "quantity": 1}, {"accessory_id": 1, "quantity": 1}],
        )

        with pytest.raises(CapacityViolationError) as exc:
            BookingService(db).commit_bookings(1, [item])

        assert exc.value.status_code == 409
        violation = exc.value.violations[0]
        assert (violation["requested"], violation["available"]) == (2, 1)
        assert booking_count(db) == 0

    def test_other_pool_accessory_has_no_capacity(self, db, add_accessory):
        add_accessory(1, total=5, pool="pool_b")

        with pytest.raises(CapacityViolationError) as exc_info:
            BookingService(db).commit_bookings(1, [pending([DAY1], {1: 1})])

        assert exc_info.value.violations[0]["available"] == 0

    def test_out_of_service_units_are_unavailable(self, db, add_accessory):
        add_accessory(1, total=2, windows=[(DAY1, DAY1, 2)])

        with pytest.raises(CapacityViolationError):
            BookingService(db).commit_bookings(1, [pending([DAY1], {1: 1})])

    def test_unknown_accessory_is_not_found(self, db):
        with pytest.raises(NotFoundError):
            BookingService(db).commit_bookings(1, [pending([DAY1], {42: 1})])
        assert booking_count(db) == 0

    def test_within_capacity_commits(self, db, add_accessory):
        add_accessory(1, total=2, name="Hose", unit="m")

        filter_, created, warnings = BookingService(db).commit_bookings(
            1, [pending([DAY1, DAY2], {1: 2})]
        )

        assert len(created) == 2
        assert warnings == []
        assert [b.date for b in filter_.bookings] == [DAY1, DAY2]
        snapshot = created[0].accessories[0]
        assert (snapshot.accessory_name, snapshot.unit, snapshot.quantity) == ("Hose", "m", 2)


class TestValidatorHelpers:

    def test_requested_quantities_sum_per_day(self):
        result = requested_quantities([
            pending([DAY1, DAY2], {1: 1}),
            pending([DAY2], {1: 2, 3: 1}),
        ])
        assert result == {(DAY1, 1): 1, (DAY2, 1): 3, (DAY2, 3): 1}

    def test_duplicate_accessory_lines_merge(self):
        item = PendingBooking(
            dates=[DAY1],
            location="Site",
            accessories=[{"accessory_id": 1, "quantity": 1}, {"accessory_id": 1, "quantity": 2}],
        )
        assert merge_accessory_requests(item) == {1: 3}


class TestLastServiceWatermark:

    def test_watermark_only_moves_forward(self):
        assert advance_last_service_date(None, [DAY2, DAY1]) == DAY2
        assert advance_last_service_date(DAY3, [DAY1]) == DAY3
        assert advance_last_service_date(DAY1, [DAY3]) == DAY3
        assert advance_last_service_date(DAY1, []) == DAY1

    def test_earlier_service_keeps_last_service_date(self, db):
        filter_ = db.get(Filter, 1)
        filter_.last_service_date = DAY3
        db.commit()

        filter_, _, _ = BookingService(db).commit_bookings(1, [pending([DAY1], type="service", location=None)])

        assert filter_.last_service_date == DAY3

    def test_later_service_advances_last_service_date(self, db):
        filter_ = db.get(Filter, 1)
        filter_.last_service_date = DAY1
        db.commit()

        filter_, created, _ = BookingService(db).commit_bookings(1, [pending([DAY3], type="service", location=None)])

        assert filter_.last_service_date == DAY3
        assert created[0].location == "Service"

    def test_ordinary_booking_does_not_touch_service_date(self, db):
        filter_, _, _ = BookingService(db).commit_bookings(1, [pending([DAY2])])
        assert filter_.last_service_date is None


class TestDateValidation:

    def test_location_required_for_ordinary_booking(self):
        with pytest.raises(ValidationError):
            pending([DAY1], location="  ")

    def test_already_booked_day_is_rejected(self, db, add_booking):
        add_booking(1, DAY2)

        with pytest.raises(InvalidRequestError):
            BookingService(db).commit_bookings(1, [pending([DAY1, DAY2])])
        db.expire_all()
        assert booking_count(db) == 1

    def test_same_day_on_another_filter_is_allowed(self, db, add_booking):
        add_booking(2, DAY1)
        _, created, _ = BookingService(db).commit_bookings(1, [pending([DAY1])])
        assert len(created) == 1

    def test_day_repeated_across_pending_items_is_rejected(self, db):
        with pytest.raises(InvalidRequestError):
            BookingService(db).commit_bookings(1, [pending([DAY1]), pending([DAY1, DAY2])])

    def test_unknown_filter(self, db):
        with pytest.raises(NotFoundError):
            BookingService(db).commit_bookings(7, [pending([DAY1])])


class TestCriticalWarnings:

    def test_missing_critical_accessory_warns_but_commits(self, db, add_accessory):
        add_accessory(1, total=4, name="UV Lamp", is_critical=True, required_per_booking=2)

        _, created, warnings = BookingService(db).commit_bookings(1, [pending([DAY1, DAY2])])

        assert len(created) == 2
        assert len(warnings) == 1
        assert warnings[0]["accessory_name"] == "UV Lamp"
        assert warnings[0]["requested"] == 0
        assert warnings[0]["date"] == DAY1

    def test_service_bookings_are_not_warned(self, db, add_accessory):
        add_accessory(1, total=4, is_critical=True, required_per_booking=2)
        warnings = BookingAccessoryValidator(db).critical_warnings(
            1, [pending([DAY1], type="service", location=None)]
        )
        assert warnings == []

    def test_critical_accessory_in_other_pool_is_ignored(self, db, add_accessory):
        add_accessory(1, total=4, pool="pool_b", is_critical=True, required_per_booking=2)
        assert BookingAccessoryValidator(db).critical_warnings(1, [pending([DAY1])]) == []


class TestRemoval:

    def test_remove_single_booking(self, db, add_accessory):
        add_accessory(1, total=2)
        _, created, _ = BookingService(db).commit_bookings(1, [pending([DAY1, DAY2], {1: 1})])
        booking_id = created[0].id

        BookingService(db).remove_booking(1, booking_id)

        db.expire_all()
        assert booking_count(db) == 1
        assert db.query(BookingAccessory).count() == 1

    def test_remove_booking_of_other_filter_is_not_found(self, db, add_booking):
        booking = add_booking(2, DAY1)
        with pytest.raises(NotFoundError):
            BookingService(db).remove_booking(1, booking.id)

    def test_remove_range(self, db, add_booking):
        for day in (DAY1, DAY2, DAY3):
            add_booking(1, day)
        add_booking(2, DAY2)

        removed = BookingService(db).remove_bookings_in_range(1, DAY1, DAY2)

        assert removed == 2
        db.expire_all()
        assert [b.date for b in db.query(Booking).filter(Booking.filter_id == 1).all()] == [DAY3]
        assert booking_count(db) == 2

    def test_remove_range_backwards_is_invalid(self, db):
        with pytest.raises(InvalidRequestError):
            BookingService(db).remove_bookings_in_range(1, DAY2, DAY1)

    def test_freed_capacity_is_available_again(self, db, add_accessory):
        add_accessory(1, total=1)
        service = BookingService(db)
        service.commit_bookings(1, [pending([DAY1], {1: 1})])
        service.remove_bookings_in_range(1, DAY1, DAY1)

        _, created, _ = service.commit_bookings(2, [pending([DAY1], {1: 1})])
        assert len(created) == 1
