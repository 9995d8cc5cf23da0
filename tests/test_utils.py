"""
Tests for helpers: sanitization, date ranges, error payloads, service status
"""

from datetime import date, timedelta

from filter_tracker.models import Filter
from filter_tracker.services.filter_service import capability_label, service_status
from filter_tracker.utils.dates import days_between, group_contiguous
from filter_tracker.utils.errors import CapacityViolationError, NotFoundError
from filter_tracker.utils.sanitization import clean_text, strip_dangerous_tags


class TestSanitization:

    def test_strips_script_and_event_handlers(self):
        assert clean_text("  Pump <script>x()</script> ok ") == "Pump  ok"
        assert strip_dangerous_tags('<a href="#" onclick="x()">link</a>') == '<a href="#">link</a>'

    def test_plain_text_with_equals_is_kept(self):
        assert clean_text("one=3, on site") == "one=3, on site"

    def test_script_urls_removed(self):
        assert "javascript" not in clean_text("javascript:alert(1)")

    def test_zero_width_characters_dropped(self):
        assert clean_text("Dock\u200b 7") == "Dock 7"

    def test_none_passes_through(self):
        assert clean_text(None) is None


class TestDates:

    def test_inclusive_range(self):
        start = date(2026, 2, 27)
        assert days_between(start, date(2026, 3, 1)) == [start, date(2026, 2, 28), date(2026, 3, 1)]

    def test_backwards_range_is_empty(self):
        assert days_between(date(2026, 3, 2), date(2026, 3, 1)) == []

    def test_group_contiguous(self):
        d = date(2026, 1, 1)
        days = [d + timedelta(days=5), d, d + timedelta(days=1), d + timedelta(days=1)]
        assert group_contiguous(days) == [[d, d + timedelta(days=1)], [d + timedelta(days=5)]]


class TestErrors:

    def test_not_found_message(self):
        assert NotFoundError("Accessory", 3).message == "Accessory 3 not found"
        assert NotFoundError("Accessory", 3).status_code == 404

    def test_capacity_violation_detail(self):
        error = CapacityViolationError([{"accessory_id": 1}])
        assert error.status_code == 409
        assert error.to_detail()["violations"] == [{"accessory_id": 1}]


class TestFilterStatus:

    def test_capability_labels(self):
        assert capability_label(Filter(uv_capability=True, ten_micron_capability=True)) == "10 Micron + UV"
        assert capability_label(Filter(uv_capability=False, ten_micron_capability=True)) == "10 Micron"
        assert capability_label(Filter(uv_capability=True, ten_micron_capability=False)) == "25 Micron"

    def test_service_due_on_the_day(self):
        filter_ = Filter(last_service_date=date(2026, 1, 1), service_frequency_days=90)
        next_day = date(2026, 4, 1)

        assert service_status(filter_, today=next_day - timedelta(days=1)) == (False, next_day)
        assert service_status(filter_, today=next_day) == (True, next_day)

    def test_never_serviced_is_not_due(self):
        assert service_status(Filter(service_frequency_days=90), today=date(2026, 1, 1)) == (False, None)
