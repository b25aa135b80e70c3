"""
Test suite for calendar view ranges, day buckets and navigation.
"""

from datetime import date, datetime

import pytest

from app.services.calendar import build_buckets, navigate, view_range


class TestViewRange:
    """Tests for the days covered by each view"""

    def test_month_grid_starts_on_sunday(self):
        """Test January 2025 grid starts on the Sunday before the 1st"""
        start, end = view_range(date(2025, 1, 15), "month")
        assert start == date(2024, 12, 29)
        assert start.weekday() == 6
        assert end == date(2025, 2, 8)
        assert (end - start).days == 41

    def test_month_starting_on_sunday(self):
        """Test a month whose 1st is a Sunday starts on the 1st"""
        start, _ = view_range(date(2026, 11, 20), "month")
        assert start == date(2026, 11, 1)

    def test_week_is_sunday_to_saturday(self):
        """Test week view around a Wednesday"""
        assert view_range(date(2025, 1, 1), "week") == (date(2024, 12, 29), date(2025, 1, 4))

    def test_week_anchor_on_sunday(self):
        """Test a Sunday anchor starts its own week"""
        assert view_range(date(2025, 1, 5), "week") == (date(2025, 1, 5), date(2025, 1, 11))

    def test_day(self):
        """Test day view is the anchor only"""
        assert view_range(date(2025, 7, 4), "day") == (date(2025, 7, 4), date(2025, 7, 4))

    def test_unknown_view(self):
        """Test an unknown view is rejected"""
        with pytest.raises(ValueError):
            view_range(date(2025, 1, 1), "year")


class TestBuildBuckets:
    """Tests for grouping records by day"""

    def test_month_has_42_buckets(self):
        """Test every month view has a full 6x7 grid"""
        buckets = build_buckets(date(2025, 2, 10), "month", [], today=date(2025, 2, 10))
        assert len(buckets) == 42
        assert sum(b.is_today for b in buckets) == 1
        assert buckets[0].is_current_month is False

    def test_records_bucketed_in_order(self):
        """Test records land on their day in input order"""
        records = [
            {"id": 1, "shift_date": date(2025, 1, 2)},
            {"id": 2, "shift_date": "2025-01-02"},
            {"id": 3, "shift_date": datetime(2025, 1, 3, 18, 30)},
            {"id": 4, "shift_date": date(2025, 3, 1)},
        ]
        buckets = build_buckets(date(2025, 1, 1), "week", records, today=date(2025, 1, 1))
        by_day = {b.date: [r["id"] for r in b.records] for b in buckets}
        assert by_day[date(2025, 1, 2)] == [1, 2]
        assert by_day[date(2025, 1, 3)] == [3]
        assert sum(len(b.records) for b in buckets) == 3

    def test_custom_date_field(self):
        """Test bucketing on a field other than shift_date"""
        records = [{"applied_at": date(2025, 1, 1)}]
        buckets = build_buckets(date(2025, 1, 1), "day", records, date_field="applied_at")
        assert len(buckets) == 1
        assert buckets[0].records == records

    def test_out_of_range_records_logged(self, caplog):
        """Test records outside the view are dropped and the count is logged"""
        records = [{"shift_date": date(2025, 1, 6)}, {"shift_date": date(2025, 3, 1)}, {"shift_date": None}]
        with caplog.at_level("DEBUG", logger="app.services.calendar"):
            buckets = build_buckets(date(2025, 1, 6), "day", records)
        assert [len(b.records) for b in buckets] == [1]
        assert "Bucketed 1 of 3 records" in caplog.text


class TestNavigate:
    """Tests for moving between pages of a view"""

    def test_month_clamps_to_short_month(self):
        """Test Jan 31 moves to the last day of February"""
        assert navigate(date(2025, 1, 31), "month", "next") == date(2025, 2, 28)
        assert navigate(date(2024, 1, 31), "month", "next") == date(2024, 2, 29)

    def test_month_back_across_year(self):
        """Test moving back from January"""
        assert navigate(date(2025, 1, 15), "month", "prev") == date(2024, 12, 15)

    def test_week_and_day(self):
        """Test week and day steps"""
        assert navigate(date(2025, 1, 1), "week", "next") == date(2025, 1, 8)
        assert navigate(date(2025, 1, 1), "day", "prev") == date(2024, 12, 31)

    def test_unknown_direction(self):
        """Test an unknown direction is rejected"""
        with pytest.raises(ValueError):
            navigate(date(2025, 1, 1), "day", "sideways")
