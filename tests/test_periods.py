"""Tests for page selection, page ranges and record views."""

from datetime import date, datetime

import pytest

from tip_tracker.analytics.aggregate import aggregate
from tip_tracker.analytics.metrics import bucket_label, format_value, value_for
from tip_tracker.analytics.periods import (
    clamp_page_index,
    day_totals,
    default_page_index,
    group_records_by_week,
    page_range,
    page_title,
    records_in_range,
    records_on_day,
)
from tip_tracker.core.dates import add_months, as_day, days_between, period_range, week_start
from tip_tracker.core.models import DataPoint, DateRange, Grouping, Metric, Weekday, WorkRecord


def _rec(day, hours=1.0, tips=0.0):
    return WorkRecord(hours=hours, tips=tips, date=day)


class TestCalendarHelpers:
    """Shared calendar arithmetic."""

    def test_week_start(self):
        """Aligns back to the configured weekday."""
        assert week_start(date(2024, 1, 10)) == date(2024, 1, 8)
        assert week_start(date(2024, 1, 10), Weekday.SUN) == date(2024, 1, 7)
        assert week_start(date(2024, 1, 8)) == date(2024, 1, 8)

    def test_as_day_drops_time(self):
        """Datetimes collapse to their calendar day."""
        assert as_day(datetime(2024, 5, 6, 23, 59)) == date(2024, 5, 6)

    def test_add_months_clamps_day(self):
        """Month stepping clamps to the month's last day."""
        assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)

    def test_add_months_overflow(self):
        """Stepping past year 9999 is an OverflowError."""
        with pytest.raises(OverflowError):
            add_months(date(9999, 12, 1), 1)

    def test_days_between_inclusive(self):
        """Both ends included."""
        assert len(days_between(date(2024, 2, 1), date(2024, 2, 29))) == 29

    def test_period_range(self):
        """Week, month and year containing a day."""
        d = date(2024, 2, 14)
        assert period_range(Grouping.WEEK, d) == DateRange(date(2024, 2, 12), date(2024, 2, 18))
        assert period_range(Grouping.MONTH, d) == DateRange(date(2024, 2, 1), date(2024, 2, 29))
        assert period_range(Grouping.YEAR, d) == DateRange(date(2024, 1, 1), date(2024, 12, 31))

    def test_weeks_clamped_at_calendar_ends(self):
        """Weeks that would run past date.min or date.max are cut short."""
        assert week_start(date.min, Weekday.SUN) == date.min
        assert period_range(Grouping.WEEK, date.min, Weekday.SUN) == DateRange(date.min, date(1, 1, 6))
        assert period_range(Grouping.WEEK, date.max) == DateRange(date(9999, 12, 27), date.max)

    def test_weekday_parse(self):
        """Config spellings map to weekdays."""
        assert Weekday.parse("MON") == Weekday.MON
        assert Weekday.parse("sunday") == Weekday.SUN
        assert Weekday.parse(2) == Weekday.WED
        with pytest.raises(ValueError):
            Weekday.parse("someday")


class TestPageSelection:
    """Page index handling and the period behind a page."""

    def setup_method(self):
        self.records = [
            _rec(date(2024, 1, 1), 5, 20),
            _rec(date(2024, 1, 9), 4, 15),
            _rec(date(2024, 1, 16), 3, 12),
        ]
        self.pages = aggregate(self.records, Grouping.WEEK, 10, now=date(2024, 1, 17))

    def test_default_is_most_recent(self):
        """Selection starts on the last page."""
        assert default_page_index(self.pages) == 2
        assert default_page_index([]) == 0

    def test_clamp(self):
        """Out of range indexes are pulled back in; negatives count from the end."""
        assert clamp_page_index(self.pages, None) == 2
        assert clamp_page_index(self.pages, 10) == 2
        assert clamp_page_index(self.pages, -1) == 2
        assert clamp_page_index(self.pages, -3) == 0
        assert clamp_page_index(self.pages, -9) == 0
        assert clamp_page_index([], 4) == 0

    def test_page_range_and_filter(self):
        """Records are filtered to the selected page's week."""
        rng = page_range(self.pages[1], Grouping.WEEK)
        assert rng == DateRange(date(2024, 1, 8), date(2024, 1, 14))
        assert records_in_range(self.records, rng) == [self.records[1]]

    def test_page_range_empty_page(self):
        """No page, no range, no records."""
        assert page_range([], Grouping.WEEK) is None
        assert records_in_range(self.records, None) == []

    def test_titles(self):
        """Titles follow the grouping."""
        assert page_title(self.pages[0], Grouping.WEEK) == "Week of Jan 1, 2024"
        month = aggregate(self.records, Grouping.MONTH, 10, now=date(2024, 1, 17))
        assert page_title(month[0], Grouping.MONTH) == "January 2024"
        year = aggregate(self.records, Grouping.YEAR, 10, now=date(2024, 1, 17))
        assert page_title(year[0], Grouping.YEAR) == "2024"
        assert page_title([], Grouping.YEAR) is None


class TestRecordViews:
    """Week-grouped log and day detail."""

    def test_group_records_by_week(self):
        """Newest week first, with weekly totals."""
        records = [
            _rec(date(2024, 1, 2), 2, 10),
            _rec(date(2024, 1, 9), 4, 15),
            _rec(date(2024, 1, 4), 3, 5),
        ]
        groups = group_records_by_week(records, 10)
        assert [g.week_start for g in groups] == [date(2024, 1, 8), date(2024, 1, 1)]
        assert [r.date for r in groups[1].records] == [date(2024, 1, 4), date(2024, 1, 2)]
        assert groups[1].totals.hours == 5
        assert groups[1].totals.earnings == 65
        assert groups[1].totals.hourly_rate == 13

    def test_day_views(self):
        """Records and totals for one day."""
        records = [_rec(date(2024, 1, 2), 2, 10), _rec(date(2024, 1, 2), 1, 5), _rec(date(2024, 1, 3), 8, 8)]
        assert len(records_on_day(records, date(2024, 1, 2))) == 2
        t = day_totals(records, date(2024, 1, 2), 10)
        assert (t.hours, t.tips, t.earnings) == (3, 15, 45)


class TestMetrics:
    """Projection and formatting of bucket values."""

    point = DataPoint(period_start=date(2024, 1, 1), hours=4.5, tips=17.5, wage=10)

    def test_value_for(self):
        """Every metric reads its own field."""
        assert value_for(self.point, Metric.HOURS) == 4.5
        assert value_for(self.point, Metric.TIPS) == 17.5
        assert value_for(self.point, Metric.TOTAL_EARNINGS) == 62.5
        assert value_for(self.point, Metric.HOURLY_RATE) == pytest.approx(13.888, abs=1e-3)
        with pytest.raises(ValueError):
            value_for(self.point, "steps")

    def test_empty_point(self):
        """Zero hours give a zero hourly rate."""
        p = DataPoint(period_start=date(2024, 1, 1), hours=0, tips=0, wage=10)
        assert p.is_empty
        assert value_for(p, Metric.HOURLY_RATE) == 0

    def test_format_value(self):
        """Hours, money and rates format differently."""
        assert format_value(Metric.HOURS, 7.5) == "7.50 hours"
        assert format_value(Metric.TIPS, 1234.5) == "$1,234.50"
        assert format_value(Metric.HOURLY_RATE, 13.888, "€") == "€13.89/hr"

    def test_bucket_label(self):
        """Axis labels per grouping."""
        assert bucket_label(self.point, Grouping.WEEK) == "Mon 1"
        assert bucket_label(self.point, Grouping.MONTH) == "1"
        assert bucket_label(self.point, Grouping.YEAR) == "Jan"
