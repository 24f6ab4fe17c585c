"""Unit tests for report window resolution"""

from datetime import datetime, timedelta
from src.domain.report import ReportPeriod, resolve_report_window

NOW = datetime(2024, 3, 15, 14, 30, 45, 123456)


class TestResolveReportWindow:
    """Test default windows per period"""

    def test_daily_starts_at_midnight(self):
        start, end = resolve_report_window(ReportPeriod.DAILY, NOW)

        assert start == datetime(2024, 3, 15, 0, 0, 0)
        assert end == NOW

    def test_weekly_starts_six_days_ago(self):
        start, end = resolve_report_window(ReportPeriod.WEEKLY, NOW)

        assert start == datetime(2024, 3, 9, 14, 30, 45, 123456)
        assert end == NOW

    def test_monthly_starts_on_first_of_month(self):
        start, end = resolve_report_window(ReportPeriod.MONTHLY, NOW)

        assert start == datetime(2024, 3, 1, 0, 0, 0)
        assert end == NOW


class TestExplicitBounds:
    """An explicit window needs both bounds"""

    def test_both_bounds_replace_period_window(self):
        start, end = resolve_report_window(
            ReportPeriod.WEEKLY, NOW, start=datetime(2023, 1, 1), end=datetime(2023, 2, 1)
        )

        assert (start, end) == (datetime(2023, 1, 1), datetime(2023, 2, 1))

    def test_lone_start_is_ignored(self):
        start, end = resolve_report_window(ReportPeriod.DAILY, NOW, start=datetime(2024, 1, 1))

        assert start == datetime(2024, 3, 15, 0, 0, 0)
        assert end == NOW

    def test_lone_end_before_today_is_ignored(self):
        start, end = resolve_report_window(
            ReportPeriod.DAILY, NOW, end=NOW - timedelta(days=2)
        )

        assert start == datetime(2024, 3, 15, 0, 0, 0)
        assert end == NOW
