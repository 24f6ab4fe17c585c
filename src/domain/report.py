"""Report period rules

Resolves the [start, end] window scanned by the dashboard report.
"""

from datetime import datetime, timedelta
from enum import Enum
from typing import Optional


class ReportPeriod(str, Enum):
    """Dashboard report periods"""
    DAILY = "DAILY"      # Midnight today -> now
    WEEKLY = "WEEKLY"    # now - 6 days -> now
    MONTHLY = "MONTHLY"  # First day of the month -> now


def resolve_report_window(
    period: ReportPeriod,
    now: datetime,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> tuple[datetime, datetime]:
    """
    Resolve the report window for a period

    An explicit window applies only when both bounds are given; a lone
    start or end is ignored and the period rule is used.

    Args:
        period: Report period
        now: Current time (naive UTC)
        start: Optional explicit window start
        end: Optional explicit window end

    Returns:
        Tuple of (start, end)
    """
    if start is not None and end is not None:
        return start, end

    if period == ReportPeriod.DAILY:
        start = now.replace(hour=0, minute=0, second=0, microsecond=0)
    elif period == ReportPeriod.WEEKLY:
        start = now - timedelta(days=6)
    else:
        start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)

    return start, now
