"""
Calendar view ranges and day bucketing for dated records.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Any, List, Optional, Tuple

from dateutil.relativedelta import relativedelta

from app.services.listing import get_field

logger = logging.getLogger(__name__)

MONTH_GRID_DAYS = 42


class CalendarView(str, Enum):
    MONTH = "month"
    WEEK = "week"
    DAY = "day"


class NavigationDirection(str, Enum):
    PREV = "prev"
    NEXT = "next"


@dataclass
class DayBucket:
    date: date
    is_today: bool = False
    is_current_month: bool = True
    records: List[Any] = field(default_factory=list)


def _sunday_on_or_before(day: date) -> date:
    # date.weekday(): Monday=0 ... Sunday=6
    return day - timedelta(days=(day.weekday() + 1) % 7)


def view_range(anchor: date, view: str) -> Tuple[date, date]:
    """
    Inclusive (start, end) of the days shown for a view.

    month: 6x7 grid starting on the Sunday on or before the 1st
    week: Sunday through Saturday containing the anchor
    day: the anchor only
    """
    view = CalendarView(view)
    if view == CalendarView.MONTH:
        start = _sunday_on_or_before(anchor.replace(day=1))
        return start, start + timedelta(days=MONTH_GRID_DAYS - 1)
    if view == CalendarView.WEEK:
        start = _sunday_on_or_before(anchor)
        return start, start + timedelta(days=6)
    return anchor, anchor


def _iso_day(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def build_buckets(
    anchor: date,
    view: str,
    records: List[Any],
    date_field: str = "shift_date",
    today: Optional[date] = None,
) -> List[DayBucket]:
    """
    One bucket per day in the view range, each holding the records dated that day.

    Days are matched on their ISO string, so string dates are compared
    verbatim. Records outside the range are dropped. Within a bucket, records
    keep their input order.
    """
    start, end = view_range(anchor, view)
    today = today or date.today()

    buckets = []
    index = {}
    day = start
    while day <= end:
        bucket = DayBucket(
            date=day,
            is_today=day == today,
            is_current_month=day.month == anchor.month and day.year == anchor.year,
        )
        index[day.isoformat()] = bucket
        buckets.append(bucket)
        day += timedelta(days=1)

    placed = 0
    for record in records:
        bucket = index.get(_iso_day(get_field(record, date_field)))
        if bucket is not None:
            bucket.records.append(record)
            placed += 1

    logger.debug(f"Bucketed {placed} of {len(records)} records into {view} view {start}..{end}")
    return buckets


def navigate(anchor: date, view: str, direction: str) -> date:
    """
    Move the anchor one view-length back or forward.

    Month moves clamp to the last valid day (Jan 31 -> Feb 28/29).
    """
    view = CalendarView(view)
    step = 1 if NavigationDirection(direction) == NavigationDirection.NEXT else -1
    if view == CalendarView.MONTH:
        return anchor + relativedelta(months=step)
    if view == CalendarView.WEEK:
        return anchor + timedelta(weeks=step)
    return anchor + timedelta(days=step)
