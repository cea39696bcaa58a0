import datetime
import re
from enum import Enum
from typing import Optional, Tuple

DateBounds = Tuple[Optional[datetime.date], Optional[datetime.date]]


class DateRange(str, Enum):
    TODAY = "today"
    YESTERDAY = "yesterday"
    LAST_3_DAYS = "last3days"
    THIS_WEEK = "thisweek"
    THIS_MONTH = "thismonth"
    LAST_MONTH = "lastmonth"
    ALL = "all"


class PaymentFilter(str, Enum):
    ALL = "all"
    PAID = "paid"
    DUE = "due"


def _month_start(day: datetime.date) -> datetime.date:
    return day.replace(day=1)


def _next_month_start(day: datetime.date) -> datetime.date:
    if day.month == 12:
        return datetime.date(day.year + 1, 1, 1)
    return datetime.date(day.year, day.month + 1, 1)


def date_bounds(date_range: DateRange, today: datetime.date) -> DateBounds:
    """Return ``(start, end)`` for a preset, start inclusive and end exclusive.

    ``None`` leaves that side open. The rolling presets have no upper bound,
    so records dated ahead of ``today`` still show up in them.
    """
    one_day = datetime.timedelta(days=1)
    if date_range == DateRange.TODAY:
        return today, today + one_day
    if date_range == DateRange.YESTERDAY:
        return today - one_day, today
    if date_range == DateRange.LAST_3_DAYS:
        return today - datetime.timedelta(days=3), None
    if date_range == DateRange.THIS_WEEK:
        return today - datetime.timedelta(days=7), None
    if date_range == DateRange.THIS_MONTH:
        return _month_start(today), _next_month_start(today)
    if date_range == DateRange.LAST_MONTH:
        previous = _month_start(today) - one_day
        return _month_start(previous), _month_start(today)
    return None, None


def build_query(
    date_range: DateRange = DateRange.ALL,
    payment: PaymentFilter = PaymentFilter.ALL,
    search: Optional[str] = None,
    today: Optional[datetime.date] = None,
) -> dict:
    """Build the MongoDB filter for the ledger view.

    Dates are stored as ISO strings, which sort the same way as the dates.
    """
    query = {}
    start, end = date_bounds(date_range, today or datetime.date.today())
    if start or end:
        query["date"] = {}
        if start:
            query["date"]["$gte"] = start.isoformat()
        if end:
            query["date"]["$lt"] = end.isoformat()

    if payment != PaymentFilter.ALL:
        query["payment_status"] = payment.value

    if search and search.strip():
        query["customer_name"] = {"$regex": re.escape(search.strip()), "$options": "i"}

    return query
