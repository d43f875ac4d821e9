"""
Day, trailing-week and month intervals over server-local naive datetimes
"""
import re
from datetime import date, datetime, time, timedelta
from typing import NamedTuple, Optional, Union

from errors import InvalidDate

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

DateLike = Union[str, date, datetime, None]


class DateRange(NamedTuple):
    start: datetime
    end: datetime
    # True when `end` is the last instant inside the range (trailing week)
    closed: bool = False

    def contains(self, instant: datetime) -> bool:
        if instant < self.start:
            return False
        return instant <= self.end if self.closed else instant < self.end


def parse_day(value: DateLike = None) -> date:
    """Resolve a YYYY-MM-DD string, date or datetime to a calendar day. None means today."""
    if value is None:
        return datetime.now().date()
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not DATE_PATTERN.match(value):
        raise InvalidDate()
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise InvalidDate()


def day_bucket(value: DateLike = None) -> DateRange:
    start = datetime.combine(parse_day(value), time.min)
    try:
        return DateRange(start, start + timedelta(days=1))
    except OverflowError:
        raise InvalidDate("Date is out of range")


def week_bucket(value: DateLike = None) -> DateRange:
    """The seven calendar days ending on and including the reference day"""
    day = parse_day(value)
    end = datetime.combine(day, time(23, 59, 59, 999000))
    try:
        start = datetime.combine(day - timedelta(days=6), time.min)
    except OverflowError:
        raise InvalidDate("Date is out of range")
    return DateRange(start, end, closed=True)


def month_bucket(value: DateLike) -> DateRange:
    day = parse_day(value)
    start = datetime(day.year, day.month, 1)
    try:
        if day.month == 12:
            end = datetime(day.year + 1, 1, 1)
        else:
            end = datetime(day.year, day.month + 1, 1)
    except ValueError:
        raise InvalidDate("Date is out of range")
    return DateRange(start, end)


def bucket_for_period(period: str, value: DateLike = None) -> Optional[DateRange]:
    buckets = {
        "daily": day_bucket,
        "weekly": week_bucket,
        "monthly": month_bucket,
    }
    bucket = buckets.get(period)
    return bucket(value) if bucket else None
