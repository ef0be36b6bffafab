import calendar
from datetime import date, datetime
from zoneinfo import ZoneInfo

from ..config import get_settings


def local_zone() -> ZoneInfo:
    """Zone in which every performance date is interpreted."""
    return ZoneInfo(get_settings().local_timezone)


def to_local_date(dt: datetime) -> date:
    if dt.tzinfo is None:
        raise ValueError("datetime must be timezone-aware")
    return dt.astimezone(local_zone()).date()


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """First and last calendar day of a month, both inclusive."""
    if not 1 <= month <= 12:
        raise ValueError("month must be between 1 and 12")
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def today_local() -> date:
    return datetime.now(local_zone()).date()


def resolve_local_date(day: date | None = None, at: datetime | None = None) -> date:
    """Calendar day a query refers to: an explicit day, else the local day of ``at``, else today."""
    if day is not None:
        return day
    if at is not None:
        return to_local_date(at)
    return today_local()
