import calendar
from dataclasses import dataclass
from datetime import date, datetime, timedelta

from dateutil.relativedelta import relativedelta

from models.enums import DateFilter


@dataclass(frozen=True)
class DateRange:
    start: date
    end: date

    def contains(self, value: date) -> bool:
        # inclusive on both ends; an inverted range contains nothing
        return self.start <= value <= self.end


def as_date(value: date | datetime) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def parse_date_filter(value: str | DateFilter) -> DateFilter | None:
    if isinstance(value, DateFilter):
        return value
    try:
        return DateFilter(value)
    except ValueError:
        return None


def date_range_for(
    date_filter: str | DateFilter,
    custom_range: DateRange | None = None,
    now: date | datetime | None = None,
) -> DateRange:
    """Map a symbolic dashboard filter onto a concrete inclusive range.

    The range ends on ``now``'s date. Month and year windows use calendar
    arithmetic, so 31 March minus six months is 30 September. ``custom``
    hands back the caller's range untouched, bounds are not reordered.
    Unknown filters, and ``custom`` without a range, collapse to today.
    """
    today = as_date(now or date.today())
    today_range = DateRange(start=today, end=today)

    resolved = parse_date_filter(date_filter)
    if resolved == DateFilter.LAST_30_DAYS:
        return DateRange(start=today - timedelta(days=30), end=today)
    if resolved == DateFilter.LAST_6_MONTHS:
        return DateRange(start=today - relativedelta(months=6), end=today)
    if resolved == DateFilter.LAST_YEAR:
        return DateRange(start=today - relativedelta(years=1), end=today)
    if resolved == DateFilter.CUSTOM:
        return custom_range or today_range
    return today_range


def month_key(value: date) -> str:
    return f"{value.year:04d}-{value.month:02d}"


def month_bounds(now: date | datetime) -> DateRange:
    today = as_date(now)
    last_day = calendar.monthrange(today.year, today.month)[1]
    return DateRange(start=today.replace(day=1), end=today.replace(day=last_day))
