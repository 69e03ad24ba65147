from datetime import date, datetime

from core.date_helper import DateRange, date_range_for, month_bounds, month_key
from models.enums import DateFilter

NOW = date(2025, 2, 15)


def test_last_30_days_is_anchored_on_now():
    assert date_range_for("30days", now=NOW) == DateRange(
        start=date(2025, 1, 16), end=date(2025, 2, 15)
    )


def test_six_months_uses_calendar_months():
    assert date_range_for(DateFilter.LAST_6_MONTHS, now=NOW).start == date(2024, 8, 15)
    # clamps to the end of a shorter month
    assert date_range_for("6months", now=date(2025, 3, 31)).start == date(2024, 9, 30)


def test_one_year_handles_leap_day():
    assert date_range_for("1year", now=date(2024, 2, 29)) == DateRange(
        start=date(2023, 2, 28), end=date(2024, 2, 29)
    )


def test_custom_range_is_returned_verbatim_even_when_inverted():
    inverted = DateRange(start=date(2025, 3, 1), end=date(2025, 1, 1))
    assert date_range_for("custom", inverted, now=NOW) is inverted
    assert not inverted.contains(date(2025, 2, 1))


def test_custom_without_range_and_unknown_filter_collapse_to_today():
    today = DateRange(start=NOW, end=NOW)
    assert date_range_for("custom", now=NOW) == today
    assert date_range_for("fortnight", now=NOW) == today


def test_datetime_now_is_truncated_to_its_date():
    assert date_range_for("30days", now=datetime(2025, 2, 15, 23, 59)).end == NOW


def test_range_contains_both_bounds():
    window = DateRange(start=date(2025, 1, 1), end=date(2025, 1, 31))
    assert window.contains(date(2025, 1, 1))
    assert window.contains(date(2025, 1, 31))
    assert not window.contains(date(2025, 2, 1))


def test_month_helpers():
    assert month_key(date(2025, 3, 9)) == "2025-03"
    assert month_bounds(date(2024, 2, 10)) == DateRange(
        start=date(2024, 2, 1), end=date(2024, 2, 29)
    )
