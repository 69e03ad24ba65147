import uuid
from datetime import date, datetime
from decimal import Decimal
from types import SimpleNamespace

from core.date_helper import DateRange
from services.aggregation import (
    dashboard_stats,
    monthly_stats,
    months_occupied,
    pending_payers,
    recent_logs,
    tenant_financial_summary,
)

NOW = datetime(2025, 3, 20, 10, 0)


def make_tenant(name, rent="10000", archived=False, **extra):
    fields = dict(
        id=uuid.uuid4(),
        name=name,
        property_name=f"{name}'s flat",
        monthly_rent=Decimal(rent),
        is_archived=archived,
        start_date=date(2024, 1, 1),
        closing_date=None,
    )
    fields.update(extra)
    return SimpleNamespace(**fields)


def make_log(tenant, day, rent="10000", bill="500", created=None):
    return SimpleNamespace(
        tenant_id=tenant.id,
        tenant_name=tenant.name,
        date=day,
        rent_paid=Decimal(rent),
        meter_bill=Decimal(bill),
        created_at=created or datetime.combine(day, datetime.min.time()),
    )


def test_dashboard_stats_counts_only_logs_inside_the_window():
    tenant = make_tenant("Asha")
    logs = [
        make_log(tenant, date(2025, 1, 1), bill="100"),
        make_log(tenant, date(2025, 2, 10), bill="200"),
        make_log(tenant, date(2025, 3, 31), bill="300"),
    ]
    stats = dashboard_stats(logs, DateRange(date(2025, 1, 1), date(2025, 2, 28)))

    assert stats.total_logs == 2
    assert stats.total_rent_collected == Decimal("20000")
    assert stats.total_electricity_bill == Decimal("300")


def test_monthly_stats_sorted_without_empty_months():
    tenant = make_tenant("Asha")
    logs = [
        make_log(tenant, date(2025, 3, 5)),
        make_log(tenant, date(2025, 1, 5)),
        make_log(tenant, date(2025, 1, 20), rent="5000", bill="50"),
    ]
    months = monthly_stats(logs, DateRange(date(2025, 1, 1), date(2025, 3, 31)))

    assert [m.month for m in months] == ["2025-01", "2025-03"]
    assert months[0].rent == Decimal("15000")
    assert months[0].electricity == Decimal("550")


def test_dashboard_totals_equal_the_sum_of_monthly_buckets():
    a, b = make_tenant("Asha"), make_tenant("Bilal")
    logs = [
        make_log(a, date(2024, 11, 3), rent="9000", bill="120.50"),
        make_log(b, date(2024, 12, 9), rent="12000", bill="80"),
        make_log(a, date(2025, 1, 2), rent="9000", bill="99.99"),
        make_log(b, date(2025, 2, 28), rent="12000", bill="10"),
    ]
    window = DateRange(date(2024, 12, 1), date(2025, 2, 28))
    stats = dashboard_stats(logs, window)
    months = monthly_stats(logs, window)

    assert stats.total_rent_collected == sum(m.rent for m in months)
    assert stats.total_electricity_bill == sum(m.electricity for m in months)


def test_pending_excludes_paid_and_archived_tenants():
    paid = make_tenant("Asha", rent="10000")
    unpaid = make_tenant("Bilal", rent="12000")
    archived = make_tenant("Chitra", archived=True, closing_date=date(2025, 1, 31))
    logs = [
        make_log(paid, date(2025, 3, 2)),
        # last month's payment does not count
        make_log(unpaid, date(2025, 2, 27)),
    ]
    pending = pending_payers([paid, unpaid, archived], logs, NOW)

    assert pending.month == "2025-03"
    assert [p.name for p in pending.tenants] == ["Bilal"]
    assert pending.total_pending == Decimal("12000")
    assert pending.count == 1


def test_pending_by_id_keeps_namesakes_apart():
    first = make_tenant("Ravi", rent="8000")
    second = make_tenant("Ravi", rent="9000")
    logs = [make_log(first, date(2025, 3, 1))]

    by_id = pending_payers([first, second], logs, NOW)
    assert [p.tenant_id for p in by_id.tenants] == [second.id]

    by_name = pending_payers([first, second], logs, NOW, by_name=True)
    assert by_name.tenants == []


def test_pending_by_name_collapses_unpaid_namesakes():
    first = make_tenant("Ravi", rent="8000")
    second = make_tenant("Ravi", rent="9000")
    pending = pending_payers([first, second], [], NOW, by_name=True)

    assert pending.count == 1
    assert pending_payers([first, second], [], NOW).count == 2


def test_months_occupied_rounds_up_partial_months():
    assert months_occupied(date(2025, 1, 1), date(2025, 1, 1)) == 0
    assert months_occupied(date(2025, 1, 1), date(2025, 1, 2)) == 1
    assert months_occupied(date(2024, 1, 1), date(2025, 1, 1)) == 13


def test_financial_summary_stops_counting_at_closing_date():
    tenant = make_tenant(
        "Asha",
        archived=True,
        start_date=date(2024, 1, 1),
        closing_date=date(2024, 3, 1),
    )
    other = make_tenant("Bilal")
    logs = [
        make_log(tenant, date(2024, 1, 5), rent="10000", bill="400"),
        make_log(tenant, date(2024, 2, 5), rent="10000", bill="600"),
        make_log(other, date(2024, 2, 5)),
    ]
    summary = tenant_financial_summary(tenant, logs, NOW)

    assert summary.total_rent_paid == Decimal("20000")
    assert summary.total_electricity_bill == Decimal("1000")
    assert summary.total_amount_paid == Decimal("21000")
    assert summary.total_months_occupied == 2
    assert summary.total_logs == 2


def test_recent_logs_newest_first():
    tenant = make_tenant("Asha")
    logs = [
        make_log(tenant, date(2025, 1, d), created=datetime(2025, 1, d, 9))
        for d in (3, 1, 2)
    ]
    assert [log.date.day for log in recent_logs(logs, 2)] == [3, 2]
    assert recent_logs(logs, 0) == []
