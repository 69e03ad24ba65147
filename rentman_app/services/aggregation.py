"""
Dashboard aggregation over rent logs and tenants.

Everything here is pure: inputs are already-loaded records (ORM rows or any
object exposing the same attributes) and "now" is always passed in.
"""
import math
import uuid
from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Iterable, List, Sequence

from core.date_helper import DateRange, as_date, month_key

DAYS_PER_MONTH = 30.44


@dataclass(frozen=True)
class DashboardStats:
    total_rent_collected: Decimal
    total_electricity_bill: Decimal
    total_logs: int


@dataclass(frozen=True)
class MonthlyStat:
    month: str
    rent: Decimal
    electricity: Decimal


@dataclass(frozen=True)
class PendingPayer:
    tenant_id: uuid.UUID
    name: str
    property_name: str
    monthly_rent: Decimal


@dataclass(frozen=True)
class PendingPayments:
    month: str
    tenants: List[PendingPayer] = field(default_factory=list)
    total_pending: Decimal = Decimal("0")

    @property
    def count(self) -> int:
        return len(self.tenants)


@dataclass(frozen=True)
class TenantFinancialSummary:
    tenant_id: uuid.UUID
    total_rent_paid: Decimal
    total_electricity_bill: Decimal
    total_amount_paid: Decimal
    total_months_occupied: int
    total_logs: int


def _amount(value) -> Decimal:
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def logs_in_range(logs: Iterable, date_range: DateRange) -> list:
    return [log for log in logs if date_range.contains(as_date(log.date))]


def dashboard_stats(logs: Iterable, date_range: DateRange) -> DashboardStats:
    matching = logs_in_range(logs, date_range)
    return DashboardStats(
        total_rent_collected=sum((_amount(log.rent_paid) for log in matching), Decimal("0")),
        total_electricity_bill=sum(
            (_amount(log.meter_bill) for log in matching), Decimal("0")
        ),
        total_logs=len(matching),
    )


def monthly_stats(logs: Iterable, date_range: DateRange) -> List[MonthlyStat]:
    # empty months are left out, not zero-filled
    buckets: dict[str, list[Decimal]] = {}
    for log in logs_in_range(logs, date_range):
        bucket = buckets.setdefault(month_key(as_date(log.date)), [Decimal("0"), Decimal("0")])
        bucket[0] += _amount(log.rent_paid)
        bucket[1] += _amount(log.meter_bill)

    return [
        MonthlyStat(month=month, rent=rent, electricity=electricity)
        for month, (rent, electricity) in sorted(buckets.items())
    ]


def pending_payers(
    tenants: Iterable,
    logs: Iterable,
    now: date | datetime,
    by_name: bool = False,
) -> PendingPayments:
    """Active tenants with no rent log dated in ``now``'s calendar month.

    Tenants are matched to logs by id. With ``by_name`` the match uses the
    log's tenant_name snapshot instead, and tenants sharing a name collapse
    into a single entry.
    """
    current_month = month_key(as_date(now))
    this_month = [log for log in logs if month_key(as_date(log.date)) == current_month]

    active = sorted(
        (t for t in tenants if not t.is_archived),
        key=lambda t: (t.name.lower(), str(t.id)),
    )

    if by_name:
        paid_names = {log.tenant_name for log in this_month}
        unpaid: "OrderedDict[str, object]" = OrderedDict()
        for tenant in active:
            if tenant.name not in paid_names and tenant.name not in unpaid:
                unpaid[tenant.name] = tenant
        pending = list(unpaid.values())
    else:
        paid_ids = {log.tenant_id for log in this_month}
        pending = [t for t in active if t.id not in paid_ids]

    payers = [
        PendingPayer(
            tenant_id=t.id,
            name=t.name,
            property_name=t.property_name,
            monthly_rent=_amount(t.monthly_rent),
        )
        for t in pending
    ]
    return PendingPayments(
        month=current_month,
        tenants=payers,
        total_pending=sum((p.monthly_rent for p in payers), Decimal("0")),
    )


def months_occupied(start: date, end: date) -> int:
    days = (end - start).days
    if days <= 0:
        return 0
    return math.ceil(days / DAYS_PER_MONTH)


def tenant_financial_summary(
    tenant, logs: Sequence, now: date | datetime
) -> TenantFinancialSummary:
    own = [log for log in logs if log.tenant_id == tenant.id]
    rent = sum((_amount(log.rent_paid) for log in own), Decimal("0"))
    electricity = sum((_amount(log.meter_bill) for log in own), Decimal("0"))
    end = tenant.closing_date if tenant.is_archived and tenant.closing_date else as_date(now)

    return TenantFinancialSummary(
        tenant_id=tenant.id,
        total_rent_paid=rent,
        total_electricity_bill=electricity,
        total_amount_paid=rent + electricity,
        total_months_occupied=months_occupied(as_date(tenant.start_date), as_date(end)),
        total_logs=len(own),
    )


def recent_logs(logs: Iterable, limit: int) -> list:
    ordered = sorted(logs, key=lambda log: log.created_at, reverse=True)
    return ordered[: max(limit, 0)]
