import uuid
from datetime import date, datetime
from typing import Optional

from core.date_helper import DateRange, date_range_for, month_bounds, parse_date_filter
from core.mapper import ORMMapper
from core.settings import settings
from models.enums import DateFilter
from models.utils import utcnow
from repos.rent_log_repo import RentLogRepo
from repos.tenant_repo import TenantRepo
from schemas.schema import (
    DashboardOut,
    DashboardStatsOut,
    MonthlyStatOut,
    PendingPaymentsOut,
    RentLogOut,
)
from services.aggregation import dashboard_stats, monthly_stats, pending_payers


class AnalyticsService:
    def __init__(self, db):
        self.log_repo: RentLogRepo = RentLogRepo(db)
        self.tenant_repo: TenantRepo = TenantRepo(db)
        self.mapper: ORMMapper = ORMMapper()

    async def dashboard(
        self,
        user_id: uuid.UUID,
        date_filter: str | DateFilter = DateFilter.LAST_30_DAYS,
        start: Optional[date] = None,
        end: Optional[date] = None,
        now: Optional[date | datetime] = None,
    ) -> DashboardOut:
        now = now or utcnow()
        resolved = parse_date_filter(date_filter) or DateFilter.LAST_30_DAYS
        custom = DateRange(start=start, end=end) if start and end else None
        window = date_range_for(resolved, custom, now)

        logs = await self.log_repo.in_date_range(user_id, window.start, window.end)
        month = month_bounds(now)
        month_logs = await self.log_repo.in_date_range(user_id, month.start, month.end)
        active = await self.tenant_repo.list_active(user_id)
        pending = pending_payers(active, month_logs, now)
        recent = await self.log_repo.recent(user_id, settings.RECENT_LOGS_LIMIT)

        return DashboardOut(
            filter=resolved,
            start=window.start,
            end=window.end,
            stats=self.mapper.one(dashboard_stats(logs, window), DashboardStatsOut),
            monthly=self.mapper.many(monthly_stats(logs, window), MonthlyStatOut),
            pending=self.mapper.one(pending, PendingPaymentsOut),
            total_tenants=len(active),
            tenants_with_dues=pending.count,
            recent_logs=self.mapper.many(recent, RentLogOut),
        )
