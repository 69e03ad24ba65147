import logging
import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from fastapi import HTTPException

from core.date_helper import DateRange, month_bounds
from core.mapper import ORMMapper
from core.settings import settings
from models.models import RentLog
from models.utils import utcnow
from repos.rent_log_repo import RentLogRepo
from repos.tenant_repo import TenantRepo
from schemas.schema import (
    DashboardStatsOut,
    DateRangeIn,
    MonthlyStatOut,
    RentLogCreate,
    RentLogOut,
    RentLogUpdate,
)
from services.aggregation import dashboard_stats, monthly_stats
from services.ledger_rules import TOLERANCE, derive_charges

logger = logging.getLogger(__name__)

DERIVED_FIELDS = ("units", "meter_bill", "total")
CHARGE_INPUTS = (
    "previous_meter_reading",
    "current_meter_reading",
    "unit_price",
    "rent_paid",
)


class RentLogService:
    def __init__(self, db):
        self.repo: RentLogRepo = RentLogRepo(db)
        self.tenant_repo: TenantRepo = TenantRepo(db)
        self.mapper: ORMMapper = ORMMapper()

    async def _check_tenant(self, user_id: uuid.UUID, tenant_id: uuid.UUID):
        tenant = await self.tenant_repo.get_by_id(user_id=user_id, tenant_id=tenant_id)
        if not tenant:
            raise HTTPException(status_code=404, detail="Tenant not found")
        return tenant

    async def get_owned(self, user_id: uuid.UUID, log_id: uuid.UUID) -> RentLog:
        log = await self.repo.get_by_id(user_id=user_id, log_id=log_id)
        if not log:
            raise HTTPException(status_code=404, detail="Rent log not found")
        return log

    async def create_rent_log(self, user_id: uuid.UUID, data: RentLogCreate) -> RentLogOut:
        tenant = await self._check_tenant(user_id, data.tenant_id)

        payload = data.model_dump(exclude={"attachments"})
        # the name is a snapshot of the tenant row, whatever the client sent
        payload["tenant_name"] = tenant.name
        charges = derive_charges(
            data.previous_meter_reading,
            data.current_meter_reading,
            data.unit_price,
            data.rent_paid,
        )
        payload.update(
            units=charges.units, meter_bill=charges.meter_bill, total=charges.total
        )
        log = await self.repo.create(
            user_id=user_id,
            log_data=payload,
            attachments=[item.model_dump() for item in data.attachments],
        )
        logger.info(
            "Rent log %s recorded for tenant %s (total %s)", log.id, log.tenant_id, log.total
        )
        return self.mapper.one(log, RentLogOut)

    def _merge_charges(self, log: RentLog, patch: dict) -> dict:
        inputs = {name: patch.get(name, getattr(log, name)) for name in CHARGE_INPUTS}
        try:
            charges = derive_charges(**inputs)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=f"current_meter_reading: {e}")

        for name in DERIVED_FIELDS:
            expected = getattr(charges, name)
            if name in patch and abs(Decimal(str(patch[name])) - expected) > TOLERANCE:
                raise HTTPException(
                    status_code=400,
                    detail=f"{name}: should be {expected}, got {patch[name]}",
                )
            patch[name] = expected
        return patch

    async def update_rent_log(
        self, user_id: uuid.UUID, log_id: uuid.UUID, data: RentLogUpdate
    ) -> RentLogOut:
        log = await self.get_owned(user_id, log_id)
        patch = data.model_dump(exclude_unset=True, exclude={"attachments"})
        attachments = None
        if "attachments" in data.model_fields_set:
            attachments = [item.model_dump() for item in data.attachments]

        if not patch and attachments is None:
            raise HTTPException(status_code=400, detail="No fields provided for update.")

        if "tenant_id" in patch or "tenant_name" in patch:
            target_id = patch.get("tenant_id", log.tenant_id)
            tenant = await self._check_tenant(user_id, target_id)
            patch["tenant_name"] = tenant.name

        patch = self._merge_charges(log, patch)
        log = await self.repo.update(log, patch, attachments=attachments)
        logger.info("Rent log %s updated", log_id)
        return self.mapper.one(log, RentLogOut)

    async def delete_rent_log(self, user_id: uuid.UUID, log_id: uuid.UUID) -> None:
        if not await self.repo.delete(user_id=user_id, log_id=log_id):
            raise HTTPException(status_code=404, detail="Rent log not found")
        logger.info("Rent log %s deleted", log_id)

    async def get_rent_log(self, user_id: uuid.UUID, log_id: uuid.UUID) -> RentLogOut:
        return self.mapper.one(await self.get_owned(user_id, log_id), RentLogOut)

    async def get_rent_logs(self, user_id: uuid.UUID) -> List[RentLogOut]:
        return self.mapper.many(await self.repo.list_all(user_id), RentLogOut)

    async def get_by_tenant(self, user_id: uuid.UUID, tenant_id: uuid.UUID) -> List[RentLogOut]:
        return self.mapper.many(await self.repo.by_tenant(user_id, tenant_id), RentLogOut)

    async def get_by_collector(self, user_id: uuid.UUID, collector: str) -> List[RentLogOut]:
        return self.mapper.many(await self.repo.by_collector(user_id, collector), RentLogOut)

    async def get_by_date_range(
        self, user_id: uuid.UUID, date_range: DateRangeIn
    ) -> List[RentLogOut]:
        logs = await self.repo.in_date_range(user_id, date_range.start, date_range.end)
        return self.mapper.many(logs, RentLogOut)

    async def search(self, user_id: uuid.UUID, term: str) -> List[RentLogOut]:
        term = (term or "").strip()
        if not term:
            return await self.get_rent_logs(user_id)
        return self.mapper.many(await self.repo.search(user_id, term), RentLogOut)

    async def get_recent(
        self, user_id: uuid.UUID, limit: Optional[int] = None
    ) -> List[RentLogOut]:
        limit = settings.RECENT_LOGS_LIMIT if limit is None else limit
        return self.mapper.many(await self.repo.recent(user_id, limit), RentLogOut)

    async def get_current_month(
        self, user_id: uuid.UUID, now: Optional[date | datetime] = None
    ) -> List[RentLogOut]:
        month = month_bounds(now or utcnow())
        logs = await self.repo.in_date_range(user_id, month.start, month.end)
        return self.mapper.many(logs, RentLogOut)

    async def get_dashboard_stats(
        self, user_id: uuid.UUID, date_range: DateRangeIn
    ) -> DashboardStatsOut:
        window = DateRange(start=date_range.start, end=date_range.end)
        logs = await self.repo.in_date_range(user_id, window.start, window.end)
        return self.mapper.one(dashboard_stats(logs, window), DashboardStatsOut)

    async def get_monthly_stats(
        self, user_id: uuid.UUID, date_range: DateRangeIn
    ) -> List[MonthlyStatOut]:
        window = DateRange(start=date_range.start, end=date_range.end)
        logs = await self.repo.in_date_range(user_id, window.start, window.end)
        return self.mapper.many(monthly_stats(logs, window), MonthlyStatOut)
