import logging
import uuid
from datetime import date, datetime
from typing import List, Optional

from fastapi import HTTPException

from core.cache import cache
from core.date_helper import month_bounds
from core.mapper import ORMMapper
from models.models import Tenant
from models.utils import utcnow
from repos.rent_log_repo import RentLogRepo
from repos.tenant_repo import TenantRepo
from schemas.schema import (
    LastMeterReadingOut,
    PendingPaymentsOut,
    TenantArchive,
    TenantCreate,
    TenantFinancialSummaryOut,
    TenantOut,
    TenantUpdate,
)
from services.aggregation import pending_payers, tenant_financial_summary

logger = logging.getLogger(__name__)

TENANT_LISTS = ("all", "active", "archived")


class TenantService:
    def __init__(self, db):
        self.repo: TenantRepo = TenantRepo(db)
        self.log_repo: RentLogRepo = RentLogRepo(db)
        self.mapper: ORMMapper = ORMMapper()

    @staticmethod
    def cache_key(user_id: uuid.UUID, which: str) -> str:
        return f"tenants:{user_id}:{which}"

    async def cache_delete(self, user_id: uuid.UUID):
        await cache.delete_cache_keys_async(
            *(self.cache_key(user_id, which) for which in TENANT_LISTS)
        )

    async def _cached_list(self, user_id: uuid.UUID, which: str, load) -> List[TenantOut]:
        key = self.cache_key(user_id, which)
        cached = await cache.get_json(key)
        if cached is not None:
            return self.mapper.many(cached, TenantOut)

        tenants = self.mapper.many(await load(user_id), TenantOut)
        await cache.set_json(key, self.mapper.dump_many(tenants))
        return tenants

    async def get_owned(self, user_id: uuid.UUID, tenant_id: uuid.UUID) -> Tenant:
        tenant = await self.repo.get_by_id(user_id=user_id, tenant_id=tenant_id)
        if not tenant:
            raise HTTPException(status_code=404, detail="Tenant not found")
        return tenant

    async def create_tenant(self, user_id: uuid.UUID, data: TenantCreate) -> TenantOut:
        payload = data.model_dump(exclude={"documents"})
        documents = [doc.model_dump() for doc in data.documents]
        tenant = await self.repo.create(
            user_id=user_id, tenant_data=payload, documents=documents
        )
        await self.cache_delete(user_id)
        logger.info("Tenant %s created for user %s", tenant.id, user_id)
        return self.mapper.one(tenant, TenantOut)

    async def get_tenants(self, user_id: uuid.UUID) -> List[TenantOut]:
        return await self._cached_list(user_id, "all", self.repo.list_all)

    async def get_active_tenants(self, user_id: uuid.UUID) -> List[TenantOut]:
        return await self._cached_list(user_id, "active", self.repo.list_active)

    async def get_archived_tenants(self, user_id: uuid.UUID) -> List[TenantOut]:
        return await self._cached_list(user_id, "archived", self.repo.list_archived)

    async def get_tenant(self, user_id: uuid.UUID, tenant_id: uuid.UUID) -> TenantOut:
        return self.mapper.one(await self.get_owned(user_id, tenant_id), TenantOut)

    async def search_tenants(self, user_id: uuid.UUID, term: str) -> List[TenantOut]:
        term = (term or "").strip()
        if not term:
            return await self.get_tenants(user_id)
        return self.mapper.many(await self.repo.search(user_id, term), TenantOut)

    async def update_tenant(
        self, user_id: uuid.UUID, tenant_id: uuid.UUID, data: TenantUpdate
    ) -> TenantOut:
        tenant = await self.get_owned(user_id, tenant_id)
        update_data = data.model_dump(exclude_unset=True, exclude={"documents"})
        documents = None
        if "documents" in data.model_fields_set:
            documents = [doc.model_dump() for doc in data.documents]

        if not update_data and documents is None:
            raise HTTPException(status_code=400, detail="No fields provided for update.")

        tenant = await self.repo.update(tenant, update_data, documents=documents)
        await self.cache_delete(user_id)
        logger.info("Tenant %s updated (%s)", tenant_id, ", ".join(sorted(update_data)))
        return self.mapper.one(tenant, TenantOut)

    async def archive_tenant(
        self, user_id: uuid.UUID, tenant_id: uuid.UUID, data: TenantArchive
    ) -> TenantOut:
        tenant = await self.get_owned(user_id, tenant_id)
        tenant = await self.repo.update(
            tenant,
            {
                "is_archived": True,
                "closing_date": data.closing_date,
                "closing_notes": data.closing_notes or "",
            },
        )
        await self.cache_delete(user_id)
        logger.info("Tenant %s archived on %s", tenant_id, data.closing_date)
        return self.mapper.one(tenant, TenantOut)

    async def unarchive_tenant(self, user_id: uuid.UUID, tenant_id: uuid.UUID) -> TenantOut:
        tenant = await self.get_owned(user_id, tenant_id)
        tenant = await self.repo.update(
            tenant, {"is_archived": False, "closing_date": None, "closing_notes": None}
        )
        await self.cache_delete(user_id)
        logger.info("Tenant %s unarchived", tenant_id)
        return self.mapper.one(tenant, TenantOut)

    async def delete_tenant(self, user_id: uuid.UUID, tenant_id: uuid.UUID) -> None:
        if not await self.repo.delete(user_id=user_id, tenant_id=tenant_id):
            raise HTTPException(status_code=404, detail="Tenant not found")
        await self.cache_delete(user_id)
        logger.info("Tenant %s deleted with its rent logs", tenant_id)

    async def get_pending_payments(
        self,
        user_id: uuid.UUID,
        now: Optional[date | datetime] = None,
        by_name: bool = False,
    ) -> PendingPaymentsOut:
        now = now or utcnow()
        month = month_bounds(now)
        tenants = await self.repo.list_active(user_id)
        logs = await self.log_repo.in_date_range(user_id, month.start, month.end)
        pending = pending_payers(tenants, logs, now, by_name=by_name)
        return self.mapper.one(pending, PendingPaymentsOut)

    async def get_financial_summary(
        self,
        user_id: uuid.UUID,
        tenant_id: uuid.UUID,
        now: Optional[date | datetime] = None,
    ) -> TenantFinancialSummaryOut:
        tenant = await self.get_owned(user_id, tenant_id)
        logs = await self.log_repo.by_tenant(user_id, tenant_id)
        summary = tenant_financial_summary(tenant, logs, now or utcnow())
        return self.mapper.one(summary, TenantFinancialSummaryOut)

    async def get_last_meter_reading(
        self, user_id: uuid.UUID, tenant_id: uuid.UUID
    ) -> LastMeterReadingOut:
        tenant = await self.get_owned(user_id, tenant_id)
        latest = await self.log_repo.latest_for_tenant(user_id, tenant_id)
        if latest is None:
            return LastMeterReadingOut(
                tenant_id=tenant.id,
                reading=tenant.start_meter_reading,
                source="start_meter_reading",
            )
        return LastMeterReadingOut(
            tenant_id=tenant.id, reading=latest.current_meter_reading, source="rent_log"
        )
