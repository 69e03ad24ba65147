import uuid
from typing import List

from fastapi import APIRouter, Depends, Query
from fastapi_utils.cbv import cbv
from sqlalchemy.ext.asyncio import AsyncSession

from core.get_current_user import get_current_user
from core.get_db import get_db_async
from core.safe_handler import safe_handler
from models.models import User
from schemas.schema import (
    ApiResponse,
    LastMeterReadingOut,
    PendingPaymentsOut,
    TenantArchive,
    TenantCreate,
    TenantFinancialSummaryOut,
    TenantOut,
    TenantUpdate,
    ok,
)
from services.tenant_service import TenantService

router = APIRouter(tags=["Tenants"])


@cbv(router=router)
class TenantRoutes:
    current_user: User = Depends(get_current_user)
    db: AsyncSession = Depends(get_db_async)

    @router.get("/", response_model=ApiResponse[List[TenantOut]])
    @safe_handler
    async def list_tenants(self):
        return ok(await TenantService(self.db).get_tenants(self.current_user.id))

    @router.post("/", status_code=201, response_model=ApiResponse[TenantOut])
    @safe_handler
    async def create(self, data: TenantCreate):
        tenant = await TenantService(self.db).create_tenant(self.current_user.id, data)
        return ok(tenant, "Tenant created")

    @router.get("/active", response_model=ApiResponse[List[TenantOut]])
    @safe_handler
    async def active(self):
        return ok(await TenantService(self.db).get_active_tenants(self.current_user.id))

    @router.get("/archived", response_model=ApiResponse[List[TenantOut]])
    @safe_handler
    async def archived(self):
        return ok(
            await TenantService(self.db).get_archived_tenants(self.current_user.id)
        )

    @router.get("/search", response_model=ApiResponse[List[TenantOut]])
    @safe_handler
    async def search(self, q: str = Query("", max_length=120)):
        return ok(await TenantService(self.db).search_tenants(self.current_user.id, q))

    @router.get("/pending-payments", response_model=ApiResponse[PendingPaymentsOut])
    @safe_handler
    async def pending_payments(self, by_name: bool = False):
        return ok(
            await TenantService(self.db).get_pending_payments(
                self.current_user.id, by_name=by_name
            )
        )

    @router.get("/{tenant_id}", response_model=ApiResponse[TenantOut])
    @safe_handler
    async def get_one(self, tenant_id: uuid.UUID):
        return ok(await TenantService(self.db).get_tenant(self.current_user.id, tenant_id))

    @router.put("/{tenant_id}", response_model=ApiResponse[TenantOut])
    @safe_handler
    async def update(self, tenant_id: uuid.UUID, data: TenantUpdate):
        tenant = await TenantService(self.db).update_tenant(
            self.current_user.id, tenant_id, data
        )
        return ok(tenant, "Tenant updated")

    @router.delete("/{tenant_id}", response_model=ApiResponse[None])
    @safe_handler
    async def delete(self, tenant_id: uuid.UUID):
        await TenantService(self.db).delete_tenant(self.current_user.id, tenant_id)
        return ok(message="Tenant deleted")

    @router.put("/{tenant_id}/archive", response_model=ApiResponse[TenantOut])
    @safe_handler
    async def archive(self, tenant_id: uuid.UUID, data: TenantArchive):
        tenant = await TenantService(self.db).archive_tenant(
            self.current_user.id, tenant_id, data
        )
        return ok(tenant, "Tenant archived")

    @router.put("/{tenant_id}/unarchive", response_model=ApiResponse[TenantOut])
    @safe_handler
    async def unarchive(self, tenant_id: uuid.UUID):
        tenant = await TenantService(self.db).unarchive_tenant(
            self.current_user.id, tenant_id
        )
        return ok(tenant, "Tenant unarchived")

    @router.get(
        "/{tenant_id}/summary", response_model=ApiResponse[TenantFinancialSummaryOut]
    )
    @safe_handler
    async def summary(self, tenant_id: uuid.UUID):
        return ok(
            await TenantService(self.db).get_financial_summary(
                self.current_user.id, tenant_id
            )
        )

    @router.get(
        "/{tenant_id}/last-reading", response_model=ApiResponse[LastMeterReadingOut]
    )
    @safe_handler
    async def last_reading(self, tenant_id: uuid.UUID):
        return ok(
            await TenantService(self.db).get_last_meter_reading(
                self.current_user.id, tenant_id
            )
        )
