import uuid
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from fastapi_utils.cbv import cbv
from sqlalchemy.ext.asyncio import AsyncSession

from core.get_current_user import get_current_user
from core.get_db import get_db_async
from core.safe_handler import safe_handler
from models.enums import DateFilter
from models.models import User
from schemas.schema import (
    ApiResponse,
    DashboardOut,
    DashboardStatsOut,
    DateRangeIn,
    MonthlyStatOut,
    RentLogCreate,
    RentLogOut,
    RentLogUpdate,
    ok,
)
from services.analytics_service import AnalyticsService
from services.rent_log_service import RentLogService

router = APIRouter(tags=["Rent Logs"])


@cbv(router=router)
class RentLogRoutes:
    current_user: User = Depends(get_current_user)
    db: AsyncSession = Depends(get_db_async)

    @router.get("/", response_model=ApiResponse[List[RentLogOut]])
    @safe_handler
    async def list_logs(self):
        return ok(await RentLogService(self.db).get_rent_logs(self.current_user.id))

    @router.post("/", status_code=201, response_model=ApiResponse[RentLogOut])
    @safe_handler
    async def create(self, data: RentLogCreate):
        log = await RentLogService(self.db).create_rent_log(self.current_user.id, data)
        return ok(log, "Rent log recorded")

    @router.get("/recent", response_model=ApiResponse[List[RentLogOut]])
    @safe_handler
    async def recent(self, limit: Optional[int] = Query(None, ge=1, le=100)):
        return ok(
            await RentLogService(self.db).get_recent(self.current_user.id, limit)
        )

    @router.get("/current-month", response_model=ApiResponse[List[RentLogOut]])
    @safe_handler
    async def current_month(self):
        return ok(
            await RentLogService(self.db).get_current_month(self.current_user.id)
        )

    @router.get("/search", response_model=ApiResponse[List[RentLogOut]])
    @safe_handler
    async def search(self, q: str = Query("", max_length=120)):
        return ok(await RentLogService(self.db).search(self.current_user.id, q))

    @router.get("/collector/{name}", response_model=ApiResponse[List[RentLogOut]])
    @safe_handler
    async def by_collector(self, name: str):
        return ok(
            await RentLogService(self.db).get_by_collector(self.current_user.id, name)
        )

    @router.get("/tenant/{tenant_id}", response_model=ApiResponse[List[RentLogOut]])
    @safe_handler
    async def by_tenant(self, tenant_id: uuid.UUID):
        return ok(
            await RentLogService(self.db).get_by_tenant(self.current_user.id, tenant_id)
        )

    @router.post("/dashboard-stats", response_model=ApiResponse[DashboardStatsOut])
    @safe_handler
    async def dashboard_stats(self, data: DateRangeIn):
        return ok(
            await RentLogService(self.db).get_dashboard_stats(self.current_user.id, data)
        )

    @router.post("/monthly-stats", response_model=ApiResponse[List[MonthlyStatOut]])
    @safe_handler
    async def monthly_stats(self, data: DateRangeIn):
        return ok(
            await RentLogService(self.db).get_monthly_stats(self.current_user.id, data)
        )

    @router.post("/date-range", response_model=ApiResponse[List[RentLogOut]])
    @safe_handler
    async def date_range(self, data: DateRangeIn):
        return ok(
            await RentLogService(self.db).get_by_date_range(self.current_user.id, data)
        )

    @router.get("/dashboard", response_model=ApiResponse[DashboardOut])
    @safe_handler
    async def dashboard(
        self,
        date_filter: DateFilter = Query(DateFilter.LAST_30_DAYS, alias="filter"),
        start: Optional[date] = None,
        end: Optional[date] = None,
    ):
        return ok(
            await AnalyticsService(self.db).dashboard(
                self.current_user.id, date_filter, start=start, end=end
            )
        )

    @router.get("/{log_id}", response_model=ApiResponse[RentLogOut])
    @safe_handler
    async def get_one(self, log_id: uuid.UUID):
        return ok(await RentLogService(self.db).get_rent_log(self.current_user.id, log_id))

    @router.put("/{log_id}", response_model=ApiResponse[RentLogOut])
    @safe_handler
    async def update(self, log_id: uuid.UUID, data: RentLogUpdate):
        log = await RentLogService(self.db).update_rent_log(
            self.current_user.id, log_id, data
        )
        return ok(log, "Rent log updated")

    @router.delete("/{log_id}", response_model=ApiResponse[None])
    @safe_handler
    async def delete(self, log_id: uuid.UUID):
        await RentLogService(self.db).delete_rent_log(self.current_user.id, log_id)
        return ok(message="Rent log deleted")
