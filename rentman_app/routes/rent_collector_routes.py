import uuid
from typing import List

from fastapi import APIRouter, Depends
from fastapi_utils.cbv import cbv
from sqlalchemy.ext.asyncio import AsyncSession

from core.get_current_user import get_current_user
from core.get_db import get_db_async
from core.safe_handler import safe_handler
from models.models import User
from schemas.schema import ApiResponse, RentCollectorIn, RentCollectorOut, ok
from services.rent_collector_service import RentCollectorService

router = APIRouter(tags=["Rent Collectors"])


@cbv(router=router)
class RentCollectorRoutes:
    current_user: User = Depends(get_current_user)
    db: AsyncSession = Depends(get_db_async)

    @router.get("/", response_model=ApiResponse[List[RentCollectorOut]])
    @safe_handler
    async def list_collectors(self):
        return ok(
            await RentCollectorService(self.db).list_collectors(self.current_user.id)
        )

    @router.post("/", status_code=201, response_model=ApiResponse[RentCollectorOut])
    @safe_handler
    async def create(self, data: RentCollectorIn):
        collector = await RentCollectorService(self.db).create_collector(
            self.current_user.id, data
        )
        return ok(collector, "Rent collector added")

    @router.get("/{collector_id}", response_model=ApiResponse[RentCollectorOut])
    @safe_handler
    async def get_one(self, collector_id: uuid.UUID):
        return ok(
            await RentCollectorService(self.db).get_collector(
                self.current_user.id, collector_id
            )
        )

    @router.put("/{collector_id}", response_model=ApiResponse[RentCollectorOut])
    @safe_handler
    async def rename(self, collector_id: uuid.UUID, data: RentCollectorIn):
        collector = await RentCollectorService(self.db).rename_collector(
            self.current_user.id, collector_id, data
        )
        return ok(collector, "Rent collector updated")

    @router.delete("/{collector_id}", response_model=ApiResponse[None])
    @safe_handler
    async def delete(self, collector_id: uuid.UUID):
        await RentCollectorService(self.db).delete_collector(
            self.current_user.id, collector_id
        )
        return ok(message="Rent collector deleted")
