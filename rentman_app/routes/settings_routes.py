from fastapi import APIRouter, Depends
from fastapi_utils.cbv import cbv
from sqlalchemy.ext.asyncio import AsyncSession

from core.get_current_user import get_current_user
from core.get_db import get_db_async
from core.safe_handler import safe_handler
from models.models import User
from schemas.schema import ApiResponse, AppSettingsOut, AppSettingsUpdate, ok
from services.settings_service import SettingsService

router = APIRouter(tags=["Settings"])


@cbv(router=router)
class SettingsRoutes:
    current_user: User = Depends(get_current_user)
    db: AsyncSession = Depends(get_db_async)

    @router.get("/", response_model=ApiResponse[AppSettingsOut])
    @safe_handler
    async def get_settings(self):
        return ok(await SettingsService(self.db).get_settings(self.current_user.id))

    @router.put("/", response_model=ApiResponse[AppSettingsOut])
    @safe_handler
    async def update_settings(self, data: AppSettingsUpdate):
        row = await SettingsService(self.db).update_settings(self.current_user.id, data)
        return ok(row, "Settings updated")
