import logging
import uuid
from decimal import Decimal

from core.cache import cache
from core.mapper import ORMMapper
from core.settings import settings
from repos.settings_repo import SettingsRepo
from schemas.schema import AppSettingsOut, AppSettingsUpdate

logger = logging.getLogger(__name__)


class SettingsService:
    def __init__(self, db):
        self.repo: SettingsRepo = SettingsRepo(db)
        self.mapper: ORMMapper = ORMMapper()

    @staticmethod
    def cache_key(user_id: uuid.UUID) -> str:
        return f"settings:{user_id}"

    async def get_settings(self, user_id: uuid.UUID) -> AppSettingsOut:
        cached = await cache.get_json(self.cache_key(user_id))
        if cached is not None:
            return self.mapper.one(cached, AppSettingsOut)

        row = await self.repo.get_or_create(
            user_id, Decimal(str(settings.DEFAULT_UNIT_PRICE))
        )
        out = self.mapper.one(row, AppSettingsOut)
        await cache.set_json(self.cache_key(user_id), out.model_dump(mode="json"))
        return out

    async def update_settings(
        self, user_id: uuid.UUID, data: AppSettingsUpdate
    ) -> AppSettingsOut:
        row = await self.repo.get_or_create(
            user_id, Decimal(str(settings.DEFAULT_UNIT_PRICE))
        )
        row.default_unit_price = data.default_unit_price
        row = await self.repo.save(row)
        await cache.delete(self.cache_key(user_id))
        logger.info("Default unit price for user %s set to %s", user_id, row.default_unit_price)
        return self.mapper.one(row, AppSettingsOut)
