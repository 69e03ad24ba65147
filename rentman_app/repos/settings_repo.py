import uuid
from decimal import Decimal
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from models.models import AppSettings


class SettingsRepo:
    def __init__(self, db):
        self.db = db

    async def get_for_user(self, user_id: uuid.UUID) -> Optional[AppSettings]:
        result = await self.db.execute(
            select(AppSettings).where(AppSettings.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def get_or_create(
        self, user_id: uuid.UUID, default_unit_price: Decimal
    ) -> AppSettings:
        existing = await self.get_for_user(user_id)
        if existing:
            return existing
        return await self.save(
            AppSettings(user_id=user_id, default_unit_price=default_unit_price)
        )

    async def save(self, row: AppSettings) -> AppSettings:
        self.db.add(row)
        try:
            await self.db.commit()
            await self.db.refresh(row)
            return row
        except SQLAlchemyError:
            await self.db.rollback()
            raise
