import uuid
from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError

from models.models import RentCollector


class RentCollectorRepo:
    def __init__(self, db):
        self.db = db

    async def list_all(self, user_id: uuid.UUID) -> List[RentCollector]:
        result = await self.db.execute(
            select(RentCollector)
            .where(RentCollector.user_id == user_id)
            .order_by(RentCollector.name.asc())
        )
        return result.scalars().all()

    async def get_by_id(
        self, user_id: uuid.UUID, collector_id: uuid.UUID
    ) -> Optional[RentCollector]:
        result = await self.db.execute(
            select(RentCollector).where(
                RentCollector.id == collector_id, RentCollector.user_id == user_id
            )
        )
        return result.scalar_one_or_none()

    async def save(self, collector: RentCollector) -> RentCollector:
        self.db.add(collector)
        try:
            await self.db.commit()
            await self.db.refresh(collector)
            return collector
        except SQLAlchemyError:
            await self.db.rollback()
            raise

    async def delete(self, user_id: uuid.UUID, collector_id: uuid.UUID) -> bool:
        try:
            result = await self.db.execute(
                delete(RentCollector).where(
                    RentCollector.id == collector_id, RentCollector.user_id == user_id
                )
            )
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            raise
        return result.rowcount > 0
