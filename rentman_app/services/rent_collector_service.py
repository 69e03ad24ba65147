import logging
import uuid
from typing import List

from fastapi import HTTPException

from core.mapper import ORMMapper
from models.models import RentCollector
from repos.rent_collector_repo import RentCollectorRepo
from schemas.schema import RentCollectorIn, RentCollectorOut

logger = logging.getLogger(__name__)


class RentCollectorService:
    def __init__(self, db):
        self.repo: RentCollectorRepo = RentCollectorRepo(db)
        self.mapper: ORMMapper = ORMMapper()

    async def get_owned(self, user_id: uuid.UUID, collector_id: uuid.UUID) -> RentCollector:
        collector = await self.repo.get_by_id(user_id=user_id, collector_id=collector_id)
        if not collector:
            raise HTTPException(status_code=404, detail="Rent collector not found")
        return collector

    async def list_collectors(self, user_id: uuid.UUID) -> List[RentCollectorOut]:
        return self.mapper.many(await self.repo.list_all(user_id), RentCollectorOut)

    async def get_collector(
        self, user_id: uuid.UUID, collector_id: uuid.UUID
    ) -> RentCollectorOut:
        return self.mapper.one(await self.get_owned(user_id, collector_id), RentCollectorOut)

    async def create_collector(
        self, user_id: uuid.UUID, data: RentCollectorIn
    ) -> RentCollectorOut:
        collector = await self.repo.save(RentCollector(user_id=user_id, name=data.name))
        logger.info("Rent collector %s added", collector.id)
        return self.mapper.one(collector, RentCollectorOut)

    async def rename_collector(
        self, user_id: uuid.UUID, collector_id: uuid.UUID, data: RentCollectorIn
    ) -> RentCollectorOut:
        collector = await self.get_owned(user_id, collector_id)
        collector.name = data.name
        collector = await self.repo.save(collector)
        logger.info("Rent collector %s renamed", collector_id)
        return self.mapper.one(collector, RentCollectorOut)

    async def delete_collector(self, user_id: uuid.UUID, collector_id: uuid.UUID) -> None:
        if not await self.repo.delete(user_id=user_id, collector_id=collector_id):
            raise HTTPException(status_code=404, detail="Rent collector not found")
        logger.info("Rent collector %s deleted", collector_id)
