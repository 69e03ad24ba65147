import uuid
from datetime import date
from typing import List, Optional

from sqlalchemy import delete, or_, select
from sqlalchemy.exc import SQLAlchemyError

from models.models import RentLog, UploadedFile

LEDGER_ORDER = (RentLog.date.desc(), RentLog.created_at.desc())


class RentLogRepo:
    def __init__(self, db):
        self.db = db

    def _owned(self, user_id: uuid.UUID):
        return select(RentLog).where(RentLog.user_id == user_id)

    async def _all(self, stmt) -> List[RentLog]:
        result = await self.db.execute(stmt)
        return result.scalars().all()

    async def _commit_and_refresh(self, log: RentLog) -> RentLog:
        try:
            await self.db.commit()
            await self.db.refresh(log)
            return log
        except SQLAlchemyError:
            await self.db.rollback()
            raise

    async def create(
        self, user_id: uuid.UUID, log_data: dict, attachments: List[dict]
    ) -> RentLog:
        log = RentLog(
            user_id=user_id,
            attachments=[UploadedFile(**item) for item in attachments],
            **log_data,
        )
        self.db.add(log)
        return await self._commit_and_refresh(log)

    async def get_by_id(self, user_id: uuid.UUID, log_id: uuid.UUID) -> Optional[RentLog]:
        result = await self.db.execute(self._owned(user_id).where(RentLog.id == log_id))
        return result.scalar_one_or_none()

    async def list_all(self, user_id: uuid.UUID) -> List[RentLog]:
        return await self._all(self._owned(user_id).order_by(*LEDGER_ORDER))

    async def by_tenant(self, user_id: uuid.UUID, tenant_id: uuid.UUID) -> List[RentLog]:
        return await self._all(
            self._owned(user_id)
            .where(RentLog.tenant_id == tenant_id)
            .order_by(*LEDGER_ORDER)
        )

    async def by_collector(self, user_id: uuid.UUID, collector: str) -> List[RentLog]:
        return await self._all(
            self._owned(user_id)
            .where(RentLog.collector == collector)
            .order_by(*LEDGER_ORDER)
        )

    async def in_date_range(
        self, user_id: uuid.UUID, start: date, end: date
    ) -> List[RentLog]:
        return await self._all(
            self._owned(user_id)
            .where(RentLog.date >= start, RentLog.date <= end)
            .order_by(*LEDGER_ORDER)
        )

    async def search(self, user_id: uuid.UUID, term: str) -> List[RentLog]:
        return await self._all(
            self._owned(user_id)
            .where(
                or_(
                    RentLog.tenant_name.icontains(term, autoescape=True),
                    RentLog.collector.icontains(term, autoescape=True),
                    RentLog.notes.icontains(term, autoescape=True),
                )
            )
            .order_by(*LEDGER_ORDER)
        )

    async def recent(self, user_id: uuid.UUID, limit: int) -> List[RentLog]:
        return await self._all(
            self._owned(user_id).order_by(RentLog.created_at.desc()).limit(limit)
        )

    async def latest_for_tenant(
        self, user_id: uuid.UUID, tenant_id: uuid.UUID
    ) -> Optional[RentLog]:
        result = await self.db.execute(
            self._owned(user_id)
            .where(RentLog.tenant_id == tenant_id)
            .order_by(*LEDGER_ORDER)
            .limit(1)
        )
        return result.scalars().first()

    async def update(
        self,
        log: RentLog,
        fields: dict,
        attachments: Optional[List[dict]] = None,
    ) -> RentLog:
        for key, value in fields.items():
            setattr(log, key, value)
        if attachments is not None:
            log.attachments = [UploadedFile(**item) for item in attachments]
        self.db.add(log)
        return await self._commit_and_refresh(log)

    async def delete(self, user_id: uuid.UUID, log_id: uuid.UUID) -> bool:
        try:
            result = await self.db.execute(
                delete(RentLog).where(RentLog.id == log_id, RentLog.user_id == user_id)
            )
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            raise
        return result.rowcount > 0
