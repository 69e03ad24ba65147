import uuid
from typing import List, Optional

from sqlalchemy import delete, or_, select
from sqlalchemy.exc import SQLAlchemyError

from models.models import Tenant, UploadedFile


class TenantRepo:
    def __init__(self, db):
        self.db = db

    def _owned(self, user_id: uuid.UUID):
        return select(Tenant).where(Tenant.user_id == user_id)

    async def _commit_and_refresh(self, tenant: Tenant) -> Tenant:
        try:
            await self.db.commit()
            await self.db.refresh(tenant)
            return tenant
        except SQLAlchemyError:
            await self.db.rollback()
            raise

    async def create(
        self, user_id: uuid.UUID, tenant_data: dict, documents: List[dict]
    ) -> Tenant:
        tenant = Tenant(
            user_id=user_id,
            is_archived=False,
            documents=[UploadedFile(**doc) for doc in documents],
            **tenant_data,
        )
        self.db.add(tenant)
        return await self._commit_and_refresh(tenant)

    async def get_by_id(
        self, user_id: uuid.UUID, tenant_id: uuid.UUID
    ) -> Optional[Tenant]:
        result = await self.db.execute(
            self._owned(user_id).where(Tenant.id == tenant_id)
        )
        return result.scalar_one_or_none()

    async def list_all(self, user_id: uuid.UUID) -> List[Tenant]:
        result = await self.db.execute(
            self._owned(user_id).order_by(Tenant.created_at.desc())
        )
        return result.scalars().all()

    async def list_active(self, user_id: uuid.UUID) -> List[Tenant]:
        result = await self.db.execute(
            self._owned(user_id)
            .where(Tenant.is_archived.is_(False))
            .order_by(Tenant.created_at.desc())
        )
        return result.scalars().all()

    async def list_archived(self, user_id: uuid.UUID) -> List[Tenant]:
        result = await self.db.execute(
            self._owned(user_id)
            .where(Tenant.is_archived.is_(True))
            .order_by(Tenant.closing_date.desc(), Tenant.created_at.desc())
        )
        return result.scalars().all()

    async def search(self, user_id: uuid.UUID, term: str) -> List[Tenant]:
        result = await self.db.execute(
            self._owned(user_id)
            .where(
                or_(
                    Tenant.name.icontains(term, autoescape=True),
                    Tenant.property_name.icontains(term, autoescape=True),
                )
            )
            .order_by(Tenant.name.asc(), Tenant.created_at.desc())
        )
        return result.scalars().all()

    async def update(
        self,
        tenant: Tenant,
        fields: dict,
        documents: Optional[List[dict]] = None,
    ) -> Tenant:
        for key, value in fields.items():
            setattr(tenant, key, value)
        if documents is not None:
            # replacing the collection orphans the old rows, which are deleted
            tenant.documents = [UploadedFile(**doc) for doc in documents]
        self.db.add(tenant)
        return await self._commit_and_refresh(tenant)

    async def delete(self, user_id: uuid.UUID, tenant_id: uuid.UUID) -> bool:
        try:
            result = await self.db.execute(
                delete(Tenant).where(Tenant.id == tenant_id, Tenant.user_id == user_id)
            )
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            raise
        return result.rowcount > 0
