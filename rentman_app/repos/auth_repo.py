import uuid
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from models.models import AppSettings, User
from models.utils import normalize_email


class AuthRepo:
    def __init__(self, db):
        self.db = db

    async def by_id(self, user_id: uuid.UUID) -> Optional[User]:
        return await self.db.get(User, user_id)

    async def _first_where(self, clause) -> Optional[User]:
        result = await self.db.execute(select(User).where(clause))
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Optional[User]:
        return await self._first_where(User.email == normalize_email(email))

    async def get_by_phone_number(self, phone_number: str) -> Optional[User]:
        return await self._first_where(User.phone_number == phone_number)

    async def create(self, user: User, settings_row: AppSettings | None = None) -> User:
        """Insert a new account, optionally with its settings row, in one transaction."""
        if user.id is not None:
            raise ValueError("create() called with an already persisted user")
        self.db.add(user)
        try:
            await self.db.flush()
            if settings_row is not None:
                settings_row.user_id = user.id
                self.db.add(settings_row)
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            raise
        await self.db.refresh(user)
        return user
