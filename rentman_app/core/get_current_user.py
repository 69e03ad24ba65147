import uuid

from fastapi import Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from models.models import User
from repos.auth_repo import AuthRepo

from .get_db import get_db_async
from .validators import jwt_protect


async def get_current_user(
    user_id: uuid.UUID = Depends(jwt_protect),
    db: AsyncSession = Depends(get_db_async),
) -> User:
    user = await AuthRepo(db).by_id(user_id)

    if not user:
        raise HTTPException(status_code=401, detail="Not Authenticated")

    return user
