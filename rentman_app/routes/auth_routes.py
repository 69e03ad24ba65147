from fastapi import APIRouter, Depends
from fastapi_utils.cbv import cbv
from sqlalchemy.ext.asyncio import AsyncSession

from core.get_current_user import get_current_user
from core.get_db import get_db_async
from core.safe_handler import safe_handler
from models.models import User
from schemas.schema import ApiResponse, UserCreate, UserLoginInput, UserOut, ok
from services.auth_service import AuthService

router = APIRouter(tags=["User Authentication"])


@cbv(router)
class UserRoutes:
    @router.post("/register", status_code=201)
    @safe_handler
    async def register(
        self,
        data: UserCreate,
        db: AsyncSession = Depends(get_db_async),
    ):
        return await AuthService(db).register(data)

    @router.post("/login")
    @safe_handler
    async def login(
        self,
        data: UserLoginInput,
        db: AsyncSession = Depends(get_db_async),
    ):
        return await AuthService(db).login(data)

    @router.post("/logout")
    @safe_handler
    async def logout(
        self,
        current_user: User = Depends(get_current_user),
        db: AsyncSession = Depends(get_db_async),
    ):
        return await AuthService(db).logout()

    @router.get("/me", response_model=ApiResponse[UserOut])
    @safe_handler
    async def me(self, current_user: User = Depends(get_current_user)):
        return ok(AuthService.me(current_user))
