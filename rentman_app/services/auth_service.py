import logging
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from fastapi import HTTPException
from fastapi.responses import JSONResponse
from jose import jwt

from core.settings import settings
from models.models import AppSettings, User
from models.utils import normalize_email, normalize_phone
from repos.auth_repo import AuthRepo
from schemas.schema import AuthOut, UserCreate, UserLoginInput, UserOut

logger = logging.getLogger(__name__)

SECRET_KEY = settings.SECRET_KEY
ALGORITHM = settings.ALGORITHM
ACCESS_EXPIRE_DAYS = settings.ACCESS_EXPIRE_DAYS
SECURE_COOKIES = settings.SECURE_COOKIES


def create_access_token(user: User) -> str:
    exp = datetime.now(timezone.utc) + timedelta(days=ACCESS_EXPIRE_DAYS)
    return jwt.encode(
        {"sub": str(user.id), "type": "access", "exp": exp},
        SECRET_KEY,
        algorithm=ALGORITHM,
    )


class AuthService:
    def __init__(self, db):
        self.repo: AuthRepo = AuthRepo(db)

    def _auth_response(self, user: User, message: str, status_code: int) -> JSONResponse:
        token = create_access_token(user)
        body = AuthOut(
            user=UserOut.model_validate(user), token=token, message=message
        ).model_dump(mode="json")
        response = JSONResponse(body, status_code=status_code)
        response.set_cookie(
            key="access_token",
            value=token,
            httponly=True,
            secure=SECURE_COOKIES,
            samesite="lax",
            max_age=ACCESS_EXPIRE_DAYS * 86400,
        )
        return response

    async def register(self, data: UserCreate) -> JSONResponse:
        if data.email and await self.repo.get_by_email(email=data.email):
            raise HTTPException(status_code=400, detail="Email already registered")
        if data.phone_number and await self.repo.get_by_phone_number(
            phone_number=data.phone_number
        ):
            raise HTTPException(status_code=400, detail="Phone number already registered")

        user = User(email=data.email, phone_number=data.phone_number)
        user.set_password(raw_password=data.password)
        await self.repo.create(
            user,
            settings_row=AppSettings(
                default_unit_price=Decimal(str(settings.DEFAULT_UNIT_PRICE))
            ),
        )
        logger.info("Registered user %s", user.id)
        return self._auth_response(user, "Registration successful", 201)

    async def login(self, data: UserLoginInput) -> JSONResponse:
        user = None
        if data.email and data.email.strip():
            user = await self.repo.get_by_email(normalize_email(data.email))
        elif data.phone_number:
            try:
                phone = normalize_phone(data.phone_number, settings.DEFAULT_PHONE_REGION)
            except ValueError:
                raise HTTPException(status_code=401, detail="Invalid credentials")
            user = await self.repo.get_by_phone_number(phone)

        if not user or not user.check_password(raw_password=data.password):
            raise HTTPException(status_code=401, detail="Invalid credentials")

        logger.info("User %s logged in", user.id)
        return self._auth_response(user, "Login successful", 200)

    async def logout(self) -> JSONResponse:
        response = JSONResponse({"success": True, "message": "Logged out successfully"})
        response.delete_cookie("access_token")
        return response

    @staticmethod
    def me(user: User) -> UserOut:
        return UserOut.model_validate(user)
