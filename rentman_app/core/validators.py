import uuid

from fastapi import HTTPException, Request
from jose import ExpiredSignatureError, JWTError, jwt

from .settings import settings


def decode_http_access_token(token: str) -> uuid.UUID:
    payload = jwt.decode(
        token,
        settings.SECRET_KEY,
        algorithms=[settings.ALGORITHM],
    )

    if payload.get("type") != "access":
        raise JWTError("Invalid token type")

    user_id = payload.get("sub")
    if not user_id:
        raise JWTError("Token missing user ID")

    try:
        return uuid.UUID(user_id)
    except ValueError:
        raise JWTError("Invalid user ID format in token")


def read_token(request: Request) -> str | None:
    header = request.headers.get("Authorization")
    if header:
        scheme, _, token = header.partition(" ")
        if scheme.lower() == "bearer" and token.strip():
            return token.strip()
    return request.cookies.get("access_token")


async def jwt_protect(request: Request) -> uuid.UUID:
    token = read_token(request)
    if not token:
        raise HTTPException(status_code=401, detail="Not authenticated")

    try:
        return decode_http_access_token(token)
    except ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token expired")
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid token")
