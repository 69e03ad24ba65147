from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException


def _field_name(loc) -> str:
    parts = [str(p) for p in (loc or ()) if p not in ("body", "query", "path")]
    return ".".join(parts) or "request"


class ValidationErrorHandler:
    async def __call__(self, request: Request, exc: RequestValidationError):

        errors = []

        for err in exc.errors():
            errors.append({
                "loc": err.get("loc"),
                "msg": str(err.get("msg")),
                "type": err.get("type"),
            })

        first = errors[0] if errors else {}
        message = f"{_field_name(first.get('loc'))}: {first.get('msg', 'invalid')}"

        return JSONResponse(
            status_code=400,
            content={
                "success": False,
                "error": "Validation failed",
                "message": message,
                "details": errors,
            },
        )


class HTTPErrorHandler:
    async def __call__(self, request: Request, exc: StarletteHTTPException):
        detail = exc.detail if isinstance(exc.detail, str) else "Request failed"

        return JSONResponse(
            status_code=exc.status_code,
            content={
                "success": False,
                "error": detail,
                "message": detail,
            },
            headers=getattr(exc, "headers", None),
        )
