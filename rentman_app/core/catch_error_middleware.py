import logging

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from .friendly_msg import get_friendly_message

logger = logging.getLogger(__name__)


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Last line of defence for errors raised outside the route wrappers."""

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as e:
            logger.exception(
                "Unhandled server error on %s %s", request.method, request.url.path
            )
            message = get_friendly_message(e)
            return JSONResponse(
                {"success": False, "error": message, "message": message},
                status_code=500,
            )
