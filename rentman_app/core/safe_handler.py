import logging
from functools import wraps

from fastapi import HTTPException
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError

from .friendly_msg import DEFAULT_MESSAGE, get_friendly_message

logger = logging.getLogger(__name__)


def safe_handler(func):
    """Route wrapper: HTTP errors pass through, bad input becomes 400, the rest 500.

    Unexpected errors are logged with their traceback and replaced by a
    friendly message so no internals reach the client.
    """

    @wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except HTTPException as e:
            logger.warning(
                "[HTTPException] %s -> %s: %s", func.__qualname__, e.status_code, e.detail
            )
            raise
        except IntegrityError as e:
            logger.warning("[IntegrityError] %s: %s", func.__qualname__, e.orig)
            raise HTTPException(status_code=400, detail=get_friendly_message(e))
        except ValidationError as e:
            logger.error("[Schema Error] in %s: %s", func.__qualname__, e, exc_info=True)
            raise HTTPException(status_code=500, detail=DEFAULT_MESSAGE)
        except ValueError as e:
            logger.warning("[ValueError] %s: %s", func.__qualname__, e)
            raise HTTPException(status_code=400, detail=str(e))
        except Exception as e:
            logger.error(
                "[Unhandled Error] in %s: %s", func.__qualname__, e, exc_info=True
            )
            raise HTTPException(status_code=500, detail=get_friendly_message(e))

    return wrapper
