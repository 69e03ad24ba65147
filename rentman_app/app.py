import logging

import uvicorn
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.catch_error_middleware import ErrorHandlerMiddleware
from core.exception_handler import HTTPErrorHandler, ValidationErrorHandler
from core.lifespan import lifespan
from core.settings import settings
from routes.auth_routes import router as user_router
from routes.rent_collector_routes import router as rent_collector_router
from routes.rent_log_routes import router as rent_log_router
from routes.settings_routes import router as settings_router
from routes.tenant_routes import router as tenant_router

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    lifespan=lifespan,
    title=settings.PROJECT_NAME,
    version="1.0.0",
)

API_PREFIX = settings.API_PREFIX

app.include_router(user_router, prefix=f"{API_PREFIX}/auth")
app.include_router(tenant_router, prefix=f"{API_PREFIX}/tenants")
app.include_router(rent_log_router, prefix=f"{API_PREFIX}/rent-logs")
app.include_router(rent_collector_router, prefix=f"{API_PREFIX}/rent-collectors")
app.include_router(settings_router, prefix=f"{API_PREFIX}/settings")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_HOSTS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health", tags=["System"])
async def health_check():
    return {"status": "ok"}


app.add_exception_handler(RequestValidationError, ValidationErrorHandler())
app.add_exception_handler(StarletteHTTPException, HTTPErrorHandler())

app.add_middleware(ErrorHandlerMiddleware)


if __name__ == "__main__":
    uvicorn.run("app:app", host="0.0.0.0", port=8000, reload=True)
