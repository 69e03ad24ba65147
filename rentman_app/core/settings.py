import os
from typing import List

from dotenv import load_dotenv
from pydantic_settings import BaseSettings

from .url_parser import parser

load_dotenv()


class Settings(BaseSettings):
    PROJECT_NAME: str = "RENTMAN PROPERTY LEDGER"
    API_PREFIX: str = "/api"
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./rentman.db")
    AUTO_CREATE_TABLES: bool = True
    SECRET_KEY: str = os.getenv("SECRET_KEY", "rentman-dev-secret")
    ALGORITHM: str = os.getenv("ALGORITHM", "HS256")
    ACCESS_EXPIRE_DAYS: int = 7
    SECURE_COOKIES: bool = False  # must be false on localhost
    DEFAULT_UNIT_PRICE: float = 8
    DEFAULT_PHONE_REGION: str = "IN"
    RECENT_LOGS_LIMIT: int = 10
    UPSTASH_REDIS_TOKEN: str | None = os.getenv("UPSTASH_REDIS_REST_TOKEN")
    UPSTASH_REDIS_URL: str | None = os.getenv("UPSTASH_REDIS_REST_URL")
    CACHE_TTL_SECONDS: int = 300
    LOG_LEVEL: str = "INFO"
    ALLOWED_HOSTS_RAW: str = os.getenv("ALLOWED_HOSTS", "")

    @property
    def ALLOWED_HOSTS(self) -> List[str]:
        return parser.parse_url_list(self.ALLOWED_HOSTS_RAW, "ALLOWED_HOSTS")

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")

    class Config:
        env_file = ".env"
        extra = "ignore"
        case_sensitive = False


settings = Settings()
