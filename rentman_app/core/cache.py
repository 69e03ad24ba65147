import asyncio
import json
import logging
import urllib.parse
from typing import Any, Optional

import httpx
from tenacity import retry, stop_after_attempt, wait_exponential

from .breaker import CircuitBreaker
from .settings import settings

logger = logging.getLogger(__name__)


class Cache:
    """Read-through cache on the Upstash Redis REST API.

    Without ``UPSTASH_REDIS_URL``/``UPSTASH_REDIS_TOKEN`` the cache is disabled:
    reads miss and writes are dropped. Cache failures are logged and treated
    as misses, they never fail a request.
    """

    def __init__(self, url: str | None = None, token: str | None = None):
        self.redis_url = (url or "").rstrip("/")
        self.redis_token = token
        self.enabled = bool(self.redis_url and self.redis_token)
        self.breaker = CircuitBreaker("upstash-cache")
        self.headers = {
            "Authorization": f"Bearer {self.redis_token}",
            "Content-Type": "application/json",
        }

    @retry(
        stop=stop_after_attempt(2), wait=wait_exponential(multiplier=1, min=1, max=10)
    )
    async def connect(self):
        if not self.enabled:
            logger.info("Cache disabled: Upstash Redis is not configured.")
            return

        logger.info("Connecting to Upstash Redis...")
        if not await self.ping():
            raise ConnectionError("Upstash Redis ping failed.")
        logger.info("Connected to Upstash Redis.")

    async def _command(self, path: str, content: str | None = None) -> Any:
        async def handler():
            async with httpx.AsyncClient(timeout=5.0) as client:
                if content is None:
                    res = await client.get(f"{self.redis_url}/{path}", headers=self.headers)
                else:
                    res = await client.post(
                        f"{self.redis_url}/{path}", headers=self.headers, content=content
                    )
            if res.status_code == 404:
                return None
            if res.status_code != 200:
                raise ConnectionError(f"Redis {path.split('/')[0]} failed ({res.status_code})")
            return res.json().get("result")

        return await self.breaker.call(handler)

    async def get(self, key: str) -> Optional[str]:
        if not self.enabled:
            return None
        try:
            return await self._command(f"get/{urllib.parse.quote(key, safe='')}")
        except (httpx.HTTPError, ConnectionError) as e:
            logger.error("Cache GET failed for %s: %s", key, e)
            return None

    async def set(self, key: str, value: str, ttl: int | None = None) -> None:
        if key is None or value is None:
            raise ValueError("Cache key and value cannot be None")
        if not self.enabled:
            return
        ttl = ttl or settings.CACHE_TTL_SECONDS
        try:
            await self._command(
                f"set/{urllib.parse.quote(key, safe='')}?EX={ttl}", content=value
            )
            logger.debug("Cache set successfully for key: %s", key)
        except (httpx.HTTPError, ConnectionError) as e:
            logger.error("Cache SET failed for %s: %s", key, e)

    async def delete(self, key: str) -> bool:
        if not self.enabled:
            return False
        try:
            await self._command(f"del/{urllib.parse.quote(key, safe='')}", content="")
            return True
        except (httpx.HTTPError, ConnectionError) as e:
            logger.error("Cache DELETE failed for %s: %s", key, e)
            return False

    async def get_json(self, key: str) -> Optional[Any]:
        data = await self.get(key)
        if not data:
            return None
        try:
            return json.loads(data)
        except json.JSONDecodeError:
            logger.error("Invalid JSON format in key: %s", key)
            return None

    async def set_json(self, key: str, value: Any, ttl: int | None = None) -> None:
        await self.set(key, json.dumps(value), ttl)

    async def delete_cache_keys_async(self, *keys: str):
        if not keys or not self.enabled:
            return
        await asyncio.gather(*(self.delete(key) for key in set(keys)))

    async def ping(self) -> bool:
        try:
            return await self._command("ping") == "PONG"
        except (httpx.HTTPError, ConnectionError):
            return False


cache = Cache(settings.UPSTASH_REDIS_URL, settings.UPSTASH_REDIS_TOKEN)
