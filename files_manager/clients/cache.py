import logging
from typing import Any, Optional

from redis import asyncio as redis
from redis.exceptions import RedisError

logger = logging.getLogger(__name__)


class RedisClient:
    """Expiring key/value store backing token -> user resolution."""

    def __init__(self, url: str, client: Optional[Any] = None):
        self.url = url
        self._client = client if client is not None else redis.from_url(url, decode_responses=True)

    async def connect(self) -> None:
        await self._client.ping()
        logger.info("Redis client connected to %s", self.url)

    async def close(self) -> None:
        await self._client.aclose()
        logger.info("Redis connection closed")

    async def is_alive(self) -> bool:
        try:
            return bool(await self._client.ping())
        except RedisError as exc:
            logger.warning("Redis ping failed: %s", exc)
            return False

    async def get(self, key: str) -> Optional[str]:
        return await self._client.get(key)

    async def set(self, key: str, value: str, ttl: int) -> None:
        await self._client.set(key, value, ex=ttl)

    async def delete(self, key: str) -> None:
        await self._client.delete(key)
