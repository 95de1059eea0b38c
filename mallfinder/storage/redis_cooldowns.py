"""Redis-backed cooldowns for proximity notifications."""

from uuid import UUID

import redis.asyncio as redis


class RedisCooldownStore:
    """Remembers which (user, mall) pairs were notified recently."""

    def __init__(self, redis_url: str, ttl_seconds: int = 24 * 3600):
        self.redis_url = redis_url
        self.ttl_seconds = ttl_seconds
        self._client: redis.Redis | None = None

    async def connect(self) -> None:
        """Establish Redis connection."""
        self._client = redis.from_url(self.redis_url, encoding="utf-8")

    async def disconnect(self) -> None:
        """Close Redis connection."""
        if self._client:
            await self._client.aclose()
            self._client = None

    @staticmethod
    def key(user_id: int, mall_id: UUID) -> str:
        return f"mallfinder:notified:{user_id}:{mall_id}"

    async def try_claim(self, user_id: int, mall_id: UUID) -> bool:
        """Start the cooldown window; False if one is already running."""
        if not self._client:
            raise RuntimeError("Redis client not connected")

        # SET NX only succeeds for the first claim inside the TTL window
        acquired = await self._client.set(
            self.key(user_id, mall_id), "1", ex=self.ttl_seconds, nx=True
        )
        return bool(acquired)

    async def release(self, user_id: int, mall_id: UUID) -> None:
        """Drop a claim, e.g. when delivering the notification failed."""
        if not self._client:
            raise RuntimeError("Redis client not connected")

        await self._client.delete(self.key(user_id, mall_id))

    async def is_cooling_down(self, user_id: int, mall_id: UUID) -> bool:
        if not self._client:
            raise RuntimeError("Redis client not connected")

        return bool(await self._client.exists(self.key(user_id, mall_id)))
