"""Redis read-through cache for redirect lookups."""

import logging
from typing import Optional

import redis.asyncio as redis
from redis.exceptions import RedisError


class RedirectCache:
    """Caches short_code -> original_url for the redirect path.

    Only the target URL is cached; click counts always go to the store.
    Every Redis failure is logged and treated as a miss.
    """

    KEY_PREFIX = "shortlink:url:"

    def __init__(
        self,
        redis_url: Optional[str] = None,
        ttl_seconds: int = 3600,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize Redis cache.

        Args:
            redis_url: Redis connection URL (e.g., redis://localhost:6379/0)
            ttl_seconds: TTL for cached targets
            logger: Optional logger instance
        """
        self.redis_url = redis_url
        self.ttl_seconds = ttl_seconds
        self.logger = logger or logging.getLogger(__name__)
        self.enabled = redis_url is not None
        self.client: Optional[redis.Redis] = None

    async def connect(self) -> None:
        """Connect to Redis, disabling the cache if it is unreachable."""
        if not self.enabled:
            return

        try:
            self.client = redis.from_url(
                self.redis_url,
                encoding="utf-8",
                decode_responses=True,
            )
            await self.client.ping()
            self.logger.info(f"Redis cache enabled with TTL={self.ttl_seconds}s")
        except (RedisError, OSError) as e:
            self.logger.error(f"Failed to connect to Redis, caching disabled: {e}")
            self.enabled = False

    @property
    def active(self) -> bool:
        return self.enabled and self.client is not None

    def key_for(self, short_code: str) -> str:
        return f"{self.KEY_PREFIX}{short_code}"

    async def get_target(self, short_code: str) -> Optional[str]:
        """Return the cached original URL, or None on miss or error."""
        if not self.active:
            return None

        try:
            return await self.client.get(self.key_for(short_code))
        except RedisError as e:
            self.logger.error(f"Cache get error for {short_code}: {e}")
            return None

    async def remember(self, short_code: str, original_url: str) -> bool:
        if not self.active:
            return False

        try:
            await self.client.setex(self.key_for(short_code), self.ttl_seconds, original_url)
            return True
        except RedisError as e:
            self.logger.error(f"Cache set error for {short_code}: {e}")
            return False

    async def forget(self, short_code: str) -> bool:
        """Evict a short code. Returns True if a key was removed."""
        if not self.active:
            return False

        try:
            return await self.client.delete(self.key_for(short_code)) > 0
        except RedisError as e:
            self.logger.error(f"Cache delete error for {short_code}: {e}")
            return False

    async def ping(self) -> bool:
        if not self.active:
            return False

        try:
            return bool(await self.client.ping())
        except RedisError as e:
            self.logger.error(f"Cache ping failed: {e}")
            return False

    async def close(self) -> None:
        """Close Redis connection."""
        if self.client:
            await self.client.aclose()
            self.client = None
            self.logger.info("Redis connection closed")
