"""Business logic service for URL shortener."""

import logging
from typing import Optional, Dict, List

from .shortcode import ShortCodeGenerator
from .database.base import URLShortenerDBBase
from .database.cache import RedirectCache
from .database.models import URLRecord
from .common.validators import is_valid_url, is_valid_short_code
from .common.url_builder import build_short_url
from .errors import (
    DuplicateCodeError,
    ExhaustedRetriesError,
    NotFoundError,
    ValidationError,
)


class URLShortenerService:
    """Allocates short codes and serves lookups on top of a store."""

    def __init__(
        self,
        db: URLShortenerDBBase,
        base_url: str,
        path_prefix: str = "",
        cache: Optional[RedirectCache] = None,
        short_code_generator: Optional[ShortCodeGenerator] = None,
        logger: Optional[logging.Logger] = None,
        enable_custom_codes: bool = True,
        max_collision_retries: int = 5,
    ):
        """Initialize URL shortener service.

        Args:
            db: Opened store instance
            base_url: Public base URL used to build short URLs
            path_prefix: Optional path prefix placed before the short code
            cache: Optional redirect cache
            short_code_generator: Optional short code generator
            logger: Optional logger
            enable_custom_codes: Whether to allow custom short codes
            max_collision_retries: Maximum insert attempts for random codes
        """
        if max_collision_retries < 1:
            raise ValueError("max_collision_retries must be at least 1")

        self.db = db
        self.base_url = base_url
        self.path_prefix = path_prefix
        self.cache = cache
        self.generator = short_code_generator or ShortCodeGenerator()
        self.logger = logger or logging.getLogger(__name__)
        self.enable_custom_codes = enable_custom_codes
        self.max_collision_retries = max_collision_retries

    def short_url_for(self, short_code: str) -> str:
        return build_short_url(short_code, self.base_url, self.path_prefix)

    def _with_short_url(self, record: URLRecord) -> URLRecord:
        record.short_url = self.short_url_for(record.short_code)
        return record

    async def create_short_url(
        self,
        original_url: str,
        custom_code: Optional[str] = None,
    ) -> URLRecord:
        """Create a new short URL.

        A custom code is inserted verbatim exactly once. Without one, random
        codes are tried until an insert succeeds or the retry limit is hit.

        Args:
            original_url: The original long URL
            custom_code: Optional custom short code

        Returns:
            The stored record with ``short_url`` filled in

        Raises:
            ValidationError: Bad URL or custom code (nothing is written)
            DuplicateCodeError: Custom code is already taken
            ExhaustedRetriesError: Every random code collided
            StorageError: Database failure
        """
        is_valid, error = is_valid_url(original_url)
        if not is_valid:
            raise ValidationError(f"Invalid URL: {error}")

        if custom_code is not None and not custom_code.strip():
            custom_code = None

        if custom_code is not None:
            record = await self._create_with_custom_code(original_url, custom_code)
        else:
            record = await self._create_with_random_code(original_url)

        self.logger.info(f"Created short URL: {record.short_code} -> {original_url}")
        return self._with_short_url(record)

    async def _create_with_custom_code(self, original_url: str, custom_code: str) -> URLRecord:
        if not self.enable_custom_codes:
            raise ValidationError("Custom short codes are not enabled")

        is_valid, error = is_valid_short_code(custom_code)
        if not is_valid:
            raise ValidationError(f"Invalid short code: {error}")

        try:
            return await self.db.create_url(custom_code, original_url)
        except DuplicateCodeError:
            self.logger.info(f"Custom short code already taken: {custom_code}")
            raise

    async def _create_with_random_code(self, original_url: str) -> URLRecord:
        for attempt in range(1, self.max_collision_retries + 1):
            code = self.generator.generate_random()
            try:
                record = await self.db.create_url(code, original_url)
            except DuplicateCodeError:
                self.logger.warning(
                    f"Short code collision on attempt {attempt}/{self.max_collision_retries}: {code}"
                )
                continue

            if attempt > 1:
                self.logger.debug(f"Generated code after {attempt} attempts: {code}")
            return record

        self.logger.error(
            f"Gave up generating a short code for {original_url} "
            f"after {self.max_collision_retries} collisions"
        )
        raise ExhaustedRetriesError(self.max_collision_retries)

    async def resolve(self, short_code: str) -> Optional[str]:
        """Redirect path: find the target and count the click.

        The click is recorded best-effort; a failure is logged and the
        target is still returned.

        Args:
            short_code: The visited short code

        Returns:
            Original URL, or None if the code does not exist or was deleted
            before the click could be recorded
        """
        original_url = None
        if self.cache:
            original_url = await self.cache.get_target(short_code)
            if original_url:
                self.logger.debug(f"Cache hit for {short_code}")

        if original_url is None:
            record = await self.db.lookup(short_code)
            if record is None:
                self.logger.warning(f"Short code not found: {short_code}")
                return None
            original_url = record.original_url
            if self.cache:
                await self.cache.remember(short_code, original_url)

        try:
            counted = await self.db.record_hit(short_code)
        except Exception:
            self.logger.exception(f"Failed to record hit for {short_code}")
            return original_url

        if not counted:
            # Row deleted after the lookup or while the target sat in the cache
            self.logger.info(f"Short code deleted during redirect: {short_code}")
            if self.cache:
                await self.cache.forget(short_code)
            return None

        return original_url

    async def get_url_info(self, short_code: str) -> URLRecord:
        """Get the full record for a short code.

        Raises:
            NotFoundError: If the code does not exist
        """
        record = await self.db.lookup(short_code)
        if record is None:
            raise NotFoundError(short_code)
        return self._with_short_url(record)

    async def list_urls(self, limit: Optional[int] = None) -> List[URLRecord]:
        """List records newest first."""
        records = await self.db.list_urls(limit)
        return [self._with_short_url(record) for record in records]

    async def delete_short_url(self, short_code: str) -> bool:
        """Delete a short URL.

        Args:
            short_code: The short code to delete

        Returns:
            True if deleted, False if it did not exist
        """
        deleted = await self.db.delete(short_code)

        # Evict only once the row is gone
        if self.cache:
            await self.cache.forget(short_code)

        if deleted:
            self.logger.info(f"Deleted short URL: {short_code}")
        else:
            self.logger.info(f"Delete of unknown short code: {short_code}")

        return deleted

    async def health_check(self) -> Dict[str, bool]:
        """Perform health check.

        Returns:
            Dictionary with health status
        """
        db_healthy = await self.db.health_check()

        # A configured cache that is down only degrades redirects
        cache_healthy = True
        if self.cache and self.cache.enabled:
            cache_healthy = await self.cache.ping()

        return {
            "database": db_healthy,
            "cache": cache_healthy,
            "overall": db_healthy and cache_healthy,
        }

    async def close(self) -> None:
        """Close service connections."""
        await self.db.close()
        if self.cache:
            await self.cache.close()
