"""Abstract base class for URL shortener store implementations."""

import logging
from abc import ABC, abstractmethod
from typing import Optional, List
from datetime import datetime

from .models import URLRecord


class URLShortenerDBBase(ABC):
    """Single-table store of short code mappings.

    Implementations must enforce short code uniqueness in the database itself
    and increment clicks with a single UPDATE statement, so that concurrent
    requests never produce duplicate codes or lost clicks.
    """

    def __init__(self, db_config: str, logger: Optional[logging.Logger] = None):
        """Initialize the store.

        Args:
            db_config: Database connection string
            logger: Optional logger instance
        """
        self.db_config = db_config
        self.logger = logger or logging.getLogger(__name__)

    @abstractmethod
    async def open(self) -> None:
        """Prepare the store for use (schema creation, connection pool)."""
        pass

    @abstractmethod
    async def create_url(
        self,
        short_code: str,
        original_url: str,
        created_at: Optional[datetime] = None,
    ) -> URLRecord:
        """Insert a new mapping with zero clicks.

        Args:
            short_code: The short code to use
            original_url: The original long URL
            created_at: Optional creation timestamp (defaults to now UTC)

        Returns:
            The stored record, including its assigned id

        Raises:
            DuplicateCodeError: If short_code is already taken
            StorageError: On any other database failure
        """
        pass

    @abstractmethod
    async def lookup(self, short_code: str) -> Optional[URLRecord]:
        """Get the record for a short code, or None."""
        pass

    @abstractmethod
    async def record_hit(self, short_code: str) -> bool:
        """Atomically increment clicks and set last_accessed to now.

        Args:
            short_code: The short code that was visited

        Returns:
            True if a row matched, False if the code does not exist
        """
        pass

    @abstractmethod
    async def list_urls(self, limit: Optional[int] = None) -> List[URLRecord]:
        """List records, newest first.

        Args:
            limit: Maximum number of records to return (None for all)
        """
        pass

    @abstractmethod
    async def delete(self, short_code: str) -> bool:
        """Delete a mapping.

        Returns:
            True if a row was removed, False if the code did not exist
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if the database answers a trivial query."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release database resources."""
        pass
