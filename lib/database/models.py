"""Data models for URL shortener."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Mapping, Optional


def _as_utc(value: Any) -> Optional[datetime]:
    """Normalize a stored timestamp (datetime or ISO string) to aware UTC."""
    if value is None:
        return None
    if not isinstance(value, datetime):
        value = datetime.fromisoformat(str(value))
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass
class URLRecord:
    """One row of the ``urls`` table."""

    id: int
    original_url: str
    short_code: str
    created_at: datetime
    clicks: int = 0
    last_accessed: Optional[datetime] = None
    # Derived from configuration, never persisted
    short_url: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert to a JSON-friendly dictionary."""
        return {
            "id": self.id,
            "original_url": self.original_url,
            "short_code": self.short_code,
            "short_url": self.short_url,
            "clicks": self.clicks,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "last_accessed": self.last_accessed.isoformat() if self.last_accessed else None,
        }

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "URLRecord":
        """Create from a database row (sqlite3.Row, asyncpg.Record or dict)."""
        return cls(
            id=row["id"],
            original_url=row["original_url"],
            short_code=row["short_code"],
            clicks=row["clicks"] or 0,
            created_at=_as_utc(row["created_at"]),
            last_accessed=_as_utc(row["last_accessed"]),
        )
