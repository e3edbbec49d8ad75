"""SQLite implementation for URL shortener."""

import os
import asyncio
import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Callable, Iterator, List, Optional

from .base import URLShortenerDBBase
from .models import URLRecord
from ..errors import DuplicateCodeError, StorageError


def _to_db_timestamp(value: datetime) -> str:
    """Fixed-width UTC ISO string so that text ordering matches time ordering."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f+00:00")


class URLShortenerSQLite(URLShortenerDBBase):
    """SQLite store. Each operation opens its own connection in the default executor."""

    CREATE_TABLE_SQL = """
    CREATE TABLE IF NOT EXISTS urls (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        original_url TEXT NOT NULL,
        short_code TEXT UNIQUE NOT NULL,
        clicks INTEGER NOT NULL DEFAULT 0,
        created_at TEXT NOT NULL,
        last_accessed TEXT
    );
    CREATE INDEX IF NOT EXISTS idx_urls_created_at ON urls (created_at);
    """

    SELECT_COLUMNS = "id, original_url, short_code, clicks, created_at, last_accessed"

    def __init__(
        self,
        db_config: str,
        busy_timeout_seconds: float = 30.0,
        create_tables: bool = True,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize SQLite store.

        Args:
            db_config: sqlite:///relative/path.db, sqlite:////absolute/path.db or a plain file path
            busy_timeout_seconds: How long a writer waits for the database lock
            create_tables: Create the schema in open()
            logger: Optional logger instance
        """
        super().__init__(db_config, logger)
        self.db_path = self._parse_connection_string(db_config)
        self.busy_timeout_seconds = busy_timeout_seconds
        self.create_tables = create_tables

    @staticmethod
    def _parse_connection_string(db_config: str) -> str:
        if db_config.startswith("sqlite:///"):
            path = db_config[len("sqlite:///"):]
        elif db_config.startswith("sqlite://"):
            path = db_config[len("sqlite://"):]
        else:
            path = db_config
        if not path or path == ":memory:":
            raise ValueError(
                "SQLite store needs a database file; in-memory databases are not shared between connections"
            )
        return path

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        """Open a connection, commit on success, always close."""
        conn = sqlite3.connect(self.db_path, timeout=self.busy_timeout_seconds)
        conn.row_factory = sqlite3.Row
        try:
            with conn:
                yield conn
        finally:
            conn.close()

    async def _run(self, action: str, func: Callable[..., Any], *args: Any) -> Any:
        """Run a blocking database call in the executor, mapping driver errors to StorageError."""
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(None, func, *args)
        except sqlite3.Error as e:
            self.logger.error(f"Error {action}: {e}")
            raise StorageError(f"Error {action}: {e}") from e

    async def open(self) -> None:
        """Create the database file and schema if needed."""
        if not self.create_tables:
            self.logger.debug("Table creation disabled for SQLite store")
            return

        def _init() -> None:
            directory = os.path.dirname(os.path.abspath(self.db_path))
            os.makedirs(directory, exist_ok=True)
            with self._connect() as conn:
                # WAL lets readers proceed while a hit is being written
                conn.execute("PRAGMA journal_mode=WAL")
                conn.executescript(self.CREATE_TABLE_SQL)

        await self._run("creating tables", _init)
        self.logger.info(f"SQLite store ready at {self.db_path}")

    async def create_url(
        self,
        short_code: str,
        original_url: str,
        created_at: Optional[datetime] = None,
    ) -> URLRecord:
        if created_at is None:
            created_at = datetime.now(timezone.utc)
        elif created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)

        def _insert() -> int:
            with self._connect() as conn:
                try:
                    cursor = conn.execute(
                        "INSERT INTO urls (original_url, short_code, clicks, created_at) VALUES (?, ?, 0, ?)",
                        (original_url, short_code, _to_db_timestamp(created_at)),
                    )
                except sqlite3.IntegrityError as e:
                    if "UNIQUE" in str(e).upper():
                        raise DuplicateCodeError(short_code) from e
                    raise
                return cursor.lastrowid

        row_id = await self._run("creating short URL", _insert)
        self.logger.debug(f"Inserted row {row_id}: {short_code} -> {original_url}")

        return URLRecord(
            id=row_id,
            original_url=original_url,
            short_code=short_code,
            clicks=0,
            created_at=created_at.astimezone(timezone.utc),
            last_accessed=None,
        )

    async def lookup(self, short_code: str) -> Optional[URLRecord]:
        def _select() -> Optional[sqlite3.Row]:
            with self._connect() as conn:
                return conn.execute(
                    f"SELECT {self.SELECT_COLUMNS} FROM urls WHERE short_code = ?",
                    (short_code,),
                ).fetchone()

        row = await self._run("looking up short code", _select)
        return URLRecord.from_row(row) if row else None

    async def record_hit(self, short_code: str) -> bool:
        now = _to_db_timestamp(datetime.now(timezone.utc))

        def _update() -> int:
            with self._connect() as conn:
                cursor = conn.execute(
                    "UPDATE urls SET clicks = clicks + 1, last_accessed = ? WHERE short_code = ?",
                    (now, short_code),
                )
                return cursor.rowcount

        updated = await self._run("recording hit", _update)
        if not updated:
            self.logger.debug(f"Hit on unknown short code: {short_code}")
        return updated > 0

    async def list_urls(self, limit: Optional[int] = None) -> List[URLRecord]:
        sql = f"SELECT {self.SELECT_COLUMNS} FROM urls ORDER BY created_at DESC, id DESC"
        params: tuple = ()
        if limit is not None:
            sql += " LIMIT ?"
            params = (limit,)

        def _select_all() -> List[sqlite3.Row]:
            with self._connect() as conn:
                return conn.execute(sql, params).fetchall()

        rows = await self._run("listing URLs", _select_all)
        return [URLRecord.from_row(row) for row in rows]

    async def delete(self, short_code: str) -> bool:
        def _delete() -> int:
            with self._connect() as conn:
                cursor = conn.execute("DELETE FROM urls WHERE short_code = ?", (short_code,))
                return cursor.rowcount

        deleted = await self._run("deleting short URL", _delete)
        return deleted > 0

    async def health_check(self) -> bool:
        def _ping() -> None:
            with self._connect() as conn:
                conn.execute("SELECT 1").fetchone()

        try:
            await self._run("running health check", _ping)
            return True
        except StorageError:
            return False

    async def close(self) -> None:
        # Connections are per operation; nothing is held open
        self.logger.debug("SQLite store closed")
