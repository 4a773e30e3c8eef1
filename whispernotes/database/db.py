"""
Durable local storage: one SQLite key-value namespace shared by all stores.
"""

from datetime import datetime, timezone
from pathlib import Path

import aiosqlite

from whispernotes.logging import get_logger

logger = get_logger('database')

SCHEMA = """
CREATE TABLE IF NOT EXISTS kv_store (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT NOT NULL
)
"""


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class LocalStorage:
    """
    Key-value blob storage. Each store owns exactly one key and never reads
    or writes another store's key.
    """

    def __init__(self, db_path: str):
        self.db_path = db_path

    async def initialize(self):
        """
        Create the database file and schema if missing.

        A file that is not an SQLite database is moved aside to
        ``<path>.corrupt-<timestamp>`` and a fresh database is created in its place.

        :return: None
        :rtype: None
        :raises aiosqlite.Error: If the database cannot be opened at all
        """
        path = Path(self.db_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        try:
            await self._create_schema()
        except aiosqlite.DatabaseError as e:
            # Locked or unopenable files raise OperationalError and are left in place.
            if isinstance(e, aiosqlite.OperationalError) or not path.is_file():
                raise
            stamp = datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S")
            moved = path.replace(path.with_name(f"{path.name}.corrupt-{stamp}"))
            logger.warning(f"Storage at {self.db_path} is unreadable ({e}); moved it to {moved}")
            await self._create_schema()
        logger.info(f"Local storage initialized at {self.db_path}")

    async def _create_schema(self) -> None:
        async with aiosqlite.connect(self.db_path) as db:
            await db.execute(SCHEMA)
            await db.commit()

    async def get_item(self, key: str) -> str | None:
        """
        Read the blob stored under a key.

        :param key: Storage key
        :type key: str
        :return: The stored text, or None when the key is absent
        :rtype: str | None
        """
        async with aiosqlite.connect(self.db_path) as db:
            cursor = await db.execute("SELECT value FROM kv_store WHERE key = ?", (key,))
            row = await cursor.fetchone()
            return row[0] if row else None

    async def set_item(self, key: str, value: str) -> None:
        async with aiosqlite.connect(self.db_path) as db:
            await db.execute(
                """INSERT INTO kv_store (key, value, updated_at) VALUES (?, ?, ?)
                   ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at""",
                (key, value, _now()),
            )
            await db.commit()

    async def remove_item(self, key: str) -> bool:
        async with aiosqlite.connect(self.db_path) as db:
            cursor = await db.execute("DELETE FROM kv_store WHERE key = ?", (key,))
            await db.commit()
            return cursor.rowcount > 0

    async def keys(self) -> list[str]:
        async with aiosqlite.connect(self.db_path) as db:
            cursor = await db.execute("SELECT key FROM kv_store ORDER BY key")
            rows = await cursor.fetchall()
            return [row[0] for row in rows]
