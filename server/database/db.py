"""SQLite readings backend"""
import sqlite3
from datetime import datetime, timezone
from typing import Optional

import aiosqlite
from config.logger import get_logger
from config.settings import READINGS_TABLE
from database.source import (
    DataSourceUnavailable,
    InsertCallback,
    StatusCallback,
    Subscriptions,
    Unsubscribe,
)
from models.schemas import Reading
from pydantic import ValidationError

logger = get_logger("db")


def _as_utc(moment: datetime) -> datetime:
    # Stored as ISO text, so a single offset keeps ORDER BY chronological
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


class SQLiteReadingsSource:
    """
    Stores readings in SQLite and notifies subscribers of every insert.

    Notifications are in-process: only inserts made through this instance
    reach its subscribers.
    """

    def __init__(self, db_path: str, table: str = READINGS_TABLE):
        self.db_path = str(db_path)
        self.table = table
        self.subscriptions = Subscriptions()

    async def init_db(self):
        """Create the readings table (async)"""
        try:
            async with aiosqlite.connect(self.db_path) as db:
                await db.execute(f"""
                    CREATE TABLE IF NOT EXISTS {self.table} (
                        id INTEGER PRIMARY KEY AUTOINCREMENT,
                        temperature REAL,
                        humidity REAL,
                        sound_value REAL,
                        created_at TEXT NOT NULL
                    )
                """)
                await db.execute(f"""
                    CREATE INDEX IF NOT EXISTS idx_{self.table}_created_at
                    ON {self.table}(created_at)
                """)
                await db.commit()
        except (sqlite3.Error, OSError) as e:
            raise DataSourceUnavailable(f"Cannot initialise {self.db_path}: {e}") from e

    async def fetch_recent(self, limit: int) -> list[Reading]:
        """Most recent readings, newest first"""
        try:
            async with aiosqlite.connect(self.db_path) as db:
                db.row_factory = aiosqlite.Row
                cursor = await db.execute(
                    f"""
                    SELECT id, temperature, humidity, sound_value, created_at
                    FROM {self.table}
                    ORDER BY created_at DESC, id DESC
                    LIMIT ?
                    """,
                    (limit,),
                )
                rows = await cursor.fetchall()
            return [Reading(**dict(row)) for row in rows]
        except (sqlite3.Error, OSError, ValidationError) as e:
            logger.error(f"Query error: {e}")
            raise DataSourceUnavailable(str(e)) from e

    async def insert(self, reading: Reading) -> Reading:
        """Persist a reading and notify subscribers with the stored row"""
        created_at = _as_utc(reading.created_at or datetime.now(timezone.utc))
        try:
            async with aiosqlite.connect(self.db_path) as db:
                cursor = await db.execute(
                    f"""
                    INSERT INTO {self.table} (temperature, humidity, sound_value, created_at)
                    VALUES (?, ?, ?, ?)
                    """,
                    (
                        reading.temperature,
                        reading.humidity,
                        reading.sound_value,
                        created_at.isoformat(),
                    ),
                )
                await db.commit()
                row_id = cursor.lastrowid
        except (sqlite3.Error, OSError) as e:
            logger.error(f"SQLite insert error: {e}", exc_info=True)
            raise DataSourceUnavailable(str(e)) from e

        stored = reading.model_copy(update={"id": row_id, "created_at": created_at})
        self.subscriptions.notify(stored)
        return stored

    async def subscribe_inserts(
        self,
        on_insert: InsertCallback,
        on_status: Optional[StatusCallback] = None,
    ) -> Unsubscribe:
        unsubscribe = self.subscriptions.add(on_insert, on_status)
        logger.info(f"Insert subscription opened on {self.table} (total: {len(self.subscriptions)})")
        return unsubscribe

    async def count(self) -> int:
        """Get total number of stored readings"""
        try:
            async with aiosqlite.connect(self.db_path) as db:
                cursor = await db.execute(f"SELECT COUNT(*) FROM {self.table}")
                row = await cursor.fetchone()
                return row[0] if row else 0
        except (sqlite3.Error, OSError) as e:
            raise DataSourceUnavailable(str(e)) from e
