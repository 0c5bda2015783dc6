import sqlite3
import aiosqlite
import os
import datetime
from contextlib import contextmanager, asynccontextmanager
from typing import List, Tuple, Optional


class Database:
    """Provides SQLite connection management and schema initialization."""

    _TABLE_DEFINITIONS = {
        "kv_store": (
            """CREATE TABLE kv_store (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                );""",
            ["key", "value", "updated_at"],
        ),
    }

    def __init__(self, db_path: str | None = None) -> None:
        self._db_path = db_path or os.environ.get("DB_PATH") or "workout.db"
        self._ensure_schema()

    @property
    def db_path(self) -> str:
        return self._db_path

    @contextmanager
    def _connection(self):
        connection = sqlite3.connect(self._db_path)
        try:
            yield connection
            connection.commit()
        finally:
            connection.close()

    def _ensure_schema(self) -> None:
        with self._connection() as conn:
            for table, (sql, columns) in self._TABLE_DEFINITIONS.items():
                self._ensure_table(conn, table, sql, columns)

    def _ensure_table(
        self, conn: sqlite3.Connection, table: str, sql: str, columns: List[str]
    ) -> None:
        cur = conn.execute(
            "SELECT name FROM sqlite_master WHERE type='table' AND name=?;", (table,)
        )
        if cur.fetchone() is None:
            conn.execute(sql)
            return

        cur = conn.execute(f"PRAGMA table_info({table});")
        existing_cols = [row[1] for row in cur.fetchall()]
        if existing_cols == columns:
            return

        conn.execute(f"DROP TABLE IF EXISTS {table}_old;")
        conn.execute(f"ALTER TABLE {table} RENAME TO {table}_old;")
        conn.execute(sql)

        common = [c for c in existing_cols if c in columns]
        if common:
            cols = ", ".join(common)
            missing = [c for c in columns if c not in existing_cols]
            if missing:
                def default_val(col: str) -> str:
                    if col == "updated_at":
                        return "''"
                    return "NULL"

                defaults = ", ".join(default_val(c) for c in missing)
                conn.execute(
                    f"INSERT INTO {table} ({cols}, {', '.join(missing)}) SELECT {cols}, {defaults} FROM {table}_old;"
                )
            else:
                conn.execute(
                    f"INSERT INTO {table} ({cols}) SELECT {cols} FROM {table}_old;"
                )
        conn.execute(f"DROP TABLE {table}_old;")

    def vacuum(self) -> None:
        """Run SQLite VACUUM to reduce database size."""
        with self._connection() as conn:
            conn.execute("VACUUM;")


class BaseRepository(Database):
    """Base repository providing helper methods."""

    def execute(self, query: str, params: Tuple = ()) -> int:
        with self._connection() as conn:
            cursor = conn.cursor()
            cursor.execute(query, params)
            return cursor.lastrowid

    def fetch_all(self, query: str, params: Tuple = ()) -> List[Tuple]:
        with self._connection() as conn:
            cursor = conn.cursor()
            cursor.execute(query, params)
            return cursor.fetchall()

    def _delete_all(self, table: str) -> None:
        self.execute(f"DELETE FROM {table};")


class AsyncDatabase(Database):
    """Provides asynchronous connection management."""

    @asynccontextmanager
    async def _async_connection(self):
        conn = await aiosqlite.connect(self._db_path)
        try:
            yield conn
            await conn.commit()
        finally:
            await conn.close()


class AsyncBaseRepository(AsyncDatabase):
    """Asynchronous variant of BaseRepository using aiosqlite."""

    async def execute(self, query: str, params: Tuple = ()) -> int:
        async with self._async_connection() as conn:
            cursor = await conn.execute(query, params)
            await conn.commit()
            return cursor.lastrowid

    async def fetch_all(self, query: str, params: Tuple = ()) -> List[Tuple]:
        async with self._async_connection() as conn:
            cursor = await conn.execute(query, params)
            rows = await cursor.fetchall()
            return rows

    async def _delete_all(self, table: str) -> None:
        await self.execute(f"DELETE FROM {table};")


def _now() -> str:
    return datetime.datetime.now(datetime.timezone.utc).isoformat()


class KeyValueRepository(BaseRepository):
    """Repository storing opaque text blobs by key."""

    def get(self, key: str) -> Optional[str]:
        rows = self.fetch_all("SELECT value FROM kv_store WHERE key = ?;", (key,))
        return rows[0][0] if rows else None

    def set(self, key: str, value: str) -> None:
        self.execute(
            "INSERT INTO kv_store (key, value, updated_at) VALUES (?, ?, ?) "
            "ON CONFLICT(key) DO UPDATE SET value=excluded.value, updated_at=excluded.updated_at;",
            (key, value, _now()),
        )

    def delete(self, key: str) -> None:
        self.execute("DELETE FROM kv_store WHERE key = ?;", (key,))

    def keys(self, prefix: str = "") -> List[str]:
        rows = self.fetch_all(
            "SELECT key FROM kv_store WHERE key LIKE ? ORDER BY key;",
            (f"{prefix}%",),
        )
        return [r[0] for r in rows]

    def delete_all(self) -> None:
        self._delete_all("kv_store")


class AsyncKeyValueRepository(AsyncBaseRepository):
    """Async repository storing opaque text blobs by key."""

    async def get(self, key: str) -> Optional[str]:
        rows = await self.fetch_all(
            "SELECT value FROM kv_store WHERE key = ?;", (key,)
        )
        return rows[0][0] if rows else None

    async def set(self, key: str, value: str) -> None:
        await self.execute(
            "INSERT INTO kv_store (key, value, updated_at) VALUES (?, ?, ?) "
            "ON CONFLICT(key) DO UPDATE SET value=excluded.value, updated_at=excluded.updated_at;",
            (key, value, _now()),
        )

    async def delete(self, key: str) -> None:
        await self.execute("DELETE FROM kv_store WHERE key = ?;", (key,))
