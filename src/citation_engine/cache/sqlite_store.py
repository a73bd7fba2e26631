"""SQLite-backed durable tier: raw URL -> canonical URL / page metadata."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any

import aiosqlite

from citation_engine.exceptions import CacheBackendError

CREATE_CACHE_TABLE = """
CREATE TABLE IF NOT EXISTS resolution_cache (
    namespace TEXT NOT NULL,
    cache_key TEXT NOT NULL,
    value TEXT NOT NULL,
    created_at TEXT NOT NULL,
    PRIMARY KEY (namespace, cache_key)
)
"""


class SQLiteCacheTier:
    def __init__(self, db_path: str) -> None:
        self._db_path = db_path

    async def initialize(self) -> None:
        try:
            async with aiosqlite.connect(self._db_path) as db:
                await db.execute(CREATE_CACHE_TABLE)
                await db.commit()
        except (aiosqlite.Error, OSError) as e:
            raise CacheBackendError(f"cannot initialize cache at {self._db_path}: {e}") from e

    async def get(self, namespace: str, key: str) -> Any | None:
        try:
            async with aiosqlite.connect(self._db_path) as db:
                async with db.execute(
                    "SELECT value FROM resolution_cache WHERE namespace = ? AND cache_key = ?",
                    (namespace, key),
                ) as cursor:
                    row = await cursor.fetchone()
        except (aiosqlite.Error, OSError) as e:
            raise CacheBackendError(f"cache read failed: {e}") from e
        if row is None:
            return None
        return json.loads(row[0])

    async def set(self, namespace: str, key: str, value: Any) -> None:
        try:
            async with aiosqlite.connect(self._db_path) as db:
                await db.execute(
                    "INSERT OR REPLACE INTO resolution_cache (namespace, cache_key, value, created_at) "
                    "VALUES (?, ?, ?, ?)",
                    (namespace, key, json.dumps(value), datetime.now(timezone.utc).isoformat()),
                )
                await db.commit()
        except (aiosqlite.Error, OSError) as e:
            raise CacheBackendError(f"cache write failed: {e}") from e

    async def count(self) -> int:
        try:
            async with aiosqlite.connect(self._db_path) as db:
                async with db.execute("SELECT COUNT(*) FROM resolution_cache") as cursor:
                    row = await cursor.fetchone()
        except (aiosqlite.Error, OSError) as e:
            raise CacheBackendError(f"cache count failed: {e}") from e
        return row[0] if row else 0
