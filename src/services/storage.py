# persistent key/value store, plays the role browser local storage had
import asyncio
import json
import os
from contextlib import asynccontextmanager
from typing import Any, Dict

import aiosqlite

from utils.constants import STORAGE_PATH
from utils.logger import get_logger

_logger = get_logger(__name__)


class Storage:
    """
    JSON values under string keys, persisted in a single sqlite table.

    Reads are served from an in-memory mirror so they stay synchronous;
    writes go to the mirror and to disk. `load()` must run once before use.
    """

    def __init__(self, path: str = STORAGE_PATH) -> None:
        self.path = path
        self._cache: Dict[str, str] = {}
        self._initialized = False
        self._init_lock = asyncio.Lock()

    @asynccontextmanager
    async def connect(self) -> aiosqlite.Connection:
        """Yield a connection, creating the kv table on first use."""
        folder = os.path.dirname(self.path)
        if folder:
            os.makedirs(folder, exist_ok=True)

        conn = await aiosqlite.connect(self.path)
        if not self._initialized:
            async with self._init_lock:
                if not self._initialized:
                    _logger.debug(f"Preparing storage at {self.path}")
                    await conn.execute(
                        """
                        CREATE TABLE IF NOT EXISTS kv (
                            key   TEXT PRIMARY KEY,
                            value TEXT NOT NULL
                        );
                        """
                    )
                    await conn.commit()
                    self._initialized = True
        try:
            yield conn
        finally:
            await conn.close()

    async def load(self) -> None:
        async with self.connect() as conn:
            cur = await conn.execute("SELECT key, value FROM kv;")
            rows = await cur.fetchall()
            await cur.close()
        self._cache = {row[0]: row[1] for row in rows}
        _logger.debug(f"Loaded {len(self._cache)} stored keys")

    def get(self, key: str, default: Any = None) -> Any:
        raw = self._cache.get(key)
        if raw is None:
            return default
        try:
            return json.loads(raw)
        except (TypeError, ValueError):
            _logger.debug(f"Ignoring malformed value stored under {key!r}")
            return default

    async def set(self, key: str, value: Any) -> None:
        raw = json.dumps(value)
        self._cache[key] = raw
        async with self.connect() as conn:
            await conn.execute(
                "INSERT OR REPLACE INTO kv(key, value) VALUES (?, ?);", (key, raw)
            )
            await conn.commit()

    async def remove(self, key: str) -> None:
        await self.remove_many(key)

    async def remove_many(self, *keys: str) -> None:
        for key in keys:
            self._cache.pop(key, None)
        async with self.connect() as conn:
            await conn.executemany(
                "DELETE FROM kv WHERE key = ?;", [(key,) for key in keys]
            )
            await conn.commit()

    async def clear(self) -> None:
        self._cache.clear()
        async with self.connect() as conn:
            await conn.execute("DELETE FROM kv;")
            await conn.commit()
