"""Two-tier resolution cache: fast local tier in front of a durable tier."""

from __future__ import annotations

import asyncio
from typing import Any

from citation_engine.observability.logger import get_logger
from citation_engine.protocols.cache import CacheTier

logger = get_logger("resolution_cache")


class TwoTierCache:
    """Reads fast -> durable -> miss; writes fast now and durable in the background.

    A durable hit is copied into the fast tier. Durable failures are logged
    and treated as a miss (reads) or dropped (writes); they never reach the
    caller.
    """

    def __init__(self, fast: CacheTier, durable: CacheTier | None = None) -> None:
        self._fast = fast
        self._durable = durable
        self._pending: set[asyncio.Task] = set()

    @property
    def fast(self) -> CacheTier:
        return self._fast

    @property
    def durable(self) -> CacheTier | None:
        return self._durable

    async def get(self, namespace: str, key: str) -> Any | None:
        value = await self._fast.get(namespace, key)
        if value is not None or self._durable is None:
            return value

        try:
            value = await self._durable.get(namespace, key)
        except Exception as e:
            logger.warning("cache_durable_read_failed", namespace=namespace, error=str(e))
            return None
        if value is not None:
            await self._fast.set(namespace, key, value)
        return value

    async def set(self, namespace: str, key: str, value: Any) -> None:
        await self._fast.set(namespace, key, value)
        if self._durable is None:
            return
        task = asyncio.create_task(self._write_durable(namespace, key, value))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def flush(self) -> None:
        """Wait for background durable writes issued so far."""
        if self._pending:
            await asyncio.gather(*list(self._pending))

    async def _write_durable(self, namespace: str, key: str, value: Any) -> None:
        try:
            await self._durable.set(namespace, key, value)
        except Exception as e:
            logger.warning("cache_durable_write_failed", namespace=namespace, error=str(e))
