"""Bounded in-process LRU tier for the resolution cache."""

from __future__ import annotations

import threading
from collections import OrderedDict
from typing import Any


class MemoryCacheTier:
    def __init__(self, max_entries: int = 2048) -> None:
        self._max_entries = max(1, max_entries)
        self._entries: OrderedDict[tuple[str, str], Any] = OrderedDict()
        self._lock = threading.Lock()

    @property
    def size(self) -> int:
        return len(self._entries)

    async def get(self, namespace: str, key: str) -> Any | None:
        with self._lock:
            value = self._entries.get((namespace, key))
            if value is not None:
                self._entries.move_to_end((namespace, key))
            return value

    async def set(self, namespace: str, key: str, value: Any) -> None:
        with self._lock:
            self._entries[(namespace, key)] = value
            self._entries.move_to_end((namespace, key))
            while len(self._entries) > self._max_entries:
                self._entries.popitem(last=False)
