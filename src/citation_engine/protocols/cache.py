"""Protocol for resolution cache tiers."""

from __future__ import annotations

from typing import Any, Protocol


class CacheTier(Protocol):
    async def get(self, namespace: str, key: str) -> Any | None: ...

    async def set(self, namespace: str, key: str, value: Any) -> None: ...
