"""Protocol for URL resolvers used by the source normalizer."""

from __future__ import annotations

from typing import Protocol


class SourceResolver(Protocol):
    async def resolve(self, raw_url: str) -> str: ...

    def is_redirect_host(self, host: str | None) -> bool: ...
