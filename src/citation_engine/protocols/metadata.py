"""Protocol for page metadata fetchers (og:title/description/image)."""

from __future__ import annotations

from typing import Protocol

from citation_engine.models.domain import PageMetadata


class PageMetadataFetcher(Protocol):
    async def fetch(self, url: str) -> PageMetadata | None:
        """Return metadata for ``url``; raise MetadataFetchError on failure."""
        ...
