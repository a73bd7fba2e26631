"""Caching wrappers around the redirect resolver and page metadata fetcher."""

from __future__ import annotations

from dataclasses import asdict

from citation_engine.cache.two_tier import TwoTierCache
from citation_engine.config.constants import DECODED_NAMESPACE, META_NAMESPACE
from citation_engine.models.domain import PageMetadata
from citation_engine.observability.logger import get_logger
from citation_engine.protocols.metadata import PageMetadataFetcher
from citation_engine.resolution.redirects import RedirectResolver, url_host

logger = get_logger("cached_resolver")


class CachedResolver:
    """Wraps a RedirectResolver, checks the cache first, remembers real destinations.

    Only resolutions that reach a non-redirect host are written back, so a
    link that could not be unwrapped is retried on the next request.
    """

    def __init__(self, resolver: RedirectResolver | None = None, cache: TwoTierCache | None = None) -> None:
        self._resolver = resolver or RedirectResolver()
        self._cache = cache

    def is_redirect_host(self, host: str | None) -> bool:
        return self._resolver.is_redirect_host(host)

    async def resolve(self, raw_url: str) -> str:
        if self._cache is not None:
            cached = await self._cache.get(DECODED_NAMESPACE, raw_url)
            if isinstance(cached, str) and cached:
                logger.debug("resolve_cache_hit", url=raw_url)
                return cached

        destination = self._resolver.resolve(raw_url)
        host = url_host(destination)
        if self._cache is not None and host and not self.is_redirect_host(host):
            await self._cache.set(DECODED_NAMESPACE, raw_url, destination)
        return destination


class CachedMetadataFetcher:
    """Wraps any PageMetadataFetcher with the ``meta`` cache namespace.

    A fetcher failure of any kind is logged and reported as no metadata.
    """

    def __init__(self, delegate: PageMetadataFetcher, cache: TwoTierCache) -> None:
        self._delegate = delegate
        self._cache = cache

    async def fetch(self, url: str) -> PageMetadata | None:
        cached = await self._cache.get(META_NAMESPACE, url)
        if isinstance(cached, dict):
            return PageMetadata(
                title=cached.get("title", ""),
                description=cached.get("description", ""),
                image=cached.get("image", ""),
            )

        try:
            meta = await self._delegate.fetch(url)
        except Exception as e:
            logger.warning("metadata_fetch_failed", url=url, error=str(e), error_type=type(e).__name__)
            return None
        if meta is None or meta.is_empty:
            return meta

        await self._cache.set(META_NAMESPACE, url, asdict(meta))
        return meta
