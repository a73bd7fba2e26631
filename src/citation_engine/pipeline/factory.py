"""Wiring helpers shared by the API and the CLI."""

from __future__ import annotations

from pathlib import Path

from citation_engine.cache.cached_resolver import CachedMetadataFetcher, CachedResolver
from citation_engine.cache.memory import MemoryCacheTier
from citation_engine.cache.sqlite_store import SQLiteCacheTier
from citation_engine.cache.two_tier import TwoTierCache
from citation_engine.citations.placement import CitationPlacer
from citation_engine.config.settings import Settings
from citation_engine.exceptions import CacheBackendError
from citation_engine.normalization.source_normalizer import SourceNormalizer
from citation_engine.observability.logger import get_logger
from citation_engine.pipeline.citation_pipeline import CitationPipeline
from citation_engine.protocols.metadata import PageMetadataFetcher
from citation_engine.resolution.redirects import RedirectResolver

logger = get_logger("factory")


async def build_cache(settings: Settings) -> TwoTierCache:
    fast = MemoryCacheTier(max_entries=settings.memory_cache_max_entries)
    if not settings.durable_cache_enabled:
        return TwoTierCache(fast)

    durable = SQLiteCacheTier(settings.durable_cache_db_path)
    try:
        Path(settings.durable_cache_db_path).parent.mkdir(parents=True, exist_ok=True)
        await durable.initialize()
    except (CacheBackendError, OSError) as e:
        logger.warning("durable_cache_unavailable", path=settings.durable_cache_db_path, error=str(e))
        return TwoTierCache(fast)
    return TwoTierCache(fast, durable)


def build_pipeline(
    settings: Settings,
    cache: TwoTierCache | None = None,
    metadata_fetcher: PageMetadataFetcher | None = None,
) -> CitationPipeline:
    if metadata_fetcher is not None and cache is None:
        cache = TwoTierCache(MemoryCacheTier(max_entries=settings.memory_cache_max_entries))
    resolver = CachedResolver(RedirectResolver(settings.redirect_hosts), cache)
    cached_fetcher = None
    if metadata_fetcher is not None:
        cached_fetcher = CachedMetadataFetcher(metadata_fetcher, cache)
    return CitationPipeline(
        normalizer=SourceNormalizer(resolver),
        placer=CitationPlacer(renumber=settings.renumber_by_appearance),
        metadata_fetcher=cached_fetcher,
    )
