"""Health check endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from citation_engine.api.dependencies import get_cache
from citation_engine.cache.memory import MemoryCacheTier
from citation_engine.cache.sqlite_store import SQLiteCacheTier
from citation_engine.cache.two_tier import TwoTierCache
from citation_engine.exceptions import CacheBackendError
from citation_engine.models.schemas import CacheHealth, HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health(cache: TwoTierCache = Depends(get_cache)) -> HealthResponse:
    fast = cache.fast
    report = CacheHealth(memory_entries=fast.size if isinstance(fast, MemoryCacheTier) else 0)
    durable = cache.durable
    if isinstance(durable, SQLiteCacheTier):
        try:
            report.durable_entries = await durable.count()
            report.durable_status = "ok"
        except CacheBackendError:
            report.durable_status = "unavailable"
    return HealthResponse(status="ok", cache=report)
