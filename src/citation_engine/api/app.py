"""FastAPI application factory with lifespan management."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from citation_engine.api.middleware import RequestTimingMiddleware
from citation_engine.api.routes_citations import router as citations_router
from citation_engine.api.routes_health import router as health_router
from citation_engine.config.settings import Settings
from citation_engine.observability.logger import get_logger, setup_logging
from citation_engine.pipeline.factory import build_cache, build_pipeline

logger = get_logger("app")


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = getattr(app.state, "settings", None) or Settings()
    setup_logging(level=settings.log_level, json_logs=settings.log_json)

    cache = await build_cache(settings)
    pipeline = build_pipeline(settings, cache)

    app.state.settings = settings
    app.state.cache = cache
    app.state.citation_pipeline = pipeline

    logger.info(
        "startup_complete",
        durable_cache=cache.durable is not None,
        renumber=settings.renumber_by_appearance,
    )

    yield

    # Shutdown: let background durable writes land
    await cache.flush()
    logger.info("shutdown_complete")


def create_app(settings: Settings | None = None) -> FastAPI:
    app = FastAPI(
        title="Grounded Citation Engine",
        version="1.0.0",
        description="Resolve grounding sources and place inline citations",
        lifespan=lifespan,
    )
    if settings is not None:
        app.state.settings = settings
    app.add_middleware(RequestTimingMiddleware)
    app.include_router(health_router, tags=["health"])
    app.include_router(citations_router, tags=["citations"])
    return app
