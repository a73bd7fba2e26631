"""FastAPI dependency injection helpers."""

from __future__ import annotations

from fastapi import Request

from citation_engine.cache.two_tier import TwoTierCache
from citation_engine.config.settings import Settings
from citation_engine.pipeline.citation_pipeline import CitationPipeline


def get_citation_pipeline(request: Request) -> CitationPipeline:
    return request.app.state.citation_pipeline


def get_cache(request: Request) -> TwoTierCache:
    return request.app.state.cache


def get_settings(request: Request) -> Settings:
    return request.app.state.settings
