"""Metric recording helpers for citation runs."""

from __future__ import annotations

from citation_engine.observability.logger import get_logger

logger = get_logger("metrics")


def log_citation_metrics(
    trace_id: str,
    raw_sources: int,
    unique_sources: int,
    unresolved_sources: int,
    segments: int,
    cited_count: int,
) -> None:
    logger.info(
        "citation_metrics",
        trace_id=trace_id,
        raw_sources=raw_sources,
        unique_sources=unique_sources,
        unresolved_sources=unresolved_sources,
        segments=segments,
        cited_count=cited_count,
    )


def log_latency(trace_id: str, stages: dict[str, float], total_ms: float) -> None:
    logger.info(
        "latency",
        trace_id=trace_id,
        stages=stages,
        total_ms=round(total_ms, 2),
    )
