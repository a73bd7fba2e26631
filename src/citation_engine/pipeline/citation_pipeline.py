"""Citation pipeline: resolve and dedupe sources, then annotate the answer."""

from __future__ import annotations

import asyncio

from citation_engine.cache.cached_resolver import CachedMetadataFetcher
from citation_engine.citations.placement import CitationPlacer
from citation_engine.models.domain import CitedAnswer, GroundingSegment, RawSource, ResolvedSource
from citation_engine.normalization.source_normalizer import SourceNormalizer, index_remap
from citation_engine.observability.logger import get_logger
from citation_engine.observability.metrics import log_citation_metrics, log_latency
from citation_engine.observability.tracing import CitationTrace

logger = get_logger("citation_pipeline")


class CitationPipeline:
    def __init__(
        self,
        normalizer: SourceNormalizer,
        placer: CitationPlacer,
        metadata_fetcher: CachedMetadataFetcher | None = None,
    ) -> None:
        self._normalizer = normalizer
        self._placer = placer
        self._metadata = metadata_fetcher

    async def run(
        self,
        text: str,
        sources: list[RawSource],
        segments: list[GroundingSegment],
    ) -> CitedAnswer:
        trace = CitationTrace()

        # STEP 1: Resolve + dedupe sources
        with trace.stage("normalize_sources", count=len(sources)):
            resolved = await self._normalizer.normalize(sources)

        # STEP 2: Place markers using original indices remapped to list positions
        with trace.stage("place_citations", segments=len(segments)):
            placement = self._placer.place(text, segments, index_remap(resolved))

        # STEP 3: List position must equal the printed number
        if self._placer.renumber:
            resolved = reorder_by_appearance(resolved, placement.order)

        # STEP 4: Optional card metadata
        if self._metadata is not None and resolved:
            with trace.stage("fetch_metadata", count=len(resolved)):
                await self._attach_metadata(resolved)

        log_citation_metrics(
            trace_id=trace.trace_id,
            raw_sources=len(sources),
            unique_sources=len(resolved),
            unresolved_sources=sum(1 for s in resolved if not s.resolved),
            segments=len(segments),
            cited_count=placement.cited_count,
        )
        log_latency(trace.trace_id, trace.stage_durations(), trace.elapsed_ms)

        return CitedAnswer(
            text=text,
            annotated_text=placement.annotated_text,
            cited_count=placement.cited_count,
            sources=resolved,
            trace_id=trace.trace_id,
        )

    async def _attach_metadata(self, sources: list[ResolvedSource]) -> None:
        urls = [s.canonical_url if s.resolved else s.site_url for s in sources]
        results = await asyncio.gather(*(self._metadata.fetch(url) for url in urls))
        for source, meta in zip(sources, results):
            if meta is not None and not meta.is_empty:
                source.metadata = meta


def reorder_by_appearance(sources: list[ResolvedSource], order: list[int]) -> list[ResolvedSource]:
    """Cited sources in order of first appearance, then uncited ones in list order."""
    cited = set(order)
    return [sources[n - 1] for n in order] + [
        s for position, s in enumerate(sources, start=1) if position not in cited
    ]
