"""Citation endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from citation_engine.api.dependencies import get_citation_pipeline, get_settings
from citation_engine.config.settings import Settings
from citation_engine.exceptions import CitationEngineError
from citation_engine.models.schemas import CitationRequest, CitationResponse, SourceOut
from citation_engine.pipeline.citation_pipeline import CitationPipeline

router = APIRouter()


@router.post("/v1/citations", response_model=CitationResponse)
async def cite(
    request: CitationRequest,
    pipeline: CitationPipeline = Depends(get_citation_pipeline),
    settings: Settings = Depends(get_settings),
) -> CitationResponse:
    try:
        result = await pipeline.run(
            text=request.text,
            sources=request.raw_sources(),
            segments=request.grounding_segments(request.offset_unit or settings.default_offset_unit),
        )
    except CitationEngineError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return CitationResponse(
        annotated_text=result.annotated_text,
        cited_count=result.cited_count,
        sources=[SourceOut.from_resolved(n, s) for n, s in enumerate(result.sources, start=1)],
        trace_id=result.trace_id,
    )
