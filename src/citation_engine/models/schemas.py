"""Pydantic models for provider grounding metadata and API serialization."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from citation_engine.exceptions import ConfigurationError
from citation_engine.models.domain import GroundingSegment, RawSource, ResolvedSource

OffsetUnit = Literal["char", "byte"]


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class WebChunk(_CamelModel):
    uri: str = ""
    title: str = ""
    domain: str | None = None


class GroundingChunk(_CamelModel):
    web: WebChunk | None = None


class Segment(_CamelModel):
    start_index: int = Field(default=0, alias="startIndex")
    end_index: int = Field(default=0, alias="endIndex")
    text: str | None = None


class GroundingSupport(_CamelModel):
    segment: Segment
    grounding_chunk_indices: list[int] = Field(default_factory=list, alias="groundingChunkIndices")


class GroundingMetadata(_CamelModel):
    grounding_chunks: list[GroundingChunk] = Field(default_factory=list, alias="groundingChunks")
    grounding_supports: list[GroundingSupport] = Field(default_factory=list, alias="groundingSupports")

    def to_sources(self) -> list[RawSource]:
        """One RawSource per chunk, positions preserved (non-web chunks become empty sources)."""
        sources = []
        for chunk in self.grounding_chunks:
            web = chunk.web or WebChunk()
            sources.append(RawSource(title=web.title, url=web.uri, display_url_hint=web.domain))
        return sources

    def to_segments(self, text: str, offset_unit: OffsetUnit = "char") -> list[GroundingSegment]:
        spans = [
            (s.segment.start_index, s.segment.end_index, s.grounding_chunk_indices)
            for s in self.grounding_supports
        ]
        return segments_from_spans(text, spans, offset_unit)


def byte_to_char_offsets(text: str) -> dict[int, int]:
    """Map every UTF-8 byte offset that starts a character (plus the end) to its char offset."""
    mapping: dict[int, int] = {}
    byte_offset = 0
    for char_offset, ch in enumerate(text):
        mapping[byte_offset] = char_offset
        byte_offset += len(ch.encode("utf-8", errors="surrogatepass"))
    mapping[byte_offset] = len(text)
    return mapping


def segments_from_spans(
    text: str,
    spans: list[tuple[int, int, list[int]]],
    offset_unit: OffsetUnit = "char",
) -> list[GroundingSegment]:
    """Build GroundingSegments from (start, end, indices), converting byte offsets to chars."""
    if offset_unit == "char":
        convert = None
    elif offset_unit == "byte":
        convert = byte_to_char_offsets(text)
    else:
        raise ConfigurationError(f"unknown offset unit: {offset_unit!r}")

    segments = []
    for start, end, indices in spans:
        if convert is not None:
            # offsets inside a multi-byte character cannot be mapped; mark them out of range
            start = convert.get(start, -1)
            end = convert.get(end, len(text) + 1)
        segments.append(GroundingSegment(text_start=start, text_end=end, source_indices=tuple(indices)))
    return segments


class SourceIn(_CamelModel):
    title: str = ""
    url: str
    snippet: str | None = None
    display_url: str | None = Field(default=None, alias="displayUrl")


class SegmentIn(_CamelModel):
    text_start: int = Field(alias="textStart")
    text_end: int = Field(alias="textEnd")
    source_indices: list[int] = Field(default_factory=list, alias="sourceIndices")


class CitationRequest(_CamelModel):
    text: str
    grounding_metadata: GroundingMetadata | None = Field(default=None, alias="groundingMetadata")
    sources: list[SourceIn] = Field(default_factory=list)
    segments: list[SegmentIn] = Field(default_factory=list)
    offset_unit: OffsetUnit | None = Field(default=None, alias="offsetUnit")

    def raw_sources(self) -> list[RawSource]:
        if self.grounding_metadata is not None:
            return self.grounding_metadata.to_sources()
        return [
            RawSource(title=s.title, url=s.url, snippet=s.snippet, display_url_hint=s.display_url)
            for s in self.sources
        ]

    def grounding_segments(self, offset_unit: OffsetUnit = "char") -> list[GroundingSegment]:
        if self.grounding_metadata is not None:
            return self.grounding_metadata.to_segments(self.text, offset_unit)
        spans = [(s.text_start, s.text_end, s.source_indices) for s in self.segments]
        return segments_from_spans(self.text, spans, offset_unit)


class PageMetadataOut(BaseModel):
    title: str = ""
    description: str = ""
    image: str = ""


class SourceOut(BaseModel):
    number: int
    canonical_url: str
    domain: str | None
    display_name: str
    site_url: str
    title: str
    snippet: str | None = None
    resolved: bool
    original_indices: list[int]
    metadata: PageMetadataOut | None = None

    @classmethod
    def from_resolved(cls, number: int, source: ResolvedSource) -> SourceOut:
        meta = source.metadata
        return cls(
            number=number,
            canonical_url=source.canonical_url,
            domain=source.domain,
            display_name=source.display_name,
            site_url=source.site_url,
            title=source.title,
            snippet=source.snippet,
            resolved=source.resolved,
            original_indices=list(source.original_indices),
            metadata=PageMetadataOut(title=meta.title, description=meta.description, image=meta.image)
            if meta is not None
            else None,
        )


class CitationResponse(BaseModel):
    annotated_text: str
    cited_count: int
    sources: list[SourceOut]
    trace_id: str


class CacheHealth(BaseModel):
    memory_entries: int
    durable_entries: int | None = None
    durable_status: Literal["ok", "disabled", "unavailable"] = "disabled"


class HealthResponse(BaseModel):
    status: str
    cache: CacheHealth
