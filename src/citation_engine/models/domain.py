"""Core domain objects used throughout the system."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class RawSource:
    title: str
    url: str
    snippet: str | None = None
    display_url_hint: str | None = None


@dataclass(frozen=True)
class GroundingSegment:
    text_start: int
    text_end: int  # exclusive
    source_indices: tuple[int, ...] = ()


@dataclass
class ResolvedSource:
    canonical_url: str
    domain: str | None
    display_name: str
    original_indices: list[int] = field(default_factory=list)
    title: str = ""
    snippet: str | None = None
    site_url: str = ""
    resolved: bool = False  # True when the canonical URL is a real destination
    metadata: PageMetadata | None = None


@dataclass
class CitationGroup:
    paragraph_end_offset: int
    citation_numbers: list[int]  # ascending, unique


@dataclass
class PlacementResult:
    annotated_text: str
    cited_count: int
    groups: list[CitationGroup]
    order: list[int]  # remapped numbers in order of first appearance


@dataclass
class PageMetadata:
    title: str = ""
    description: str = ""
    image: str = ""

    @property
    def is_empty(self) -> bool:
        return not (self.title or self.description or self.image)


@dataclass
class CitedAnswer:
    text: str
    annotated_text: str
    cited_count: int
    sources: list[ResolvedSource]
    trace_id: str = ""
