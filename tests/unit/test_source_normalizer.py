"""Tests for source normalization and deduplication."""

from __future__ import annotations

from citation_engine.cache.cached_resolver import CachedResolver
from citation_engine.models.domain import RawSource, ResolvedSource
from citation_engine.normalization.source_normalizer import (
    SourceNormalizer,
    derive_domain,
    display_name_for,
    index_remap,
    preferred_site_url,
)


def test_derive_domain_prefers_display_hint():
    source = RawSource(title="bbc.co.uk", url="https://x", display_url_hint="www.NHS.uk")
    assert derive_domain(source, "https://www.cdc.gov/") == "nhs.uk"


def test_derive_domain_skips_redirect_hint():
    source = RawSource(title="webmd.com", url="https://x", display_url_hint="google.com")
    assert derive_domain(source, "https://www.cdc.gov/") == "webmd.com"


def test_derive_domain_from_title_substring():
    source = RawSource(title="Aspirin dosing - www.Drugs.com", url="https://x")
    assert derive_domain(source, "https://www.cdc.gov/") == "drugs.com"


def test_derive_domain_title_that_is_redirect_host():
    source = RawSource(title="google.com", url="https://x")
    assert derive_domain(source, "https://www.cdc.gov/page") == "cdc.gov"


def test_derive_domain_none_when_everything_redirects():
    source = RawSource(title="", url="https://vertexaisearch.cloud.google.com/x")
    assert derive_domain(source, source.url) is None


def test_display_name_for():
    assert display_name_for("youtube.com") == "YouTube"
    assert display_name_for("healthline.com") == "Healthline"
    assert display_name_for("nhs.uk") == "Nhs"
    assert display_name_for(None) == "Source"


def test_preferred_site_url():
    assert preferred_site_url(RawSource(title="", url="u", display_url_hint="nhs.uk"), "") == "https://nhs.uk"
    assert preferred_site_url(RawSource(title="cdc.gov", url="u"), "") == "https://cdc.gov"
    assert (
        preferred_site_url(RawSource(title="Article", url="u"), "https://WWW.who.int/news/1")
        == "https://www.who.int"
    )
    redirect = "https://vertexaisearch.cloud.google.com/grounding-api-redirect/abc"
    assert preferred_site_url(RawSource(title="Article", url=redirect), redirect) == redirect


def test_index_remap():
    sources = [
        ResolvedSource("https://a/", "a", "A", [0, 2]),
        ResolvedSource("https://b/", "b", "B", [1]),
    ]
    assert index_remap(sources) == {0: 1, 2: 1, 1: 2}


async def test_normalize_dedupes_by_canonical_url(make_vertex_link):
    normalizer = SourceNormalizer(CachedResolver())
    sources = [
        RawSource(title="example.com", url=make_vertex_link(b"https://example.com/a")),
        RawSource(title="Example page", url="https://www.google.com/url?q=https://example.com/a"),
    ]
    result = await normalizer.normalize(sources)
    assert len(result) == 1
    assert result[0].canonical_url == "https://example.com/a"
    assert result[0].original_indices == [0, 1]
    assert result[0].title == "example.com"
    assert result[0].resolved


async def test_normalize_unresolvable_redirect_gets_placeholder():
    normalizer = SourceNormalizer(CachedResolver())
    raw = "https://vertexaisearch.cloud.google.com/grounding-api-redirect/%%%"
    result = await normalizer.normalize([RawSource(title="", url=raw)])
    assert result[0].domain is None
    assert result[0].display_name == "Source"
    assert result[0].canonical_url == raw
    assert not result[0].resolved


async def test_normalize_preserves_first_appearance_order(sample_sources):
    normalizer = SourceNormalizer(CachedResolver())
    result = await normalizer.normalize(sample_sources)
    assert [r.original_indices for r in result] == [[0, 2], [1], [3]]
    assert [r.display_name for r in result] == ["Mayo Clinic", "Nhs", "Source"]
    assert result[0].domain == "mayoclinic.org"
    assert result[1].domain == "nhs.uk"


async def test_normalize_loses_no_indices(sample_sources):
    normalizer = SourceNormalizer(CachedResolver())
    result = await normalizer.normalize(sample_sources + sample_sources)
    indices = sorted(i for r in result for i in r.original_indices)
    assert indices == list(range(len(sample_sources) * 2))


async def test_normalize_empty():
    assert await SourceNormalizer(CachedResolver()).normalize([]) == []


async def test_normalize_is_deterministic(sample_sources):
    normalizer = SourceNormalizer(CachedResolver())
    assert await normalizer.normalize(sample_sources) == await normalizer.normalize(sample_sources)


def test_derive_domain_ignores_hint_that_is_not_a_host():
    source = RawSource(title="Article", url="https://x", display_url_hint="Example Site")
    assert derive_domain(source, "https://www.cdc.gov/x") == "cdc.gov"
    assert preferred_site_url(source, "https://www.cdc.gov/x") == "https://www.cdc.gov"


async def test_normalize_non_url_stays_unresolved():
    normalizer = SourceNormalizer(CachedResolver())
    [result] = await normalizer.normalize([RawSource(title="Some title", url="see attached notes")])
    assert result.canonical_url == "see attached notes"
    assert result.domain is None
    assert result.display_name == "Source"
    assert not result.resolved
    assert result.site_url == "see attached notes"
