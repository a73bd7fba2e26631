"""Resolve, deduplicate and name grounding sources."""

from __future__ import annotations

import asyncio

from citation_engine.config.constants import SITE_NAMES, SOURCE_PLACEHOLDER
from citation_engine.models.domain import RawSource, ResolvedSource
from citation_engine.normalization.predicates import find_domain, is_domain_like, strip_www
from citation_engine.observability.logger import get_logger
from citation_engine.protocols.resolver import SourceResolver
from citation_engine.resolution.redirects import is_redirect_host as default_is_redirect_host
from citation_engine.resolution.redirects import parse_url, url_host

logger = get_logger("source_normalizer")


def _ensure_http(value: str) -> str:
    value = value.strip()
    return value if value.lower().startswith(("http://", "https://")) else f"https://{value}"


def derive_domain(source: RawSource, resolved_url: str, is_redirect_host=default_is_redirect_host) -> str | None:
    """Pick the lowercase, www-less domain that best names ``source``.

    Priority: display URL hint, domain-shaped title, domain found inside the
    title, resolved URL host. Redirect hosts never qualify.
    """
    hint = (source.display_url_hint or "").strip()
    if hint:
        host = url_host(hint)
        if host and not is_redirect_host(host):
            return strip_www(host)

    title = (source.title or "").strip()
    if is_domain_like(title) and not is_redirect_host(title):
        return strip_www(title.lower())
    found = find_domain(title)
    if found and not is_redirect_host(found):
        return strip_www(found.lower())

    host = url_host(resolved_url)
    if host and not is_redirect_host(host):
        return strip_www(host)
    return None


def display_name_for(domain: str | None) -> str:
    if not domain:
        return SOURCE_PLACEHOLDER
    known = SITE_NAMES.get(domain)
    if known:
        return known
    label = domain.split(".")[0]
    return (label[:1].upper() + label[1:]) or SOURCE_PLACEHOLDER


def preferred_site_url(source: RawSource, resolved_url: str, is_redirect_host=default_is_redirect_host) -> str:
    """Best non-redirect ``https://host`` for links and favicons."""
    hint = (source.display_url_hint or "").strip()
    if hint and url_host(hint):
        return _ensure_http(hint)
    title = (source.title or "").strip()
    if is_domain_like(title):
        return _ensure_http(title)
    parts = parse_url(resolved_url)
    if parts is not None and parts.hostname and not is_redirect_host(parts.hostname):
        return f"{parts.scheme.lower()}://{parts.hostname.lower()}"
    return _ensure_http(source.url) if parse_url(source.url) else source.url


def index_remap(sources: list[ResolvedSource]) -> dict[int, int]:
    """Map each original source index to its 1-based position in ``sources``."""
    remap: dict[int, int] = {}
    for position, source in enumerate(sources, start=1):
        for index in source.original_indices:
            remap[index] = position
    return remap


class SourceNormalizer:
    def __init__(self, resolver: SourceResolver) -> None:
        self._resolver = resolver

    async def normalize(self, sources: list[RawSource]) -> list[ResolvedSource]:
        if not sources:
            return []

        destinations = await asyncio.gather(*(self._resolver.resolve(s.url) for s in sources))
        is_redirect = self._resolver.is_redirect_host

        groups: dict[str, ResolvedSource] = {}
        for index, (source, destination) in enumerate(zip(sources, destinations)):
            host = url_host(destination)
            resolved = host is not None and not is_redirect(host)
            canonical = destination if resolved else source.url

            existing = groups.get(canonical)
            if existing is not None:
                existing.original_indices.append(index)
                continue

            domain = derive_domain(source, canonical, is_redirect)
            groups[canonical] = ResolvedSource(
                canonical_url=canonical,
                domain=domain,
                display_name=display_name_for(domain),
                original_indices=[index],
                title=source.title or "",
                snippet=source.snippet,
                site_url=preferred_site_url(source, canonical, is_redirect),
                resolved=resolved,
            )

        result = list(groups.values())
        logger.info(
            "sources_normalized",
            total=len(sources),
            unique=len(result),
            unresolved=sum(1 for r in result if not r.resolved),
        )
        return result
