"""Extract card-preview metadata (title/description/image) from fetched HTML.

``parse_page_metadata`` is the building block for fetcher implementations;
``HtmlFileFetcher`` serves pages already saved on disk.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from citation_engine.config.constants import META_DESCRIPTION_MAX_CHARS, META_TITLE_MAX_CHARS
from citation_engine.exceptions import MetadataFetchError
from citation_engine.models.domain import PageMetadata
from citation_engine.normalization.predicates import looks_like_token
from citation_engine.resolution.redirects import normalize_url

TITLE_SELECTORS = [
    'meta[property="og:title"]',
    'meta[name="twitter:title"]',
    'meta[name="title"]',
    'meta[property="title"]',
]
DESCRIPTION_SELECTORS = [
    'meta[property="og:description"]',
    'meta[name="twitter:description"]',
    'meta[name="description"]',
    'meta[property="description"]',
]
IMAGE_SELECTORS = [
    'meta[property="og:image:secure_url"]',
    'meta[property="og:image"]',
    'meta[name="twitter:image:src"]',
    'meta[name="twitter:image"]',
    'meta[name="image"]',
]


def _first_content(soup: BeautifulSoup, selectors: list[str]) -> str:
    for selector in selectors:
        tag = soup.select_one(selector)
        if tag is not None:
            value = (tag.get("content") or "").strip()
            if value:
                return value
    return ""


def _json_ld(soup: BeautifulSoup) -> dict[str, str]:
    """First headline/name/description/image string found in any JSON-LD block."""
    found: dict[str, str] = {}

    def scan(obj: object) -> None:
        if isinstance(obj, list):
            for item in obj:
                scan(item)
            return
        if not isinstance(obj, dict):
            return
        for field in ("headline", "name", "description", "image"):
            value = obj.get(field)
            if isinstance(value, str) and field not in found:
                found[field] = value
        for value in obj.values():
            scan(value)

    for script in soup.find_all("script", attrs={"type": "application/ld+json"}):
        try:
            scan(json.loads(script.string or "{}"))
        except (ValueError, RecursionError):
            continue
    return found


def parse_page_metadata(html: str, base_url: str) -> PageMetadata:
    soup = BeautifulSoup(html, "html.parser")
    ld = _json_ld(soup)

    title = soup.title.get_text(strip=True) if soup.title else ""
    if not title:
        title = _first_content(soup, TITLE_SELECTORS) or ld.get("headline") or ld.get("name") or ""
    if not title:
        h1 = soup.find("h1")
        title = h1.get_text(strip=True) if h1 else ""

    description = _first_content(soup, DESCRIPTION_SELECTORS) or ld.get("description") or ""

    image = _first_content(soup, IMAGE_SELECTORS)
    if not image:
        link = soup.find("link", rel="image_src")
        image = (link.get("href") or "").strip() if link else ""
    image = image or ld.get("image") or ""
    if image and not image.lower().startswith(("http://", "https://")):
        image = urljoin(base_url, image)

    title = title.strip()[:META_TITLE_MAX_CHARS]
    description = description.strip()[:META_DESCRIPTION_MAX_CHARS]
    return PageMetadata(
        title="" if looks_like_token(title) else title,
        description="" if looks_like_token(description) else description,
        image=image,
    )


class HtmlFileFetcher:
    """PageMetadataFetcher over local HTML files keyed by page URL."""

    def __init__(self, pages: dict[str, str | Path]) -> None:
        self._pages = {normalize_url(url): Path(path) for url, path in pages.items()}

    async def fetch(self, url: str) -> PageMetadata | None:
        path = self._pages.get(normalize_url(url))
        if path is None:
            return None
        try:
            html = await asyncio.to_thread(path.read_text, encoding="utf-8", errors="replace")
        except OSError as e:
            raise MetadataFetchError(f"cannot read {path}: {e}") from e
        return parse_page_metadata(html, url)
