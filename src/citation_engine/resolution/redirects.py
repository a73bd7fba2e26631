"""Redirect resolution: undo provider and search-engine link wrapping.

A grounded answer cites its sources through indirection links. Three shapes
are recognised, tried in order:

1. Aggregator links whose last path segment (after the
   ``grounding-api-redirect`` marker) is a base64url token. The token is
   decoded and searched for an embedded ``http(s)://`` URL.
2. Redirect-style links (custom ``grounding*``/``vertex*``/``genai*`` schemes,
   search-engine redirect hosts) carrying the destination in a query
   parameter.
3. Anything else, which is re-serialised so equivalent spellings of the same
   URL compare equal.

``resolve`` never raises; every failure falls back to the next strategy and
ultimately to the input string.
"""

from __future__ import annotations

import base64
import binascii
import json
import re
from urllib.parse import SplitResult, parse_qs, unquote, urlsplit, urlunsplit

from citation_engine.config.constants import (
    AGGREGATOR_HOSTS,
    AGGREGATOR_PATH_MARKER,
    DESTINATION_PARAMS,
    REDIRECT_HOST_SUFFIXES,
    REDIRECT_HOSTS,
    REDIRECT_SCHEME_PREFIXES,
    SEARCH_REDIRECT_PATHS,
)
from citation_engine.exceptions import DecodeError
from citation_engine.observability.logger import get_logger

logger = get_logger("redirects")

URL_RE = re.compile(r"https?://[\w\-._~:/?#\[\]@!$&'()*+,;=%]+", re.ASCII)
ENCODED_URL_RE = re.compile(r"https?%3A%2F%2F[0-9A-Za-z%._\-~/?#=&+]+", re.IGNORECASE)
_HTTP_PREFIX_RE = re.compile(r"^https?://", re.IGNORECASE)
_HOSTLIKE_RE = re.compile(r"^(?:[a-z0-9-]+\.)+[a-z]{2,}(?::\d+)?(?:[/?#]|$)", re.IGNORECASE)


def decode_base64url(token: str) -> str:
    """Decode a base64url token (unpadded or padded) into UTF-8 text.

    Invalid UTF-8 sequences are replaced rather than rejected; provider
    tokens are often binary envelopes with a URL embedded in them.
    """
    normalized = token.strip().rstrip("=").replace("-", "+").replace("_", "/")
    if not normalized:
        raise DecodeError("empty base64url token")
    normalized += "=" * (-len(normalized) % 4)
    try:
        raw = base64.b64decode(normalized, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodeError(f"invalid base64url token: {e}") from e
    return raw.decode("utf-8", errors="replace")


def extract_embedded_url(text: str) -> str | None:
    """Find the first http(s) URL hidden in a blob of decoded text."""
    match = URL_RE.search(text)
    if match:
        return match.group(0)

    match = ENCODED_URL_RE.search(text)
    if match:
        return unquote(match.group(0))

    match = URL_RE.search(unquote(text))
    if match:
        return match.group(0)

    try:
        data = json.loads(text)
    except (ValueError, RecursionError):
        return None
    return _scan_json(data)


def _scan_json(value: object) -> str | None:
    if isinstance(value, str):
        match = URL_RE.search(value)
        return match.group(0) if match else None
    if isinstance(value, dict):
        value = list(value.values())
    if isinstance(value, list):
        for item in value:
            found = _scan_json(item)
            if found:
                return found
    return None


def parse_url(raw: str) -> SplitResult | None:
    """Parse ``raw`` as a URL with a scheme and authority, retrying with https://.

    A parse only counts when the host is a plausible hostname (letters, digits,
    dots, hyphens) or a bracketed IPv6 literal; "not a url" does not parse.
    """
    candidate = raw.strip()
    if not candidate:
        return None
    attempts = [candidate] if "://" in candidate else [candidate, f"https://{candidate}"]
    for attempt in attempts:
        try:
            parts = urlsplit(attempt)
        except ValueError:
            continue
        if parts.scheme and parts.netloc and _valid_host(parts):
            return parts
    return None


def _valid_host(parts: SplitResult) -> bool:
    host = parts.hostname
    if not host:
        return False
    if ":" in host:
        return "[" in parts.netloc
    return all(ch.isalnum() or ch in ".-" for ch in host)


def serialize_url(parts: SplitResult) -> str:
    scheme = parts.scheme.lower()
    userinfo, at, hostport = parts.netloc.rpartition("@")
    path = parts.path
    if not path and scheme in ("http", "https"):
        path = "/"
    return urlunsplit((scheme, f"{userinfo}{at}{hostport.lower()}", path, parts.query, parts.fragment))


def normalize_url(url: str) -> str:
    parts = parse_url(url)
    return serialize_url(parts) if parts else url


def url_host(url: str) -> str | None:
    """Lowercase host of ``url`` (https:// assumed when missing), or None."""
    parts = parse_url(url)
    if parts is None or not parts.hostname:
        return None
    return parts.hostname.lower()


class RedirectResolver:
    def __init__(self, extra_redirect_hosts: list[str] | None = None) -> None:
        self._extra_hosts = frozenset(h.lower().strip(".") for h in extra_redirect_hosts or [])

    def is_redirect_host(self, host: str | None) -> bool:
        if not host:
            return False
        h = host.lower().strip().rstrip(".")
        if h in REDIRECT_HOSTS or h.endswith(REDIRECT_HOST_SUFFIXES):
            return True
        return any(h == extra or h.endswith("." + extra) for extra in self._extra_hosts)

    def resolve(self, raw_url: str) -> str:
        parts = parse_url(raw_url)
        if parts is None:
            return raw_url
        host = (parts.hostname or "").lower()

        try:
            embedded = self._unwrap_aggregator(parts, host)
        except DecodeError as e:
            logger.debug("redirect_token_decode_failed", url=raw_url, error=str(e))
            embedded = None
        if embedded:
            return embedded

        target = self._unwrap_redirect(parts, host)
        if target:
            return target

        return serialize_url(parts)

    def _unwrap_aggregator(self, parts: SplitResult, host: str) -> str | None:
        if host not in AGGREGATOR_HOSTS:
            return None
        segments = [s for s in parts.path.split("/") if s]
        if AGGREGATOR_PATH_MARKER not in segments[:-1]:
            return None
        decoded = decode_base64url(segments[-1])
        embedded = extract_embedded_url(decoded)
        if embedded is None:
            logger.debug("redirect_token_without_url", host=host)
            return None
        return normalize_url(embedded)

    def _unwrap_redirect(self, parts: SplitResult, host: str) -> str | None:
        custom_scheme = parts.scheme.lower().startswith(REDIRECT_SCHEME_PREFIXES)
        if not (custom_scheme or self.is_redirect_host(host) or _is_search_redirect(host, parts.path)):
            return None

        params = parse_qs(parts.query)
        for name in DESTINATION_PARAMS:
            for value in params.get(name, []):
                destination = _as_destination(value)
                if destination:
                    return destination

        if custom_scheme and host:
            query = f"?{parts.query}" if parts.query else ""
            return normalize_url(f"https://{parts.netloc}{parts.path}{query}")
        return None


def _is_search_redirect(host: str, path: str) -> bool:
    for engine, paths in SEARCH_REDIRECT_PATHS.items():
        if (host == engine or host.endswith("." + engine)) and path in paths:
            return True
    return False


def _as_destination(value: str) -> str | None:
    value = value.strip()
    if ENCODED_URL_RE.match(value):
        value = unquote(value)
    if _HTTP_PREFIX_RE.match(value) or _HOSTLIKE_RE.match(value):
        parts = parse_url(value)
        if parts is not None and parts.hostname:
            return serialize_url(parts)
    return None


_default_resolver = RedirectResolver()


def resolve(raw_url: str) -> str:
    return _default_resolver.resolve(raw_url)


def is_redirect_host(host: str | None) -> bool:
    return _default_resolver.is_redirect_host(host)
