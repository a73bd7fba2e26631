"""Small regex predicates used to classify titles, hints and page text."""

from __future__ import annotations

import re

_DOMAIN_LIKE_RE = re.compile(r"^(?:[a-z0-9-]+\.)+[a-z]{2,}$", re.IGNORECASE)
_DOMAIN_IN_TEXT_RE = re.compile(
    r"(?<![\w.-])((?:[a-z0-9-]+\.)+[a-z]{2,})(?![\w-])", re.IGNORECASE
)
_TOKEN_RUN_RE = re.compile(r"^[A-Za-z0-9+/_=-]{20,}$")
_BASE64URL_RUN_RE = re.compile(r"[A-Za-z0-9_-]{18,}")


def is_domain_like(text: str | None) -> bool:
    """True for bare hostnames such as ``example.co.uk``.

    Titles that happen to be a hostname ("ajithp.com") are common in
    grounding metadata, where the provider puts the site name in the title.
    """
    if not text:
        return False
    return bool(_DOMAIN_LIKE_RE.match(text.strip()))


def find_domain(text: str | None) -> str | None:
    """Return the first hostname-shaped substring of ``text``.

    The last label must be alphabetic, so version numbers ("2.0") and
    decimals never count as domains.
    """
    if not text:
        return None
    match = _DOMAIN_IN_TEXT_RE.search(text)
    return match.group(1) if match else None


def strip_www(host: str) -> str:
    return host[4:] if host.lower().startswith("www.") else host


def looks_like_token(text: str | None) -> bool:
    """Detect random-looking strings such as redirect tokens."""
    if not text:
        return False
    s = text.strip()
    if len(s) < 12:
        return False
    if _TOKEN_RUN_RE.match(s) or _BASE64URL_RUN_RE.search(s):
        return True
    # long and no whitespace at all
    return len(s) >= 20 and not re.search(r"\s", s)
