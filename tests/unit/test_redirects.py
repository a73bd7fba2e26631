"""Tests for redirect resolution."""

from __future__ import annotations

import base64
import json

import pytest

from citation_engine.exceptions import DecodeError
from citation_engine.resolution.redirects import (
    RedirectResolver,
    decode_base64url,
    extract_embedded_url,
    is_redirect_host,
    resolve,
    url_host,
)


def test_vertex_token_with_literal_url(make_vertex_link):
    link = make_vertex_link(b"\x08\x01\x12\x1bhttps://example.com/article\x1a\x00")
    assert resolve(link) == "https://example.com/article"


def test_vertex_token_with_percent_encoded_url(make_vertex_link):
    link = make_vertex_link(b"target=https%3A%2F%2Fexample.com%2Fnews%3Fid%3D7")
    assert resolve(link) == "https://example.com/news?id=7"


def test_vertex_token_with_json_payload(make_vertex_link):
    payload = json.dumps({"meta": {"kind": "web"}, "links": ["not a url", "https://example.org/x"]})
    assert resolve(make_vertex_link(payload.encode())) == "https://example.org/x"


def test_vertex_token_without_url_falls_back_to_normalized_link(make_vertex_link):
    link = make_vertex_link(b"nothing to see here")
    assert resolve(link) == link


def test_vertex_invalid_token_does_not_raise():
    link = "https://vertexaisearch.cloud.google.com/grounding-api-redirect/@@@"
    assert resolve(link) == link


def test_marker_without_token_is_left_alone():
    link = "https://vertexaisearch.cloud.google.com/grounding-api-redirect/"
    assert resolve(link) == link


def test_google_url_redirect():
    raw = "https://www.google.com/url?sa=t&q=https%3A%2F%2Fwww.example.com%2Fpage&usg=abc"
    assert resolve(raw) == "https://www.example.com/page"


def test_google_search_query_is_not_a_destination():
    raw = "https://www.google.com/search?q=aspirin+dosage"
    assert resolve(raw) == raw


def test_parameter_priority_prefers_url_over_q():
    raw = "https://www.google.com/url?q=https://second.example/&url=https://first.example/"
    assert resolve(raw) == "https://first.example/"


def test_duckduckgo_redirect():
    raw = "https://duckduckgo.com/l/?uddg=https%3A%2F%2Fexample.net%2Fa&rut=xyz"
    assert resolve(raw) == "https://example.net/a"


def test_custom_scheme_with_param():
    raw = "grounding-api-redirect://redirect?url=https%3A%2F%2Fexample.com%2Fdoc"
    assert resolve(raw) == "https://example.com/doc"


def test_custom_scheme_rebuilt_as_https():
    raw = "grounding-api-redirect://example.com/path/to?x=1"
    assert resolve(raw) == "https://example.com/path/to?x=1"


def test_plain_url_is_normalized():
    assert resolve("HTTPS://Example.COM") == "https://example.com/"
    assert resolve("https://example.com/Path?Q=1") == "https://example.com/Path?Q=1"


def test_scheme_less_url_gets_https():
    assert resolve("example.com/page") == "https://example.com/page"


def test_unparseable_input_returned_unchanged():
    assert resolve("") == ""
    assert resolve("   ") == "   "
    assert resolve("http://[broken") == "http://[broken"


def test_text_with_spaces_is_not_a_url():
    assert resolve("not a url") == "not a url"
    assert resolve("see attached notes") == "see attached notes"
    assert resolve("https://bad host/x") == "https://bad host/x"
    assert url_host("Example Site") is None
    assert url_host("https://exa_mple.com/") is None


def test_ipv6_literal_host_is_accepted():
    assert url_host("http://[::1]:8080/status") == "::1"


@pytest.mark.parametrize(
    "raw",
    [
        "https://www.google.com/url?q=https://example.com/a",
        "grounding-api-redirect://example.com/p",
        "example.com",
        "https://Example.com:8080/x?y=1#frag",
    ],
)
def test_resolve_is_idempotent(raw):
    once = resolve(raw)
    assert resolve(once) == once


def test_resolve_is_idempotent_for_vertex_links(make_vertex_link):
    once = resolve(make_vertex_link(b"https://example.com/article"))
    assert resolve(once) == once


def test_decode_base64url_handles_missing_padding():
    token = base64.urlsafe_b64encode(b"https://a.io/?x=~").decode().rstrip("=")
    assert decode_base64url(token) == "https://a.io/?x=~"


def test_decode_base64url_rejects_garbage():
    with pytest.raises(DecodeError):
        decode_base64url("***")
    with pytest.raises(DecodeError):
        decode_base64url("")


def test_extract_embedded_url_none_when_absent():
    assert extract_embedded_url("plain words only") is None
    assert extract_embedded_url('{"a": [1, 2, {"b": "no"}]}') is None


def test_is_redirect_host():
    assert is_redirect_host("vertexaisearch.cloud.google.com")
    assert is_redirect_host("www.google.com")
    assert is_redirect_host("google.com")
    assert is_redirect_host("lh3.googleusercontent.com")
    assert not is_redirect_host("example.com")
    assert not is_redirect_host("notgoogle.com")
    assert not is_redirect_host(None)


def test_extra_redirect_hosts():
    resolver = RedirectResolver(extra_redirect_hosts=["news.ycombinator.com", "t.co"])
    assert resolver.is_redirect_host("t.co")
    assert resolver.is_redirect_host("sub.t.co")
    assert not resolver.is_redirect_host("at.co")
    assert resolver.resolve("https://t.co/abc?url=https://example.com/") == "https://example.com/"


def test_url_host():
    assert url_host("https://WWW.Example.com/a") == "www.example.com"
    assert url_host("example.com") == "example.com"
    assert url_host("") is None
