"""Tests for citation run stage timing."""

import structlog

from citation_engine.observability.tracing import CitationTrace


def test_stages_are_recorded_in_order():
    trace = CitationTrace()
    with trace.stage("normalize_sources", count=2) as timing:
        assert timing.details == {"count": 2}
    with trace.stage("place_citations"):
        pass
    assert [t.stage for t in trace.stages] == ["normalize_sources", "place_citations"]
    assert set(trace.stage_durations()) == {"normalize_sources", "place_citations"}
    assert all(d >= 0 for d in trace.stage_durations().values())
    assert trace.elapsed_ms >= 0


def test_trace_id_is_bound_only_inside_a_stage():
    trace = CitationTrace(trace_id="run-1")
    with trace.stage("place_citations"):
        bound = structlog.contextvars.get_contextvars()
        assert bound["trace_id"] == "run-1"
        assert bound["stage"] == "place_citations"
    assert "trace_id" not in structlog.contextvars.get_contextvars()
