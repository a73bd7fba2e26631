"""Stage timing for a single citation run."""

from __future__ import annotations

import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from uuid import uuid4

import structlog


@dataclass
class StageTiming:
    stage: str
    started_ms: float
    ended_ms: float | None = None
    details: dict = field(default_factory=dict)

    @property
    def duration_ms(self) -> float:
        return (self.ended_ms if self.ended_ms is not None else self.started_ms) - self.started_ms


class CitationTrace:
    """Times the stages of one run; log events inside a stage carry ``trace_id``."""

    def __init__(self, trace_id: str | None = None) -> None:
        self.trace_id = trace_id or uuid4().hex
        self.stages: list[StageTiming] = []
        self._origin = time.perf_counter()

    def _now_ms(self) -> float:
        return (time.perf_counter() - self._origin) * 1000

    @contextmanager
    def stage(self, name: str, **details):
        timing = StageTiming(stage=name, started_ms=self._now_ms(), details=details)
        with structlog.contextvars.bound_contextvars(trace_id=self.trace_id, stage=name):
            try:
                yield timing
            finally:
                timing.ended_ms = self._now_ms()
                self.stages.append(timing)

    @property
    def elapsed_ms(self) -> float:
        return self._now_ms()

    def stage_durations(self) -> dict[str, float]:
        return {t.stage: round(t.duration_ms, 2) for t in self.stages}
