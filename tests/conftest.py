"""Shared test fixtures."""

from __future__ import annotations

import base64
import tempfile
from pathlib import Path

import pytest

from citation_engine.config.settings import Settings
from citation_engine.models.domain import GroundingSegment, RawSource

VERTEX_PREFIX = "https://vertexaisearch.cloud.google.com/grounding-api-redirect/"


def vertex_link(payload: bytes) -> str:
    """Build a grounding redirect link whose token wraps ``payload``."""
    token = base64.urlsafe_b64encode(payload).decode("ascii").rstrip("=")
    return VERTEX_PREFIX + token


@pytest.fixture
def settings():
    """Test settings with temp paths."""
    tmp = tempfile.mkdtemp()
    return Settings(
        durable_cache_db_path=str(Path(tmp) / "test_cache.db"),
        memory_cache_max_entries=64,
    )


@pytest.fixture
def answer_text():
    return (
        "# Aspirin overview\n"
        "Aspirin reduces fever. It also thins the blood.\n"
        "\n"
        "Low doses are used for heart protection. Talk to a doctor first.\n"
        "\n"
        "## Side effects\n"
        "Stomach upset is the most common side effect."
    )


@pytest.fixture
def sample_sources():
    return [
        RawSource(title="mayoclinic.org", url=vertex_link(b"\x0a\x1dhttps://www.mayoclinic.org/aspirin\x12\x00")),
        RawSource(title="NHS guidance", url="https://www.nhs.uk/medicines/aspirin/"),
        RawSource(title="mayoclinic.org", url="https://www.mayoclinic.org/aspirin"),
        RawSource(title="", url=VERTEX_PREFIX + "@@not-base64@@"),
    ]


@pytest.fixture
def sample_segments(answer_text):
    fever = answer_text.index("Aspirin reduces fever.")
    doses = answer_text.index("Low doses")
    stomach = answer_text.index("Stomach upset")
    return [
        GroundingSegment(fever, fever + len("Aspirin reduces fever."), (1,)),
        GroundingSegment(doses, doses + len("Low doses are used for heart protection."), (0, 2)),
        GroundingSegment(stomach, len(answer_text), (3, 1)),
    ]


@pytest.fixture
def make_vertex_link():
    return vertex_link
