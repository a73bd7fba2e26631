"""Paragraph-level inline citation placement."""

from __future__ import annotations

import re
from bisect import bisect_left

from citation_engine.citations.paragraphs import Boundary, paragraph_boundaries
from citation_engine.models.domain import CitationGroup, GroundingSegment, PlacementResult
from citation_engine.observability.logger import get_logger

logger = get_logger("citation_placement")

# One inserted marker unit: a space after the sentence terminator, then [n][m]...
CITATION_MARKER_RE = re.compile(r"(?<=[.!?]) (?:\[\d+\])+")


def render_marker(numbers: list[int]) -> str:
    return "".join(f"[{n}]" for n in numbers)


def strip_citation_markers(text: str) -> str:
    return CITATION_MARKER_RE.sub("", text)


def _insert_marker(text: str, position: int, marker: str) -> str:
    before = "" if position > 0 and text[position - 1].isspace() else " "
    after = " " if position < len(text) and not text[position].isspace() else ""
    return f"{text[:position]}{before}{marker}{after}{text[position:]}"


class CitationPlacer:
    """Attach ``[n]`` markers to the end of each cited paragraph.

    With ``renumber`` on, printed numbers follow first appearance in the text
    (1, 2, 3, ...) and ``PlacementResult.order`` says which remapped number
    each printed number stands for. With it off, remapped numbers are printed
    as given.
    """

    def __init__(self, renumber: bool = True) -> None:
        self._renumber = renumber

    @property
    def renumber(self) -> bool:
        return self._renumber

    def place(
        self,
        text: str,
        segments: list[GroundingSegment],
        index_remap: dict[int, int],
    ) -> PlacementResult:
        usable, malformed = self._usable_segments(text, segments, index_remap)

        boundaries = paragraph_boundaries(text)
        offsets = [b.offset for b in boundaries]
        placed: list[tuple[Boundary, list[int]]] = []
        unplaced = 0
        for segment, numbers in sorted(usable, key=lambda item: item[0].text_end):
            i = bisect_left(offsets, segment.text_end)
            if i == len(offsets) or boundaries[i].is_heading:
                unplaced += 1
                continue
            placed.append((boundaries[i], numbers))

        ordinal: dict[int, int] = {}
        order: list[int] = []
        for _, numbers in placed:
            for n in numbers:
                if n not in ordinal:
                    ordinal[n] = len(order) + 1
                    order.append(n)

        per_boundary: dict[int, set[int]] = {}
        for boundary, numbers in placed:
            printed = {ordinal[n] if self._renumber else n for n in numbers}
            per_boundary.setdefault(boundary.offset, set()).update(printed)

        groups = [
            CitationGroup(paragraph_end_offset=offset, citation_numbers=sorted(numbers))
            for offset, numbers in sorted(per_boundary.items())
        ]

        # last boundary first so earlier offsets stay valid
        annotated = text
        for group in reversed(groups):
            annotated = _insert_marker(
                annotated, group.paragraph_end_offset, render_marker(group.citation_numbers)
            )

        if malformed or unplaced:
            logger.debug("segments_skipped", malformed=malformed, unplaced=unplaced)

        return PlacementResult(
            annotated_text=annotated,
            cited_count=len(order),
            groups=groups,
            order=order,
        )

    @staticmethod
    def _usable_segments(
        text: str,
        segments: list[GroundingSegment],
        index_remap: dict[int, int],
    ) -> tuple[list[tuple[GroundingSegment, list[int]]], int]:
        usable: list[tuple[GroundingSegment, list[int]]] = []
        malformed = 0
        for segment in segments:
            if segment.text_start < 0 or segment.text_end > len(text) or segment.text_start > segment.text_end:
                malformed += 1
                continue
            numbers: list[int] = []
            for index in segment.source_indices:
                n = index_remap.get(index)
                if n is not None and n not in numbers:
                    numbers.append(n)
            if not numbers:
                malformed += 1
                continue
            usable.append((segment, numbers))
        return usable, malformed


def place_citations(
    text: str,
    segments: list[GroundingSegment],
    index_remap: dict[int, int],
) -> tuple[str, int]:
    """Insert citation markers into ``text``; returns (annotated_text, cited_count)."""
    result = CitationPlacer().place(text, segments, index_remap)
    return result.annotated_text, result.cited_count
