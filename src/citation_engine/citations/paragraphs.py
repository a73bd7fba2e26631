"""Line-based paragraph boundary detection for citation anchoring."""

from __future__ import annotations

import re
from dataclasses import dataclass

_HEADING_RE = re.compile(r"^ {0,3}(?:#{1,6}(?:\s|$)|\d+\.\s)")
_TERMINATOR_RE = re.compile(r"[.!?](?=\s|$)")


@dataclass(frozen=True)
class Boundary:
    offset: int  # text offset just past the paragraph's last sentence terminator
    line_index: int
    is_heading: bool


def is_heading_line(line: str) -> bool:
    """Markdown heading (``# Title``) or enumerated item (``3. Item``)."""
    return bool(_HEADING_RE.match(line))


def last_sentence_end(line: str) -> int | None:
    """Offset just past the last ``.``/``!``/``?`` followed by whitespace or end of line."""
    end = None
    for match in _TERMINATOR_RE.finditer(line):
        end = match.end()
    return end


def paragraph_boundaries(text: str) -> list[Boundary]:
    """Return citation anchor points in ascending offset order.

    A non-blank line closes a paragraph when it is the last line, or the next
    line is blank, a heading or an enumerated item. Paragraphs whose closing
    line has no sentence terminator produce no boundary.
    """
    lines = text.split("\n")
    starts: list[int] = []
    offset = 0
    for line in lines:
        starts.append(offset)
        offset += len(line) + 1

    boundaries: list[Boundary] = []
    for i, line in enumerate(lines):
        if not line.strip():
            continue
        is_last = i == len(lines) - 1
        if not is_last:
            following = lines[i + 1]
            if following.strip() and not is_heading_line(following):
                continue
        end = last_sentence_end(line)
        if end is None:
            continue
        boundaries.append(Boundary(offset=starts[i] + end, line_index=i, is_heading=is_heading_line(line)))
    return boundaries
