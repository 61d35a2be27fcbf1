"""Managed marker utilities for the README badge block."""

from __future__ import annotations

from ..models import SpliceResult

START_MARKER = "<!-- releaserun-badges-start -->"
END_MARKER = "<!-- releaserun-badges-end -->"


class MarkerManager:
    """Replaces the content between the badge start and end markers.

    Everything outside the markers is left untouched, including whitespace.
    """

    def __init__(self, start: str = START_MARKER, end: str = END_MARKER) -> None:
        self.start = start
        self.end = end

    def has_markers(self, markdown: str) -> bool:
        return self.start in markdown and self.end in markdown

    def splice(self, markdown: str, body: str) -> SpliceResult:
        """Return ``markdown`` with ``body`` placed between the markers."""
        start_index = markdown.find(self.start)
        end_index = markdown.find(self.end)
        if start_index == -1 or end_index == -1 or end_index <= start_index:
            return SpliceResult(markers_found=False, changed=False, content=markdown)

        before = markdown[: start_index + len(self.start)]
        after = markdown[end_index:]
        content = f"{before}\n{body}\n{after}"
        return SpliceResult(markers_found=True, changed=content != markdown, content=content)


__all__ = ["END_MARKER", "MarkerManager", "START_MARKER"]
