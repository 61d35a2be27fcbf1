"""Rendering and splicing of the managed README content."""

from .badges import BadgeRenderer, badge_count
from .markers import END_MARKER, START_MARKER, MarkerManager
from .pr_body import PullRequestBodyBuilder

__all__ = [
    "BadgeRenderer",
    "END_MARKER",
    "MarkerManager",
    "PullRequestBodyBuilder",
    "START_MARKER",
    "badge_count",
]
