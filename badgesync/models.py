"""Core data models shared across badgesync components."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class BadgeCategory(str, Enum):
    """Badge categories served by the image service."""

    HEALTH = "health"
    EOL = "eol"
    FRESHNESS = "freshness"
    CVE = "cve"
    CLOUD = "cloud"

    @property
    def label(self) -> str:
        return _CATEGORY_LABELS[self]


_CATEGORY_LABELS = {
    BadgeCategory.HEALTH: "health",
    BadgeCategory.EOL: "EOL",
    BadgeCategory.FRESHNESS: "freshness",
    BadgeCategory.CVE: "CVEs",
    BadgeCategory.CLOUD: "cloud",
}


class LinkMode(str, Enum):
    """Target a rendered badge links to."""

    BADGE_PAGE = "badge-page"
    RELEASERUN = "releaserun"
    NONE = "none"


class RenderStyle(str, Enum):
    """Visual style requested from the image service."""

    FLAT = "flat"
    FLAT_SQUARE = "flat-square"
    PLASTIC = "plastic"
    FOR_THE_BADGE = "for-the-badge"


@dataclass(frozen=True)
class Product:
    """A tracked product, optionally pinned to a version."""

    name: str
    version: Optional[str] = None

    def __str__(self) -> str:
        return f"{self.name}:{self.version}" if self.version else self.name


@dataclass
class ParsedProducts:
    """Products accepted from the input list plus the warnings emitted while parsing."""

    products: List[Product] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class SpliceResult:
    """Outcome of replacing the managed badge region in a document."""

    markers_found: bool
    changed: bool
    content: str


__all__ = [
    "BadgeCategory",
    "LinkMode",
    "ParsedProducts",
    "Product",
    "RenderStyle",
    "SpliceResult",
]
