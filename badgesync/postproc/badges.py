"""Badge markup rendering for the managed README block."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence
from urllib.parse import quote

from ..models import BadgeCategory, LinkMode, Product, RenderStyle

DEFAULT_BADGE_BASE_URL = "https://img.releaserun.com/badge"
BADGE_PAGE_URL = "https://releaserun.com/badges/{product}/"
HOME_URL = "https://releaserun.com"


@dataclass(frozen=True)
class BadgeRenderer:
    """Renders markdown badges for products.

    Output depends only on the constructor arguments and the products and
    categories passed in, so repeated runs produce byte-identical markup.
    """

    style: RenderStyle = RenderStyle.FLAT
    link_mode: LinkMode = LinkMode.BADGE_PAGE
    base_url: Optional[str] = None

    def badge_url(self, category: BadgeCategory, product: Product) -> str:
        base = self.base_url or DEFAULT_BADGE_BASE_URL
        if product.version:
            path = f"{category.value}/{product.name}/{product.version}.svg"
        else:
            path = f"{category.value}/{product.name}.svg"
        url = f"{base}/{path}"
        # flat is the service default; leaving it out keeps existing URLs stable.
        if self.style is not RenderStyle.FLAT:
            url += f"?style={quote(self.style.value, safe='')}"
        return url

    def link_url(self, product: Product, badge_url: str) -> str:
        if self.link_mode is LinkMode.BADGE_PAGE:
            return BADGE_PAGE_URL.format(product=product.name)
        if self.link_mode is LinkMode.RELEASERUN:
            return HOME_URL
        return badge_url

    @staticmethod
    def label(category: BadgeCategory, product: Product) -> str:
        version_suffix = f" {product.version}" if product.version else ""
        return f"{product.name}{version_suffix} {category.label}"

    def render_badge(self, product: Product, category: BadgeCategory) -> str:
        """Return a single linked badge image in markdown."""
        image = self.badge_url(category, product)
        link = self.link_url(product, image)
        return f"[![{self.label(category, product)}]({image})]({link})"

    def render(
        self, products: Sequence[Product], categories: Sequence[BadgeCategory]
    ) -> str:
        """Render one line per product, badges on a line separated by a space."""
        lines = [
            " ".join(self.render_badge(product, category) for category in categories)
            for product in products
        ]
        return "\n".join(lines)


def badge_count(products: Sequence[Product], categories: Sequence[BadgeCategory]) -> int:
    return len(products) * len(categories)


__all__ = ["BadgeRenderer", "DEFAULT_BADGE_BASE_URL", "badge_count"]
