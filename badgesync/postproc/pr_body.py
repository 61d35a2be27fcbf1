"""Pull request description rendering."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from ..models import BadgeCategory, Product

TEMPLATE_NAME = "pr_body.md.j2"


class PullRequestBodyBuilder:
    """Renders the pull request body from a jinja template."""

    def __init__(self, templates_dir: Path | None = None) -> None:
        self.templates_dir = templates_dir or Path(__file__).resolve().parent.parent / "templates"
        self._env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=False,
            undefined=StrictUndefined,
        )

    def build(
        self,
        document_path: str,
        products: Sequence[Product],
        categories: Sequence[BadgeCategory],
    ) -> str:
        template = self._env.get_template(TEMPLATE_NAME)
        return template.render(
            document_path=document_path,
            products=[str(product) for product in products],
            categories=[category.value for category in categories],
        )


__all__ = ["PullRequestBodyBuilder"]
