"""Tests for the pull request body template."""

from __future__ import annotations

from badgesync.models import BadgeCategory, Product
from badgesync.postproc.pr_body import PullRequestBodyBuilder


def test_pr_body_lists_products_and_categories() -> None:
    body = PullRequestBodyBuilder().build(
        "README.md",
        [Product("python", "3.12"), Product("node")],
        [BadgeCategory.HEALTH, BadgeCategory.EOL],
    )

    assert body == (
        "## Version Health Badges Update\n"
        "\n"
        "This PR updates version health badges in `README.md`.\n"
        "\n"
        "### Products tracked\n"
        "- python:3.12\n"
        "- node\n"
        "\n"
        "### Badge types\n"
        "health, eol\n"
        "\n"
        "---\n"
        "Powered by [ReleaseRun](https://releaserun.com) | "
        "[Badge Documentation](https://releaserun.com/badges/)"
    )


def test_pr_body_uses_custom_templates_dir(tmp_path) -> None:
    (tmp_path / "pr_body.md.j2").write_text(
        "{{ document_path }}: {{ products | join(' ') }}", encoding="utf-8"
    )

    body = PullRequestBodyBuilder(tmp_path).build(
        "docs/README.md", [Product("go", "1.22")], [BadgeCategory.HEALTH]
    )

    assert body == "docs/README.md: go:1.22"
