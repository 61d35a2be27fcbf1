"""Tests for badgesync.validation."""

from __future__ import annotations

from pathlib import Path

import pytest

from badgesync.models import BadgeCategory, LinkMode, Product, RenderStyle
from badgesync.validation import (
    ConfigError,
    is_valid_badge_service_url,
    parse_badge_types,
    parse_products,
    validate_badge_service_url,
    validate_branch_name,
    validate_document_path,
    validate_link_mode,
    validate_product_name,
    validate_style,
    validate_version,
    workspace_relative,
)


@pytest.mark.parametrize("name", ["python", "node.js", "go-lang", "ruby_on_rails", "3scale"])
def test_validate_product_name_accepts(name: str) -> None:
    assert validate_product_name(name)


@pytest.mark.parametrize(
    "name", ["", ".hidden", "-dash", "UPPER", "has space", "injection;rm", "../traversal"]
)
def test_validate_product_name_rejects(name: str) -> None:
    assert not validate_product_name(name)


def test_validate_version_accepts_latest_and_tags() -> None:
    for version in ("3.12", "20.11.0", "latest", "v1.0.0", "3.12-rc1"):
        assert validate_version(version)
    for version in ("", ".1", "-1", "1;echo"):
        assert not validate_version(version)


def test_parse_products_splits_name_and_version() -> None:
    parsed = parse_products("python:3.12\nnode:20.11\nrust")

    assert parsed.products == [
        Product("python", "3.12"),
        Product("node", "20.11"),
        Product("rust", None),
    ]
    assert parsed.warnings == []


def test_parse_products_skips_blank_lines_and_whitespace() -> None:
    parsed = parse_products("  python:3.12 \r\n\n\nnode:20\n   ")

    assert [str(product) for product in parsed.products] == ["python:3.12", "node:20"]


def test_parse_products_treats_trailing_colon_as_no_version() -> None:
    parsed = parse_products("python:")

    assert parsed.products == [Product("python", None)]


def test_parse_products_drops_invalid_entries_with_warnings() -> None:
    parsed = parse_products("python:3.12\nINVALID:1.0\nnode:20\npython:3.12:extra")

    assert [product.name for product in parsed.products] == ["python", "node"]
    assert parsed.warnings == [
        'Skipping invalid product name: "INVALID"',
        'Skipping invalid version "3.12:extra" for product "python"',
    ]


def test_parse_products_caps_list_with_single_warning() -> None:
    lines = "\n".join(f"product{index}:1.0" for index in range(51))

    parsed = parse_products(lines)

    assert len(parsed.products) == 50
    assert parsed.products[-1].name == "product49"
    assert len(parsed.warnings) == 1
    assert "Maximum of 50 products allowed" in parsed.warnings[0]


def test_parse_products_validates_retained_lines_after_cap() -> None:
    lines = ["BAD"] + [f"product{index}" for index in range(55)]

    parsed = parse_products("\n".join(lines))

    assert len(parsed.products) == 49
    assert len(parsed.warnings) == 2


def test_parse_badge_types_filters_and_normalises() -> None:
    assert parse_badge_types("health,eol,cve") == [
        BadgeCategory.HEALTH,
        BadgeCategory.EOL,
        BadgeCategory.CVE,
    ]
    assert parse_badge_types(" Health , EOL,invalid ") == [BadgeCategory.HEALTH, BadgeCategory.EOL]


def test_parse_badge_types_defaults_to_health() -> None:
    assert parse_badge_types("invalid,nope") == [BadgeCategory.HEALTH]
    assert parse_badge_types("") == [BadgeCategory.HEALTH]


def test_validate_style_and_link_mode() -> None:
    assert validate_style("for-the-badge") is RenderStyle.FOR_THE_BADGE
    assert validate_link_mode("none") is LinkMode.NONE

    with pytest.raises(ConfigError, match="Invalid style"):
        validate_style("invalid-style")
    with pytest.raises(ConfigError, match="Invalid link-to value"):
        validate_link_mode("invalid-link")


@pytest.mark.parametrize(
    "url",
    [
        "https://releaserun.com",
        "https://img.releaserun.com",
        "https://staging.releaserun.com/",
        "https://a.b.releaserun.com/path",
        "https://img.releaserun.com:8443",
    ],
)
def test_badge_service_url_accepts_root_and_subdomains(url: str) -> None:
    assert is_valid_badge_service_url(url)


@pytest.mark.parametrize(
    "url",
    [
        "http://img.releaserun.com",
        "https://evil.com",
        "https://releaserun.com.evil.com",
        "https://notreleaserun.com",
        "https://192.168.1.1",
        "https://127.0.0.1",
        "https://localhost",
        "https://[::1]",
        "https://releaserun.com@evil.com",
        "https://evil.com\\.releaserun.com",
        "https://evil.com)x.releaserun.com",
        "https://img.releaserun.com/badge)](https://evil.com",
        "https://-bad.releaserun.com",
        "https://a..releaserun.com",
        "https://img_1.releaserun.com",
        "not-a-url",
        "",
    ],
)
def test_badge_service_url_rejects(url: str) -> None:
    assert not is_valid_badge_service_url(url)


def test_validate_badge_service_url_builds_badge_base() -> None:
    assert validate_badge_service_url("https://img.releaserun.com/") == "https://img.releaserun.com/badge"
    assert validate_badge_service_url("https://img.releaserun.com") == "https://img.releaserun.com/badge"
    assert validate_badge_service_url(None) is None
    with pytest.raises(ConfigError, match="Invalid badge-service-url"):
        validate_badge_service_url("http://evil.com/phishing")


def test_validate_document_path_resolves_inside_workspace(tmp_path: Path) -> None:
    workspace = tmp_path / "workspace"
    (workspace / "docs").mkdir(parents=True)

    resolved = validate_document_path("docs/../docs/README.md", workspace)

    assert resolved == (workspace / "docs" / "README.md").resolve()
    assert workspace_relative(resolved, workspace) == "docs/README.md"
    assert validate_document_path(str(workspace / "README.md"), workspace) == (
        workspace / "README.md"
    ).resolve()


@pytest.mark.parametrize("document", ["../../etc/passwd", "/etc/passwd", "../workspace2/README.md"])
def test_validate_document_path_rejects_escape(tmp_path: Path, document: str) -> None:
    workspace = tmp_path / "workspace"
    workspace.mkdir()

    with pytest.raises(ConfigError, match="must be within repository workspace"):
        validate_document_path(document, workspace)


@pytest.mark.parametrize("branch", ["releaserun/badges-update", "badges", "feature/a.b_c-d"])
def test_validate_branch_name_accepts(branch: str) -> None:
    assert validate_branch_name(branch) == branch


@pytest.mark.parametrize(
    "branch",
    [
        "a..b",
        "/leading",
        "trailing/",
        "branch.lock",
        "has space",
        "tilde~1",
        "caret^",
        "colon:x",
        "question?",
        "star*",
        "bracket[",
        "back\\slash",
        "ctrl\x07",
        "del\x7f",
    ],
)
def test_validate_branch_name_rejects(branch: str) -> None:
    with pytest.raises(ConfigError, match="Invalid pr-branch"):
        validate_branch_name(branch)
