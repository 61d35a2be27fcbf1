"""Validation and normalisation of run inputs.

Two severities are applied on purpose. Individual product lines and badge
categories degrade gracefully: bad entries are dropped and reported as
warnings. Run-wide options (style, link mode, badge service origin, document
path, working branch) raise :class:`ConfigError` and abort the run before any
remote call is made.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import List, Optional
from urllib.parse import urlparse

from .models import BadgeCategory, LinkMode, ParsedProducts, Product, RenderStyle

PRODUCT_PATTERN = re.compile(r"^[a-z0-9][a-z0-9._-]*$")
VERSION_PATTERN = re.compile(r"^[a-zA-Z0-9][a-zA-Z0-9._-]*$")
LATEST_VERSION = "latest"
MAX_PRODUCTS = 50
BADGE_SERVICE_ROOT_DOMAIN = "releaserun.com"

_IPV4_PATTERN = re.compile(r"^\d{1,3}(\.\d{1,3}){3}$")
_BRANCH_FORBIDDEN = re.compile(r"[\x00-\x1f\x7f ~^:?*\[\\]")
_LOOPBACK_HOSTS = {"localhost", "127.0.0.1", "::1"}
# Plain host[:port]; no userinfo, brackets or backslashes.
_NETLOC_PATTERN = re.compile(r"^[A-Za-z0-9.-]+(:\d{1,5})?$")
_HOST_LABEL = re.compile(r"^(?!-)[a-z0-9-]{1,63}(?<!-)$")
# Characters that would end or escape a markdown link target.
_URL_UNSAFE_CHARS = re.compile(r"[\s\\()<>\"'`]")


class ConfigError(RuntimeError):
    """Raised when a run-wide option is invalid and the run must abort."""


def validate_product_name(name: str) -> bool:
    return bool(PRODUCT_PATTERN.match(name))


def validate_version(version: str) -> bool:
    return version == LATEST_VERSION or bool(VERSION_PATTERN.match(version))


def validate_badge_type(value: str) -> bool:
    return value in {category.value for category in BadgeCategory}


def parse_products(text: str) -> ParsedProducts:
    """Parse newline-delimited ``name[:version]`` entries.

    Blank lines are ignored. Only the first :data:`MAX_PRODUCTS` entries are
    considered and a single warning is emitted when the list is longer.
    Entries with an invalid name or version are skipped with a warning.
    """
    lines = [line.strip() for line in text.split("\n")]
    lines = [line for line in lines if line]

    result = ParsedProducts()
    if len(lines) > MAX_PRODUCTS:
        result.warnings.append(
            f"Maximum of {MAX_PRODUCTS} products allowed. "
            f"Only the first {MAX_PRODUCTS} will be processed."
        )

    for line in lines[:MAX_PRODUCTS]:
        name, _, version = line.partition(":")
        if not validate_product_name(name):
            result.warnings.append(f'Skipping invalid product name: "{name}"')
            continue
        if version and not validate_version(version):
            result.warnings.append(
                f'Skipping invalid version "{version}" for product "{name}"'
            )
            continue
        result.products.append(Product(name=name, version=version or None))
    return result


def parse_badge_types(text: str) -> List[BadgeCategory]:
    """Return requested categories in order, defaulting to ``health``."""
    requested = [part.strip().lower() for part in text.split(",")]
    categories = [BadgeCategory(value) for value in requested if validate_badge_type(value)]
    return categories or [BadgeCategory.HEALTH]


def validate_style(value: str) -> RenderStyle:
    try:
        return RenderStyle(value)
    except ValueError:
        allowed = ", ".join(style.value for style in RenderStyle)
        raise ConfigError(f'Invalid style: "{value}". Must be one of: {allowed}') from None


def validate_link_mode(value: str) -> LinkMode:
    try:
        return LinkMode(value)
    except ValueError:
        raise ConfigError(
            f'Invalid link-to value: "{value}". Must be badge-page, releaserun, or none.'
        ) from None


def is_valid_badge_service_url(url: str) -> bool:
    """Check that ``url`` is an HTTPS origin under the badge service domain."""
    if _URL_UNSAFE_CHARS.search(url):
        return False
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    if parsed.scheme != "https" or not _NETLOC_PATTERN.match(parsed.netloc):
        return False

    host = (parsed.hostname or "").rstrip(".")
    if not host or not all(_HOST_LABEL.match(label) for label in host.split(".")):
        return False
    if _IPV4_PATTERN.match(host) or host in _LOOPBACK_HOSTS:
        return False

    # Suffix must sit on a label boundary: releaserun.com.evil.com is rejected.
    return host == BADGE_SERVICE_ROOT_DOMAIN or host.endswith(f".{BADGE_SERVICE_ROOT_DOMAIN}")


def validate_badge_service_url(url: Optional[str]) -> Optional[str]:
    """Return the badge image base for a service origin, or ``None`` when unset."""
    if not url:
        return None
    if not is_valid_badge_service_url(url):
        raise ConfigError(
            f'Invalid badge-service-url: "{url}". URL must use HTTPS and match '
            f"*.{BADGE_SERVICE_ROOT_DOMAIN} (no IP addresses or localhost)."
        )
    return f"{url.removesuffix('/')}/badge"


def validate_document_path(document: str, workspace: Path) -> Path:
    """Resolve ``document`` and ensure it stays inside ``workspace``."""
    root = workspace.expanduser().resolve()
    candidate = Path(document).expanduser()
    if not candidate.is_absolute():
        candidate = root / candidate
    resolved = candidate.resolve()
    try:
        resolved.relative_to(root)
    except ValueError:
        raise ConfigError(
            "Invalid readme-path: must be within repository workspace"
        ) from None
    return resolved


def workspace_relative(path: Path, workspace: Path) -> str:
    """Return the repository path of ``path`` as used by the hosting API."""
    return path.relative_to(workspace.expanduser().resolve()).as_posix()


def validate_branch_name(branch: str) -> str:
    if (
        ".." in branch
        or branch.startswith("/")
        or branch.endswith("/")
        or branch.endswith(".lock")
        or _BRANCH_FORBIDDEN.search(branch)
    ):
        raise ConfigError(
            f'Invalid pr-branch: "{branch}". Branch name contains invalid characters.'
        )
    return branch


__all__ = [
    "BADGE_SERVICE_ROOT_DOMAIN",
    "ConfigError",
    "LATEST_VERSION",
    "MAX_PRODUCTS",
    "is_valid_badge_service_url",
    "parse_badge_types",
    "parse_products",
    "validate_badge_service_url",
    "validate_badge_type",
    "validate_branch_name",
    "validate_document_path",
    "validate_link_mode",
    "validate_product_name",
    "validate_style",
    "validate_version",
    "workspace_relative",
]
