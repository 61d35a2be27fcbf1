"""Configuration loading: action inputs, ``.badgesync.yml`` defaults and run settings."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from .logging import get_logger
from .validation import ConfigError

CONFIG_FILENAME = ".badgesync.yml"
DEFAULT_PR_TITLE = "chore: update version health badges"
DEFAULT_PR_BRANCH = "releaserun/badges-update"

logger = get_logger("config")


@dataclass
class ActionInputs:
    """Raw input values, keyed like the action's ``with:`` block."""

    products: str = ""
    badge_types: str = "health"
    readme_path: str = "README.md"
    style: str = "flat"
    link_to: str = "badge-page"
    pr_title: str = DEFAULT_PR_TITLE
    pr_branch: str = DEFAULT_PR_BRANCH
    github_token: str = ""
    badge_service_url: str = ""

    @staticmethod
    def input_name(field_name: str) -> str:
        return field_name.replace("_", "-")


@dataclass
class RunSettings:
    """Process environment made explicit for a single run."""

    workspace: Path
    repository: str = ""
    token_fallback: Optional[str] = None
    event_default_branch: Optional[str] = None
    api_url: str = "https://api.github.com"
    output_file: Optional[Path] = None


def load_inputs(
    environ: Mapping[str, str],
    *,
    config_file: Path | None = None,
) -> ActionInputs:
    """Build :class:`ActionInputs` from ``INPUT_*`` variables.

    Blank inputs fall back to values from ``config_file`` (when it exists)
    and then to the built-in defaults.
    """
    file_values = load_config_file(config_file) if config_file is not None else {}
    values: Dict[str, str] = {}
    for field in fields(ActionInputs):
        name = ActionInputs.input_name(field.name)
        raw = environ.get(_env_key(name), "").strip()
        if not raw:
            raw = file_values.get(name, "")
        if raw:
            values[field.name] = raw
    return ActionInputs(**values)


def load_config_file(path: Path) -> Dict[str, str]:
    """Read ``.badgesync.yml`` into a mapping of input name to string value."""
    if not path.exists():
        return {}

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Failed to read {path.name}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path.name} must contain a mapping at the root")

    known = {ActionInputs.input_name(field.name) for field in fields(ActionInputs)}
    values: Dict[str, str] = {}
    for key, value in data.items():
        name = str(key).strip().replace("_", "-")
        if name not in known:
            logger.warning("Ignoring unknown key '%s' in %s", key, path.name)
            continue
        if name == "github-token":
            logger.warning("Ignoring github-token in %s; pass it as an input instead", path.name)
            continue
        converted = _as_input_str(name, value)
        if converted:
            values[name] = converted
    return values


def load_settings(environ: Mapping[str, str] | None = None) -> RunSettings:
    """Collect the CI runner environment into :class:`RunSettings`."""
    env = os.environ if environ is None else environ
    workspace = Path(env.get("GITHUB_WORKSPACE") or Path.cwd())
    output_file = env.get("GITHUB_OUTPUT")
    return RunSettings(
        workspace=workspace,
        repository=env.get("GITHUB_REPOSITORY", ""),
        token_fallback=env.get("GITHUB_TOKEN") or None,
        event_default_branch=_event_default_branch(env.get("GITHUB_EVENT_PATH")),
        api_url=env.get("GITHUB_API_URL") or "https://api.github.com",
        output_file=Path(output_file) if output_file else None,
    )


def _env_key(name: str) -> str:
    return f"INPUT_{name.replace(' ', '_').upper()}"


def _as_input_str(name: str, value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        separator = "\n" if name == "products" else ","
        return separator.join(str(item).strip() for item in value if item is not None)
    if isinstance(value, dict):
        raise ConfigError(f"'{name}' in {CONFIG_FILENAME} must be a string or a list")
    return str(value).strip()


def _event_default_branch(event_path: Optional[str]) -> Optional[str]:
    if not event_path:
        return None
    try:
        payload = json.loads(Path(event_path).read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        logger.debug("Could not read event payload %s: %s", event_path, exc)
        return None
    repository = payload.get("repository") if isinstance(payload, dict) else None
    if isinstance(repository, dict):
        branch = repository.get("default_branch")
        if isinstance(branch, str) and branch:
            return branch
    return None


__all__ = [
    "ActionInputs",
    "CONFIG_FILENAME",
    "DEFAULT_PR_BRANCH",
    "DEFAULT_PR_TITLE",
    "RunSettings",
    "load_config_file",
    "load_inputs",
    "load_settings",
]
