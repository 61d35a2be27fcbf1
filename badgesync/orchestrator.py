"""Pipeline orchestration for a badge sync run."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional

from .config import ActionInputs, RunSettings
from .git.github import GitHubClient
from .git.publisher import PublishRequest, PublishResult, Publisher
from .git.remote import RemoteHost
from .logging import get_logger
from .models import BadgeCategory, LinkMode, Product, RenderStyle
from .postproc.badges import BadgeRenderer, badge_count
from .postproc.markers import END_MARKER, START_MARKER, MarkerManager
from .postproc.pr_body import PullRequestBodyBuilder
from .reporting import RunReporter
from .validation import (
    ConfigError,
    parse_badge_types,
    parse_products,
    validate_badge_service_url,
    validate_branch_name,
    validate_document_path,
    validate_link_mode,
    validate_style,
    workspace_relative,
)

RemoteFactory = Callable[[RunSettings, str], RemoteHost]


@dataclass
class RunOptions:
    """Validated run-wide options."""

    branch: str
    style: RenderStyle
    link_mode: LinkMode
    badge_base_url: Optional[str]
    document: Path
    repo_path: str


@dataclass
class RunResult:
    """Outcome of a run: ``success``, ``skipped`` or ``failed``."""

    status: str
    message: str = ""
    outputs: Dict[str, str] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)
    publish: Optional[PublishResult] = None

    @property
    def ok(self) -> bool:
        return self.status != "failed"


def _github_remote(settings: RunSettings, token: str) -> RemoteHost:
    if not settings.repository:
        raise ConfigError("GITHUB_REPOSITORY is not set; cannot determine the target repository.")
    return GitHubClient(settings.repository, token, api_url=settings.api_url)


class Orchestrator:
    """Coordinates validation, rendering, splicing and publishing."""

    def __init__(
        self,
        remote_factory: RemoteFactory | None = None,
        marker_manager: MarkerManager | None = None,
        body_builder: PullRequestBodyBuilder | None = None,
    ) -> None:
        self.remote_factory = remote_factory or _github_remote
        self.marker_manager = marker_manager or MarkerManager()
        self.body_builder = body_builder or PullRequestBodyBuilder()
        self.logger = get_logger("orchestrator")

    async def run(
        self,
        inputs: ActionInputs,
        settings: RunSettings,
        reporter: RunReporter | None = None,
    ) -> RunResult:
        """Execute one sync run; failures are reported, never raised."""
        reporter = reporter or RunReporter(settings.output_file)
        result = RunResult(status="failed")
        try:
            await self._run(inputs, settings, reporter, result)
        except Exception as exc:
            message = str(exc) or "An unexpected error occurred"
            self.logger.debug("Run aborted", exc_info=True)
            reporter.set_failed(message)
            result.status = "failed"
            result.message = message
        result.outputs = dict(reporter.outputs)
        return result

    def validate_options(self, inputs: ActionInputs, settings: RunSettings) -> RunOptions:
        """Validate run-wide options; raise :class:`ConfigError` on the first bad value."""
        branch = validate_branch_name(inputs.pr_branch)
        style = validate_style(inputs.style)
        link_mode = validate_link_mode(inputs.link_to)
        badge_base_url = validate_badge_service_url(inputs.badge_service_url or None)
        document = validate_document_path(inputs.readme_path, settings.workspace)
        return RunOptions(
            branch=branch,
            style=style,
            link_mode=link_mode,
            badge_base_url=badge_base_url,
            document=document,
            repo_path=workspace_relative(document, settings.workspace),
        )

    async def _run(
        self,
        inputs: ActionInputs,
        settings: RunSettings,
        reporter: RunReporter,
        result: RunResult,
    ) -> None:
        if not inputs.products.strip():
            raise ConfigError("Input required and not supplied: products")
        options = self.validate_options(inputs, settings)

        parsed = parse_products(inputs.products)
        for warning in parsed.warnings:
            self._warn(result, warning)
        if not parsed.products:
            self._skip(result, "No valid products found in input. Nothing to do.")
            return
        self.logger.info("Parsed %d product(s)", len(parsed.products))

        categories = parse_badge_types(inputs.badge_types)
        self.logger.info("Badge types: %s", ", ".join(c.value for c in categories))

        renderer = BadgeRenderer(
            style=options.style,
            link_mode=options.link_mode,
            base_url=options.badge_base_url,
        )
        markdown = renderer.render(parsed.products, categories)
        self.logger.info(
            "Generated badges for %d product(s) x %d type(s)",
            len(parsed.products),
            len(categories),
        )
        self.logger.debug("Generated badge markdown:\n%s", markdown)
        reporter.set_output("badges-markdown", markdown)
        reporter.set_output("badges-count", badge_count(parsed.products, categories))
        reporter.set_output("pr-branch", options.branch)

        try:
            current = options.document.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise RuntimeError(f"Failed to read README at {options.document}: {exc}") from exc

        spliced = self.marker_manager.splice(current, markdown)
        if not spliced.markers_found:
            self._skip(
                result,
                f"No badge markers found in {inputs.readme_path}. "
                f"Add {START_MARKER} and {END_MARKER} to your README.",
            )
            return

        if spliced.changed:
            try:
                options.document.write_text(spliced.content, encoding="utf-8")
            except OSError as exc:
                raise RuntimeError(f"Failed to write README at {options.document}: {exc}") from exc
            self.logger.info("README updated with new badges.")
        else:
            self.logger.info("No changes detected. Badges are up to date.")

        token = inputs.github_token or settings.token_fallback
        if not token:
            raise ConfigError(
                "No GitHub token provided. Set github-token input or GITHUB_TOKEN env var."
            )
        reporter.set_secret(token)

        request = PublishRequest(
            path=options.repo_path,
            content=spliced.content,
            branch=options.branch,
            title=inputs.pr_title,
            body=self.build_pr_body(options.repo_path, parsed.products, categories),
            fallback_base=settings.event_default_branch,
            skip_when_current=not spliced.changed,
        )
        remote = self.remote_factory(settings, token)
        try:
            published = await Publisher(remote).publish(request)
        finally:
            close = getattr(remote, "aclose", None)
            if close is not None:
                await close()

        if published is None:
            result.status = "skipped"
            result.message = "Badges are already up to date on the default branch. Nothing to publish."
            return
        reporter.set_output("pr-number", published.pr_number)
        reporter.set_output("pr-url", published.pr_url)
        result.status = "success"
        result.publish = published
        result.message = f"PR #{published.pr_number}: {published.pr_url}"

    def build_pr_body(
        self,
        document_path: str,
        products: List[Product],
        categories: List[BadgeCategory],
    ) -> str:
        return self.body_builder.build(document_path, products, categories)

    def _warn(self, result: RunResult, message: str) -> None:
        result.warnings.append(message)
        self.logger.warning(message)

    def _skip(self, result: RunResult, message: str) -> None:
        self._warn(result, message)
        result.status = "skipped"
        result.message = message


__all__ = ["Orchestrator", "RunOptions", "RunResult"]
