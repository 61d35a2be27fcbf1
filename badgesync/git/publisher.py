"""Branch and pull request reconciliation for badge updates."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..logging import get_logger
from .remote import RemoteError, RemoteHost

FALLBACK_DEFAULT_BRANCH = "main"


class PublishError(RuntimeError):
    """Raised when a remote step fails in a way the operator must resolve."""


@dataclass
class PublishRequest:
    """Everything the publisher needs to push one document update."""

    path: str
    content: str
    branch: str
    title: str
    body: str
    fallback_base: Optional[str] = None
    skip_when_current: bool = False


@dataclass
class PublishResult:
    default_branch: str
    branch_action: str
    pr_number: int
    pr_url: str
    pr_created: bool


class Publisher:
    """Pushes a document update to a working branch and opens or refreshes its PR.

    Each call re-reads remote state; nothing is cached between runs. The
    working branch is never force-updated. A diverged branch is deleted and
    recreated from the default branch tip instead.
    """

    def __init__(self, remote: RemoteHost) -> None:
        self.remote = remote
        self.logger = get_logger("publisher")

    async def publish(self, request: PublishRequest) -> Optional[PublishResult]:
        """Reconcile the working branch and PR; ``None`` when there is nothing to publish."""
        default_branch = await self.resolve_default_branch(request.fallback_base)
        if request.skip_when_current and await self.is_current(request, default_branch):
            self.logger.info(
                "%s on %s already matches and no PR is open; nothing to publish.",
                request.path,
                default_branch,
            )
            return None
        tip = await self.remote.get_ref(default_branch)
        branch_action = await self.sync_branch(request.branch, tip.sha, default_branch)
        await self.commit(request)
        self.logger.info("Committed badge updates.")
        number, url, created = await self.open_pull_request(request, default_branch)
        return PublishResult(
            default_branch=default_branch,
            branch_action=branch_action,
            pr_number=number,
            pr_url=url,
            pr_created=created,
        )

    async def resolve_default_branch(self, fallback: Optional[str] = None) -> str:
        try:
            repository = await self.remote.get_repository()
        except RemoteError as exc:
            self.logger.warning(
                "Failed to query repository default branch: %s. "
                "Falling back to context or '%s'.",
                exc,
                FALLBACK_DEFAULT_BRANCH,
            )
            return fallback or FALLBACK_DEFAULT_BRANCH
        return repository.default_branch

    async def is_current(self, request: PublishRequest, default_branch: str) -> bool:
        """True when no PR is open for the branch and the default branch holds the content."""
        try:
            if await self.remote.list_pull_requests(request.branch, "open"):
                return False
            remote_file = await self.remote.get_file_content(request.path, default_branch)
        except RemoteError as exc:
            self.logger.debug("Could not compare %s with %s: %s", request.path, default_branch, exc)
            return False
        return remote_file.type == "file" and remote_file.content == request.content

    async def sync_branch(self, branch: str, sha: str, default_branch: str) -> str:
        """Point ``branch`` at ``sha``; return ``created``, ``updated`` or ``recreated``."""
        try:
            await self.remote.create_ref(branch, sha)
        except RemoteError as exc:
            self.logger.debug("Could not create branch %s: %s", branch, exc)
        else:
            self.logger.info("Created branch %s", branch)
            return "created"

        try:
            await self.remote.update_ref(branch, sha, force=False)
        except RemoteError as exc:
            self.logger.warning("Branch %s has diverged from %s: %s", branch, default_branch, exc)
            self.logger.warning("Deleting and recreating branch to avoid destroying manual commits.")
        else:
            self.logger.info("Updated branch %s", branch)
            return "updated"

        try:
            await self.remote.delete_ref(branch)
            await self.remote.create_ref(branch, sha)
        except RemoteError as exc:
            raise PublishError(
                f"Branch {branch} has diverged and could not be recreated: {exc}. "
                "Please manually delete the branch and re-run the action."
            ) from exc
        self.logger.info("Recreated branch %s from %s", branch, default_branch)
        return "recreated"

    async def file_revision(self, path: str, branch: str) -> Optional[str]:
        """Return the revision marker of ``path`` on ``branch`` or ``None`` if absent."""
        try:
            remote_file = await self.remote.get_file_content(path, branch)
        except RemoteError:
            self.logger.debug("%s does not exist on %s yet", path, branch)
            return None
        if remote_file.type != "file":
            return None
        return remote_file.sha or None

    async def commit(self, request: PublishRequest) -> str:
        """Write the document to the working branch, retrying once with a fresh marker."""
        sha = await self.file_revision(request.path, request.branch)
        try:
            return await self.remote.create_or_update_file_content(
                request.path, request.content, request.title, request.branch, sha
            )
        except RemoteError as exc:
            self.logger.warning("File content update failed, retrying once: %s", exc)

        sha = await self.file_revision(request.path, request.branch)
        return await self.remote.create_or_update_file_content(
            request.path, request.content, request.title, request.branch, sha
        )

    async def open_pull_request(
        self, request: PublishRequest, base: str
    ) -> tuple[int, str, bool]:
        try:
            existing = await self.remote.list_pull_requests(request.branch, "open")
            if existing:
                current = existing[0]
                # Title and body are rewritten on every run, even when unchanged.
                await self.remote.update_pull_request(current.number, request.title, request.body)
                self.logger.info("Updated existing PR #%d", current.number)
                return current.number, current.html_url, False

            created = await self.remote.create_pull_request(
                request.title, request.body, request.branch, base
            )
        except RemoteError as exc:
            raise PublishError(
                f"Failed to create/update PR: {exc}. Badge changes were committed to "
                f"{request.branch} but PR could not be created."
            ) from exc
        self.logger.info("Created PR #%d: %s", created.number, created.html_url)
        return created.number, created.html_url, True


__all__ = ["PublishError", "PublishRequest", "PublishResult", "Publisher"]
