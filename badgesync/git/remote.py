"""Remote hosting collaborator used by the publisher.

The publisher only talks to the hosting platform through :class:`RemoteHost`,
which keeps the reconciliation logic testable against an in-memory fake.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Protocol


class RemoteError(RuntimeError):
    """Raised when a hosting API call fails."""

    def __init__(self, message: str, *, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.status = status


class RemoteNotFound(RemoteError):
    """Raised when the requested remote object does not exist."""


@dataclass(frozen=True)
class Repository:
    full_name: str
    default_branch: str


@dataclass(frozen=True)
class GitRef:
    ref: str
    sha: str


@dataclass(frozen=True)
class RemoteFile:
    """A path on a branch; ``sha`` is the revision marker.

    ``content`` is the decoded text when the platform returned it.
    """

    path: str
    sha: str
    type: str = "file"
    content: Optional[str] = None


@dataclass(frozen=True)
class PullRequest:
    number: int
    html_url: str
    title: str = ""
    head: str = ""
    base: str = ""


class RemoteHost(Protocol):
    """Operations the publisher needs from the hosting platform.

    Branch arguments are plain branch names (``main``, ``releaserun/badges``);
    implementations translate them to the platform's ref syntax.
    """

    async def get_repository(self) -> Repository: ...

    async def get_ref(self, branch: str) -> GitRef: ...

    async def create_ref(self, branch: str, sha: str) -> GitRef: ...

    async def update_ref(self, branch: str, sha: str, *, force: bool) -> GitRef: ...

    async def delete_ref(self, branch: str) -> None: ...

    async def get_file_content(self, path: str, ref: str) -> RemoteFile: ...

    async def create_or_update_file_content(
        self,
        path: str,
        content: str,
        message: str,
        branch: str,
        sha: Optional[str] = None,
    ) -> str: ...

    async def list_pull_requests(self, head: str, state: str = "open") -> List[PullRequest]: ...

    async def create_pull_request(
        self, title: str, body: str, head: str, base: str
    ) -> PullRequest: ...

    async def update_pull_request(self, number: int, title: str, body: str) -> PullRequest: ...


__all__ = [
    "GitRef",
    "PullRequest",
    "RemoteError",
    "RemoteFile",
    "RemoteHost",
    "RemoteNotFound",
    "Repository",
]
