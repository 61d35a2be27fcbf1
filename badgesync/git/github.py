"""GitHub REST implementation of the remote hosting collaborator."""

from __future__ import annotations

import base64
from typing import Any, List, Optional
from urllib.parse import quote

import httpx

from ..logging import get_logger
from .remote import GitRef, PullRequest, RemoteError, RemoteFile, RemoteNotFound, Repository

DEFAULT_API_URL = "https://api.github.com"
API_VERSION = "2022-11-28"


class GitHubClient:
    """Async client for the handful of GitHub endpoints the publisher uses."""

    def __init__(
        self,
        repository: str,
        token: str,
        *,
        api_url: str = DEFAULT_API_URL,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        owner, _, name = repository.partition("/")
        if not owner or not name:
            raise ValueError(f"Repository must be in 'owner/name' form, got '{repository}'")
        self.owner = owner
        self.name = name
        self.logger = get_logger("github")
        self._client = httpx.AsyncClient(
            base_url=api_url.rstrip("/"),
            headers={
                "Accept": "application/vnd.github+json",
                "Authorization": f"Bearer {token}",
                "X-GitHub-Api-Version": API_VERSION,
                "User-Agent": "badgesync",
            },
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "GitHubClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # ------------------------------------------------------------------
    # Repository and refs

    async def get_repository(self) -> Repository:
        data = await self._request("GET", self._repo_path())
        if not isinstance(data, dict) or not data.get("default_branch"):
            raise RemoteError("Repository response did not include a default branch")
        return Repository(
            full_name=data.get("full_name", f"{self.owner}/{self.name}"),
            default_branch=data["default_branch"],
        )

    async def get_ref(self, branch: str) -> GitRef:
        data = await self._request("GET", self._repo_path(f"git/ref/heads/{_quote_ref(branch)}"))
        return _to_ref(data)

    async def create_ref(self, branch: str, sha: str) -> GitRef:
        data = await self._request(
            "POST",
            self._repo_path("git/refs"),
            json={"ref": f"refs/heads/{branch}", "sha": sha},
        )
        return _to_ref(data)

    async def update_ref(self, branch: str, sha: str, *, force: bool) -> GitRef:
        data = await self._request(
            "PATCH",
            self._repo_path(f"git/refs/heads/{_quote_ref(branch)}"),
            json={"sha": sha, "force": force},
        )
        return _to_ref(data)

    async def delete_ref(self, branch: str) -> None:
        await self._request("DELETE", self._repo_path(f"git/refs/heads/{_quote_ref(branch)}"))

    # ------------------------------------------------------------------
    # Contents

    async def get_file_content(self, path: str, ref: str) -> RemoteFile:
        data = await self._request(
            "GET",
            self._repo_path(f"contents/{_quote_ref(path)}"),
            params={"ref": ref},
        )
        if isinstance(data, list):
            return RemoteFile(path=path, sha="", type="dir")
        if not isinstance(data, dict):
            raise RemoteError(f"Unexpected contents payload for {path}")
        return RemoteFile(
            path=data.get("path", path),
            sha=data.get("sha", ""),
            type=data.get("type", "file"),
            content=_decode_content(data),
        )

    async def create_or_update_file_content(
        self,
        path: str,
        content: str,
        message: str,
        branch: str,
        sha: Optional[str] = None,
    ) -> str:
        payload: dict[str, Any] = {
            "message": message,
            "content": base64.b64encode(content.encode("utf-8")).decode("ascii"),
            "branch": branch,
        }
        if sha:
            payload["sha"] = sha
        data = await self._request("PUT", self._repo_path(f"contents/{_quote_ref(path)}"), json=payload)
        commit = data.get("commit") or {}
        return str(commit.get("sha", ""))

    # ------------------------------------------------------------------
    # Pull requests

    async def list_pull_requests(self, head: str, state: str = "open") -> List[PullRequest]:
        data = await self._request(
            "GET",
            self._repo_path("pulls"),
            params={"head": f"{self.owner}:{head}", "state": state},
        )
        return [_to_pull_request(item) for item in data]

    async def create_pull_request(self, title: str, body: str, head: str, base: str) -> PullRequest:
        data = await self._request(
            "POST",
            self._repo_path("pulls"),
            json={"title": title, "body": body, "head": head, "base": base},
        )
        return _to_pull_request(data)

    async def update_pull_request(self, number: int, title: str, body: str) -> PullRequest:
        data = await self._request(
            "PATCH",
            self._repo_path(f"pulls/{number}"),
            json={"title": title, "body": body},
        )
        return _to_pull_request(data)

    # ------------------------------------------------------------------
    # Helpers

    def _repo_path(self, suffix: str = "") -> str:
        base = f"/repos/{self.owner}/{self.name}"
        return f"{base}/{suffix}" if suffix else base

    async def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        self.logger.debug("%s %s", method, url)
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            raise RemoteError(f"{method} {url} failed: {exc}") from exc

        if response.status_code >= 400:
            message = _error_message(response)
            error_cls = RemoteNotFound if response.status_code == 404 else RemoteError
            raise error_cls(message, status=response.status_code)

        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise RemoteError(f"{method} {url} returned invalid JSON") from exc


def _quote_ref(value: str) -> str:
    return quote(value, safe="/")


def _error_message(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict) and payload.get("message"):
        return str(payload["message"])
    return response.text.strip() or f"HTTP {response.status_code}"


def _decode_content(data: dict[str, Any]) -> Optional[str]:
    raw = data.get("content")
    if raw is None or data.get("encoding") != "base64":
        return None
    try:
        return base64.b64decode(raw).decode("utf-8")
    except (ValueError, UnicodeDecodeError):
        return None


def _to_ref(data: dict[str, Any]) -> GitRef:
    return GitRef(ref=data["ref"], sha=data["object"]["sha"])


def _to_pull_request(data: dict[str, Any]) -> PullRequest:
    head = data.get("head") or {}
    base = data.get("base") or {}
    return PullRequest(
        number=int(data["number"]),
        html_url=data.get("html_url", ""),
        title=data.get("title", ""),
        head=head.get("ref", ""),
        base=base.get("ref", ""),
    )


__all__ = ["DEFAULT_API_URL", "GitHubClient"]
