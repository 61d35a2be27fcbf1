"""Remote hosting access and branch/PR reconciliation."""

from .github import GitHubClient
from .publisher import PublishError, PublishRequest, PublishResult, Publisher
from .remote import RemoteError, RemoteHost, RemoteNotFound

__all__ = [
    "GitHubClient",
    "PublishError",
    "PublishRequest",
    "PublishResult",
    "Publisher",
    "RemoteError",
    "RemoteHost",
    "RemoteNotFound",
]
