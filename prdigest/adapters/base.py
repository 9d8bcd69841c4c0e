"""Abstract base for Git platform adapters."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, AsyncIterator, Dict, List

from prdigest.models import PullRequest


class GitPlatformError(Exception):
    """Raised when a Git platform API call fails."""

    pass


class NotFoundError(GitPlatformError):
    """Raised when the requested resource does not exist (HTTP 404)."""

    pass


class GitPlatformAdapter(ABC):
    """Read-only interface to a Git hosting platform.

    All calls are coroutines; callers await them one at a time.
    """

    @abstractmethod
    def list_open_pulls(self, repo: str) -> AsyncIterator[List[Dict[str, Any]]]:
        """Yield pages of open pull request summaries for owner/repo."""
        ...

    @abstractmethod
    async def get_pull(self, repo: str, pr_number: int, now: datetime | None = None) -> PullRequest:
        """Fetch one pull request with full details.

        Raises NotFoundError when it no longer exists.
        """
        ...

    @abstractmethod
    def search_issues(self, query: str) -> AsyncIterator[List[Dict[str, Any]]]:
        """Yield pages of issue/PR search result items."""
        ...

    async def close(self) -> None:
        """Release network resources. Override if needed."""
        return None

    async def __aenter__(self) -> "GitPlatformAdapter":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()
