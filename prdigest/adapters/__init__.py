"""Git platform adapters (base and implementations)."""

from prdigest.adapters.base import GitPlatformAdapter, GitPlatformError, NotFoundError
from prdigest.adapters.github import GitHubAdapter

__all__ = ["GitPlatformAdapter", "GitPlatformError", "GitHubAdapter", "NotFoundError"]
