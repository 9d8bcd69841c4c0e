"""Pull request record collected for the digest (Pydantic)."""

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict

SECONDS_PER_DAY = 86400
UNKNOWN_AUTHOR = "unknown"


def _parse_iso(s: str) -> datetime:
    return datetime.fromisoformat(s.replace("Z", "+00:00"))


def days_open(created_at: str, now: datetime | None = None) -> int:
    """Whole days elapsed since created_at (floored)."""
    now = now or datetime.now(UTC)
    elapsed = (now - _parse_iso(created_at)).total_seconds()
    return int(elapsed // SECONDS_PER_DAY)


class PullRequest(BaseModel):
    """Open pull request as shown in the digest. Identity is the url."""

    model_config = ConfigDict(frozen=True)

    repo: str
    number: int
    title: str
    url: str
    author: str = UNKNOWN_AUTHOR
    days: int
    additions: int = 0
    deletions: int = 0
    draft: bool = False

    @classmethod
    def from_api(cls, repo: str, data: dict[str, Any], now: datetime | None = None) -> "PullRequest":
        """Build from a GitHub pull detail payload; optional fields get defaults here."""
        user = data.get("user") or {}
        additions = data.get("additions")
        deletions = data.get("deletions")
        return cls(
            repo=repo,
            number=data["number"],
            title=data.get("title") or "",
            url=data["html_url"],
            author=user.get("login") or UNKNOWN_AUTHOR,
            days=days_open(data["created_at"], now),
            additions=additions if additions is not None else 0,
            deletions=deletions if deletions is not None else 0,
            draft=bool(data.get("draft")),
        )
