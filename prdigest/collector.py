"""Collect open PRs from repo listings and author searches into one collection.

Both strategies write into the same PRCollection, keyed by PR url, so a PR
reached through a team repo and through a team member's search appears once.
The collection limit is checked before every repo, user, page and record;
once it is reached collection stops without error.
"""

import logging
import re
from datetime import datetime
from typing import Any

from prdigest.adapters.base import GitPlatformAdapter, NotFoundError
from prdigest.config import DigestConfig
from prdigest.models import PullRequest

LOG = logging.getLogger("prdigest.collector")

# https://api.github.com/repos/{owner}/{repo}/issues/{number}
ISSUE_URL_RE = re.compile(r"/repos/([^/]+)/([^/]+)/issues/(\d+)$")


class PRCollection:
    """PRs keyed by url; re-adding a url replaces the earlier entry."""

    def __init__(self, limit: int) -> None:
        self.limit = limit
        self._prs: dict[str, PullRequest] = {}

    def add(self, pr: PullRequest) -> None:
        self._prs[pr.url] = pr

    @property
    def is_full(self) -> bool:
        return len(self._prs) >= self.limit

    def values(self) -> list[PullRequest]:
        return list(self._prs.values())

    def __len__(self) -> int:
        return len(self._prs)

    def __contains__(self, url: object) -> bool:
        return url in self._prs


def normalize_repo(raw: Any) -> tuple[str, str] | None:
    """Split "owner/repo" into (owner, repo); None when either part is missing."""
    parts = str(raw or "").strip().split("/")
    owner = parts[0]
    name = parts[1] if len(parts) > 1 else ""
    if not owner or not name:
        return None
    return owner, name


def normalize_user(raw: Any) -> str | None:
    """Trim whitespace and one leading "@"; None when nothing is left."""
    user = str(raw or "").strip()
    if user.startswith("@"):
        user = user[1:]
    return user or None


def parse_issue_url(url: str) -> tuple[str, str, int] | None:
    """Extract (owner, repo, number) from an API issue url, or None."""
    match = ISSUE_URL_RE.search(url)
    if not match:
        return None
    return match.group(1), match.group(2), int(match.group(3))


def search_query(org: str, user: str) -> str:
    return f"is:pr is:open org:{org} author:{user}"


def _valid_number(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


async def add_pull(
    adapter: GitPlatformAdapter,
    repo: str,
    number: int,
    collection: PRCollection,
    now: datetime | None = None,
) -> bool:
    """Fetch PR details and add them; False when the PR is gone (404)."""
    try:
        pr = await adapter.get_pull(repo, number, now)
    except NotFoundError:
        LOG.debug("PR %s#%s not found, skipping", repo, number)
        return False
    collection.add(pr)
    return True


async def collect_repo(
    adapter: GitPlatformAdapter,
    repo_raw: Any,
    collection: PRCollection,
    now: datetime | None = None,
) -> None:
    """Add every open PR of one repository, in listing order."""
    parsed = normalize_repo(repo_raw)
    if parsed is None:
        LOG.debug("Skipping malformed repo entry: %r", repo_raw)
        return
    repo = "/".join(parsed)
    before = len(collection)
    async for page in adapter.list_open_pulls(repo):
        for item in page:
            if collection.is_full:
                break
            if not isinstance(item, dict) or not _valid_number(item.get("number")):
                continue
            await add_pull(adapter, repo, item["number"], collection, now)
        if collection.is_full:
            break
    LOG.info("Repo %s: %d PRs collected", repo, len(collection) - before)


async def collect_user(
    adapter: GitPlatformAdapter,
    org: str,
    user_raw: Any,
    collection: PRCollection,
    max_results: int,
    now: datetime | None = None,
) -> None:
    """Add open PRs authored by one user anywhere in the org."""
    user = normalize_user(user_raw)
    if user is None:
        return

    results: list[Any] = []
    async for page in adapter.search_issues(search_query(org, user)):
        results.extend(page)
        if len(results) >= max_results:
            break
    results = results[:max_results]

    before = len(collection)
    for item in results:
        if collection.is_full:
            break
        if not isinstance(item, dict) or not item.get("url"):
            continue
        parsed = parse_issue_url(str(item["url"]))
        if parsed is None:
            LOG.debug("Skipping search item with unexpected url: %s", item["url"])
            continue
        owner, name, number = parsed
        await add_pull(adapter, f"{owner}/{name}", number, collection, now)
    LOG.info("User @%s: %d search results, %d new PRs", user, len(results), len(collection) - before)


async def collect_all(
    adapter: GitPlatformAdapter,
    config: DigestConfig,
    now: datetime | None = None,
) -> PRCollection:
    """Collect repos first, then users, stopping once max_total_prs is reached."""
    collection = PRCollection(limit=config.max_total_prs)

    for repo in config.repos:
        if collection.is_full:
            break
        await collect_repo(adapter, repo, collection, now)

    for user in config.users:
        if collection.is_full:
            break
        await collect_user(
            adapter,
            config.org,
            user,
            collection,
            config.max_search_results_per_user,
            now,
        )

    if collection.is_full:
        LOG.warning("Reached max_total_prs=%d; collection stopped early", collection.limit)
    LOG.info("Collected %d unique PRs", len(collection))
    return collection
