"""Digest pipeline: collect, classify, render."""

import logging
from datetime import UTC, datetime

from prdigest.adapters.base import GitPlatformAdapter
from prdigest.adapters.github import GitHubAdapter
from prdigest.classifier import classify
from prdigest.collector import collect_all
from prdigest.config import AppConfig
from prdigest.render import render_digest

LOG = logging.getLogger("prdigest.digest")


def make_adapter(config: AppConfig) -> GitPlatformAdapter:
    """GitHub adapter from config; runs unauthenticated when no token is found."""
    token = config.github_token_resolved
    if not token:
        LOG.warning("GITHUB_TOKEN not found. Using unauthenticated requests (limited rate).")
    return GitHubAdapter(token=token, api_url=config.github.api_url, timeout=config.github.timeout)


async def run_digest(
    config: AppConfig,
    adapter: GitPlatformAdapter,
    now: datetime | None = None,
) -> str:
    """Build the digest text with an already open adapter."""
    now = now or datetime.now(UTC)
    digest_cfg = config.digest
    LOG.info(
        "Building PR digest | org=%s | repos=%d | users=%d",
        digest_cfg.org,
        len(digest_cfg.repos),
        len(digest_cfg.users),
    )

    collection = await collect_all(adapter, digest_cfg, now)
    classification = classify(collection.values(), digest_cfg.team_repos)
    LOG.info(
        "Classified %d PRs: %d owned, %d non-owned",
        classification.total,
        len(classification.owned),
        len(classification.non_owned),
    )
    return render_digest(classification, digest_cfg.max_prs_per_repo, now.date())


async def build_digest(
    config: AppConfig,
    adapter: GitPlatformAdapter | None = None,
    now: datetime | None = None,
) -> str:
    """Build the digest; opens (and closes) a GitHub adapter unless one is given."""
    if adapter is not None:
        return await run_digest(config, adapter, now)
    async with make_adapter(config) as gh:
        return await run_digest(config, gh, now)
