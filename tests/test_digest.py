"""End-to-end tests for the digest pipeline with an in-memory adapter."""

from unittest.mock import patch

import pytest

from prdigest.adapters.base import GitPlatformError
from prdigest.adapters.github import GitHubAdapter
from prdigest.config import AppConfig, DigestConfig, GitHubConfig
from prdigest.digest import build_digest, make_adapter
from prdigest.render import EMPTY_PLACEHOLDER, NON_OWNED_TITLE, OWNED_TITLE
from tests.fakes import NOW, FakeAdapter, pull_payload, search_item


def _config(**digest: object) -> AppConfig:
    return AppConfig(digest=DigestConfig(**digest))


@pytest.mark.asyncio
async def test_single_repo_digest() -> None:
    """Two PRs in one owned repo render oldest first under one sub-header."""
    adapter = FakeAdapter(
        listings={"acme/core": [[{"number": 5}, {"number": 7}]]},
        pulls={
            ("acme/core", 5): pull_payload("acme/core", 5, days=3),
            ("acme/core", 7): pull_payload("acme/core", 7, days=9),
        },
    )
    config = _config(org="acme", repos=["acme/core"], max_total_prs=10)

    text = await build_digest(config, adapter, NOW)
    lines = text.split("\n")

    assert lines[0] == "📬 *PR Digest* — Oct 17, 2026"
    owned = lines[lines.index(OWNED_TITLE):lines.index(NON_OWNED_TITLE)]
    non_owned = lines[lines.index(NON_OWNED_TITLE):]
    assert "*acme/core* — 2 open" in owned
    pr_lines = [line for line in owned if line.startswith("• ")]
    assert pr_lines == [
        "• <https://github.com/acme/core/pull/7|#7 PR 7>",
        "• <https://github.com/acme/core/pull/5|#5 PR 5>",
    ]
    assert EMPTY_PLACEHOLDER in non_owned
    assert adapter.calls[0] == ("list", "acme/core", 0)


@pytest.mark.asyncio
async def test_owned_and_non_owned_sections() -> None:
    """Search results outside team repos go to the non-owned section, once each."""
    adapter = FakeAdapter(
        listings={"acme/core": [[{"number": 1}]]},
        searches={
            "is:pr is:open org:acme author:alice": [
                [search_item("acme/core", 1), search_item("acme/infra", 4)]
            ]
        },
        pulls={
            ("acme/core", 1): pull_payload("acme/core", 1, days=2),
            ("acme/infra", 4): pull_payload("acme/infra", 4, days=5, user={"login": "alice"}),
        },
    )
    config = _config(org="acme", repos=["acme/core"], users=["@alice"])

    text = await build_digest(config, adapter, NOW)
    lines = text.split("\n")

    owned = lines[lines.index(OWNED_TITLE):lines.index(NON_OWNED_TITLE)]
    non_owned = lines[lines.index(NON_OWNED_TITLE):]
    assert "*acme/core* — 1 open" in owned
    assert "*acme/infra* — 1 open" in non_owned
    assert "  🕒 5d   |   👤 @alice   |   🧮 +10 / -2" in non_owned
    assert text.count("|#1 ") == 1


@pytest.mark.asyncio
async def test_platform_error_propagates() -> None:
    """A non-404 API failure aborts the digest."""
    adapter = FakeAdapter(
        listings={"acme/core": [[{"number": 1}]]},
        pulls={("acme/core", 1): GitPlatformError("500: server error")},
    )

    with pytest.raises(GitPlatformError):
        await build_digest(_config(org="acme", repos=["acme/core"]), adapter, NOW)


@pytest.mark.asyncio
async def test_build_digest_opens_and_closes_own_adapter() -> None:
    """Without an adapter, one is made from config and closed afterwards."""
    fake = FakeAdapter(listings={"acme/core": [[]]})
    config = _config(org="acme", repos=["acme/core"])

    with patch("prdigest.digest.make_adapter", return_value=fake):
        text = await build_digest(config, now=NOW)

    assert fake.closed is True
    assert text.count(EMPTY_PLACEHOLDER) == 2


def test_make_adapter_uses_github_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    """make_adapter passes token and api_url through."""
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    config = AppConfig(
        digest=DigestConfig(org="acme", repos=["acme/core"]),
        github=GitHubConfig(token="abc", api_url="https://ghe.example.com/api/v3/"),
    )

    adapter = make_adapter(config)

    assert isinstance(adapter, GitHubAdapter)
    assert adapter._api_url == "https://ghe.example.com/api/v3"
    assert adapter._headers["Authorization"] == "token abc"
