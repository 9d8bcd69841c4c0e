"""Render the digest text (Slack mrkdwn).

Layout:

    📬 *PR Digest* — Oct 17, 2026

    ━━━━━━━━━━━━━━━━━━━━
    📦 *Team Owned Repos*
    ━━━━━━━━━━━━━━━━━━━━

    *PR* | *Age* | *Author* | *Δ*


    *acme/core* — 2 open

    • <https://github.com/acme/core/pull/7|#7 Fix login>
      🕒 9d   |   👤 @alice   |   🧮 +10 / -2

Repositories are listed alphabetically; PRs within a repository oldest
first. The sub-header counts every open PR in the repository even when
only the first max_per_repo are listed.
"""

from collections.abc import Sequence
from datetime import date

from prdigest.classifier import Classification
from prdigest.models import PullRequest

SEPARATOR = "━━━━━━━━━━━━━━━━━━━━"
EMPTY_PLACEHOLDER = "_None today 🎉_"
COLUMNS_LINE = "*PR* | *Age* | *Author* | *Δ*"
DRAFT_MARKER = " 📝(draft)"
DIGEST_HEADER = "📬 *PR Digest* — {date}"
OWNED_TITLE = "📦 *Team Owned Repos*"
NON_OWNED_TITLE = "🧑‍💻 *Team PRs in Non-Owned Repos*"

# Fixed English abbreviations; strftime("%b") follows the process locale
MONTHS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]


def pretty_date(d: date) -> str:
    """Format as "Mon D, YYYY", e.g. "Oct 7, 2026"."""
    return f"{MONTHS[d.month - 1]} {d.day}, {d.year}"


def group_by_repo(prs: Sequence[PullRequest]) -> dict[str, list[PullRequest]]:
    """Sort oldest first (stable) and bucket by repo, preserving that order."""
    groups: dict[str, list[PullRequest]] = {}
    for pr in sorted(prs, key=lambda p: p.days, reverse=True):
        groups.setdefault(pr.repo, []).append(pr)
    return groups


def render_pr(pr: PullRequest) -> list[str]:
    draft = DRAFT_MARKER if pr.draft else ""
    return [
        f"• <{pr.url}|#{pr.number} {pr.title}>{draft}",
        f"  🕒 {pr.days}d   |   👤 @{pr.author}   |   🧮 +{pr.additions} / -{pr.deletions}",
        "",
    ]


def render_section(title: str, prs: Sequence[PullRequest], max_per_repo: int) -> list[str]:
    """Render one section as a list of lines."""
    lines = ["", SEPARATOR, title, SEPARATOR, ""]

    if not prs:
        lines.append(EMPTY_PLACEHOLDER)
        lines.append("")
        return lines

    groups = group_by_repo(prs)

    lines.append(COLUMNS_LINE)
    lines.append("")

    for repo in sorted(groups):
        repo_prs = groups[repo]
        lines.append("")
        lines.append(f"*{repo}* — {len(repo_prs)} open")
        lines.append("")
        for pr in repo_prs[:max_per_repo]:
            lines.extend(render_pr(pr))

    return lines


def render_digest(classification: Classification, max_per_repo: int, today: date) -> str:
    """Full digest: dated header, owned section, then non-owned section."""
    out = [DIGEST_HEADER.format(date=pretty_date(today))]
    out.extend(render_section(OWNED_TITLE, classification.owned, max_per_repo))
    out.extend(render_section(NON_OWNED_TITLE, classification.non_owned, max_per_repo))
    return "\n".join(out)
