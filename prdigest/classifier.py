"""Split collected PRs into team-owned and non-owned repositories."""

from collections.abc import Iterable

from pydantic import BaseModel, Field

from prdigest.models import PullRequest


class Classification(BaseModel):
    """Disjoint partition of the collected PRs."""

    owned: list[PullRequest] = Field(default_factory=list)
    non_owned: list[PullRequest] = Field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.owned) + len(self.non_owned)


def classify(prs: Iterable[PullRequest], team_repos: Iterable[str]) -> Classification:
    """A PR is owned iff its repo exactly matches one of team_repos."""
    team_set = {str(r or "").strip() for r in team_repos}
    result = Classification()
    for pr in prs:
        if pr.repo in team_set:
            result.owned.append(pr)
        else:
            result.non_owned.append(pr)
    return result
