"""GitHub REST API adapter (aiohttp)."""

import json
import logging
from datetime import datetime
from typing import Any, AsyncIterator, Dict, List, Tuple

import aiohttp

from prdigest.adapters.base import GitPlatformAdapter, GitPlatformError, NotFoundError
from prdigest.models import PullRequest

LOG = logging.getLogger("prdigest.adapters.github")


class GitHubAdapter(GitPlatformAdapter):
    """GitHub API implementation."""

    PER_PAGE = 100
    USER_AGENT = "prdigest/0.1"

    def __init__(
        self,
        token: str | None = None,
        api_url: str = "https://api.github.com",
        timeout: int = 30,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self._api_url = api_url.rstrip("/")
        self._headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": self.USER_AGENT,
        }
        if token:
            self._headers["Authorization"] = f"token {token}"
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._session = session
        self._owns_session = session is None

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            self._session = aiohttp.ClientSession(timeout=self._timeout)
        return self._session

    async def close(self) -> None:
        if self._session is not None and self._owns_session:
            await self._session.close()
        self._session = None

    def _url(self, path: str) -> str:
        if path.startswith("http://") or path.startswith("https://"):
            return path
        return f"{self._api_url}{path}" if path.startswith("/") else f"{self._api_url}/{path}"

    async def _request(
        self,
        method: str,
        path: str,
        params: Dict[str, Any] | None = None,
    ) -> Tuple[Any, str | None]:
        """Perform one request; return decoded JSON and the rel="next" link, if any."""
        url = self._url(path)
        session = self._get_session()
        async with session.request(method, url, params=params, headers=self._headers) as resp:
            if resp.status >= 400:
                text = await resp.text()
                msg = text or resp.reason or str(resp.status)
                try:
                    msg = json.loads(text).get("message", msg)
                except (ValueError, AttributeError):
                    pass
                if resp.status == 404:
                    raise NotFoundError(f"404: {msg}")
                raise GitPlatformError(f"{resp.status}: {msg}")
            data = await resp.json(content_type=None)
            next_link = resp.links.get("next")
            next_url = str(next_link.get("url")) if next_link else None
            return data, next_url

    async def _paginate(self, path: str, params: Dict[str, Any]) -> AsyncIterator[Any]:
        """Follow Link: rel="next" until exhausted, yielding each decoded page."""
        url: str | None = path
        page_params: Dict[str, Any] | None = params
        while url:
            data, url = await self._request("GET", url, params=page_params)
            # The next link already carries the query string
            page_params = None
            yield data

    async def list_open_pulls(self, repo: str) -> AsyncIterator[List[Dict[str, Any]]]:
        params = {"state": "open", "per_page": self.PER_PAGE}
        async for page in self._paginate(f"/repos/{repo}/pulls", params):
            yield page if isinstance(page, list) else []

    async def get_pull(self, repo: str, pr_number: int, now: datetime | None = None) -> PullRequest:
        data, _ = await self._request("GET", f"/repos/{repo}/pulls/{pr_number}")
        return PullRequest.from_api(repo, data, now)

    async def search_issues(self, query: str) -> AsyncIterator[List[Dict[str, Any]]]:
        params = {"q": query, "per_page": self.PER_PAGE}
        async for page in self._paginate("/search/issues", params):
            items = page.get("items") if isinstance(page, dict) else None
            yield items if isinstance(items, list) else []
