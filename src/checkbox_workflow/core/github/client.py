"""GitHub REST gateway for issue comments and issue bodies.

The gateway is an explicit object built once per run from the token and the
repository; nothing is configured globally. Transport is ``urllib.request``
with JSON bodies. Calls are not retried: an API failure raises
:class:`GitHubAPIError` and ends the run.
"""
from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, Iterator, List, Mapping, Optional, Protocol, Tuple
from urllib.error import HTTPError, URLError
from urllib.parse import urlencode
from urllib.request import Request, urlopen

from checkbox_workflow.core.checkbox.comments import has_state_metadata
from checkbox_workflow.core.exceptions import GitHubAPIError

from .models import Comment, Issue, Repository

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"
API_VERSION = "2022-11-28"

_NEXT_LINK = re.compile(r'<([^>]+)>\s*;\s*rel="next"')


class CommentGateway(Protocol):
    """Operations the workflow runner needs from the hosting API."""

    def find_comment(self, issue_number: int, action_id: str) -> Optional[Comment]: ...

    def create_comment(self, issue_number: int, body: str) -> Comment: ...

    def update_comment(self, comment_id: int, body: str) -> Comment: ...

    def get_issue(self, issue_number: int) -> Issue: ...

    def update_issue_body(self, issue_number: int, body: str) -> Issue: ...

    def create_or_update_comment(
        self, issue_number: int, action_id: str, body: str
    ) -> Tuple[Comment, bool]: ...

    def create_or_update_issue_body(
        self, issue_number: int, action_id: str, body: str
    ) -> Tuple[Issue, bool]: ...


def parse_repository(value: str) -> Repository:
    """Parse ``owner/name``.

    Raises:
        ValueError: If ``value`` is not exactly two non-empty segments.
    """
    parts = (value or "").strip().split("/")
    if len(parts) != 2 or not all(p.strip() for p in parts):
        raise ValueError(f"Repository must look like 'owner/name', got {value!r}")
    return Repository(owner=parts[0].strip(), name=parts[1].strip())


def next_page_url(link_header: Optional[str]) -> Optional[str]:
    """Return the ``rel="next"`` URL from a ``Link`` header, if any."""
    if not link_header:
        return None
    match = _NEXT_LINK.search(link_header)
    return match.group(1) if match else None


class GitHubClient:
    """Comment/issue gateway backed by the GitHub REST API."""

    def __init__(
        self,
        token: str,
        repository: Repository,
        *,
        api_url: str = DEFAULT_API_URL,
        timeout_seconds: float = 15.0,
        per_page: int = 100,
        user_agent: str = "checkbox-workflow",
    ) -> None:
        self._token = token
        self.repository = repository
        self.api_url = api_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.per_page = per_page
        self.user_agent = user_agent

    @classmethod
    def from_settings(
        cls, token: str, repository: Repository, settings: Mapping[str, Any]
    ) -> GitHubClient:
        gh = settings.get("github", {}) or {}
        return cls(
            token,
            repository,
            api_url=str(gh.get("api_url") or DEFAULT_API_URL),
            timeout_seconds=float(gh.get("timeout_seconds", 15.0)),
            per_page=int(gh.get("per_page", 100)),
            user_agent=str(gh.get("user_agent") or "checkbox-workflow"),
        )

    # ---- transport ---------------------------------------------------------

    def _repo_url(self, path: str, params: Optional[Dict[str, Any]] = None) -> str:
        url = f"{self.api_url}/repos/{self.repository.owner}/{self.repository.name}{path}"
        if params:
            url = f"{url}?{urlencode(params)}"
        return url

    def _headers(self) -> Dict[str, str]:
        return {
            "Accept": "application/vnd.github+json",
            "Authorization": f"Bearer {self._token}",
            "X-GitHub-Api-Version": API_VERSION,
            "User-Agent": self.user_agent,
        }

    def _request(
        self,
        method: str,
        url: str,
        payload: Optional[Dict[str, Any]] = None,
    ) -> Tuple[Any, Mapping[str, str]]:
        data = None
        headers = self._headers()
        if payload is not None:
            data = json.dumps(payload).encode("utf-8")
            headers["Content-Type"] = "application/json"

        logger.debug("%s %s", method, url)
        req = Request(url, data=data, headers=headers, method=method)
        try:
            with urlopen(req, timeout=self.timeout_seconds) as resp:
                raw = resp.read()
                resp_headers = resp.headers
        except HTTPError as exc:
            detail = ""
            try:
                body = json.loads(exc.read().decode("utf-8") or "{}")
                detail = str(body.get("message") or "") if isinstance(body, dict) else ""
            except (ValueError, OSError):
                detail = ""
            reason = detail or str(exc.reason or "")
            message = f"GitHub API {method} {url} failed with HTTP {exc.code}"
            if reason:
                message = f"{message}: {reason}"
            raise GitHubAPIError(
                message,
                status=exc.code,
                method=method,
                url=url,
            ) from exc
        except URLError as exc:
            raise GitHubAPIError(
                f"GitHub API {method} {url} failed: {exc.reason}",
                method=method,
                url=url,
            ) from exc

        if not raw:
            return None, resp_headers
        try:
            return json.loads(raw.decode("utf-8")), resp_headers
        except ValueError as exc:
            raise GitHubAPIError(
                f"GitHub API {method} {url} returned invalid JSON",
                method=method,
                url=url,
            ) from exc

    def _paginate(self, url: str) -> Iterator[List[Dict[str, Any]]]:
        next_url: Optional[str] = url
        while next_url:
            page, headers = self._request("GET", next_url)
            yield list(page or [])
            next_url = next_page_url(headers.get("Link") if headers else None)

    # ---- comments ----------------------------------------------------------

    def find_comment(self, issue_number: int, action_id: str) -> Optional[Comment]:
        """First comment whose body carries state metadata for ``action_id``.

        Stops paging as soon as a match is found.
        """
        url = self._repo_url(f"/issues/{issue_number}/comments", {"per_page": self.per_page})
        for page in self._paginate(url):
            for data in page:
                body = data.get("body") or ""
                if has_state_metadata(body, action_id):
                    return Comment.from_api(data)
        return None

    def create_comment(self, issue_number: int, body: str) -> Comment:
        data, _ = self._request(
            "POST", self._repo_url(f"/issues/{issue_number}/comments"), {"body": body}
        )
        return Comment.from_api(data)

    def update_comment(self, comment_id: int, body: str) -> Comment:
        data, _ = self._request(
            "PATCH", self._repo_url(f"/issues/comments/{comment_id}"), {"body": body}
        )
        return Comment.from_api(data)

    def create_or_update_comment(
        self, issue_number: int, action_id: str, body: str
    ) -> Tuple[Comment, bool]:
        """Update this action's comment, or create it. Returns ``(comment, is_new)``."""
        existing = self.find_comment(issue_number, action_id)
        if existing is not None:
            return self.update_comment(existing.id, body), False
        return self.create_comment(issue_number, body), True

    # ---- issues ------------------------------------------------------------

    def get_issue(self, issue_number: int) -> Issue:
        data, _ = self._request("GET", self._repo_url(f"/issues/{issue_number}"))
        return Issue.from_api(data)

    def update_issue_body(self, issue_number: int, body: str) -> Issue:
        data, _ = self._request("PATCH", self._repo_url(f"/issues/{issue_number}"), {"body": body})
        return Issue.from_api(data)

    def create_or_update_issue_body(
        self, issue_number: int, action_id: str, body: str
    ) -> Tuple[Issue, bool]:
        """Overwrite the issue body. ``is_new`` is True when no metadata existed before."""
        issue = self.get_issue(issue_number)
        had_metadata = has_state_metadata(issue.body, action_id)
        return self.update_issue_body(issue_number, body), not had_metadata


__all__ = [
    "API_VERSION",
    "DEFAULT_API_URL",
    "CommentGateway",
    "GitHubClient",
    "next_page_url",
    "parse_repository",
]
