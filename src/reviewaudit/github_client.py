"""GitHub REST API client for pull request and review retrieval."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Optional, Tuple

import requests

from .config import Config
from .errors import RateLimitError, TransportError, UnexpectedPayloadError
from .models import PullRequestSummary, Review

logger = logging.getLogger(__name__)


class GitHubClient:
    """Small, typed client for the GitHub pull request APIs used by the audit.

    Requests are not retried; any failure is raised as ``TransportError`` and
    retry policy is left to whatever invokes the audit.
    """

    _API_VERSION = "2022-11-28"

    def __init__(self, config: Config, timeout_seconds: int = 30) -> None:
        """Initialize an authenticated GitHub API client.

        Args:
            config: Validated runtime configuration including API URL and token.
            timeout_seconds: Per-request timeout in seconds.
        """
        self._config = config
        self._timeout_seconds = timeout_seconds
        self._base_url = config.api_url.rstrip("/")

        self._session = requests.Session()
        self._session.headers.update(
            {
                "Accept": "application/vnd.github+json",
                "Authorization": f"Bearer {config.token}",
                "X-GitHub-Api-Version": self._API_VERSION,
            }
        )

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> "GitHubClient":
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def _build_url(self, path: str) -> str:
        """Build a fully qualified API URL from a path below the API root."""
        return f"{self._base_url}/{path.lstrip('/')}"

    def _parse_datetime(self, value: Any) -> Optional[datetime]:
        """Parse GitHub ISO8601 timestamps into timezone-aware datetimes."""
        if value is None or value == "":
            return None
        if not isinstance(value, str):
            raise UnexpectedPayloadError(f"GitHub API returned a non-string timestamp: {value!r}")

        normalized = value[:-1] + "+00:00" if value.endswith("Z") else value
        try:
            parsed = datetime.fromisoformat(normalized)
        except ValueError as exc:
            raise UnexpectedPayloadError(f"GitHub API returned an invalid timestamp: {value!r}") from exc
        if parsed.tzinfo is None:
            return parsed.replace(tzinfo=timezone.utc)
        return parsed

    def _rate_limit_reset(self, response: requests.Response) -> Optional[datetime]:
        reset_header = response.headers.get("X-RateLimit-Reset")
        if not reset_header:
            return None
        try:
            return datetime.fromtimestamp(int(reset_header), tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None

    def _is_rate_limited(self, response: requests.Response) -> bool:
        if response.status_code == 429:
            return True
        return response.status_code == 403 and response.headers.get("X-RateLimit-Remaining") == "0"

    def _get_page(self, url: str, params: Optional[Dict[str, Any]] = None) -> Tuple[List[Any], Optional[str]]:
        """Fetch one page of a list endpoint.

        Returns:
            The decoded list payload and the URL of the next page, if any.

        Raises:
            RateLimitError: If GitHub reports the rate limit as exhausted.
            TransportError: If the request fails or returns HTTP >= 400.
            UnexpectedPayloadError: If the body is not a JSON list.
        """
        try:
            response = self._session.get(url, params=params, timeout=self._timeout_seconds)
        except requests.RequestException as exc:
            raise TransportError(f"GitHub request failed: GET {url}") from exc

        if self._is_rate_limited(response):
            reset_at = self._rate_limit_reset(response)
            raise RateLimitError(
                f"GitHub API rate limit exceeded: GET {url} returned {response.status_code}",
                reset_at=reset_at,
            )

        if response.status_code >= 400:
            raise TransportError(
                "GitHub API request failed: "
                f"GET {url} returned {response.status_code} - {response.text}"
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise UnexpectedPayloadError(f"GitHub API returned invalid JSON: GET {url}") from exc

        if not isinstance(payload, list):
            raise UnexpectedPayloadError(f"GitHub API returned unexpected payload shape: GET {url}")

        next_url = (response.links or {}).get("next", {}).get("url")
        return payload, next_url

    def _iter_pages(self, path: str, params: Optional[Dict[str, Any]] = None) -> Iterator[List[Any]]:
        """Yield raw pages in API order, following ``rel="next"`` links until exhausted."""
        query: Dict[str, Any] = dict(params or {})
        if self._config.per_page is not None:
            query["per_page"] = self._config.per_page

        url: Optional[str] = self._build_url(path)
        page_params: Optional[Dict[str, Any]] = query
        page_number = 0

        while url:
            page_number += 1
            items, url = self._get_page(url, params=page_params)
            # The next link already carries every query parameter.
            page_params = None
            logger.debug(
                "Fetched page",
                extra={"path": path, "page": page_number, "items": len(items)},
            )
            yield items

    def _to_pull_request(self, item: Any) -> PullRequestSummary:
        if not isinstance(item, dict):
            raise UnexpectedPayloadError(f"GitHub pull request payload is not an object: {item!r}")

        pr_id = item.get("id")
        number = item.get("number")
        url = item.get("url")
        state = item.get("state")

        if pr_id is None or number is None or not url or not state:
            raise UnexpectedPayloadError(
                "GitHub pull request payload is missing required fields: "
                f"payload={item}"
            )

        try:
            pr_id = int(pr_id)
            number = int(number)
        except (TypeError, ValueError) as exc:
            raise UnexpectedPayloadError(
                f"GitHub pull request payload has non-integer id or number: payload={item}"
            ) from exc

        return PullRequestSummary(
            id=pr_id,
            number=number,
            url=str(url),
            html_url=str(item.get("html_url") or ""),
            state=str(state),
            merged_at=self._parse_datetime(item.get("merged_at")),
        )

    def _to_review(self, item: Any) -> Review:
        if not isinstance(item, dict) or item.get("id") is None:
            raise UnexpectedPayloadError(f"GitHub review payload is missing required fields: payload={item}")
        try:
            return Review(id=int(item["id"]))
        except (TypeError, ValueError) as exc:
            raise UnexpectedPayloadError(f"GitHub review payload has a non-integer id: payload={item}") from exc

    def iter_closed_pull_request_pages(self, owner: str, repo: str) -> Iterator[List[PullRequestSummary]]:
        """Yield pages of closed pull requests in the order GitHub returns them."""
        for items in self._iter_pages(f"repos/{owner}/{repo}/pulls", params={"state": "closed"}):
            yield [self._to_pull_request(item) for item in items]

    def iter_review_pages(self, owner: str, repo: str, number: int) -> Iterator[List[Review]]:
        """Yield pages of submitted reviews for one pull request.

        Inline review comments are a separate collection and are not included.
        """
        for items in self._iter_pages(f"repos/{owner}/{repo}/pulls/{number}/reviews"):
            yield [self._to_review(item) for item in items]
