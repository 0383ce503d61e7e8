"""Detection of pull requests merged past the threshold without any review.

Business logic:
- Page through closed pull requests in the order GitHub returns them.
- Skip pull requests that were closed without merging.
- Skip pull requests merged less than the threshold ago.
- For the rest, page through reviews until the first one is seen.
- Keep the pull requests that have no reviews at all.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Callable, List, Optional

from .config import TimeThreshold
from .github_client import GitHubClient
from .models import PullRequestSummary, ScanResult
from .staleness import is_stale

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class UnreviewedMergeScanner:
    """Finds merged pull requests that never received a review."""

    def __init__(
        self,
        client: GitHubClient,
        threshold: TimeThreshold,
        clock: Optional[Callable[[], datetime]] = None,
        max_workers: int = 1,
    ) -> None:
        """Create a scanner.

        Args:
            client: API capability providing paged pull request and review listings.
            threshold: How long after merging a review may be outstanding.
            clock: Source of the current time, called once per scan.
            max_workers: Review lookups run concurrently within one listing page.
        """
        self._client = client
        self._threshold = threshold
        self._clock = clock or _utc_now
        self._max_workers = max(1, max_workers)

    def has_reviews(self, owner: str, repo: str, number: int) -> bool:
        """Return whether the pull request has at least one review.

        Pages are consumed in API order and iteration stops at the first
        non-empty page, so a reviewed pull request never exhausts pagination.
        """
        total_reviews = 0
        for reviews in self._client.iter_review_pages(owner, repo, number):
            total_reviews += len(reviews)
            if total_reviews > 0:
                return True
        return False

    def _is_unreviewed_merge(self, owner: str, repo: str, pr: PullRequestSummary, now: datetime) -> bool:
        if pr.merged_at is None:
            logger.debug("Skipping pull request without merge timestamp", extra={"pr_url": pr.url})
            return False

        if not is_stale(pr.merged_at, self._threshold, now):
            logger.debug(
                "Skipping pull request merged within threshold",
                extra={
                    "pr_url": pr.url,
                    "amount": self._threshold.amount,
                    "unit": self._threshold.unit.value,
                },
            )
            return False

        if self.has_reviews(owner, repo, pr.number):
            logger.debug("Skipping reviewed pull request", extra={"pr_url": pr.url})
            return False

        logger.debug("Pull request merged without review", extra={"pr_url": pr.url})
        return True

    def _filter_page(
        self,
        owner: str,
        repo: str,
        page: List[PullRequestSummary],
        now: datetime,
        executor: Optional[ThreadPoolExecutor],
    ) -> List[PullRequestSummary]:
        if executor is None:
            flags = [self._is_unreviewed_merge(owner, repo, pr, now) for pr in page]
        else:
            # map() yields in submission order and re-raises the first worker error.
            flags = list(executor.map(lambda pr: self._is_unreviewed_merge(owner, repo, pr, now), page))
        return [pr for pr, flagged in zip(page, flags) if flagged]

    def _count_candidates(self, page: List[PullRequestSummary], now: datetime) -> int:
        return sum(
            1 for pr in page if pr.merged_at is not None and is_stale(pr.merged_at, self._threshold, now)
        )

    def scan(self, owner: str, repo: str) -> ScanResult:
        """Scan every closed pull request of ``owner/repo``.

        Returns:
            A ``ScanResult`` listing unreviewed merges in listing order.

        Raises:
            TransportError: If any listing request fails. No partial result
                is returned in that case.
        """
        now = self._clock()
        result = ScanResult()

        executor: Optional[ThreadPoolExecutor] = None
        if self._max_workers > 1:
            executor = ThreadPoolExecutor(max_workers=self._max_workers)

        try:
            for page in self._client.iter_closed_pull_request_pages(owner, repo):
                result.pages_scanned += 1
                result.pull_requests_scanned += len(page)
                result.review_lookups += self._count_candidates(page, now)
                result.pull_requests.extend(self._filter_page(owner, repo, page, now, executor))
        finally:
            if executor is not None:
                executor.shutdown(wait=True)

        logger.info(
            "Scanned closed pull requests",
            extra={
                "repository": f"{owner}/{repo}",
                "pages": result.pages_scanned,
                "prs_total": result.pull_requests_scanned,
                "review_lookups": result.review_lookups,
                "unreviewed": len(result.pull_requests),
            },
        )

        return result
