"""Domain models for the unreviewed merge audit.

These dataclasses model only the subset of GitHub payload fields the scan
needs. They are built by the API client and never mutated afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterator, List, Optional


@dataclass(frozen=True, slots=True)
class PullRequestSummary:
    """Represents one entry of the closed pull request listing."""

    id: int
    number: int
    url: str
    html_url: str
    state: str
    merged_at: Optional[datetime]


@dataclass(frozen=True, slots=True)
class Review:
    """Represents a submitted pull request review; only its existence matters."""

    id: int


@dataclass(slots=True)
class ScanResult:
    """Pull requests merged past the threshold without reviews, in listing order."""

    pull_requests: List[PullRequestSummary] = field(default_factory=list)
    pages_scanned: int = 0
    pull_requests_scanned: int = 0
    review_lookups: int = 0

    def __len__(self) -> int:
        return len(self.pull_requests)

    def __iter__(self) -> Iterator[PullRequestSummary]:
        return iter(self.pull_requests)

    def __bool__(self) -> bool:
        return bool(self.pull_requests)
