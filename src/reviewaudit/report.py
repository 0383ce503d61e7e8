"""Formatting helpers for unreviewed merge reporting.

This module provides utilities for:
- Rendering a pull request identifier by number, id or URL.
- Describing a time threshold in words.
- Building a human-readable report for a scan result.
"""

from __future__ import annotations

from typing import List

from .config import TimeThreshold, TimeUnit
from .models import PullRequestSummary, ScanResult


def format_identifier(pr: PullRequestSummary, identify_by: str = "number") -> str:
    """Render the field used to identify a flagged pull request.

    Args:
        pr: Flagged pull request.
        identify_by: ``"number"``, ``"id"`` or ``"url"``.

    Returns:
        ``#<number>``, the numeric id, or the browser URL (falling back to the
        API URL when GitHub did not send one).

    Raises:
        ValueError: If ``identify_by`` is not a known field.
    """
    if identify_by == "number":
        return f"#{pr.number}"
    if identify_by == "id":
        return str(pr.id)
    if identify_by == "url":
        return pr.html_url or pr.url
    raise ValueError(f"Unknown identifier field: {identify_by!r}")


def describe_threshold(threshold: TimeThreshold) -> str:
    """Describe a threshold in words, e.g. ``"24 hours"`` or ``"1 day"``."""
    noun = "day" if threshold.unit is TimeUnit.DAY else "hour"
    if threshold.amount != 1:
        noun += "s"
    return f"{threshold.amount} {noun}"


def generate_report(
    repository: str,
    result: ScanResult,
    threshold: TimeThreshold,
    identify_by: str = "number",
) -> str:
    """Generate a human-readable audit report for a repository.

    Args:
        repository: ``owner/repo`` display name.
        result: Completed scan result.
        threshold: Threshold the scan was run with.
        identify_by: Field used to identify flagged pull requests.

    Returns:
        Formatted multi-line text report.
    """
    lines: List[str] = [
        f"Repository: {repository}",
        f"Unreviewed merges older than {describe_threshold(threshold)}",
        "",
        f"   Pages scanned: {result.pages_scanned}",
        f"   Closed PRs scanned: {result.pull_requests_scanned}",
        f"   Review lookups: {result.review_lookups}",
        "",
    ]

    if not result:
        lines.append("No unreviewed merges found.")
        return "\n".join(lines)

    lines.append(f"Unreviewed merges: {len(result)}")
    for pr in result:
        merged = pr.merged_at.isoformat() if pr.merged_at else "n/a"
        lines.append(f"   {format_identifier(pr, identify_by)} merged at {merged}")

    return "\n".join(lines)
