"""Threshold check deciding whether a merged pull request is old enough to audit."""

from __future__ import annotations

from datetime import datetime, timezone

from .config import TimeThreshold


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def is_stale(merged_at: datetime, threshold: TimeThreshold, now: datetime) -> bool:
    """Return whether ``now`` is at or past ``merged_at`` plus the threshold.

    The boundary is inclusive: a pull request merged exactly ``threshold`` ago
    is stale. Naive datetimes are interpreted as UTC. A deadline past the last
    representable datetime is never reached.
    """
    try:
        deadline = _as_utc(merged_at) + threshold.as_timedelta()
    except OverflowError:
        return False
    return _as_utc(now) >= deadline
