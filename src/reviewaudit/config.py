"""Configuration parsing and validation for the unreviewed merge audit."""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import Optional, Tuple

from .errors import AuthenticationError, ConfigurationError

DEFAULT_API_URL = "https://api.github.com"
IDENTIFIER_FIELDS = ("number", "id", "url")
# Longest accepted threshold; larger windows cannot be added to a merge date.
MAX_THRESHOLD = timedelta(days=36500)

# Actions exports an input named "github-token" with its hyphen kept.
_TOKEN_ENV_VARS = ("GITHUB_TOKEN", "INPUT_GITHUB-TOKEN", "INPUT_GITHUB_TOKEN")


class TimeUnit(Enum):
    """Units accepted for the review threshold."""

    HOUR = "h"
    DAY = "d"


@dataclass(frozen=True)
class TimeThreshold:
    """How long after merging a pull request may remain without a review."""

    amount: int
    unit: TimeUnit

    @classmethod
    def parse(cls, amount: str, unit: str) -> "TimeThreshold":
        """Build a threshold from raw string inputs.

        Args:
            amount: Integer magnitude, e.g. ``"24"``.
            unit: ``"h"`` for hours or ``"d"`` for days.

        Returns:
            A validated ``TimeThreshold``.

        Raises:
            ConfigurationError: If ``amount`` is not a positive integer,
                ``unit`` is not exactly ``"h"`` or ``"d"``, or the
                threshold exceeds ``MAX_THRESHOLD``.
        """
        try:
            parsed_amount = int(str(amount).strip())
        except ValueError as exc:
            raise ConfigurationError(
                f"Invalid value for 'amount': expected an integer, got {amount!r}."
            ) from exc

        if parsed_amount <= 0:
            raise ConfigurationError(
                f"Invalid value for 'amount': expected an integer greater than 0, got {parsed_amount}."
            )

        try:
            parsed_unit = TimeUnit(unit)
        except ValueError as exc:
            raise ConfigurationError(
                f"Invalid value for 'unit': only \"h\" or \"d\" accepted, got {unit!r}."
            ) from exc

        threshold = cls(amount=parsed_amount, unit=parsed_unit)
        try:
            window = threshold.as_timedelta()
        except OverflowError:
            window = None
        if window is None or window > MAX_THRESHOLD:
            raise ConfigurationError(
                f"Invalid value for 'amount': threshold must not exceed {MAX_THRESHOLD.days} days."
            )

        return threshold

    def as_timedelta(self) -> timedelta:
        if self.unit is TimeUnit.DAY:
            return timedelta(days=self.amount)
        return timedelta(hours=self.amount)


@dataclass(frozen=True)
class Config:
    """Validated runtime settings used by the audit."""

    owner: str
    repo: str
    threshold: TimeThreshold
    token: str
    api_url: str = DEFAULT_API_URL
    identify_by: str = "number"
    max_workers: int = 1
    per_page: Optional[int] = None

    @property
    def repository(self) -> str:
        return f"{self.owner}/{self.repo}"


def parse_repository(value: str) -> Tuple[str, str]:
    """Split an ``owner/repo`` string into its two parts.

    Raises:
        ConfigurationError: If the value is not two non-empty segments.
    """
    parts = value.strip().split("/")
    if len(parts) != 2 or not all(part.strip() for part in parts):
        raise ConfigurationError(
            f"Invalid repository {value!r}: expected the form 'owner/repo'."
        )
    return parts[0].strip(), parts[1].strip()


def _read_token() -> str:
    for name in _TOKEN_ENV_VARS:
        token = os.getenv(name, "").strip()
        if token:
            return token
    return ""


def load_config(
    amount: str,
    unit: str,
    repository: Optional[str],
    api_url: Optional[str] = None,
    identify_by: str = "number",
    max_workers: int = 1,
    per_page: Optional[int] = None,
) -> Config:
    """Build and validate application configuration.

    Validation happens entirely before any network access. ``repository`` and
    ``api_url`` fall back to the ``GITHUB_REPOSITORY`` and ``GITHUB_API_URL``
    variables that GitHub Actions exports.

    Args:
        amount: Raw threshold magnitude.
        unit: Raw threshold unit, ``"h"`` or ``"d"``.
        repository: ``owner/repo`` to audit, or ``None`` to use the environment.
        api_url: GitHub REST API base URL.
        identify_by: Pull request field used when reporting flagged items.
        max_workers: Concurrent review lookups per listing page.
        per_page: Explicit page size, or ``None`` for the API default.

    Returns:
        A validated ``Config`` instance.

    Raises:
        ConfigurationError: If any setting is malformed.
        AuthenticationError: If no GitHub token is configured.
    """
    threshold = TimeThreshold.parse(amount, unit)

    repository = repository or os.getenv("GITHUB_REPOSITORY", "")
    if not repository:
        raise ConfigurationError(
            "Missing repository. Pass --repository owner/repo or set 'GITHUB_REPOSITORY'."
        )
    owner, repo = parse_repository(repository)

    if identify_by not in IDENTIFIER_FIELDS:
        raise ConfigurationError(
            f"Invalid value for 'identify_by': expected one of {', '.join(IDENTIFIER_FIELDS)}."
        )
    if max_workers <= 0:
        raise ConfigurationError("Invalid value for 'max_workers': expected an integer greater than 0.")
    if per_page is not None and per_page <= 0:
        raise ConfigurationError("Invalid value for 'per_page': expected an integer greater than 0.")

    token = _read_token()
    if not token:
        raise AuthenticationError(
            "Missing required GitHub token. "
            "Set the 'GITHUB_TOKEN' environment variable before running the audit."
        )

    return Config(
        owner=owner,
        repo=repo,
        threshold=threshold,
        token=token,
        api_url=(api_url or os.getenv("GITHUB_API_URL") or DEFAULT_API_URL).rstrip("/"),
        identify_by=identify_by,
        max_workers=max_workers,
        per_page=per_page,
    )
