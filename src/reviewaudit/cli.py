"""Command-line argument parsing for the unreviewed merge audit."""

from __future__ import annotations

import argparse
import os
from typing import Optional, Sequence

from .config import IDENTIFIER_FIELDS


def _positive_int(value: str) -> int:
    """Parse and validate a positive integer CLI value.

    Args:
        value: Raw command-line argument value.

    Returns:
        The validated positive integer.

    Raises:
        argparse.ArgumentTypeError: If value is not a positive integer.
    """
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError("must be an integer") from exc

    if parsed <= 0:
        raise argparse.ArgumentTypeError("must be greater than 0")

    return parsed


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments for the audit.

    ``--amount`` and ``--unit`` are kept as raw strings; they are validated by
    the configuration layer so that bad values surface as configuration errors.
    Both default to the ``INPUT_AMOUNT``/``INPUT_UNIT`` variables GitHub
    Actions sets for action inputs.

    Returns:
        Parsed CLI arguments.
    """
    parser = argparse.ArgumentParser(
        prog="unreviewed-merge-audit",
        description=(
            "Fail when a GitHub repository has pull requests that were merged "
            "longer ago than a threshold without receiving any review."
        ),
    )

    parser.add_argument(
        "--amount",
        default=os.getenv("INPUT_AMOUNT") or "5",
        help="How many units after merging a review may be missing (default: 5).",
    )
    parser.add_argument(
        "--unit",
        default=os.getenv("INPUT_UNIT") or "h",
        help='Threshold unit: "h" for hours or "d" for days (default: h).',
    )
    parser.add_argument(
        "--repository",
        default=None,
        help="Repository to audit as owner/repo (default: $GITHUB_REPOSITORY).",
    )
    parser.add_argument(
        "--api-url",
        default=None,
        help="GitHub REST API base URL (default: $GITHUB_API_URL or https://api.github.com).",
    )
    parser.add_argument(
        "--identify-by",
        choices=IDENTIFIER_FIELDS,
        default="number",
        help="Pull request field printed for flagged merges (default: number).",
    )
    parser.add_argument(
        "--workers",
        type=_positive_int,
        default=1,
        help="Concurrent review lookups per page of pull requests (default: 1).",
    )
    parser.add_argument(
        "--per-page",
        type=_positive_int,
        default=None,
        help="Page size to request from GitHub (default: the API default).",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log why each pull request was skipped.",
    )

    return parser.parse_args(argv)
