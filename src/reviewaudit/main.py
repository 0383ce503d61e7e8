"""Entry point wiring configuration, the GitHub client, the scanner and reporting."""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional, Sequence

from .cli import parse_args
from .config import load_config
from .errors import AuthenticationError, ConfigurationError, TransportError
from .github_client import GitHubClient
from .report import format_identifier, generate_report
from .scanner import UnreviewedMergeScanner

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_UNEXPECTED_ERROR = 1
EXIT_CONFIGURATION_ERROR = 2
EXIT_AUTHENTICATION_ERROR = 3
EXIT_TRANSPORT_ERROR = 4
EXIT_UNREVIEWED_MERGES = 5


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _report_failure(message: str) -> None:
    """Log a failure and annotate the workflow run when inside GitHub Actions."""
    logger.error(message)
    if os.getenv("GITHUB_ACTIONS") == "true":
        print(f"::error::{message}")


def orchestrate_scan(argv: Optional[Sequence[str]] = None) -> int:
    """Run one audit and map its outcome to a process exit code."""
    try:
        args = parse_args(argv)
        configure_logging(verbose=args.verbose)

        config = load_config(
            amount=args.amount,
            unit=args.unit,
            repository=args.repository,
            api_url=args.api_url,
            identify_by=args.identify_by,
            max_workers=args.workers,
            per_page=args.per_page,
        )

        print(f"Scanning closed pull requests for repository '{config.repository}'...")
        with GitHubClient(config=config) as client:
            scanner = UnreviewedMergeScanner(
                client=client,
                threshold=config.threshold,
                max_workers=config.max_workers,
            )
            result = scanner.scan(config.owner, config.repo)

        print(
            generate_report(
                repository=config.repository,
                result=result,
                threshold=config.threshold,
                identify_by=config.identify_by,
            )
        )

        if len(result) > 0:
            logger.info(
                "The unreviewed PRs: %s",
                [format_identifier(pr, config.identify_by) for pr in result],
            )
            _report_failure("There are closed PRs that need code review")
            return EXIT_UNREVIEWED_MERGES

        return EXIT_OK
    except AuthenticationError as exc:
        _report_failure(str(exc))
        return EXIT_AUTHENTICATION_ERROR
    except ConfigurationError as exc:
        _report_failure(str(exc))
        return EXIT_CONFIGURATION_ERROR
    except TransportError as exc:
        _report_failure(str(exc))
        return EXIT_TRANSPORT_ERROR
    except Exception:
        logger.exception("Unexpected error while auditing pull requests")
        return EXIT_UNEXPECTED_ERROR


def main() -> None:
    raise SystemExit(orchestrate_scan())


if __name__ == "__main__":
    main()
