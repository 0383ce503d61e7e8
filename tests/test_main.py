"""Tests for application orchestration in the main module."""

import sys
from argparse import Namespace
from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import MagicMock, Mock, patch

import pytest

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from reviewaudit.config import Config, TimeThreshold, TimeUnit
from reviewaudit.errors import AuthenticationError, RateLimitError, TransportError
from reviewaudit.main import (
    EXIT_AUTHENTICATION_ERROR,
    EXIT_CONFIGURATION_ERROR,
    EXIT_OK,
    EXIT_TRANSPORT_ERROR,
    EXIT_UNEXPECTED_ERROR,
    EXIT_UNREVIEWED_MERGES,
    orchestrate_scan,
)
from reviewaudit.models import PullRequestSummary, ScanResult


@pytest.fixture(autouse=True)
def _outside_actions(monkeypatch):
    monkeypatch.delenv("GITHUB_ACTIONS", raising=False)


def _args(**overrides) -> Namespace:
    values = dict(
        amount="24",
        unit="h",
        repository="octo/repo",
        api_url=None,
        identify_by="number",
        workers=1,
        per_page=None,
        verbose=False,
    )
    values.update(overrides)
    return Namespace(**values)


def _config() -> Config:
    return Config(
        owner="octo",
        repo="repo",
        threshold=TimeThreshold(amount=24, unit=TimeUnit.HOUR),
        token="secret",
    )


def _merged_pr(number: int) -> PullRequestSummary:
    return PullRequestSummary(
        id=100 + number,
        number=number,
        url=f"https://api.github.com/repos/octo/repo/pulls/{number}",
        html_url=f"https://github.com/octo/repo/pull/{number}",
        state="closed",
        merged_at=datetime(2020, 1, 1, tzinfo=timezone.utc),
    )


def test_orchestrate_scan_success_without_findings(capsys):
    """Verify orchestration returns 0 and wires components correctly on a clean scan."""
    config = _config()
    client = Mock()
    scanner = Mock()
    scanner.scan.return_value = ScanResult()

    with patch("reviewaudit.main.parse_args", return_value=_args()) as parse_args_mock, patch(
        "reviewaudit.main.load_config", return_value=config
    ) as load_config_mock, patch(
        "reviewaudit.main.GitHubClient"
    ) as client_ctor_mock, patch(
        "reviewaudit.main.UnreviewedMergeScanner", return_value=scanner
    ) as scanner_ctor_mock, patch(
        "reviewaudit.main.generate_report", return_value="REPORT"
    ) as report_mock:
        client_ctor_mock.return_value.__enter__.return_value = client
        exit_code = orchestrate_scan()

    assert exit_code == EXIT_OK
    parse_args_mock.assert_called_once_with(None)
    load_config_mock.assert_called_once_with(
        amount="24",
        unit="h",
        repository="octo/repo",
        api_url=None,
        identify_by="number",
        max_workers=1,
        per_page=None,
    )
    client_ctor_mock.assert_called_once_with(config=config)
    scanner_ctor_mock.assert_called_once_with(client=client, threshold=config.threshold, max_workers=1)
    scanner.scan.assert_called_once_with("octo", "repo")
    report_mock.assert_called_once_with(
        repository="octo/repo",
        result=scanner.scan.return_value,
        threshold=config.threshold,
        identify_by="number",
    )
    output = capsys.readouterr().out
    assert "Scanning closed pull requests for repository 'octo/repo'..." in output
    assert "REPORT" in output


def test_orchestrate_scan_with_unreviewed_merges_returns_failure(capsys, monkeypatch):
    """Verify a non-empty result fails the run and annotates GitHub Actions."""
    monkeypatch.setenv("GITHUB_ACTIONS", "true")
    client = MagicMock()
    client.iter_closed_pull_request_pages.return_value = iter([[_merged_pr(7)], [_merged_pr(9)]])
    client.iter_review_pages.side_effect = lambda owner, repo, number: iter([[]])

    with patch("reviewaudit.main.parse_args", return_value=_args()), patch(
        "reviewaudit.main.load_config", return_value=_config()
    ), patch("reviewaudit.main.GitHubClient") as client_ctor_mock:
        client_ctor_mock.return_value.__enter__.return_value = client
        exit_code = orchestrate_scan()

    assert exit_code == EXIT_UNREVIEWED_MERGES
    output = capsys.readouterr().out
    assert "#7 merged at" in output
    assert "#9 merged at" in output
    assert "::error::There are closed PRs that need code review" in output


def test_orchestrate_scan_invalid_amount_never_touches_network(monkeypatch):
    """Verify a malformed amount is a configuration error raised before any API call."""
    monkeypatch.setenv("GITHUB_TOKEN", "secret")

    with patch("reviewaudit.main.parse_args", return_value=_args(amount="abc")), patch(
        "reviewaudit.main.GitHubClient"
    ) as client_ctor_mock:
        exit_code = orchestrate_scan()

    assert exit_code == EXIT_CONFIGURATION_ERROR
    client_ctor_mock.assert_not_called()


def test_orchestrate_scan_missing_token_returns_auth_error():
    """Verify authentication failures return the authentication exit code."""
    with patch("reviewaudit.main.parse_args", return_value=_args()), patch(
        "reviewaudit.main.load_config",
        side_effect=AuthenticationError("Missing required GitHub token."),
    ):
        exit_code = orchestrate_scan()

    assert exit_code == EXIT_AUTHENTICATION_ERROR


@pytest.mark.parametrize("error", [TransportError("boom"), RateLimitError("slow down")])
def test_orchestrate_scan_transport_error_returns_transport_exit_code(error):
    """Verify API failures abort the scan with the transport exit code."""
    scanner = Mock()
    scanner.scan.side_effect = error

    with patch("reviewaudit.main.parse_args", return_value=_args()), patch(
        "reviewaudit.main.load_config", return_value=_config()
    ), patch("reviewaudit.main.GitHubClient"), patch(
        "reviewaudit.main.UnreviewedMergeScanner", return_value=scanner
    ), patch("reviewaudit.main.generate_report") as report_mock:
        exit_code = orchestrate_scan()

    assert exit_code == EXIT_TRANSPORT_ERROR
    report_mock.assert_not_called()


def test_orchestrate_scan_unexpected_error_returns_generic_exit_code():
    """Verify unexpected exceptions are mapped to the generic non-zero exit code."""
    with patch("reviewaudit.main.parse_args", side_effect=RuntimeError("boom")):
        exit_code = orchestrate_scan()

    assert exit_code == EXIT_UNEXPECTED_ERROR
