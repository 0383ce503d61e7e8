"""Tests for command-line argument parsing."""

import sys
from pathlib import Path

import pytest

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from reviewaudit.cli import parse_args


@pytest.fixture(autouse=True)
def _no_action_inputs(monkeypatch):
    monkeypatch.delenv("INPUT_AMOUNT", raising=False)
    monkeypatch.delenv("INPUT_UNIT", raising=False)


def test_parse_args_with_valid_arguments():
    """Verify CLI parsing succeeds when all arguments are provided."""
    args = parse_args(
        [
            "--amount",
            "24",
            "--unit",
            "d",
            "--repository",
            "octo/repo",
            "--api-url",
            "https://ghe.example.com/api/v3",
            "--identify-by",
            "url",
            "--workers",
            "4",
            "--per-page",
            "100",
            "--verbose",
        ]
    )

    assert args.amount == "24"
    assert args.unit == "d"
    assert args.repository == "octo/repo"
    assert args.api_url == "https://ghe.example.com/api/v3"
    assert args.identify_by == "url"
    assert args.workers == 4
    assert args.per_page == 100
    assert args.verbose is True


def test_parse_args_defaults():
    """Verify defaults match a 5 hour threshold with sequential lookups."""
    args = parse_args([])

    assert args.amount == "5"
    assert args.unit == "h"
    assert args.repository is None
    assert args.api_url is None
    assert args.identify_by == "number"
    assert args.workers == 1
    assert args.per_page is None
    assert args.verbose is False


def test_parse_args_reads_action_inputs_from_environment(monkeypatch):
    """Verify INPUT_AMOUNT and INPUT_UNIT provide defaults inside GitHub Actions."""
    monkeypatch.setenv("INPUT_AMOUNT", "3")
    monkeypatch.setenv("INPUT_UNIT", "d")

    args = parse_args([])

    assert args.amount == "3"
    assert args.unit == "d"


def test_parse_args_keeps_invalid_amount_as_raw_string():
    """Verify amount validation is left to the configuration layer."""
    args = parse_args(["--amount", "abc"])

    assert args.amount == "abc"


@pytest.mark.parametrize("flag", ["--workers", "--per-page"])
def test_parse_args_with_non_positive_count_fails_validation(flag):
    """Verify CLI parsing exits with an error when counts are not positive."""
    with pytest.raises(SystemExit):
        parse_args([flag, "0"])


def test_parse_args_with_unknown_identifier_field_fails_validation():
    with pytest.raises(SystemExit):
        parse_args(["--identify-by", "title"])
