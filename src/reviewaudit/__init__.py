"""Audit a GitHub repository for pull requests merged without any review."""

__version__ = "0.1.0"
