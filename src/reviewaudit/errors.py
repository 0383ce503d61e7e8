"""Custom exception types for the unreviewed merge audit."""

from __future__ import annotations

from datetime import datetime
from typing import Optional


class AuditError(Exception):
    """Base exception for all expected audit failures."""


class ConfigurationError(AuditError):
    """Raised when runtime configuration values are missing or invalid."""


class AuthenticationError(ConfigurationError):
    """Raised when no GitHub token is available to authenticate API requests."""


class TransportError(AuditError):
    """Raised when a GitHub API request fails or returns an unexpected response."""


class RateLimitError(TransportError):
    """Raised when GitHub rejects a request because the rate limit is exhausted."""

    def __init__(self, message: str, reset_at: Optional[datetime] = None) -> None:
        super().__init__(message)
        self.reset_at = reset_at


class UnexpectedPayloadError(TransportError):
    """Raised when an API payload is not valid JSON or lacks required fields."""
