"""
Custom exception classes for the GitHub issue migration tool.
"""

from __future__ import annotations


class MigrationError(Exception):
    """Base exception for migration errors."""


class ConfigurationError(MigrationError):
    """Raised when repository paths or credentials are malformed or missing."""


class RetryBudgetExhaustedError(MigrationError):
    """Raised when a rate-limited call keeps failing past the secondary retry budget."""

    def __init__(self, description: str, attempts: int) -> None:
        super().__init__(f"Gave up on {description} after {attempts} secondary rate limit hits")
        self.description: str = description
        self.attempts: int = attempts
