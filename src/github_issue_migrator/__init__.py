"""
GitHub Issue Migration Tool

Migrates issues, pull request records and their comments from one GitHub
repository to another. Safe to re-run: already migrated items are found
through a provenance marker in their body and skipped or resynced.
"""

from __future__ import annotations

from .cli import main
from .exceptions import ConfigurationError, MigrationError, RetryBudgetExhaustedError
from .models import Comment, Item, MigrationDecision, RepoRef
from .orchestrator import MigrationStats, Migrator
from .rate_limit import RateLimiter
from .reconciler import Reconciler
from .utils import setup_logging

# Package version
__version__ = "0.1.0"

__all__ = [
    "Comment",
    "ConfigurationError",
    "Item",
    "MigrationDecision",
    "MigrationError",
    "MigrationStats",
    "Migrator",
    "RateLimiter",
    "Reconciler",
    "RepoRef",
    "RetryBudgetExhaustedError",
    "main",
    "setup_logging",
]
