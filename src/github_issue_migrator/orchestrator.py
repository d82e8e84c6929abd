"""Migration driver that walks the source repository and reconciles each item.

Migration Flow
--------------
Phase 1: Snapshot
    - List every source item (open and closed) once
    - List every target item (open and closed) once

Phase 2: Items, oldest first
    For each source item, in ascending number order:
        a. Build the provenance marker
        b. Search the known target items for it
        c. Skip, resync the open/closed state, or create the item with its
           labels, replay its comments and close it if needed

    GitHub lists issues newest first. Processing ascending keeps the target
    numbering in the same chronological order as the source.

Target Item Set
---------------
The target items listed in phase 1 are never re-fetched. Items created
during the run are appended to the same list, so a later source item (or a
duplicated marker) sees them without another API call.

Error Handling
--------------
Nothing is caught here. A hard API failure or an exhausted retry budget
aborts the run; re-running resumes safely because completed items are found
again through their markers.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .models import MigrationDecision
from .rate_limit import RateLimiter
from .reconciler import Reconciler

if TYPE_CHECKING:
    from .models import Item, RepoRef
    from .protocols import IssueTracker

logger = logging.getLogger(__name__)


@dataclass
class MigrationStats:
    """Statistics collected during migration."""

    items_created: int = 0
    items_resynced: int = 0
    items_skipped: int = 0
    comments_created: int = 0
    pull_requests_skipped: int = 0


class Migrator:
    """Migrates all issues and pull requests from one repository to another.

    Usage:
        source = GitHubTracker(client, parse_repo_path("octo/old"))
        target = GitHubTracker(client, parse_repo_path("octo/new"))
        stats = Migrator(source, target, source.repo_ref).migrate()

    The migrator keeps no state between runs. Progress is re-derived from the
    target repository's content each time.
    """

    _source: IssueTracker
    _target: IssueTracker

    def __init__(
        self,
        source: IssueTracker,
        target: IssueTracker,
        source_repo: RepoRef,
        rate_limiter: RateLimiter | None = None,
        *,
        skip_pull_requests: bool = False,
        attribute_comments: bool = False,
    ) -> None:
        """Initialize the migrator.

        Args:
            source: Tracker for the repository to migrate from
            target: Tracker for the repository to migrate to
            source_repo: Source owner/name, embedded in provenance markers
            rate_limiter: Limiter wrapping every remote call (default settings if omitted)
            skip_pull_requests: Leave pull request records out of the migration
            attribute_comments: Prefix replayed comments with original author and date
        """
        self._source = source
        self._target = target
        self.rate_limiter: RateLimiter = rate_limiter or RateLimiter()
        self.skip_pull_requests: bool = skip_pull_requests
        self.reconciler: Reconciler = Reconciler(
            source,
            target,
            source_repo,
            self.rate_limiter,
            attribute_comments=attribute_comments,
        )

    def migrate(self) -> MigrationStats:
        """Execute the full migration.

        Returns:
            MigrationStats for the run

        Raises:
            RetryBudgetExhaustedError: If a call stays rate limited past the retry budget
            GithubException: On any other API failure
        """
        logger.info("Migrating issues")
        stats = MigrationStats()

        source_items = self.rate_limiter.call(self._source.list_items, "listing source items")
        target_items: list[Item] = self.rate_limiter.call(self._target.list_items, "listing target items")
        logger.info(f"Found {len(source_items)} source items and {len(target_items)} target items")

        for position, item in enumerate(sorted(source_items, key=lambda i: i.number), start=1):
            if self.skip_pull_requests and item.is_pull_request:
                logger.debug(f"Skipping PR #{item.number} (pull requests excluded)")
                stats.pull_requests_skipped += 1
                continue

            logger.info(f"{position}) Migrating {item.kind} #{item.number}...\n\tTitle: {item.title}")
            result = self.reconciler.reconcile(item, target_items)

            if result.decision is MigrationDecision.CREATE:
                assert result.target_item is not None  # always set on create
                target_items.append(result.target_item)
                stats.items_created += 1
                stats.comments_created += result.comments_created
            elif result.decision is MigrationDecision.RESYNC:
                stats.items_resynced += 1
            else:
                stats.items_skipped += 1

        logger.info(
            f"Migration finished: {stats.items_created} created, {stats.items_resynced} resynced, "
            f"{stats.items_skipped} skipped, {stats.comments_created} comments"
        )
        return stats
