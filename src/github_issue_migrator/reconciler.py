"""
Per-item reconciliation between a source repository and a target repository.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .markers import build_marker, build_target_body, format_comment_attribution, marker_matches
from .models import MigrationDecision

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .models import Item, RepoRef
    from .protocols import IssueTracker
    from .rate_limit import RateLimiter

# Module-wide logger
logger: logging.Logger = logging.getLogger(__name__)


@dataclass
class ReconcileResult:
    """Outcome of reconciling one source item."""

    decision: MigrationDecision
    source_item: Item
    target_item: Item | None
    """Matching or newly created target item. Never None for SKIP or RESYNC."""
    comments_created: int = 0


def find_migrated(marker: str, target_items: Sequence[Item]) -> Item | None:
    """Return the first target item whose body carries the marker."""
    return next((item for item in target_items if marker_matches(item.body, marker)), None)


class Reconciler:
    """Decides between skip, resync and create for each source item and carries it out.

    Comments carry no marker of their own. If a run dies halfway through
    replaying an item's comments, the item itself is found on the next run and
    skipped, so the missing comments are not added. Deleting the partial target
    item and re-running replays all of them again.
    """

    def __init__(
        self,
        source: IssueTracker,
        target: IssueTracker,
        source_repo: RepoRef,
        rate_limiter: RateLimiter,
        *,
        attribute_comments: bool = False,
    ) -> None:
        self.source: IssueTracker = source
        self.target: IssueTracker = target
        self.source_repo: RepoRef = source_repo
        self.rate_limiter: RateLimiter = rate_limiter
        self.attribute_comments: bool = attribute_comments

    def marker_for(self, item: Item) -> str:
        return build_marker(item.kind, self.source_repo, item.number, item.html_url)

    def reconcile(self, item: Item, target_items: Sequence[Item]) -> ReconcileResult:
        """Bring one source item into the target repository.

        Args:
            item: Source item
            target_items: Known target items, including those created earlier in this run (read only)

        Returns:
            ReconcileResult describing what was done
        """
        marker = self.marker_for(item)
        existing = find_migrated(marker, target_items)

        if existing is None:
            return self._create(item, marker)

        if existing.state == item.state:
            logger.info(
                f"Skipping {item.kind} #{item.number} (already migrated to #{existing.number} and status is the same)"
            )
            return ReconcileResult(MigrationDecision.SKIP, item, existing)

        self.rate_limiter.call(
            lambda: self.target.update_item_state(existing.number, item.state),
            f"updating state of target #{existing.number}",
        )
        logger.info(
            f"Updated status of {item.kind} #{existing.number} to {item.state} "
            f"(already migrated from #{item.number})"
        )
        return ReconcileResult(MigrationDecision.RESYNC, item, existing)

    def _create(self, item: Item, marker: str) -> ReconcileResult:
        body = build_target_body(marker, item.body)
        labels = list(dict.fromkeys(item.labels))

        created = self.rate_limiter.call(
            lambda: self.target.create_item(item.title, body, labels),
            f"creating target for {item.kind} #{item.number}",
        )
        logger.debug(f"Created #{created.number} for {item.kind} #{item.number}")

        comments = self.rate_limiter.call(
            lambda: self.source.list_comments(item.number),
            f"listing comments of {item.kind} #{item.number}",
        )
        comments = sorted(comments, key=lambda c: c.created_at)
        for comment in comments:
            comment_body = format_comment_attribution(comment) if self.attribute_comments else comment.body
            self.rate_limiter.call(
                lambda: self.target.create_comment(created.number, comment_body),  # noqa: B023 - called immediately
                f"creating comment on target #{created.number}",
            )
            logger.debug(f"Migrated comment by {comment.author}")

        if item.state == "closed":
            self.rate_limiter.call(
                lambda: self.target.update_item_state(created.number, "closed"),
                f"closing target #{created.number}",
            )
            created.state = "closed"

        logger.info(f"Migrated {item.kind} #{item.number} -> #{created.number}")
        return ReconcileResult(MigrationDecision.CREATE, item, created, comments_created=len(comments))
