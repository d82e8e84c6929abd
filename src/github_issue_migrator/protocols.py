"""Protocols for the collaborators the migration logic talks to.

Two seams keep the reconciliation and retry logic independent of the network
and the wall clock:

1. IssueTracker: the remote issue tracker (one instance per repository)
2. Clock: time source and sleeper used by the rate limiter

Production code wires GitHubTracker and SystemClock; tests substitute
in-memory fakes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .models import Comment, Item, ItemState


class IssueTracker(Protocol):
    """Protocol for one repository on a remote issue tracker.

    Every method performs raw remote calls. Implementations must not retry or
    sleep on their own; callers route each call through RateLimiter.call().
    """

    def list_items(self) -> list[Item]:
        """Return every issue and pull request, open and closed.

        The order is whatever the remote listing yields (newest first on GitHub).
        """
        ...

    def list_comments(self, number: int) -> list[Comment]:
        """Return all comments of an item in a single full listing."""
        ...

    def create_item(self, title: str, body: str, labels: Sequence[str]) -> Item:
        """Create a new issue and return it as it now exists on the tracker."""
        ...

    def update_item_state(self, number: int, state: ItemState) -> None:
        """Open or close an existing item."""
        ...

    def create_comment(self, number: int, body: str) -> None:
        """Append a comment to an existing item."""
        ...


class Clock(Protocol):
    """Time source for backoff computations."""

    def time(self) -> float:
        """Return the current time as epoch seconds."""
        ...

    def sleep(self, seconds: float) -> None:
        """Block for the given number of seconds."""
        ...
