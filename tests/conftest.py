"""
Pytest configuration and fixtures.

Provides in-memory stand-ins for the two collaborators of the migration
logic: an issue tracker recording every remote call, and a clock recording
every sleep instead of blocking.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

import pytest

from github_issue_migrator.models import Comment, Item, RepoRef

if TYPE_CHECKING:
    from collections.abc import Sequence

    from github_issue_migrator.models import ItemKind, ItemState

SOURCE_REPO = RepoRef("octo", "old-app")
TARGET_REPO = RepoRef("octo", "new-app")


class FakeClock:
    """Clock that advances instantly when asked to sleep."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now: float = start
        self.sleeps: list[float] = []

    def time(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class FakeTracker:
    """In-memory IssueTracker recording the remote calls made against it."""

    def __init__(self, repo_ref: RepoRef, items: Sequence[Item] = ()) -> None:
        self.repo_ref: RepoRef = repo_ref
        self.items: list[Item] = list(items)
        self.comments: dict[int, list[Comment]] = {}
        self.calls: list[tuple[object, ...]] = []

    def _next_number(self) -> int:
        return max((item.number for item in self.items), default=0) + 1

    def _get(self, number: int) -> Item:
        return next(item for item in self.items if item.number == number)

    def list_items(self) -> list[Item]:
        self.calls.append(("list_items",))
        # Newest first, like GitHub
        return sorted(self.items, key=lambda i: i.number, reverse=True)

    def list_comments(self, number: int) -> list[Comment]:
        self.calls.append(("list_comments", number))
        return list(self.comments.get(number, []))

    def create_item(self, title: str, body: str, labels: Sequence[str]) -> Item:
        self.calls.append(("create_item", title))
        number = self._next_number()
        item = Item(
            number=number,
            title=title,
            body=body,
            state="open",
            labels=list(labels),
            html_url=f"https://github.com/{self.repo_ref.full_name}/issues/{number}",
        )
        self.items.append(item)
        return replace(item, labels=list(labels))

    def update_item_state(self, number: int, state: ItemState) -> None:
        self.calls.append(("update_item_state", number, state))
        self._get(number).state = state

    def create_comment(self, number: int, body: str) -> None:
        self.calls.append(("create_comment", number, body))
        created_at = datetime(2024, 1, 1, tzinfo=UTC) + timedelta(minutes=len(self.comments.get(number, [])))
        self.comments.setdefault(number, []).append(Comment(number, "migrator", created_at, body))

    def remote_calls(self, name: str) -> list[tuple[object, ...]]:
        return [call for call in self.calls if call[0] == name]


def make_item(
    number: int,
    *,
    title: str | None = None,
    body: str = "",
    state: ItemState = "open",
    kind: ItemKind = "Issue",
    labels: list[str] | None = None,
    repo: RepoRef = SOURCE_REPO,
) -> Item:
    path = "pull" if kind == "PR" else "issues"
    return Item(
        number=number,
        title=title or f"Item {number}",
        body=body,
        state=state,
        kind=kind,
        labels=labels or [],
        html_url=f"https://github.com/{repo.full_name}/{path}/{number}",
        created_at=datetime(2024, 1, 1, tzinfo=UTC) + timedelta(days=number),
        author="alice",
    )


def make_comment(issue_number: int, minute: int, body: str, author: str = "bob") -> Comment:
    return Comment(issue_number, author, datetime(2024, 2, 1, 12, minute, tzinfo=UTC), body)


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def source_tracker() -> FakeTracker:
    return FakeTracker(SOURCE_REPO)


@pytest.fixture
def target_tracker() -> FakeTracker:
    return FakeTracker(TARGET_REPO)

