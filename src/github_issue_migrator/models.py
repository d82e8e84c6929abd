"""Data models exchanged between the issue trackers, the reconciler and the driver.

These models are a normalized snapshot of what the remote API returns. They
carry no client objects, so the migration logic can be exercised with plain
in-memory fixtures.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal, NamedTuple

ItemState = Literal["open", "closed"]
ItemKind = Literal["Issue", "PR"]


class RepoRef(NamedTuple):
    """Owner/name pair identifying a repository."""

    owner: str
    name: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"


@dataclass
class Item:
    """An issue or pull request record.

    GitHub lists pull requests through the issues API as well; `kind` tells
    them apart so the provenance marker can name the right type.
    """

    number: int
    title: str
    body: str
    state: ItemState
    kind: ItemKind = "Issue"
    labels: list[str] = field(default_factory=list)
    html_url: str = ""
    created_at: datetime | None = None
    author: str = ""

    @property
    def is_pull_request(self) -> bool:
        return self.kind == "PR"


@dataclass
class Comment:
    """A comment on an item, in the order the source returned it."""

    issue_number: int
    author: str
    created_at: datetime
    body: str


class MigrationDecision(enum.Enum):
    """What the reconciler did with one source item."""

    SKIP = "skip"
    RESYNC = "resync"
    CREATE = "create"
