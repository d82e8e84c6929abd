"""Provenance markers and body builders for migrated items.

A migrated item's body starts with a marker naming the source item. The marker
is the only record of a past migration: each run rediscovers prior work by
searching target bodies for it. The format must therefore never change, or
previously migrated items become invisible and get duplicated.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import Comment, ItemKind, RepoRef

MARKER_TEMPLATE = "{kind} Migrated from [{owner}/{name}#{number}]({permalink})"


def build_marker(kind: ItemKind, source_repo: RepoRef, number: int, permalink: str) -> str:
    """Build the provenance marker for a source item.

    Args:
        kind: "Issue" or "PR"
        source_repo: Repository the item comes from
        number: Source item number
        permalink: Source item HTML URL

    Returns:
        Marker text, e.g. "Issue Migrated from [octo/app#7](https://github.com/octo/app/issues/7)"
    """
    return MARKER_TEMPLATE.format(
        kind=kind,
        owner=source_repo.owner,
        name=source_repo.name,
        number=number,
        permalink=permalink,
    )


def marker_matches(body: str | None, marker: str) -> bool:
    """Return True if body contains marker verbatim (case-sensitive, no normalization)."""
    if not body:
        return False
    return marker in body


def build_target_body(marker: str, source_body: str | None) -> str:
    """Prefix the source body with the marker and a blank line."""
    return f"{marker}\n\n{source_body or ''}"


def format_comment_attribution(comment: Comment) -> str:
    """Prefix a comment body with its original author and creation date."""
    header = f"**Original comment by {comment.author} on {comment.created_at:%Y-%m-%d}:**"
    return f"{header}\n\n{comment.body}"
