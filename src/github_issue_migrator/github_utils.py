from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING, Final

from github import Auth, Github

from . import utils
from .exceptions import ConfigurationError
from .models import Comment, Item, RepoRef

if TYPE_CHECKING:
    from collections.abc import Sequence

    import github.Issue
    from github.Repository import Repository

    from .models import ItemState

# Module-wide logger
logger: logging.Logger = logging.getLogger(__name__)

_TOKEN_ENV_VAR: Final[str] = "GITHUB_TOKEN"  # noqa: S105
_DEFAULT_TOKEN_PASS_PATH: Final[str] = "github/cli/token"  # noqa: S105


def parse_repo_path(repo_path: str) -> RepoRef:
    """Split an "owner/name" path, rejecting anything else."""
    path = repo_path.strip()
    parts = path.split("/")
    if len(parts) != 2:  # noqa: PLR2004
        msg = f"Invalid GitHub repository path '{repo_path}'. Expected format: 'owner/repository'"
        raise ConfigurationError(msg)
    owner, name = parts
    if not owner or not name:
        msg = f"Invalid GitHub repository path '{repo_path}'. Both owner and repository name must be non-empty"
        raise ConfigurationError(msg)
    if any(char.isspace() for char in path):
        msg = f"Invalid GitHub repository path '{repo_path}'. Owner and repository name must not contain whitespace"
        raise ConfigurationError(msg)
    return RepoRef(owner, name)


def get_token(pass_path: str | None = None) -> str:
    """Get GitHub token from pass path, env var GITHUB_TOKEN, or default pass location."""
    if pass_path:
        return utils.get_pass_value(pass_path)

    token: str | None = os.environ.get(_TOKEN_ENV_VAR)
    if token:
        return token

    try:
        return utils.get_pass_value(_DEFAULT_TOKEN_PASS_PATH)
    except utils.PassError as e:
        msg = f"No GitHub token found: set {_TOKEN_ENV_VAR} or store one in pass at '{_DEFAULT_TOKEN_PASS_PATH}'"
        raise ConfigurationError(msg) from e


def get_client(token: str) -> Github:
    """Get a GitHub client using the token.

    PyGithub's own retry is disabled; RateLimiter is the single place that
    decides whether and how long to wait.
    """
    return Github(auth=Auth.Token(token), retry=None)


def _to_item(issue: github.Issue.Issue) -> Item:
    return Item(
        number=issue.number,
        title=issue.title,
        body=issue.body or "",
        state="closed" if issue.state == "closed" else "open",
        kind="PR" if issue.pull_request is not None else "Issue",
        labels=[label.name for label in issue.labels],
        html_url=issue.html_url,
        created_at=issue.created_at,
        author=issue.user.login if issue.user else "",
    )


class GitHubTracker:
    """IssueTracker backed by a PyGithub repository.

    Raw issue objects are cached by number as they are listed or created, so
    comment and state calls do not need an extra fetch.
    """

    def __init__(self, client: Github, repo_ref: RepoRef) -> None:
        self.client: Github = client
        self.repo_ref: RepoRef = repo_ref
        self._repo: Repository | None = None
        self._issues: dict[int, github.Issue.Issue] = {}

    @property
    def repo(self) -> Repository:
        if self._repo is None:
            # Lazy: no request until the first real call
            self._repo = self.client.get_repo(self.repo_ref.full_name, lazy=True)
        return self._repo

    def _issue(self, number: int) -> github.Issue.Issue:
        issue = self._issues.get(number)
        if issue is None:
            issue = self.repo.get_issue(number)
            self._issues[number] = issue
        return issue

    def list_items(self) -> list[Item]:
        issues = list(self.repo.get_issues(state="all"))
        self._issues.update((issue.number, issue) for issue in issues)
        logger.debug(f"Listed {len(issues)} items in {self.repo_ref.full_name}")
        return [_to_item(issue) for issue in issues]

    def list_comments(self, number: int) -> list[Comment]:
        return [
            Comment(
                issue_number=number,
                author=comment.user.login if comment.user else "",
                created_at=comment.created_at,
                body=comment.body or "",
            )
            for comment in self._issue(number).get_comments()
        ]

    def create_item(self, title: str, body: str, labels: Sequence[str]) -> Item:
        issue = self.repo.create_issue(title=title, body=body, labels=list(labels))
        self._issues[issue.number] = issue
        return _to_item(issue)

    def update_item_state(self, number: int, state: ItemState) -> None:
        self._issue(number).edit(state=state)

    def create_comment(self, number: int, body: str) -> None:
        _ = self._issue(number).create_comment(body)
