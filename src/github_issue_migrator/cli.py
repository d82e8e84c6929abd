"""
Command-line interface for the GitHub issue migration tool.
"""

from __future__ import annotations

import argparse
import logging
import sys

from . import github_utils as ghu
from .orchestrator import Migrator
from .rate_limit import DEFAULT_MAX_SECONDARY_RETRIES, DEFAULT_PACING_DELAY, RateLimiter
from .utils import setup_logging


def parse_arguments(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Migrate issues and pull request records with their comments between GitHub repositories"
    )

    # Positional arguments
    _ = parser.add_argument("source_repo", help="Source GitHub repository path (owner/repo)")
    _ = parser.add_argument("target_repo", help="Target GitHub repository path (owner/repo)")

    _ = parser.add_argument(
        "--github-pass-token", help="Path for GitHub token in pass utility (default: $GITHUB_TOKEN, then github/cli/token)"
    )

    _ = parser.add_argument(
        "--skip-pull-requests", action="store_true", help="Do not migrate pull request records"
    )

    _ = parser.add_argument(
        "--attribute-comments",
        action="store_true",
        help="Prefix each migrated comment with its original author and date",
    )

    _ = parser.add_argument(
        "--pacing-delay",
        type=float,
        default=DEFAULT_PACING_DELAY,
        help=f"Seconds to pause after every successful API call (default: {DEFAULT_PACING_DELAY})",
    )

    _ = parser.add_argument(
        "--max-retries",
        type=int,
        default=DEFAULT_MAX_SECONDARY_RETRIES,
        help=f"Maximum retries on secondary rate limits per call (default: {DEFAULT_MAX_SECONDARY_RETRIES})",
    )

    _ = parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    return parser.parse_args(argv)


def main() -> None:
    """Main entry point."""
    args = parse_arguments()

    setup_logging(verbose=args.verbose)
    logger = logging.getLogger(__name__)

    try:
        # Configuration errors surface here, before any remote call
        source_repo = ghu.parse_repo_path(args.source_repo)
        target_repo = ghu.parse_repo_path(args.target_repo)
        token = ghu.get_token(args.github_pass_token)

        client = ghu.get_client(token)
        source = ghu.GitHubTracker(client, source_repo)
        target = ghu.GitHubTracker(client, target_repo)
        rate_limiter = RateLimiter(pacing_delay=args.pacing_delay, max_secondary_retries=args.max_retries)

        logger.info(f"Migrating {source_repo.full_name} -> {target_repo.full_name}")
        migrator = Migrator(
            source,
            target,
            source_repo,
            rate_limiter,
            skip_pull_requests=args.skip_pull_requests,
            attribute_comments=args.attribute_comments,
        )
        _ = migrator.migrate()

    except Exception:
        logger.exception("Migration failed")
        sys.exit(1)

    sys.exit(0)
