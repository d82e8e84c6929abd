"""Retry and backoff around quota-limited GitHub API calls.

Every remote call goes through RateLimiter.call(). A call either succeeds,
waits and retries on a rate-limit signal, or fails immediately.

GitHub throttles in three ways, checked in this order:

1. Retry-After header: sleep exactly that many seconds.
2. Primary quota exhausted (X-RateLimit-Remaining: 0): sleep until one second past
   X-RateLimit-Reset.
3. Secondary (abuse) limit with no actionable header: exponential backoff
   from secondary_base_delay, doubling per consecutive hit.

Only the third path counts against max_secondary_retries. The first two
carry an authoritative wait and retry indefinitely.

After each success the limiter pauses for pacing_delay so a long migration
stays below the burst thresholds that trigger secondary limits.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Final, TypeVar

from github import GithubException, RateLimitExceededException

from .exceptions import RetryBudgetExhaustedError

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from .protocols import Clock

# Module-wide logger
logger: logging.Logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_PACING_DELAY: Final[float] = 2.0
DEFAULT_SECONDARY_BASE_DELAY: Final[float] = 60.0
DEFAULT_MAX_SECONDARY_RETRIES: Final[int] = 5
# Added to every primary-reset wait
PRIMARY_RESET_BUFFER: Final[float] = 1.0

_RATE_LIMIT_STATUSES: Final[frozenset[int]] = frozenset({403, 429})


class SystemClock:
    """Clock backed by the wall clock."""

    def time(self) -> float:
        return time.time()

    def sleep(self, seconds: float) -> None:
        time.sleep(seconds)


def _header(headers: Mapping[str, str] | None, name: str) -> str | None:
    if not headers:
        return None
    wanted = name.lower()
    for key, value in headers.items():
        if key.lower() == wanted:
            return value
    return None


def _exception_message(exc: GithubException) -> str:
    if isinstance(exc.data, dict):
        message = exc.data.get("message")
        if isinstance(message, str):
            return message
    return exc.message or ""


def retry_after_seconds(headers: Mapping[str, str] | None) -> float | None:
    """Return the Retry-After duration in seconds, or None if absent or unparseable."""
    value = _header(headers, "Retry-After")
    if value is None:
        return None
    try:
        return max(0.0, float(value))
    except ValueError:
        return None


def primary_reset_timestamp(headers: Mapping[str, str] | None) -> float | None:
    """Return X-RateLimit-Reset as epoch seconds when the primary quota is exhausted."""
    remaining = _header(headers, "X-RateLimit-Remaining")
    reset = _header(headers, "X-RateLimit-Reset")
    if remaining is None or reset is None:
        return None
    try:
        if int(remaining) != 0:
            return None
        return float(reset)
    except ValueError:
        return None


def is_rate_limit_error(exc: GithubException) -> bool:
    """Check whether a GithubException is a throttling response rather than a hard failure.

    A 403 is only treated as throttling when it carries a rate-limit signal;
    a plain 403 is a permission error and must not be retried.
    """
    if isinstance(exc, RateLimitExceededException) or exc.status == 429:
        return True
    if exc.status not in _RATE_LIMIT_STATUSES:
        return False
    if retry_after_seconds(exc.headers) is not None or primary_reset_timestamp(exc.headers) is not None:
        return True
    return "rate limit" in _exception_message(exc).lower()


class RateLimiter:
    """Runs remote operations, absorbing GitHub rate limits.

    Backoff state (the secondary-limit streak) lives in locals of a single
    call(), so no two calls share counters.
    """

    def __init__(
        self,
        clock: Clock | None = None,
        *,
        pacing_delay: float = DEFAULT_PACING_DELAY,
        secondary_base_delay: float = DEFAULT_SECONDARY_BASE_DELAY,
        max_secondary_retries: int = DEFAULT_MAX_SECONDARY_RETRIES,
    ) -> None:
        if max_secondary_retries < 0:
            msg = f"max_secondary_retries must be >= 0, got {max_secondary_retries}"
            raise ValueError(msg)
        self.clock: Clock = clock or SystemClock()
        self.pacing_delay: float = pacing_delay
        self.secondary_base_delay: float = secondary_base_delay
        self.max_secondary_retries: int = max_secondary_retries

    def call(self, operation: Callable[[], T], description: str = "GitHub API call") -> T:
        """Run operation until it succeeds, retrying on rate limits.

        Args:
            operation: Zero-argument callable performing one remote call
            description: Human-readable name used in log lines and errors

        Returns:
            The operation's result

        Raises:
            RetryBudgetExhaustedError: If secondary limits were hit more than max_secondary_retries times
            GithubException: Any non-rate-limit failure, unchanged
        """
        secondary_hits = 0
        while True:
            try:
                result = operation()
            except GithubException as e:
                if not is_rate_limit_error(e):
                    raise
                secondary_hits = self._back_off(e, description, secondary_hits)
                continue

            if self.pacing_delay > 0:
                logger.debug(f"Pacing {self.pacing_delay:.1f}s after {description}")
                self.clock.sleep(self.pacing_delay)
            return result

    def _back_off(self, exc: GithubException, description: str, secondary_hits: int) -> int:
        """Sleep for the wait exc calls for and return the updated secondary streak."""
        retry_after = retry_after_seconds(exc.headers)
        if retry_after is not None:
            logger.warning(f"Rate limited on {description}: Retry-After {retry_after:.0f}s")
            self.clock.sleep(retry_after)
            return secondary_hits

        reset_at = primary_reset_timestamp(exc.headers)
        if reset_at is not None:
            wait = max(0.0, reset_at - self.clock.time()) + PRIMARY_RESET_BUFFER
            logger.warning(f"Primary rate limit exhausted on {description}: waiting {wait:.0f}s for quota reset")
            self.clock.sleep(wait)
            return secondary_hits

        secondary_hits += 1
        if secondary_hits > self.max_secondary_retries:
            logger.error(f"Secondary rate limit retry budget exhausted on {description}")
            raise RetryBudgetExhaustedError(description, secondary_hits) from exc

        wait = self.secondary_base_delay * 2 ** (secondary_hits - 1)
        logger.warning(
            f"Secondary rate limit hit on {description} "
            f"({secondary_hits}/{self.max_secondary_retries}): waiting {wait:.0f}s before retrying"
        )
        self.clock.sleep(wait)
        return secondary_hits
