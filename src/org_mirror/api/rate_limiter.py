"""Rate limiting for GitHub API calls."""

import time
from typing import Mapping, Optional

from loguru import logger


class RateLimiter:
    """Token bucket rate limiter that also honors GitHub rate-limit headers."""

    def __init__(
        self,
        requests_per_second: float = 10.0,
        min_remaining: int = 0,
        max_wait: float = 900.0,
    ):
        """Initialize rate limiter.

        Args:
            requests_per_second: Maximum requests per second allowed
            min_remaining: Wait for the quota reset once the remaining
                request count reported by the API drops to this value
            max_wait: Upper bound in seconds for a single quota-reset wait
        """
        self.requests_per_second = requests_per_second
        self.min_remaining = min_remaining
        self.max_wait = max_wait
        self.tokens = requests_per_second
        self.last_update = time.time()
        self.remaining: Optional[int] = None
        self.reset_at: Optional[float] = None

    def acquire(self) -> None:
        """Acquire a token for making a request.

        Blocks until a token is available and, when the API quota is
        exhausted, until the quota window resets.
        """
        self._wait_for_quota()

        now = time.time()
        elapsed = now - self.last_update

        # Add tokens based on elapsed time
        self.tokens = min(
            self.requests_per_second, self.tokens + elapsed * self.requests_per_second
        )
        self.last_update = now

        if self.tokens >= 1:
            self.tokens -= 1
            return

        sleep_time = (1 - self.tokens) / self.requests_per_second
        time.sleep(sleep_time)
        self.tokens = 0
        self.last_update = time.time()

    def observe(self, headers: Mapping[str, str]) -> None:
        """Record quota information from a response's headers.

        Args:
            headers: Response headers
        """
        remaining = headers.get('X-RateLimit-Remaining')
        reset = headers.get('X-RateLimit-Reset')

        if remaining is not None and str(remaining).isdigit():
            self.remaining = int(remaining)
        if reset is not None and str(reset).isdigit():
            self.reset_at = float(reset)

    def _quota_wait(self) -> float:
        if self.remaining is None or self.reset_at is None:
            return 0.0
        if self.remaining > self.min_remaining:
            return 0.0
        return max(0.0, self.reset_at - time.time())

    def _wait_for_quota(self) -> None:
        wait = self._quota_wait()
        if wait <= 0:
            return

        wait = min(wait, self.max_wait)
        logger.warning(
            f'API quota low ({self.remaining} requests left), '
            f'waiting {wait:.0f}s for the rate limit window to reset'
        )
        time.sleep(wait)
        self.remaining = None
        self.reset_at = None
