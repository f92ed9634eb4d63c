"""Tests for API rate limiting."""

from unittest.mock import patch

from org_mirror.api.rate_limiter import RateLimiter


class TestRateLimiter:
    """Test token bucket and quota handling."""

    @patch('org_mirror.api.rate_limiter.time')
    def test_acquire_with_tokens_available(self, mock_time):
        """Test no sleep while the bucket has tokens."""
        mock_time.time.return_value = 1000.0
        limiter = RateLimiter(requests_per_second=5)

        for _ in range(5):
            limiter.acquire()

        mock_time.sleep.assert_not_called()

    @patch('org_mirror.api.rate_limiter.time')
    def test_acquire_sleeps_when_bucket_empty(self, mock_time):
        """Test sleeping once the bucket is drained."""
        mock_time.time.return_value = 1000.0
        limiter = RateLimiter(requests_per_second=1)

        limiter.acquire()
        limiter.acquire()

        mock_time.sleep.assert_called_once_with(1.0)

    def test_observe_parses_headers(self):
        """Test quota headers are recorded."""
        limiter = RateLimiter()

        limiter.observe({'X-RateLimit-Remaining': '42', 'X-RateLimit-Reset': '1700000000'})

        assert limiter.remaining == 42
        assert limiter.reset_at == 1700000000.0

    def test_observe_ignores_missing_or_invalid_headers(self):
        """Test unusable headers leave the state alone."""
        limiter = RateLimiter()

        limiter.observe({})
        limiter.observe({'X-RateLimit-Remaining': 'n/a'})

        assert limiter.remaining is None
        assert limiter.reset_at is None

    @patch('org_mirror.api.rate_limiter.time')
    def test_waits_for_reset_when_quota_exhausted(self, mock_time):
        """Test waiting until the reported reset time."""
        mock_time.time.return_value = 1000.0
        limiter = RateLimiter(requests_per_second=10)
        limiter.observe({'X-RateLimit-Remaining': '0', 'X-RateLimit-Reset': '1030'})

        assert limiter.remaining == 0
        limiter.acquire()

        mock_time.sleep.assert_called_once_with(30.0)
        assert limiter.remaining is None
        assert limiter.reset_at is None

    @patch('org_mirror.api.rate_limiter.time')
    def test_waits_below_min_remaining(self, mock_time):
        """Test the configured threshold triggers the wait early."""
        mock_time.time.return_value = 1000.0
        limiter = RateLimiter(min_remaining=10)
        limiter.observe({'X-RateLimit-Remaining': '5', 'X-RateLimit-Reset': '1010'})

        limiter.acquire()

        mock_time.sleep.assert_called_once_with(10.0)

    @patch('org_mirror.api.rate_limiter.time')
    def test_no_wait_above_min_remaining(self, mock_time):
        """Test no wait while enough quota remains."""
        mock_time.time.return_value = 1000.0
        limiter = RateLimiter(min_remaining=10)
        limiter.observe({'X-RateLimit-Remaining': '11', 'X-RateLimit-Reset': '1010'})

        limiter.acquire()

        mock_time.sleep.assert_not_called()

    @patch('org_mirror.api.rate_limiter.time')
    def test_wait_is_capped(self, mock_time):
        """Test a single wait never exceeds max_wait."""
        mock_time.time.return_value = 1000.0
        limiter = RateLimiter(max_wait=60)
        limiter.observe({'X-RateLimit-Remaining': '0', 'X-RateLimit-Reset': '5000'})

        limiter.acquire()

        mock_time.sleep.assert_called_once_with(60)

    @patch('org_mirror.api.rate_limiter.time')
    def test_reset_in_the_past_does_not_wait(self, mock_time):
        """Test a stale reset time causes no wait."""
        mock_time.time.return_value = 1000.0
        limiter = RateLimiter()
        limiter.observe({'X-RateLimit-Remaining': '0', 'X-RateLimit-Reset': '900'})

        limiter.acquire()

        mock_time.sleep.assert_not_called()
