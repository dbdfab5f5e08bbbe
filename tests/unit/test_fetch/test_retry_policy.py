"""Unit tests for retry policy decisions."""

import pytest

from src.fetch.models import FetchError, FetchErrorClass, RetryPolicy


class TestRetryPolicy:
    """Tests for RetryPolicy model."""

    def test_default_values(self) -> None:
        """Test default retry policy values."""
        policy = RetryPolicy()

        assert policy.max_retries == 3
        assert policy.base_delay_ms == 1000
        assert policy.max_delay_ms == 30000
        assert policy.exponential_base == 2.0
        assert policy.jitter_factor == 0.1


class TestShouldRetry:
    """Tests for retry decision logic."""

    @pytest.fixture
    def policy(self) -> RetryPolicy:
        """Create a standard retry policy."""
        return RetryPolicy(max_retries=3)

    @pytest.mark.parametrize(
        "error_class",
        [
            FetchErrorClass.NETWORK_TIMEOUT,
            FetchErrorClass.CONNECTION_ERROR,
            FetchErrorClass.HTTP_5XX,
            FetchErrorClass.RATE_LIMITED,
        ],
    )
    def test_retryable_until_max(
        self, policy: RetryPolicy, error_class: FetchErrorClass
    ) -> None:
        """Transient errors are retried until max_retries is reached."""
        error = FetchError(error_class=error_class, message="transient")

        assert policy.should_retry(error, attempt=0) is True
        assert policy.should_retry(error, attempt=2) is True
        assert policy.should_retry(error, attempt=3) is False

    @pytest.mark.parametrize(
        "error_class",
        [
            FetchErrorClass.HTTP_4XX,
            FetchErrorClass.INVALID_PAYLOAD,
            FetchErrorClass.UNKNOWN,
        ],
    )
    def test_not_retryable(
        self, policy: RetryPolicy, error_class: FetchErrorClass
    ) -> None:
        """Permanent errors are never retried."""
        error = FetchError(error_class=error_class, message="permanent")

        assert policy.should_retry(error, attempt=0) is False

    def test_zero_retries(self) -> None:
        """max_retries=0 disables retries."""
        policy = RetryPolicy(max_retries=0)
        error = FetchError(error_class=FetchErrorClass.HTTP_5XX, message="down")

        assert policy.should_retry(error, attempt=0) is False


class TestGetDelay:
    """Tests for backoff delay calculation."""

    def test_exponential_without_jitter(self) -> None:
        """Delays double per attempt."""
        policy = RetryPolicy(base_delay_ms=1000, jitter_factor=0.0)

        assert policy.get_delay_ms(0) == 1000
        assert policy.get_delay_ms(1) == 2000
        assert policy.get_delay_ms(2) == 4000

    def test_capped_at_max_delay(self) -> None:
        """Delays never exceed max_delay_ms (before jitter)."""
        policy = RetryPolicy(base_delay_ms=1000, max_delay_ms=5000, jitter_factor=0.0)

        assert policy.get_delay_ms(10) == 5000

    def test_jitter_bounds(self) -> None:
        """Jitter adds at most jitter_factor of the delay."""
        policy = RetryPolicy(base_delay_ms=1000, jitter_factor=0.5)

        for _ in range(20):
            assert 1000 <= policy.get_delay_ms(0) <= 1500
