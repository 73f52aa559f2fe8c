"""Unit tests for the retry policy in utils/retry.py."""

import pytest
from requests.exceptions import ConnectionError, ReadTimeout, ConnectTimeout, SSLError

from mailersend_cli.utils.retry import RetryManager


class TestRetryManager:
    """Test cases for the RetryManager class."""

    def test_initialization_defaults(self):
        manager = RetryManager()

        assert manager.max_retries == 3
        assert manager.base_delay == 1.0
        assert manager.backoff_factor == 2.0
        assert manager.max_attempts == 4

    def test_has_attempts_left(self):
        manager = RetryManager(max_retries=3)

        assert manager.has_attempts_left(0) is True
        assert manager.has_attempts_left(2) is True
        assert manager.has_attempts_left(3) is False

    @pytest.mark.parametrize("status", [429, 500, 502, 503, 504])
    def test_retryable_statuses(self, status):
        assert RetryManager().is_retryable_status(status) is True

    @pytest.mark.parametrize("status", [200, 204, 400, 401, 403, 404, 422])
    def test_non_retryable_statuses(self, status):
        assert RetryManager().is_retryable_status(status) is False

    def test_connection_errors_are_retryable(self):
        manager = RetryManager()

        assert manager.is_retryable_exception(ConnectionError("refused")) is True
        assert manager.is_retryable_exception(ConnectTimeout("connect timeout")) is True
        assert manager.is_retryable_exception(SSLError("handshake")) is True

    def test_read_timeouts_are_not_retried(self):
        manager = RetryManager()

        assert manager.is_retryable_exception(ReadTimeout("read timeout")) is False
        assert manager.is_retryable_exception(ValueError("bug")) is False

    def test_exponential_backoff(self):
        manager = RetryManager()

        assert [manager.calculate_delay(a) for a in range(3)] == [1.0, 2.0, 4.0]

    def test_custom_backoff(self):
        manager = RetryManager(base_delay=0.5, backoff_factor=3.0)

        assert manager.calculate_delay(2) == 4.5


class TestRetryAfter:
    """Retry-After parsing and precedence."""

    @pytest.mark.parametrize("value,expected", [
        ("1", 1),
        ("0", 0),
        (" 30 ", 30),
        (None, None),
        ("", None),
        ("-1", None),
        ("1.5", None),
        ("Wed, 21 Oct 2015 07:28:00 GMT", None),
        ("\u00b2", None),
        ("\u0663", None),
    ])
    def test_parse_retry_after(self, value, expected):
        assert RetryManager.parse_retry_after(value) == expected

    def test_retry_after_overrides_backoff(self):
        manager = RetryManager()

        assert manager.delay_for_response(2, "7") == 7.0

    def test_unusable_retry_after_falls_back_to_backoff(self):
        manager = RetryManager()

        assert manager.delay_for_response(1, "soon") == 2.0
        assert manager.delay_for_response(0, None) == 1.0
