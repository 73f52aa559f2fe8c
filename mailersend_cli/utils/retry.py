"""Retry policy for the HTTP transport.

This module decides which outcomes are worth another attempt and how long
to wait before making it: exponential backoff, overridden by a server
supplied ``Retry-After`` when one is present.
"""

import re
from typing import Optional

from requests.exceptions import ConnectionError


# Statuses the server uses to ask us to come back later.
RATE_LIMIT_STATUS = 429

# ASCII digits only; str.isdigit also accepts superscripts that int() rejects.
_INTEGER_SECONDS = re.compile(r"[0-9]+")


class RetryManager:
    """Backoff policy shared by every request the transport executes."""

    def __init__(
        self,
        max_retries: int = 3,
        base_delay: float = 1.0,
        backoff_factor: float = 2.0,
    ) -> None:
        """Initialize retry manager.

        Args:
            max_retries: Maximum number of retry attempts after the first
            base_delay: Delay in seconds before the first retry
            backoff_factor: Multiplier for exponential backoff
        """
        self.max_retries = max_retries
        self.base_delay = base_delay
        self.backoff_factor = backoff_factor

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1

    def has_attempts_left(self, attempt: int) -> bool:
        """Whether another attempt may follow the 0-based ``attempt``."""
        return attempt < self.max_retries

    def is_retryable_status(self, status_code: int) -> bool:
        """Check if an HTTP status should trigger a retry.

        Only rate limiting and server errors are retried; any other 4xx is a
        client error that a second attempt would not fix.
        """
        return status_code == RATE_LIMIT_STATUS or status_code >= 500

    def is_retryable_exception(self, exception: Exception) -> bool:
        """Check if a transport exception should trigger a retry.

        ``requests.ConnectionError`` covers refused connections, DNS
        failures, TLS handshake errors and connect timeouts.
        """
        return isinstance(exception, ConnectionError)

    def calculate_delay(self, attempt: int) -> float:
        """Calculate delay for a retry attempt.

        Args:
            attempt: Attempt number (0-based) that just failed

        Returns:
            Delay in seconds
        """
        return self.base_delay * (self.backoff_factor ** attempt)

    @staticmethod
    def parse_retry_after(value: Optional[str]) -> Optional[int]:
        """Parse a ``Retry-After`` header given as integer seconds.

        Any other form (including HTTP-dates) is ignored.

        Returns:
            Seconds to wait, or None when the header is absent or unusable
        """
        if value is None:
            return None
        value = value.strip()
        if not _INTEGER_SECONDS.fullmatch(value):
            return None
        return int(value)

    def delay_for_response(self, attempt: int, retry_after: Optional[str]) -> float:
        """Delay before retrying a 429/5xx response."""
        seconds = self.parse_retry_after(retry_after)
        if seconds is not None:
            return float(seconds)
        return self.calculate_delay(attempt)
