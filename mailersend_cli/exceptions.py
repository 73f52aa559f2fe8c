"""Exception classes for the MailerSend CLI.

This module defines custom exception classes used throughout the application
for proper error handling and user feedback.
"""

from typing import Optional, Dict, List, Any


class MailerSendCLIError(Exception):
    """Base exception class for all MailerSend CLI errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error message
            details: Optional additional error details
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigError(MailerSendCLIError):
    """Exception raised for configuration-related errors."""
    pass


class ProfileNotFoundError(ConfigError):
    """Exception raised when a named profile is not in the configuration."""

    def __init__(self, name: str) -> None:
        super().__init__(f'profile "{name}" not found')
        self.name = name


class NoTokenError(ConfigError):
    """Exception raised when no credential can be resolved."""
    pass


class AuthenticationError(MailerSendCLIError):
    """Exception raised for authentication-related errors."""
    pass


class TokenRefreshError(AuthenticationError):
    """Exception raised when an OAuth refresh exchange fails."""
    pass


class TransportError(MailerSendCLIError):
    """Exception raised when a request never produced an HTTP response."""
    pass


class MaxRetriesExceededError(TransportError):
    """Exception raised when maximum retry attempts are exceeded."""

    def __init__(
        self,
        message: str,
        attempts: int,
        last_exception: Optional[Exception] = None
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error message
            attempts: Number of attempts made
            last_exception: The last exception that caused the failure
        """
        super().__init__(message)
        self.attempts = attempts
        self.last_exception = last_exception


class ValidationError(MailerSendCLIError):
    """Exception raised for invalid user input."""
    pass


class ResponseParseError(MailerSendCLIError):
    """Exception raised when a response body is not the expected JSON."""

    def __init__(self, cause: Exception) -> None:
        super().__init__(f"failed to parse response: {cause}")
        self.cause = cause


class DomainNotFoundError(MailerSendCLIError):
    """Exception raised when a domain name or ID cannot be resolved."""
    pass


class DomainResolutionError(MailerSendCLIError):
    """Exception raised when the domain list needed for resolution cannot be fetched.

    The underlying failure (often an :class:`APIError`) stays available as
    ``cause`` so callers can still inspect its status code.
    """

    def __init__(self, cause: MailerSendCLIError) -> None:
        super().__init__(f"failed to list domains for resolution: {cause}", details={"cause": cause})
        self.cause = cause

    @property
    def status_code(self) -> int:
        return getattr(self.cause, "status_code", 0)


class APIError(MailerSendCLIError):
    """An HTTP 4xx/5xx response, with any field-level validation details.

    The string form is stable: a single ``API error <N>: <message>`` line,
    followed by one line per field message when the server returned
    validation errors.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 0,
        field_errors: Optional[Dict[str, List[str]]] = None,
        raw_body: Optional[bytes] = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error message
            status_code: HTTP status code
            field_errors: Mapping of request field name to validation messages
            raw_body: Raw response body as captured by the transport
        """
        super().__init__(message)
        self.status_code = status_code
        self.field_errors = field_errors or {}
        self.raw_body = raw_body

    def __str__(self) -> str:
        header = f"API error {self.status_code}: {self.message}"
        if not self.field_errors:
            return header

        width = max(len(field) for field in self.field_errors)
        lines = [header]
        for field, messages in self.field_errors.items():
            for msg in messages:
                lines.append(f"  {field:<{width}}  {msg}")
        return "\n".join(lines)

    @property
    def is_rate_limited(self) -> bool:
        return self.status_code == 429
