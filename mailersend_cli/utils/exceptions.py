"""Error bridge and user-facing error formatting.

``wrap_error`` turns the ``requests.HTTPError`` raised for an error response
into an ``APIError`` carrying the status code, the server's message and any
field-level validation errors, using the body the transport captured.
"""

import json
from typing import Any, Dict, List, Optional, Tuple

from requests.exceptions import HTTPError

from ..exceptions import (
    MailerSendCLIError,
    APIError,
    MaxRetriesExceededError,
)


def _parse_error_body(raw_body: bytes) -> Tuple[str, Dict[str, List[str]]]:
    """Extract ``message`` and ``errors`` from an error response body.

    Returns:
        Tuple of (message, field_errors); empty values when the body is not
        the documented error envelope
    """
    try:
        parsed = json.loads(raw_body)
    except (ValueError, UnicodeDecodeError):
        return "", {}

    if not isinstance(parsed, dict):
        return "", {}

    message = parsed.get("message")
    if not isinstance(message, str):
        message = ""

    field_errors: Dict[str, List[str]] = {}
    errors = parsed.get("errors")
    if isinstance(errors, dict):
        for field, messages in errors.items():
            if isinstance(messages, list):
                field_errors[str(field)] = [str(m) for m in messages]
            elif isinstance(messages, str):
                field_errors[str(field)] = [messages]

    return message, field_errors


def wrap_error(error: Optional[Exception], transport: Any = None) -> Optional[Exception]:
    """Convert an HTTP error into an ``APIError`` with field-level details.

    Args:
        error: Error raised by the API client or a direct request
        transport: The ``CLITransport`` that executed the request; its last
            captured error body is read (and cleared)

    Returns:
        ``None`` for ``None``, an ``APIError`` for HTTP error responses, and
        the original error for everything else
    """
    if error is None:
        return None

    if isinstance(error, APIError):
        return error

    if not isinstance(error, HTTPError) or error.response is None:
        return error

    response = error.response
    status_code = response.status_code
    message = response.reason or ""

    raw_body = transport.last_error_body() if transport is not None else None
    if not raw_body:
        raw_body = response.content or None

    field_errors: Dict[str, List[str]] = {}
    if raw_body:
        parsed_message, field_errors = _parse_error_body(raw_body)
        if parsed_message:
            message = parsed_message

    if not message:
        message = str(error)

    return APIError(
        message,
        status_code=status_code,
        field_errors=field_errors,
        raw_body=raw_body,
    )


def format_error_for_user(error: Exception, verbose: bool = False) -> str:
    """Format an error message for user display.

    Args:
        error: The exception to format
        verbose: Whether to include debug information

    Returns:
        Formatted error message
    """
    if isinstance(error, APIError):
        message = str(error)
        if verbose and error.raw_body:
            message += f"\nResponse: {error.raw_body.decode('utf-8', errors='replace')}"
        return message

    if isinstance(error, MaxRetriesExceededError):
        message = error.message
        if verbose:
            message += f"\nAttempts: {error.attempts}"
        return message

    if isinstance(error, MailerSendCLIError):
        return error.message

    if verbose:
        return f"Error: {error}\nType: {type(error).__name__}"
    return f"Error: {error}"
