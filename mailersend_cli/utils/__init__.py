"""Utility modules for the MailerSend CLI.

This package contains the retry policy, the error bridge, the pagination
aggregator and domain resolution shared by all commands.
"""

from .retry import RetryManager
from .paginate import fetch_all
from .domains import DomainResolver
from .exceptions import wrap_error, format_error_for_user

__all__ = [
    "RetryManager",
    "fetch_all",
    "DomainResolver",
    "wrap_error",
    "format_error_for_user",
]
