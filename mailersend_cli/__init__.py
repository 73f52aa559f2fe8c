"""MailerSend CLI package.

A command-line tool for the MailerSend email and SMS API. Provides
credential profiles, a retrying HTTP transport and commands for domains,
sending, activity, suppressions and the rest of the account.
"""

__version__ = "0.1.0"
__description__ = "Command-line tool for the MailerSend API"

# Re-export main classes for convenience
from .client import MailerSendClient
from .config import Config, ConfigManager, Profile
from .render import OutputFormatter
from .transport import CLITransport
from .utils.retry import RetryManager
from .exceptions import (
    MailerSendCLIError,
    ConfigError,
    ProfileNotFoundError,
    NoTokenError,
    AuthenticationError,
    TokenRefreshError,
    TransportError,
    MaxRetriesExceededError,
    ValidationError,
    ResponseParseError,
    DomainNotFoundError,
    APIError,
)

__all__ = [
    "__version__",
    "__description__",
    "MailerSendClient",
    "Config",
    "ConfigManager",
    "Profile",
    "OutputFormatter",
    "CLITransport",
    "RetryManager",
    "MailerSendCLIError",
    "ConfigError",
    "ProfileNotFoundError",
    "NoTokenError",
    "AuthenticationError",
    "TokenRefreshError",
    "TransportError",
    "MaxRetriesExceededError",
    "ValidationError",
    "ResponseParseError",
    "DomainNotFoundError",
    "APIError",
]
