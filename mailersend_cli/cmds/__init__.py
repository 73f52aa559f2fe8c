"""Command modules for the MailerSend CLI.

This module exports all command groups (Typer apps) that can be registered
with the main application.
"""

# Import all command apps
from .auth import app as auth_app
from .profile import app as profile_app
from .domain import app as domain_app
from .email import app as email_app
from .bulk_email import app as bulk_email_app
from .activity import app as activity_app
from .analytics import app as analytics_app
from .message import app as message_app
from .template import app as template_app
from .webhook import app as webhook_app
from .suppression import app as suppression_app
from .recipient import app as recipient_app
from .token import app as token_app
from .user import app as user_app
from .smtp import app as smtp_app
from .inbound import app as inbound_app
from .identity import app as identity_app
from .sms import app as sms_app
from .verification import app as verification_app

__all__ = [
    "auth_app",
    "profile_app",
    "domain_app",
    "email_app",
    "bulk_email_app",
    "activity_app",
    "analytics_app",
    "message_app",
    "template_app",
    "webhook_app",
    "suppression_app",
    "recipient_app",
    "token_app",
    "user_app",
    "smtp_app",
    "inbound_app",
    "identity_app",
    "sms_app",
    "verification_app",
]
