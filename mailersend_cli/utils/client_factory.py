"""Client factory for command invocations.

This module assembles a configured ``MailerSendClient`` from the Typer
context: the token comes from the credential store (honouring
``--profile``), the transport gets ``--verbose`` and the optional base-URL
override from ``MAILERSEND_API_BASE_URL``.
"""

import os
from typing import Any, Optional, Tuple

import typer
from rich.console import Console

from ..client import MailerSendClient, REQUEST_TIMEOUT
from ..config import ConfigManager
from ..transport import CLITransport

BASE_URL_ENV_VAR = "MAILERSEND_API_BASE_URL"


class ClientFactory:
    """Factory for creating configured MailerSendClient instances."""

    def __init__(self, console: Optional[Console] = None):
        """Initialize the client factory.

        Args:
            console: Console for diagnostics and the verbose trace (stderr)
        """
        self.console = console or Console(stderr=True, highlight=False)

    def create_client(
        self,
        config_manager: ConfigManager,
        profile: Optional[str] = None,
        verbose: bool = False,
    ) -> MailerSendClient:
        """Create a client bound to the resolved token.

        Args:
            config_manager: Credential store
            profile: Profile override from ``--profile``
            verbose: Enable the HTTP trace

        Returns:
            Configured MailerSendClient; its ``transport`` attribute exposes
            the captured error bodies

        Raises:
            ConfigError: If no token can be resolved
        """
        token = config_manager.get_token(profile)

        base_url = os.getenv(BASE_URL_ENV_VAR) or None
        if verbose and base_url:
            self.console.print(f"[dim]Using API base URL override: {base_url}[/dim]")

        transport = CLITransport(verbose=verbose, base_url=base_url, console=self.console)
        return MailerSendClient(token, transport=transport, timeout=REQUEST_TIMEOUT)

    def create_client_from_context(self, ctx: typer.Context) -> MailerSendClient:
        """Create a MailerSendClient from the Typer context."""
        obj = ctx.obj or {}
        config_manager = obj.get("config_manager") or ConfigManager()
        return self.create_client(
            config_manager,
            profile=obj.get("profile"),
            verbose=obj.get("verbose", False),
        )


# Global factory instance
_client_factory = ClientFactory()


def get_client_from_context(ctx: typer.Context) -> MailerSendClient:
    """Convenience function to get client from context."""
    return _client_factory.create_client_from_context(ctx)


def get_client_and_formatter(ctx: typer.Context) -> Tuple[MailerSendClient, Any]:
    """Get both client and formatter from context.

    Returns:
        Tuple of (MailerSendClient, OutputFormatter)
    """
    client = get_client_from_context(ctx)
    formatter = ctx.obj["output_formatter"]
    return client, formatter
