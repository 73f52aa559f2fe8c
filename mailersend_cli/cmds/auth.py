"""Authentication commands for the MailerSend CLI.

This module provides ``auth login``, ``auth logout`` and ``auth status``.
Tokens are stored in the credential store as named profiles.
"""

from typing import Optional

import typer
from rich.prompt import Prompt

from ..exceptions import ConfigError, ValidationError
from ..utils.cli_helpers import is_interactive
from ..app import handle_exceptions

app = typer.Typer()


@app.command()
@handle_exceptions
def login(
    ctx: typer.Context,
    token: Optional[str] = typer.Option(None, "--token", help="API token"),
    method: str = typer.Option("token", "--method", help="Authentication method (token)"),
    profile_name: Optional[str] = typer.Option(
        None, "--profile", help="Profile to save credentials to (default: 'default')"
    ),
) -> None:
    """Log in with an API token.

    The profile is created or replaced and becomes the active profile.

    Examples:
        # Non-interactive login
        mailersend auth login --token mlsn.xxxx

        # Store the token under a named profile
        mailersend auth login --token mlsn.xxxx --profile work
    """
    config_manager = ctx.obj["config_manager"]
    formatter = ctx.obj["output_formatter"]

    if method != "token":
        raise ValidationError(f"unknown auth method: {method} (only 'token' is supported)")

    name = profile_name or ctx.obj.get("profile") or "default"

    if not token:
        if not is_interactive():
            raise ValidationError("--token is required in non-interactive mode")
        token = Prompt.ask("API Token", password=True, show_default=False).strip()
    if not token:
        raise ConfigError("token cannot be empty")

    config_manager.login(name, token)
    formatter.success(f"Logged in successfully. Profile: {name}")


@app.command()
@handle_exceptions
def logout(ctx: typer.Context) -> None:
    """Remove the stored credentials of the active (or ``--profile``) profile."""
    config_manager = ctx.obj["config_manager"]
    formatter = ctx.obj["output_formatter"]

    name = config_manager.logout(ctx.obj.get("profile"))
    formatter.success(f"Logged out from profile: {name}")


@app.command()
@handle_exceptions
def status(ctx: typer.Context) -> None:
    """Show the current authentication status."""
    config_manager = ctx.obj["config_manager"]
    formatter = ctx.obj["output_formatter"]

    name = ctx.obj.get("profile")
    try:
        if name:
            profile = config_manager.get_profile(name)
        else:
            name, profile = config_manager.active()
    except ConfigError:
        if name:
            formatter.error(f'Profile "{name}" not found.')
        else:
            formatter.error("Not logged in. Run 'mailersend auth login' to authenticate.")
        return

    if formatter.json_output:
        formatter.render_json({
            "profile": name,
            "has_token": bool(profile.api_token),
            "has_oauth": bool(profile.oauth_access_token),
            "expires_at": profile.oauth_expires_at or "",
        })
        return

    try:
        active_name, _ = config_manager.active()
    except ConfigError:
        active_name = ""

    method = "OAuth" if profile.method == "oauth" else "API Token"
    formatter.render_table(
        ["FIELD", "VALUE"],
        [
            ["Profile", name],
            ["Method", method],
            ["Token", profile.masked_token()],
            ["Active", "Yes" if name == active_name else "No"],
        ],
    )
