"""Main Typer application for the MailerSend CLI.

This module contains the main Typer app instance and registers all command groups.
It provides the entry point for the CLI and handles the global options:
profile selection, verbose tracing and JSON output.
"""

import os
import sys
from functools import wraps
from typing import Optional

import typer
from rich.console import Console

from . import __version__
from .config import ConfigManager, TOKEN_ENV_VAR
from .render import OutputFormatter
from .exceptions import MailerSendCLIError
from .transport import set_user_agent
from .utils.client_factory import BASE_URL_ENV_VAR
from .utils.exceptions import format_error_for_user

# Create main Typer app
app = typer.Typer(
    name="mailersend",
    help="Command-line tool for the MailerSend API",
    context_settings={"help_option_names": ["-h", "--help"]},
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# Results go to stdout, everything else to stderr
console = Console(highlight=False)
err_console = Console(stderr=True, highlight=False)

_registered = False


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        typer.echo(f"mailersend {__version__}")
        raise typer.Exit()


def show_environment_info(config_manager: ConfigManager, profile: Optional[str]) -> None:
    """Print which credentials and overrides are in effect."""
    err_console.print(f"Config file: {config_manager.config_file}", style="dim", markup=False)
    env_vars = {
        TOKEN_ENV_VAR: "[set]" if os.getenv(TOKEN_ENV_VAR) else "[not set]",
        BASE_URL_ENV_VAR: os.getenv(BASE_URL_ENV_VAR, "[not set]"),
    }
    for var, value in env_vars.items():
        err_console.print(f"  {var}: {value}", style="dim", markup=False)
    if profile:
        err_console.print(f"Using profile: {profile}", style="dim", markup=False)


# Global options
@app.callback()
def main(
    ctx: typer.Context,
    profile: Optional[str] = typer.Option(
        None,
        "--profile",
        help="Configuration profile to use",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Trace HTTP requests and responses on stderr",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output results as JSON",
    ),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """MailerSend CLI - manage domains, send email and SMS, inspect activity.

    Examples:
        # Store an API token
        mailersend auth login --token mlsn.xxxx

        # List domains
        mailersend domain list

        # Send an email
        mailersend email send --from me@example.com --to you@example.com --subject Hi --text Hello

        # Activity for the last 7 days as JSON
        mailersend --json activity list --domain example.com
    """
    set_user_agent(f"mailersend-cli/{__version__}")

    config_manager = ConfigManager()

    # Store global options in context
    ctx.ensure_object(dict)
    ctx.obj["profile"] = profile
    ctx.obj["verbose"] = verbose
    ctx.obj["json"] = json_output
    ctx.obj["console"] = console
    ctx.obj["config_manager"] = config_manager
    ctx.obj["output_formatter"] = OutputFormatter(console, err_console, json_output=json_output)

    if verbose:
        err_console.print("[dim]Verbose mode enabled[/dim]")
        show_environment_info(config_manager, profile)


def handle_exceptions(func):
    """Decorator to handle common exceptions in commands."""
    @wraps(func)
    def wrapper(*args, **kwargs):
        ctx = kwargs.get("ctx")
        verbose = bool(ctx.obj.get("verbose", False)) if ctx is not None and ctx.obj else False
        try:
            return func(*args, **kwargs)
        except MailerSendCLIError as e:
            err_console.print(format_error_for_user(e, verbose), style="red", markup=False, soft_wrap=True)
            raise typer.Exit(1)
        except KeyboardInterrupt:
            err_console.print("\n[yellow]Operation cancelled by user[/yellow]")
            raise typer.Exit(130)
        except typer.Exit:
            raise
        except Exception as e:
            if verbose:
                err_console.print_exception()
            else:
                err_console.print(f"Unexpected error: {e}", style="red", markup=False, soft_wrap=True)
                err_console.print("[dim]Use --verbose for more details[/dim]")
            raise typer.Exit(1)
    return wrapper


@app.command()
def version() -> None:
    """Print the version."""
    typer.echo(f"mailersend {__version__}")


# Import and register command groups
def register_commands() -> None:
    """Register all command groups with the main app."""
    global _registered
    if _registered:
        return

    from .cmds import (
        auth_app,
        profile_app,
        domain_app,
        email_app,
        bulk_email_app,
        activity_app,
        analytics_app,
        message_app,
        template_app,
        webhook_app,
        suppression_app,
        recipient_app,
        token_app,
        user_app,
        smtp_app,
        inbound_app,
        identity_app,
        sms_app,
        verification_app,
    )
    from .cmds.quota import quota

    # Register command groups
    app.add_typer(auth_app, name="auth", help="Manage authentication")
    app.add_typer(profile_app, name="profile", help="Manage configuration profiles")
    app.add_typer(domain_app, name="domain", help="Manage sending domains")
    app.add_typer(email_app, name="email", help="Send email")
    app.add_typer(bulk_email_app, name="bulk-email", help="Send and track bulk email")
    app.add_typer(activity_app, name="activity", help="Inspect sending activity")
    app.add_typer(analytics_app, name="analytics", help="Activity analytics")
    app.add_typer(message_app, name="message", help="Inspect sent messages")
    app.add_typer(template_app, name="template", help="Manage templates")
    app.add_typer(webhook_app, name="webhook", help="Manage webhooks")
    app.add_typer(suppression_app, name="suppression", help="Manage suppression lists")
    app.add_typer(recipient_app, name="recipient", help="Manage recipients")
    app.add_typer(token_app, name="token", help="Manage API tokens")
    app.add_typer(user_app, name="user", help="Manage account users")
    app.add_typer(smtp_app, name="smtp", help="Manage SMTP users")
    app.add_typer(inbound_app, name="inbound", help="Manage inbound routes")
    app.add_typer(identity_app, name="identity", help="Manage sender identities")
    app.add_typer(sms_app, name="sms", help="Send SMS and manage numbers")
    app.command(name="quota", help="Show API quota")(quota)
    app.add_typer(verification_app, name="verification", help="Verify email addresses")

    _registered = True


# Convenience function for CLI entry point
def cli():
    """Entry point for the CLI."""
    register_commands()

    try:
        app()
    except KeyboardInterrupt:
        err_console.print("\n[yellow]Operation cancelled by user[/yellow]")
        sys.exit(130)


if __name__ == "__main__":
    cli()
