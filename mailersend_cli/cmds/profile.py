"""Profile management commands for the MailerSend CLI."""

from typing import Optional

import typer

from ..utils.cli_helpers import confirm, require_arg
from ..app import handle_exceptions

app = typer.Typer()


@app.command()
@handle_exceptions
def add(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Profile name"),
    token: Optional[str] = typer.Option(None, "--token", help="API token for this profile"),
) -> None:
    """Add a profile. The first profile becomes the active one.

    Examples:
        mailersend profile add staging --token mlsn.xxxx
    """
    config_manager = ctx.obj["config_manager"]
    formatter = ctx.obj["output_formatter"]

    token = require_arg(token, "token", "API Token")

    if config_manager.has_profile(name):
        if not confirm(f'Profile "{name}" already exists. Overwrite?'):
            return

    config_manager.add_profile(name, token)
    formatter.success(f'Profile "{name}" added.')


@app.command("list")
@handle_exceptions
def list_profiles(ctx: typer.Context) -> None:
    """List all profiles."""
    config_manager = ctx.obj["config_manager"]
    formatter = ctx.obj["output_formatter"]

    profiles = config_manager.list_profiles()

    if formatter.json_output:
        formatter.render_json([
            {k: p[k] for k in ("name", "active", "has_token", "has_oauth")}
            for p in profiles
        ])
        return

    if not profiles:
        formatter.console.print(
            "No profiles configured. Run 'mailersend profile add <name>' to create one.",
            markup=False,
        )
        return

    rows = [["*" if p["active"] else "", p["name"], p["method"]] for p in profiles]
    formatter.render_table(["", "NAME", "METHOD"], rows)


@app.command()
@handle_exceptions
def switch(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Profile to activate"),
) -> None:
    """Switch the active profile."""
    ctx.obj["config_manager"].switch_profile(name)
    ctx.obj["output_formatter"].success(f"Switched to profile: {name}")


@app.command()
@handle_exceptions
def remove(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Profile to remove"),
) -> None:
    """Remove a profile.

    If it was the active profile another one becomes active.
    """
    config_manager = ctx.obj["config_manager"]

    # Fail on unknown names before asking
    config_manager.get_profile(name)
    if not confirm(f'Remove profile "{name}"?'):
        return

    config_manager.remove_profile(name)
    ctx.obj["output_formatter"].success(f'Profile "{name}" removed.')
