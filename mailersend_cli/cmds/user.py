"""Account user commands for the MailerSend CLI.

``user invite`` manages pending invitations; accepted invites show up as
users.
"""

from typing import Any, Dict, List, Optional

import typer

from ..render import data_of
from ..utils.cli_helpers import confirm, require_arg, split_csv
from ..utils.client_factory import get_client_and_formatter
from ..app import handle_exceptions

app = typer.Typer()
invite_app = typer.Typer()
app.add_typer(invite_app, name="invite", help="Manage user invitations")


def access_changes(
    permissions: Optional[List[str]],
    templates: Optional[List[str]],
    domains: Optional[List[str]],
) -> Dict[str, Any]:
    """Permission, template and domain lists given on the command line."""
    changes: Dict[str, Any] = {}
    if permissions:
        changes["permissions"] = split_csv(permissions)
    if templates:
        changes["templates"] = split_csv(templates)
    if domains:
        changes["domains"] = split_csv(domains)
    return changes


@app.command("list")
@handle_exceptions
def list_users(
    ctx: typer.Context,
    limit: int = typer.Option(0, "--limit", help="Maximum number of users to return (0 = all)"),
) -> None:
    """List account users."""
    client, formatter = get_client_and_formatter(ctx)

    users = client.list_users(limit=limit)
    rows = [[u.get("id"), u.get("email"), u.get("role")] for u in users]
    formatter.output(users, ["ID", "EMAIL", "ROLE"], rows)


@app.command()
@handle_exceptions
def get(
    ctx: typer.Context,
    user_id: str = typer.Argument(..., help="User ID"),
) -> None:
    """Get user details."""
    client, formatter = get_client_and_formatter(ctx)

    result = client.get_user(user_id)
    if formatter.json_output:
        formatter.render_json(result)
        return

    d = data_of(result)
    formatter.render_detail([
        ["ID", d.get("id")],
        ["Email", d.get("email")],
        ["Role", d.get("role")],
    ])


@app.command()
@handle_exceptions
def update(
    ctx: typer.Context,
    user_id: str = typer.Argument(..., help="User ID"),
    role: Optional[str] = typer.Option(None, "--role", help="User role"),
    permissions: Optional[List[str]] = typer.Option(None, "--permissions", help="Permissions"),
    templates: Optional[List[str]] = typer.Option(None, "--templates", help="Template IDs"),
    domains: Optional[List[str]] = typer.Option(None, "--domains", help="Domain IDs"),
) -> None:
    """Update a user's role and access."""
    changes = access_changes(permissions, templates, domains)
    if role is not None:
        changes["role"] = role

    client, formatter = get_client_and_formatter(ctx)
    result = client.update_user(user_id, changes)

    if formatter.json_output:
        formatter.render_json(result)
        return
    formatter.success(f"User {user_id} updated successfully.")


@app.command()
@handle_exceptions
def delete(
    ctx: typer.Context,
    user_id: str = typer.Argument(..., help="User ID"),
) -> None:
    """Remove a user from the account."""
    client, formatter = get_client_and_formatter(ctx)

    if not confirm(f"Delete user {user_id}?"):
        return

    client.delete_user(user_id)
    formatter.success(f"User {user_id} deleted successfully.")


@invite_app.command("create")
@handle_exceptions
def invite_create(
    ctx: typer.Context,
    email: Optional[str] = typer.Option(None, "--email", help="Email address"),
    role: Optional[str] = typer.Option(None, "--role", help="User role"),
    permissions: Optional[List[str]] = typer.Option(None, "--permissions", help="Permissions"),
    templates: Optional[List[str]] = typer.Option(None, "--templates", help="Template IDs"),
    domains: Optional[List[str]] = typer.Option(None, "--domains", help="Domain IDs"),
) -> None:
    """Invite a user to the account."""
    email = require_arg(email, "email", "Email address")
    role = require_arg(role, "role", "User role")

    invite: Dict[str, Any] = {"email": email, "role": role}
    invite.update(access_changes(permissions, templates, domains))

    client, formatter = get_client_and_formatter(ctx)
    result = client.invite_user(invite)

    if formatter.json_output:
        formatter.render_json(result)
        return
    formatter.success(f"User invitation sent to {email}.")


@invite_app.command("list")
@handle_exceptions
def invite_list(
    ctx: typer.Context,
    limit: int = typer.Option(0, "--limit", help="Maximum number of invites to return (0 = all)"),
) -> None:
    """List pending invites."""
    client, formatter = get_client_and_formatter(ctx)

    invites = client.list_invites(limit=limit)
    rows = [[i.get("id"), i.get("email"), i.get("role")] for i in invites]
    formatter.output(invites, ["ID", "EMAIL", "ROLE"], rows)


@invite_app.command("get")
@handle_exceptions
def invite_get(
    ctx: typer.Context,
    invite_id: str = typer.Argument(..., help="Invite ID"),
) -> None:
    """Get invite details."""
    client, formatter = get_client_and_formatter(ctx)

    result = client.get_invite(invite_id)
    if formatter.json_output:
        formatter.render_json(result)
        return

    d = data_of(result)
    formatter.render_detail([
        ["ID", d.get("id")],
        ["Email", d.get("email")],
        ["Role", d.get("role")],
    ])


@invite_app.command("resend")
@handle_exceptions
def invite_resend(
    ctx: typer.Context,
    invite_id: str = typer.Argument(..., help="Invite ID"),
) -> None:
    """Resend an invite."""
    client, formatter = get_client_and_formatter(ctx)

    client.resend_invite(invite_id)
    formatter.success(f"Invite {invite_id} resent successfully.")


@invite_app.command("cancel")
@handle_exceptions
def invite_cancel(
    ctx: typer.Context,
    invite_id: str = typer.Argument(..., help="Invite ID"),
) -> None:
    """Cancel an invite."""
    client, formatter = get_client_and_formatter(ctx)

    client.cancel_invite(invite_id)
    formatter.success(f"Invite {invite_id} cancelled successfully.")
