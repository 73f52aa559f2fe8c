"""API token commands for the MailerSend CLI."""

from typing import List, Optional

import typer

from ..exceptions import ValidationError
from ..render import data_of
from ..utils.cli_helpers import confirm, require_arg, split_csv
from ..utils.client_factory import get_client_and_formatter
from ..app import handle_exceptions

app = typer.Typer()

TOKEN_STATUSES = ("pause", "unpause")


@app.command("list")
@handle_exceptions
def list_tokens(
    ctx: typer.Context,
    limit: int = typer.Option(0, "--limit", help="Maximum number of tokens to return (0 = all)"),
) -> None:
    """List API tokens."""
    client, formatter = get_client_and_formatter(ctx)

    tokens = client.list_tokens(limit=limit)
    rows = [[t.get("id"), t.get("name"), t.get("status"), t.get("created_at")] for t in tokens]
    formatter.output(tokens, ["ID", "NAME", "STATUS", "CREATED AT"], rows)


@app.command()
@handle_exceptions
def get(
    ctx: typer.Context,
    token_id: str = typer.Argument(..., help="Token ID"),
) -> None:
    """Get API token details."""
    client, formatter = get_client_and_formatter(ctx)

    result = client.get_token(token_id)
    if formatter.json_output:
        formatter.render_json(result)
        return

    d = data_of(result)
    formatter.render_detail([
        ["ID", d.get("id")],
        ["Name", d.get("name")],
        ["Status", d.get("status")],
        ["Created At", d.get("created_at")],
    ])


@app.command()
@handle_exceptions
def create(
    ctx: typer.Context,
    name: Optional[str] = typer.Option(None, "--name", help="Token name"),
    domain: Optional[str] = typer.Option(None, "--domain", help="Domain name or ID"),
    scopes: Optional[List[str]] = typer.Option(None, "--scopes", help="Token scopes (repeat or comma-separate)"),
) -> None:
    """Create an API token.

    The token value is only shown once, in the output of this command.
    """
    name = require_arg(name, "name", "Token name")
    domain = require_arg(domain, "domain", "Domain name or ID")
    scope_list = split_csv(scopes)
    if not scope_list:
        raise ValidationError("--scopes is required")

    client, formatter = get_client_and_formatter(ctx)
    domain_id = client.domain_resolver.resolve_id(domain)
    result = client.create_token(name, domain_id, scope_list)

    if formatter.json_output:
        formatter.render_json(result)
        return

    d = data_of(result)
    formatter.success(f"Token created successfully. ID: {d.get('id')}")
    if d.get("accessToken"):
        formatter.console.print(d["accessToken"], markup=False)


@app.command()
@handle_exceptions
def update(
    ctx: typer.Context,
    token_id: str = typer.Argument(..., help="Token ID"),
    status: Optional[str] = typer.Option(None, "--status", help="Token status: pause or unpause"),
) -> None:
    """Pause or unpause an API token."""
    status = require_arg(status, "status", "Status (pause/unpause)")
    if status not in TOKEN_STATUSES:
        raise ValidationError(f'invalid status "{status}": use pause or unpause')

    client, formatter = get_client_and_formatter(ctx)
    result = client.update_token_status(token_id, status)

    if formatter.json_output:
        formatter.render_json(result)
        return

    formatter.success(f"Token {token_id} status updated to {status}.")


@app.command()
@handle_exceptions
def delete(
    ctx: typer.Context,
    token_id: str = typer.Argument(..., help="Token ID"),
) -> None:
    """Delete an API token."""
    client, formatter = get_client_and_formatter(ctx)

    if not confirm(f"Delete token {token_id}?"):
        return

    client.delete_token(token_id)
    formatter.success(f"Token {token_id} deleted successfully.")
