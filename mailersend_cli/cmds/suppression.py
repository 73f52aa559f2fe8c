"""Suppression list commands for the MailerSend CLI.

Each command takes the list type as its first argument: ``blocklist``,
``hard-bounces``, ``spam-complaints``, ``unsubscribes`` or ``on-hold``.
"""

from typing import Any, Dict, List, Optional

import typer

from ..client import SUPPRESSION_TYPES
from ..exceptions import ValidationError
from ..utils.cli_helpers import confirm, require_arg, split_csv
from ..utils.client_factory import get_client_and_formatter
from ..app import handle_exceptions

app = typer.Typer()

TYPE_HELP = "Suppression list: " + ", ".join(SUPPRESSION_TYPES)


def _check_type(suppression_type: str) -> str:
    if suppression_type not in SUPPRESSION_TYPES:
        raise ValidationError(
            f'unknown suppression list "{suppression_type}" (use one of: {", ".join(SUPPRESSION_TYPES)})'
        )
    return suppression_type


def _entry_value(item: Dict[str, Any]) -> str:
    """Blocklist entries carry a pattern, the other lists a recipient."""
    if item.get("pattern"):
        return item["pattern"]
    recipient = item.get("recipient")
    if isinstance(recipient, dict):
        return recipient.get("email", "")
    return item.get("email") or ""


@app.command("list")
@handle_exceptions
def list_suppressions(
    ctx: typer.Context,
    suppression_type: str = typer.Argument(..., metavar="TYPE", help=TYPE_HELP),
    domain: Optional[str] = typer.Option(None, "--domain", help="Filter by domain name or ID"),
    limit: int = typer.Option(0, "--limit", help="Maximum number of items to return (0 = all)"),
) -> None:
    """List entries of a suppression list.

    Examples:
        mailersend suppression list blocklist --domain example.com
    """
    _check_type(suppression_type)

    client, formatter = get_client_and_formatter(ctx)
    domain_id = client.domain_resolver.resolve_id(domain) if domain else None
    items = client.list_suppressions(suppression_type, domain_id=domain_id, limit=limit)

    rows = [[i.get("id"), i.get("type", suppression_type), _entry_value(i), i.get("created_at")] for i in items]
    formatter.output(items, ["ID", "TYPE", "PATTERN/EMAIL", "CREATED AT"], rows)


@app.command()
@handle_exceptions
def add(
    ctx: typer.Context,
    suppression_type: str = typer.Argument(..., metavar="TYPE", help=TYPE_HELP),
    domain: Optional[str] = typer.Option(None, "--domain", help="Domain name or ID"),
    recipients: Optional[List[str]] = typer.Option(None, "--recipients", help="Recipient emails"),
    patterns: Optional[List[str]] = typer.Option(None, "--patterns", help="Patterns to block (blocklist only)"),
) -> None:
    """Add recipients to a suppression list."""
    _check_type(suppression_type)
    if suppression_type == "on-hold":
        raise ValidationError("entries cannot be added to the on-hold list")

    domain = require_arg(domain, "domain", "Domain name or ID")
    recipient_list = split_csv(recipients)
    pattern_list = split_csv(patterns)
    if pattern_list and suppression_type != "blocklist":
        raise ValidationError("--patterns is only supported for the blocklist")
    if not recipient_list and not pattern_list:
        raise ValidationError("--recipients is required")

    client, formatter = get_client_and_formatter(ctx)
    domain_id = client.domain_resolver.resolve_id(domain)
    result = client.add_suppressions(suppression_type, domain_id, recipient_list, pattern_list)

    if formatter.json_output:
        formatter.render_json(result)
        return

    formatter.success(f"Entries added to {suppression_type}.")


@app.command()
@handle_exceptions
def delete(
    ctx: typer.Context,
    suppression_type: str = typer.Argument(..., metavar="TYPE", help=TYPE_HELP),
    ids: Optional[List[str]] = typer.Option(None, "--ids", help="IDs to delete"),
    delete_all: bool = typer.Option(False, "--all", help="Delete all entries"),
    domain: Optional[str] = typer.Option(None, "--domain", help="Domain name or ID"),
) -> None:
    """Delete entries from a suppression list."""
    _check_type(suppression_type)

    id_list = split_csv(ids)
    if not id_list and not delete_all:
        raise ValidationError("either --ids or --all is required")

    if delete_all and not confirm(f"Delete ALL entries from {suppression_type}?"):
        return

    client, formatter = get_client_and_formatter(ctx)
    domain_id = client.domain_resolver.resolve_id(domain) if domain else None
    client.delete_suppressions(suppression_type, ids=id_list, domain_id=domain_id, delete_all=delete_all)

    formatter.success(f"Entries deleted from {suppression_type}.")
