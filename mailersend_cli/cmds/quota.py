"""API quota command for the MailerSend CLI."""

import typer

from ..utils.client_factory import get_client_and_formatter
from ..app import handle_exceptions


@handle_exceptions
def quota(ctx: typer.Context) -> None:
    """Show the daily API request quota."""
    client, formatter = get_client_and_formatter(ctx)

    result = client.get_quota()
    if formatter.json_output:
        formatter.render_json(result)
        return

    total = int(result.get("quota") or 0)
    remaining = int(result.get("remaining") or 0)
    formatter.render_detail([
        ["Total", total],
        ["Used", total - remaining],
        ["Remaining", remaining],
    ])
