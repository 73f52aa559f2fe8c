"""Email verification commands for the MailerSend CLI.

``verify`` checks a single address synchronously; ``verify-async`` queues
the check and ``status`` reads its outcome. The other commands work
on verification lists: create one from addresses, start it, optionally wait
for it to finish, then fetch the per-address results.
"""

import json
import time
from pathlib import Path
from typing import List, Optional

import typer

from ..exceptions import ValidationError
from ..render import data_of
from ..utils.cli_helpers import read_lines, require_arg, split_csv
from ..utils.client_factory import get_client_and_formatter
from ..app import handle_exceptions

app = typer.Typer()

POLL_INTERVAL = 5
FINAL_STATUSES = ("verified", "failed")


def _status_name(verification: dict) -> str:
    status = verification.get("status")
    if isinstance(status, dict):
        return status.get("name") or ""
    return status or ""


@app.command()
@handle_exceptions
def verify(
    ctx: typer.Context,
    email: str = typer.Argument(..., help="Email address to verify"),
) -> None:
    """Verify a single email address."""
    client, formatter = get_client_and_formatter(ctx)

    result = client.verify_email(email)
    if formatter.json_output:
        formatter.render_json(result)
        return

    d = data_of(result)
    formatter.render_detail([
        ["Email", email],
        ["Status", d.get("status")],
    ])


@app.command("verify-async")
@handle_exceptions
def verify_async(
    ctx: typer.Context,
    email: str = typer.Argument(..., help="Email address to verify"),
) -> None:
    """Queue verification of a single email address."""
    client, formatter = get_client_and_formatter(ctx)

    result = client.verify_email_async(email)
    if formatter.json_output:
        formatter.render_json(result)
        return

    d = data_of(result)
    formatter.render_detail([
        ["ID", d.get("id")],
        ["Address", d.get("address")],
        ["Status", d.get("status")],
    ])


@app.command()
@handle_exceptions
def status(
    ctx: typer.Context,
    verification_id: str = typer.Argument(..., help="Async verification ID"),
) -> None:
    """Get the status of an async email verification."""
    client, formatter = get_client_and_formatter(ctx)

    result = client.get_async_verification(verification_id)
    if formatter.json_output:
        formatter.render_json(result)
        return

    d = data_of(result)
    fields = [
        ["ID", d.get("id")],
        ["Address", d.get("address")],
        ["Status", d.get("status")],
    ]
    for label, key in (("Result", "result"), ("Error", "error")):
        if d.get(key) is not None:
            fields.append([label, json.dumps(d[key])])
    formatter.render_detail(fields)


@app.command("list")
@handle_exceptions
def list_verifications(
    ctx: typer.Context,
    limit: int = typer.Option(0, "--limit", help="Maximum number of lists to return (0 = all)"),
) -> None:
    """List verification lists."""
    client, formatter = get_client_and_formatter(ctx)

    items = client.list_verifications(limit=limit)
    rows = [
        [v.get("id"), v.get("name"), v.get("total", 0), _status_name(v), v.get("created_at")]
        for v in items
    ]
    formatter.output(items, ["ID", "NAME", "TOTAL", "STATUS", "CREATED AT"], rows)


@app.command()
@handle_exceptions
def get(
    ctx: typer.Context,
    verification_id: str = typer.Argument(..., help="Verification list ID"),
) -> None:
    """Get a verification list with its statistics."""
    client, formatter = get_client_and_formatter(ctx)

    result = client.get_verification(verification_id)
    if formatter.json_output:
        formatter.render_json(result)
        return

    d = data_of(result)
    stats = d.get("statistics") or {}
    formatter.render_detail([
        ["ID", d.get("id")],
        ["Name", d.get("name")],
        ["Total", d.get("total", 0)],
        ["Status", _status_name(d)],
        ["Source", d.get("source")],
        ["Verification Started", d.get("verification_started")],
        ["Verification Ended", d.get("verification_ended")],
        ["Created At", d.get("created_at")],
        ["Updated At", d.get("updated_at")],
        ["Valid", stats.get("valid", 0)],
        ["Catch All", stats.get("catch_all", 0)],
        ["Mailbox Full", stats.get("mailbox_full", 0)],
        ["Role Based", stats.get("role_based", 0)],
        ["Unknown", stats.get("unknown", 0)],
        ["Syntax Error", stats.get("syntax_error", 0)],
        ["Typo", stats.get("typo", 0)],
        ["Mailbox Not Found", stats.get("mailbox_not_found", 0)],
        ["Disposable", stats.get("disposable", 0)],
        ["Mailbox Blocked", stats.get("mailbox_blocked", 0)],
        ["Failed", stats.get("failed", 0)],
    ])


@app.command()
@handle_exceptions
def create(
    ctx: typer.Context,
    name: Optional[str] = typer.Option(None, "--name", help="Name for the verification list"),
    emails: Optional[List[str]] = typer.Option(None, "--emails", help="Email addresses (repeat or comma-separate)"),
    emails_file: Optional[Path] = typer.Option(None, "--emails-file", help="File with one email address per line"),
) -> None:
    """Create a verification list.

    Examples:
        mailersend verification create --name signups --emails-file signups.txt
    """
    name = require_arg(name, "name", "List name")

    addresses = split_csv(emails)
    if emails_file is not None:
        addresses.extend(read_lines(emails_file))
    if not addresses:
        raise ValidationError("--emails or --emails-file is required")

    client, formatter = get_client_and_formatter(ctx)
    result = client.create_verification(name, addresses)

    if formatter.json_output:
        formatter.render_json(result)
        return

    d = data_of(result)
    formatter.success(f"Verification list created: {d.get('name')} (ID: {d.get('id')})")


@app.command()
@handle_exceptions
def start(
    ctx: typer.Context,
    verification_id: str = typer.Argument(..., help="Verification list ID"),
    wait: bool = typer.Option(False, "--wait", help="Poll until verification completes"),
) -> None:
    """Start verifying a list.

    With ``--wait`` the list is polled every 5 seconds until its status is
    ``verified`` or ``failed``.
    """
    client, formatter = get_client_and_formatter(ctx)

    result = client.start_verification(verification_id)

    if not wait:
        if formatter.json_output:
            formatter.render_json(result)
        else:
            formatter.success(f"Verification started for list {verification_id}.")
        return

    while True:
        time.sleep(POLL_INTERVAL)

        polled = client.get_verification(verification_id)
        status = _status_name(data_of(polled))
        formatter.note(f"Waiting... (status: {status})")

        if status in FINAL_STATUSES:
            break

    if formatter.json_output:
        formatter.render_json(polled)
    elif status == "verified":
        formatter.success(f"Verification completed for list {verification_id}.")
    else:
        formatter.error(f"Verification failed for list {verification_id}.")


@app.command()
@handle_exceptions
def results(
    ctx: typer.Context,
    verification_id: str = typer.Argument(..., help="Verification list ID"),
    status: Optional[List[str]] = typer.Option(
        None, "--status", help="Filter by result (valid, invalid, catch_all, mailbox_full, role, unknown)"
    ),
    limit: int = typer.Option(0, "--limit", help="Maximum number of results to return (0 = all)"),
) -> None:
    """Show per-address results of a verification list."""
    client, formatter = get_client_and_formatter(ctx)

    items = client.list_verification_results(verification_id, results=split_csv(status), limit=limit)
    rows = [[r.get("address"), r.get("result"), r.get("reason", "")] for r in items]
    formatter.output(items, ["EMAIL", "RESULT", "REASON"], rows)
