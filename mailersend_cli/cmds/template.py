"""Template management commands for the MailerSend CLI."""

from typing import Optional

import typer

from ..render import data_of, truncate
from ..utils.cli_helpers import confirm
from ..utils.client_factory import get_client_and_formatter
from ..app import handle_exceptions

app = typer.Typer()


@app.command("list")
@handle_exceptions
def list_templates(
    ctx: typer.Context,
    domain: Optional[str] = typer.Option(None, "--domain", help="Filter by domain name or ID"),
    limit: int = typer.Option(0, "--limit", help="Maximum number of templates to return (0 = all)"),
) -> None:
    """List templates."""
    client, formatter = get_client_and_formatter(ctx)

    domain_id = client.domain_resolver.resolve_id(domain) if domain else None
    templates = client.list_templates(domain_id=domain_id, limit=limit)

    rows = [[t.get("id"), truncate(t.get("name"), 40), t.get("type"), t.get("created_at")] for t in templates]
    formatter.output(templates, ["ID", "NAME", "TYPE", "CREATED AT"], rows)


@app.command()
@handle_exceptions
def get(
    ctx: typer.Context,
    template_id: str = typer.Argument(..., help="Template ID"),
) -> None:
    """Get template details and sending stats."""
    client, formatter = get_client_and_formatter(ctx)

    result = client.get_template(template_id)
    if formatter.json_output:
        formatter.render_json(result)
        return

    d = data_of(result)
    domain = d.get("domain") or {}
    category = d.get("category")
    if isinstance(category, dict):
        category = f"{category.get('name')} ({category.get('id')})"
    stats = d.get("template_stats") or {}

    formatter.render_detail([
        ["ID", d.get("id")],
        ["Name", d.get("name")],
        ["Type", d.get("type")],
        ["Image Path", d.get("image_path")],
        ["Created At", d.get("created_at")],
        ["Category", category or "-"],
        ["Domain", f"{domain.get('name')} ({domain.get('id')})" if domain.get("id") else "-"],
        ["Total", stats.get("total", 0)],
        ["Queued", stats.get("queued", 0)],
        ["Sent", stats.get("sent", 0)],
        ["Rejected", stats.get("rejected", 0)],
        ["Delivered", stats.get("delivered", 0)],
        ["Last Sent At", stats.get("last_email_sent_at")],
    ])


@app.command()
@handle_exceptions
def delete(
    ctx: typer.Context,
    template_id: str = typer.Argument(..., help="Template ID"),
) -> None:
    """Delete a template."""
    client, formatter = get_client_and_formatter(ctx)

    if not confirm(f"Delete template {template_id}?"):
        return

    client.delete_template(template_id)
    formatter.success(f"Template {template_id} deleted successfully.")
