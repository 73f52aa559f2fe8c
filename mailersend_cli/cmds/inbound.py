"""Inbound route commands for the MailerSend CLI."""

from typing import Any, Dict, List, Optional

import typer

from ..render import data_of, yes_no
from ..utils.cli_helpers import require_arg, require_list, split_csv
from ..utils.client_factory import get_client_and_formatter
from ..app import handle_exceptions

app = typer.Typer()

MATCH_FILTER_TYPES = ("match_all", "match_sender", "match_domain", "match_recipient")
CATCH_FILTER_TYPES = ("catch_all", "catch_recipient")

# Priority sent when routing is enabled and none was given
DEFAULT_PRIORITY = 100


def parse_forwards(raw: List[str]) -> List[Dict[str, str]]:
    """Turn ``type:value`` strings into forward objects.

    A bare value, or one starting with ``http``, is a webhook URL.
    """
    forwards = []
    for item in raw:
        kind, value = "webhook", item
        idx = item.find(":")
        if idx > 0 and not item.startswith("http"):
            kind, value = item[:idx], item[idx + 1:]
        forwards.append({"type": kind, "value": value})
    return forwards


@app.command("list")
@handle_exceptions
def list_routes(
    ctx: typer.Context,
    domain: Optional[str] = typer.Option(None, "--domain", help="Filter by domain name or ID"),
    limit: int = typer.Option(0, "--limit", help="Maximum number of routes to return (0 = all)"),
) -> None:
    """List inbound routes."""
    client, formatter = get_client_and_formatter(ctx)

    domain_id = client.domain_resolver.resolve_id(domain) if domain else None
    routes = client.list_inbound_routes(domain_id=domain_id, limit=limit)

    rows = [[r.get("id"), r.get("name")] for r in routes]
    formatter.output(routes, ["ID", "NAME"], rows)


@app.command()
@handle_exceptions
def get(
    ctx: typer.Context,
    inbound_id: str = typer.Argument(..., help="Inbound route ID"),
) -> None:
    """Get inbound route details."""
    client, formatter = get_client_and_formatter(ctx)

    result = client.get_inbound_route(inbound_id)
    if formatter.json_output:
        formatter.render_json(result)
        return

    d = data_of(result)
    formatter.render_detail([
        ["ID", d.get("id")],
        ["Name", d.get("name")],
        ["Domain Enabled", yes_no(d.get("enabled"))],
        ["Inbound Domain", d.get("domain")],
        ["Address", d.get("address")],
    ])


@app.command()
@handle_exceptions
def create(
    ctx: typer.Context,
    domain: Optional[str] = typer.Option(None, "--domain", help="Domain name or ID"),
    name: Optional[str] = typer.Option(None, "--name", help="Route name"),
    domain_enabled: bool = typer.Option(True, "--domain-enabled/--domain-disabled", help="Whether the inbound domain is enabled"),
    inbound_domain: Optional[str] = typer.Option(None, "--inbound-domain", help="Inbound domain"),
    inbound_priority: int = typer.Option(0, "--inbound-priority", help="Inbound priority"),
    catch_filter_type: Optional[str] = typer.Option(None, "--catch-filter-type", help="Catch filter type (catch_all, catch_recipient)"),
    match_filter_type: Optional[str] = typer.Option(None, "--match-filter-type", help="Match filter type (e.g. match_all, match_recipient)"),
    forwards: Optional[List[str]] = typer.Option(None, "--forwards", help="Forwards as type:value pairs, e.g. webhook:https://example.com"),
) -> None:
    """Create an inbound route.

    Examples:
        mailersend inbound create --domain example.com --name support \\
            --match-filter-type match_all --forwards https://example.com/inbound
    """
    domain = require_arg(domain, "domain", "Domain name or ID")
    name = require_arg(name, "name", "Route name")
    match_filter_type = require_arg(match_filter_type, "match-filter-type", "Match filter type (e.g. match_all, match_recipient)")
    forward_list = require_list(forwards, "forwards", "Forward URLs (type:value pairs)")

    client, formatter = get_client_and_formatter(ctx)
    domain_id = client.domain_resolver.resolve_id(domain)

    route: Dict[str, Any] = {
        "domain_id": domain_id,
        "name": name,
        "domain_enabled": domain_enabled,
        "match_filter": {"type": match_filter_type},
        "forwards": parse_forwards(forward_list),
    }
    if inbound_domain:
        route["inbound_domain"] = inbound_domain
    if inbound_priority > 0:
        route["inbound_priority"] = inbound_priority
    elif domain_enabled:
        route["inbound_priority"] = DEFAULT_PRIORITY
    if catch_filter_type:
        route["catch_filter"] = {"type": catch_filter_type, "filters": []}

    result = client.create_inbound_route(route)
    if formatter.json_output:
        formatter.render_json(result)
        return
    formatter.success(f"Inbound route created successfully. ID: {data_of(result).get('id')}")


def current_route(d: Dict[str, Any]) -> Dict[str, Any]:
    """Rebuild an update body from a fetched route."""
    match_filter = {"type": "match_all"}
    catch_filter: Dict[str, Any] = {"type": "catch_all", "filters": []}
    for f in d.get("filters") or []:
        if f.get("type") in MATCH_FILTER_TYPES:
            match_filter = {"type": f["type"]}
        elif f.get("type") in CATCH_FILTER_TYPES:
            catch_filter = {"type": f["type"], "filters": []}

    return {
        "name": d.get("name"),
        "domain_enabled": bool(d.get("enabled")),
        "inbound_domain": d.get("domain"),
        "inbound_priority": d.get("priority") or 0,
        "match_filter": match_filter,
        "catch_filter": catch_filter,
        "forwards": [
            {"type": fw.get("type"), "value": fw.get("value")}
            for fw in d.get("forwards") or []
        ],
    }


@app.command()
@handle_exceptions
def update(
    ctx: typer.Context,
    inbound_id: str = typer.Argument(..., help="Inbound route ID"),
    name: Optional[str] = typer.Option(None, "--name", help="Route name"),
    domain_enabled: Optional[bool] = typer.Option(None, "--domain-enabled/--domain-disabled", help="Whether the inbound domain is enabled"),
    inbound_domain: Optional[str] = typer.Option(None, "--inbound-domain", help="Inbound domain"),
    inbound_priority: Optional[int] = typer.Option(None, "--inbound-priority", help="Inbound priority"),
    catch_filter_type: Optional[str] = typer.Option(None, "--catch-filter-type", help="Catch filter type"),
    match_filter_type: Optional[str] = typer.Option(None, "--match-filter-type", help="Match filter type"),
    forwards: Optional[List[str]] = typer.Option(None, "--forwards", help="Forwards as type:value pairs"),
) -> None:
    """Update an inbound route.

    The current route is fetched first and the given options are applied on
    top of it.
    """
    client, formatter = get_client_and_formatter(ctx)

    route = current_route(data_of(client.get_inbound_route(inbound_id)))
    if name is not None:
        route["name"] = name
    if domain_enabled is not None:
        route["domain_enabled"] = domain_enabled
    if inbound_domain is not None:
        route["inbound_domain"] = inbound_domain
    if inbound_priority is not None:
        route["inbound_priority"] = inbound_priority
    if catch_filter_type is not None:
        route["catch_filter"] = {"type": catch_filter_type, "filters": []}
    if match_filter_type is not None:
        route["match_filter"] = {"type": match_filter_type}
    if forwards:
        route["forwards"] = parse_forwards(split_csv(forwards))

    result = client.update_inbound_route(inbound_id, route)
    if formatter.json_output:
        formatter.render_json(result)
        return
    formatter.success(f"Inbound route {inbound_id} updated successfully.")


@app.command()
@handle_exceptions
def delete(
    ctx: typer.Context,
    inbound_id: str = typer.Argument(..., help="Inbound route ID"),
) -> None:
    """Delete an inbound route."""
    client, formatter = get_client_and_formatter(ctx)

    client.delete_inbound_route(inbound_id)
    formatter.success(f"Inbound route {inbound_id} deleted successfully.")
