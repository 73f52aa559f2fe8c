"""Email sending commands for the MailerSend CLI."""

import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer
from rich.prompt import Prompt

from ..exceptions import ValidationError
from ..utils.cli_helpers import is_interactive, require_arg, split_csv
from ..utils.client_factory import get_client_and_formatter
from ..app import handle_exceptions

app = typer.Typer()


def _read_file(path: Optional[Path], kind: str) -> Optional[str]:
    if path is None:
        return None
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        raise ValidationError(f"failed to read {kind} file: {e}")


def build_message(
    to: str,
    to_name: Optional[str] = None,
    sender: Optional[str] = None,
    from_name: Optional[str] = None,
    cc: Optional[str] = None,
    bcc: Optional[str] = None,
    reply_to: Optional[str] = None,
    subject: Optional[str] = None,
    text: Optional[str] = None,
    html: Optional[str] = None,
    template_id: Optional[str] = None,
    tags: Optional[List[str]] = None,
    send_at: Optional[int] = None,
    track_clicks: bool = False,
    track_opens: bool = False,
    track_content: bool = False,
) -> Dict[str, Any]:
    """Assemble the ``/email`` request body, leaving out unset fields."""
    recipient = {"email": to}
    if to_name:
        recipient["name"] = to_name
    message: Dict[str, Any] = {"to": [recipient]}

    if sender:
        message["from"] = {"email": sender}
        if from_name:
            message["from"]["name"] = from_name
    if cc:
        message["cc"] = [{"email": cc}]
    if bcc:
        message["bcc"] = [{"email": bcc}]
    if reply_to:
        message["reply_to"] = {"email": reply_to}
    if subject:
        message["subject"] = subject
    if html:
        message["html"] = html
    if text:
        message["text"] = text
    if template_id:
        message["template_id"] = template_id
    if tags:
        message["tags"] = tags
    if send_at:
        message["send_at"] = send_at
    if track_clicks or track_opens or track_content:
        message["settings"] = {
            "track_clicks": track_clicks,
            "track_opens": track_opens,
            "track_content": track_content,
        }
    return message


@app.command()
@handle_exceptions
def send(
    ctx: typer.Context,
    sender: Optional[str] = typer.Option(None, "--from", help="Sender email address"),
    from_name: Optional[str] = typer.Option(None, "--from-name", help="Sender name"),
    to: Optional[str] = typer.Option(None, "--to", help="Recipient email address"),
    to_name: Optional[str] = typer.Option(None, "--to-name", help="Recipient name"),
    cc: Optional[str] = typer.Option(None, "--cc", help="CC email address"),
    bcc: Optional[str] = typer.Option(None, "--bcc", help="BCC email address"),
    reply_to: Optional[str] = typer.Option(None, "--reply-to", help="Reply-to email address"),
    subject: Optional[str] = typer.Option(None, "--subject", help="Email subject"),
    text: Optional[str] = typer.Option(None, "--text", help="Plain text body"),
    html: Optional[str] = typer.Option(None, "--html", help="HTML body"),
    html_file: Optional[Path] = typer.Option(None, "--html-file", help="File containing the HTML body"),
    text_file: Optional[Path] = typer.Option(None, "--text-file", help="File containing the plain text body"),
    template_id: Optional[str] = typer.Option(None, "--template-id", help="Template ID to use"),
    tags: Optional[List[str]] = typer.Option(None, "--tags", help="Email tags (repeat or comma-separate)"),
    send_at: Optional[int] = typer.Option(None, "--send-at", help="Unix timestamp for scheduled sending"),
    track_clicks: bool = typer.Option(False, "--track-clicks", help="Enable click tracking"),
    track_opens: bool = typer.Option(False, "--track-opens", help="Enable open tracking"),
    track_content: bool = typer.Option(False, "--track-content", help="Enable content tracking"),
) -> None:
    """Send an email.

    Without a body flag the HTML body is read from stdin.

    Examples:
        mailersend email send --from me@example.com --to you@example.com \\
            --subject "Hello" --text "Hi there"

        cat body.html | mailersend email send --from me@example.com --to you@example.com --subject Report
    """
    client, formatter = get_client_and_formatter(ctx)

    to = require_arg(to, "to", "Recipient email address")

    interactive = is_interactive()
    if not sender and interactive:
        sender = Prompt.ask("Sender email address")
    if not subject and interactive:
        subject = Prompt.ask("Subject")

    if not (html or text or html_file or text_file or template_id) and interactive:
        content_type = Prompt.ask("Email content type", choices=["text", "html", "template-id"], default="text")
        if content_type == "text":
            text = Prompt.ask("Plain text body")
        elif content_type == "html":
            html = Prompt.ask("HTML body")
        else:
            template_id = Prompt.ask("Template ID")

    html = _read_file(html_file, "HTML") or html
    text = _read_file(text_file, "text") or text

    if not (html or text or template_id) and not interactive:
        piped = sys.stdin.read()
        if piped:
            html = piped

    message = build_message(
        to,
        to_name=to_name,
        sender=sender,
        from_name=from_name,
        cc=cc,
        bcc=bcc,
        reply_to=reply_to,
        subject=subject,
        text=text,
        html=html,
        template_id=template_id,
        tags=split_csv(tags),
        send_at=send_at,
        track_clicks=track_clicks,
        track_opens=track_opens,
        track_content=track_content,
    )

    message_id = client.send_email(message)

    if formatter.json_output:
        result = {"status": "sent"}
        if message_id:
            result["message_id"] = message_id
        formatter.render_json(result)
        return

    if message_id:
        formatter.success(f"Email queued successfully. Message ID: {message_id}")
    else:
        formatter.success("Email queued successfully.")
