"""Event commands for eventful - post or preview a single event.

- fire: Build one event and POST it to its configured webhook
- encode: Print the form body an event would be posted with
"""

from pathlib import Path

import typer
from rich.console import Console

from ..config_loader import load_config
from ..events import EventKind, MessageEvent, PresenceEvent, WebhookEvent
from ..exceptions import ConfigError
from ..webhooks import WebhookClient, build_request

console = Console()


def _parse_kind(kind: str) -> EventKind:
    try:
        return EventKind.from_string(kind)
    except ValueError:
        valid = ", ".join(k.short_name for k in EventKind)
        console.print(f"[red]Unknown event kind: {kind}[/red] [dim](valid: {valid})[/dim]")
        raise typer.Exit(2) from None


def _build_event(
    kind: EventKind,
    *,
    sender: str,
    recipient: str,
    msg_type: str,
    subject: str,
    body: str,
    thread: str,
    user: str,
    server: str,
    resource: str,
    message: str,
) -> WebhookEvent:
    if kind is EventKind.MESSAGE:
        return MessageEvent(
            from_jid=sender,
            to_jid=recipient,
            type=msg_type,
            subject=subject,
            body=body,
            thread=thread,
        )
    return PresenceEvent(kind=kind, user=user, server=server, resource=resource, message=message)


# Options shared by both commands
SenderOpt = typer.Option("", "--from", help="Message: sender JID")
RecipientOpt = typer.Option("", "--to", help="Message: recipient JID")
TypeOpt = typer.Option("", "--type", help="Message: type attribute")
SubjectOpt = typer.Option("", "--subject", help="Message: subject text")
BodyOpt = typer.Option("", "--body", help="Message: body text")
ThreadOpt = typer.Option("", "--thread", help="Message: thread id")
UserOpt = typer.Option("", "--user", help="Presence: user (local part)")
ServerOpt = typer.Option("", "--server", help="Presence: server (domain)")
ResourceOpt = typer.Option("", "--resource", help="Presence: resource")
MessageOpt = typer.Option("", "--message", help="Presence: stanza or status text")


def fire(
    kind: str = typer.Argument(..., help="Event kind (message, presence_set, presence_unset, online, offline)"),
    sender: str = SenderOpt,
    recipient: str = RecipientOpt,
    msg_type: str = TypeOpt,
    subject: str = SubjectOpt,
    body: str = BodyOpt,
    thread: str = ThreadOpt,
    user: str = UserOpt,
    server: str = ServerOpt,
    resource: str = ResourceOpt,
    message: str = MessageOpt,
    config_file: Path | None = typer.Option(None, "--config", "-c", help="Config file path"),
    timeout: float | None = typer.Option(None, "--timeout", help="Request timeout in seconds"),
) -> None:
    """🚀 Post one event to its configured webhook.

    Examples:
        eventful fire message --from alice@example.com --to bob@example.com --body hi
        eventful fire online --user carol --server example.com --resource phone
    """
    event_kind = _parse_kind(kind)
    try:
        config = load_config(config_file)
    except ConfigError as e:
        console.print(f"[red]❌ Error loading config: {e}[/red]")
        raise typer.Exit(1) from None

    event = _build_event(
        event_kind,
        sender=sender,
        recipient=recipient,
        msg_type=msg_type,
        subject=subject,
        body=body,
        thread=thread,
        user=user,
        server=server,
        resource=resource,
        message=message,
    )
    request = build_request(event, config)
    if request is None:
        console.print(f"[yellow]⚠️  No webhook configured for {event_kind.short_name}, nothing sent[/yellow]")
        return

    result = WebhookClient(timeout=timeout).post_form_sync(request)
    if result.success:
        console.print(
            f"[green]✅ {event_kind.short_name} → {request.url}[/green] "
            f"[dim]({result.status_code}, {result.delivery_time_ms:.0f}ms)[/dim]"
        )
        return

    console.print(f"[red]❌ {event_kind.short_name} → {request.url}: {result.error}[/red]")
    raise typer.Exit(1)


def encode(
    kind: str = typer.Argument(..., help="Event kind (message, presence_set, presence_unset, online, offline)"),
    sender: str = SenderOpt,
    recipient: str = RecipientOpt,
    msg_type: str = TypeOpt,
    subject: str = SubjectOpt,
    body: str = BodyOpt,
    thread: str = ThreadOpt,
    user: str = UserOpt,
    server: str = ServerOpt,
    resource: str = ResourceOpt,
    message: str = MessageOpt,
) -> None:
    """🔎 Print the form body an event would be posted with.

    Examples:
        eventful encode message --from alice@example.com --to bob@example.com --body hi
    """
    event = _build_event(
        _parse_kind(kind),
        sender=sender,
        recipient=recipient,
        msg_type=msg_type,
        subject=subject,
        body=body,
        thread=thread,
        user=user,
        server=server,
        resource=resource,
        message=message,
    )
    # Plain output for piping
    print(event.to_form())


def register_event_commands(app: typer.Typer) -> None:
    """Register fire and encode with the Typer app."""
    app.command(name="fire")(fire)
    app.command(name="encode")(encode)
