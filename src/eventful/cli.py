"""CLI entry point for eventful."""

import logging

import typer

from .cli_commands import register_config_commands, register_event_commands

app = typer.Typer(
    name="eventful",
    help="""Post XMPP server events to webhooks.

Manage the plugin's webhook configuration and try it out by posting
single events by hand.

Quick start:
  eventful config init
  eventful config show
  eventful fire message --from alice@example.com --to bob@example.com --body hi
""",
    add_completion=False,
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log requests and responses"),
) -> None:
    """Configure logging for every command."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


register_config_commands(app)
register_event_commands(app)


if __name__ == "__main__":
    app()
