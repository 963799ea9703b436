"""Config commands for eventful - configuration management.

Provides commands to manage the eventful.json file:
- init: Create template config file
- show: Display current configuration
- path: Show path to config file
"""

import json

import typer
from rich.console import Console
from rich.markdown import Markdown
from rich.syntax import Syntax

from ..config_loader import (
    ENV_VAR_MAPPINGS,
    config_file_exists,
    generate_default_config_file,
    get_config_file_path,
    get_env_overrides,
    load_config,
)
from ..exceptions import ConfigError

console = Console()

config_app = typer.Typer(
    name="config",
    help="📋 Manage webhook configuration.",
    no_args_is_help=True,
)


@config_app.command(name="init")
def config_init(
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite existing config"),
    show: bool = typer.Option(False, "--show", "-s", help="Show config after creation"),
) -> None:
    """🚀 Create a template configuration file.

    Every event kind is listed with an empty URL (disabled).

    Examples:
        eventful config init
        eventful config init --force
    """
    config_path = get_config_file_path()

    if config_file_exists() and not force:
        console.print(f"[yellow]⚠️  Config file already exists:[/yellow] {config_path}")
        console.print("[dim]Use --force to overwrite.[/dim]")
        raise typer.Exit(1)

    try:
        generate_default_config_file(config_path, overwrite=force)
    except OSError as e:
        console.print(f"[red]❌ Error creating config: {e}[/red]")
        raise typer.Exit(1) from None

    console.print(f"[green]✅ Config file created:[/green] {config_path}")
    if show:
        console.print()
        _display_config()


@config_app.command(name="show")
def config_show(
    raw: bool = typer.Option(False, "--raw", "-r", help="Show raw JSON without formatting"),
    env: bool = typer.Option(False, "--env", "-e", help="Show environment variable overrides"),
) -> None:
    """📖 Display current configuration (password masked).

    Examples:
        eventful config show
        eventful config show --raw
        eventful config show --env
    """
    if env:
        _display_env_overrides()
        return

    _display_config(raw=raw)


@config_app.command(name="path")
def config_path(
    check: bool = typer.Option(False, "--check", "-c", help="Check if file exists"),
) -> None:
    """📍 Show path to configuration file.

    Examples:
        eventful config path
        eventful config path --check
    """
    path = get_config_file_path()

    if check:
        if config_file_exists():
            console.print(f"[green]✅ {path}[/green]")
        else:
            console.print(f"[yellow]⚠️  {path}[/yellow] [dim](not found)[/dim]")
            raise typer.Exit(1)
    else:
        # Plain output for piping
        console.print(str(path))


def _display_config(raw: bool = False) -> None:
    """Display the current configuration.

    Args:
        raw: If True, output raw JSON without formatting.
    """
    try:
        config = load_config()
    except ConfigError as e:
        console.print(f"[red]❌ Error loading config: {e}[/red]")
        raise typer.Exit(1) from None

    config_json = json.dumps(config.to_safe_dict(), indent=2)

    if raw:
        print(config_json)
        return

    config_path = get_config_file_path()
    if config_file_exists():
        console.print(f"[bold blue]📋 Configuration[/bold blue] ({config_path})\n")
    else:
        console.print("[bold blue]📋 Configuration[/bold blue] [dim](defaults, no file)[/dim]\n")

    console.print(Syntax(config_json, "json", theme="monokai", line_numbers=False))

    overrides = get_env_overrides()
    if overrides:
        console.print(f"\n[dim]📎 {len(overrides)} environment variable override(s) applied[/dim]")
        console.print("[dim]   Use 'eventful config show --env' to see them[/dim]")


def _display_env_overrides() -> None:
    """Display active environment variable overrides."""
    overrides = get_env_overrides()

    console.print("[bold blue]🔧 Environment Variable Overrides[/bold blue]\n")

    if not overrides:
        console.print("[dim]No environment variable overrides are currently set.[/dim]\n")
        console.print("[bold]Available environment variables:[/bold]")
        rows = []
        for env_var, key, kind in ENV_VAR_MAPPINGS:
            target = f"url.{kind.value}" if kind is not None else key
            rows.append(f"| `{env_var}` | `{target}` |")
        table = "| Variable | Config Key |\n|----------|------------|\n" + "\n".join(rows)
        console.print(Markdown(table))
        return

    console.print("[bold]Active overrides:[/bold]\n")
    for env_var, value in overrides.items():
        if "password" in env_var.lower():
            console.print(f"  [cyan]{env_var}[/cyan] = [dim]***[/dim]")
        else:
            console.print(f"  [cyan]{env_var}[/cyan] = {value}")


def register_config_commands(app: typer.Typer) -> None:
    """Register config command group with the Typer app."""
    app.add_typer(config_app, name="config")
