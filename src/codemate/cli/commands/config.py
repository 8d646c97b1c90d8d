"""
codemate config - Configuration commands.

Usage:
    codemate config show
    codemate config show chat
    codemate config show providers.default
    codemate config show --json
"""

import json
from typing import Annotated

import typer
import yaml
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax

from codemate.config import ConfigurationError, get_nested_value, load_config
from codemate.cli.output import console

app = typer.Typer(
    name="config",
    help="Configuration management.",
)


@app.command()
def show(
    section: Annotated[
        str | None,
        typer.Argument(
            help="Config section to show (e.g., 'providers', 'chat.enable_tools').",
        ),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output as JSON.",
        ),
    ] = False,
) -> None:
    """Show the merged configuration."""
    try:
        config = load_config()
    except ConfigurationError as e:
        console.print(f"[red]Configuration error: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    config_dict = config.model_dump()
    if section:
        value = get_nested_value(config_dict, section)
        if value is None:
            console.print(f"[red]Section '{section}' not found in configuration.[/red]")
            raise typer.Exit(1)
        config_dict = value

    if json_output:
        typer.echo(json.dumps(config_dict, indent=2, default=str))
        return

    output = yaml.dump(
        config_dict,
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
    )
    if section:
        console.print(Panel(Syntax(output, "yaml", theme="monokai"), title=f"[cyan]{section}[/cyan]"))
    else:
        console.print(Syntax(output, "yaml", theme="monokai"))
