"""
Main Typer application for codemate CLI.

This module defines the root CLI application and registers all commands.
"""

import logging
from typing import Annotated

import typer

from codemate import __version__
from codemate.cli.commands import chat, config, parse
from codemate.cli.output import print_info

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Create the main Typer app
app = typer.Typer(
    name="codemate",
    help="Coding assistant that lets a language model use your workspace tools.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    pretty_exceptions_enable=True,
    pretty_exceptions_show_locals=False,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        print_info(f"codemate version [green]{__version__}[/green]")
        raise typer.Exit()


# noinspection PyUnusedLocal
@app.callback()
def main_callback(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable debug logging.",
        ),
    ] = False,
) -> None:
    """
    [bold blue]codemate[/bold blue] - coding assistant

    Chat with a language model that can call workspace tools through
    tool-call markup in its replies.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
    )


app.command("parse")(parse.parse_command)
app.command("chat")(chat.chat_command)
app.add_typer(config.app, name="config")


if __name__ == "__main__":
    app()
