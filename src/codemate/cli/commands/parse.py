"""
codemate parse - Show the tool calls in a model response.

Usage:
    codemate parse response.txt
    cat response.txt | codemate parse
    codemate parse response.txt --json
"""

import json
import sys
from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape

from codemate.agent.parser import ToolCallParser
from codemate.cli.output import console, print_error, print_info, print_table


def _read_input(file: Path | None) -> str:
    if file is None or str(file) == "-":
        return sys.stdin.read()

    if not file.exists():
        print_error(f"File not found: {file}")
        raise typer.Exit(1)
    return file.read_text(encoding="utf-8")


def parse_command(
    file: Annotated[
        Path | None,
        typer.Argument(
            help="File holding the model response ('-' or omitted for stdin).",
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
    """Show the tool calls found in a model response without running them."""
    text = _read_input(file)
    calls = ToolCallParser.parse(text)

    if json_output:
        data = [{"name": call.name, "parameters": call.parameters} for call in calls]
        typer.echo(json.dumps(data, indent=2, ensure_ascii=False))
        return

    if not calls:
        print_info("No tool calls found.")
        return

    rows = []
    for index, call in enumerate(calls, start=1):
        params = "\n".join(escape(f"{key}={value}") for key, value in call.parameters.items())
        rows.append([index, escape(call.name), params or "-"])

    print_table(["#", "Tool", "Parameters"], rows, title="Tool Calls")
    console.print(f"[dim]{len(calls)} tool call(s)[/dim]")
