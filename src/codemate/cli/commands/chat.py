"""
codemate chat - Chat with the configured model.

Usage:
    codemate chat
    codemate chat --model gemini-1.5-pro
    codemate chat --message "Explain this error" --no-tools

Inside the chat loop, /clear forgets the conversation and /exit leaves.
"""

import asyncio
from typing import Annotated

import typer
from rich.markdown import Markdown
from rich.markup import escape

from codemate.agent import ChatEvent, ChatOrchestrator, EventType
from codemate.cli.output import console, print_error, print_info
from codemate.config import ConfigurationError, load_config

EXIT_COMMANDS = {"/exit", "/quit"}
CLEAR_COMMAND = "/clear"


def _print_event(event: ChatEvent) -> None:
    """Show tool progress while a turn runs."""
    if event.event_type == EventType.TOOL_START:
        console.print(f"[dim]→ running {event.tool_name}[/dim]")
    elif event.event_type == EventType.TOOL_ERROR:
        error = (event.data or {}).get("error", event.message)
        console.print(f"[yellow]! {event.tool_name} failed: {escape(str(error))}[/yellow]")


async def _send(orchestrator: ChatOrchestrator, text: str) -> bool:
    """Send one message and print the reply. Returns False on error."""
    with console.status("[dim]Thinking...[/dim]"):
        response = await orchestrator.handle_user_message(text)

    if not response.success:
        print_error(escape(response.error or "Unknown error"))
        return False

    console.print(Markdown(response.text))
    return True


async def _chat_loop(orchestrator: ChatOrchestrator) -> None:
    print_info("Type /clear to reset the conversation, /exit to quit.")

    while True:
        try:
            text = console.input("[bold cyan]you>[/bold cyan] ")
        except (EOFError, KeyboardInterrupt):
            console.print()
            break

        text = text.strip()
        if not text:
            continue
        if text in EXIT_COMMANDS:
            break
        if text == CLEAR_COMMAND:
            orchestrator.clear_history()
            print_info("Conversation cleared.")
            continue

        await _send(orchestrator, text)


def chat_command(
    message: Annotated[
        str | None,
        typer.Option(
            "--message",
            "-q",
            help="Send a single message and exit.",
        ),
    ] = None,
    model: Annotated[
        str | None,
        typer.Option(
            "--model",
            "-m",
            help="Model to use (name or alias).",
        ),
    ] = None,
    tools: Annotated[
        bool,
        typer.Option(
            "--tools/--no-tools",
            help="Advertise and execute tools (default: from config).",
        ),
    ] = True,
) -> None:
    """Chat with the configured model."""
    try:
        config = load_config()
    except ConfigurationError as e:
        print_error(f"Configuration error: {escape(str(e))}")
        raise typer.Exit(1)

    if model:
        config.providers.default = model
    if not tools:
        config.chat.enable_tools = False

    orchestrator = ChatOrchestrator.from_config(config, event_callback=_print_event)
    console.print(f"[dim]Model: {config.get_default_model()}[/dim]")

    if message is not None:
        if not asyncio.run(_send(orchestrator, message)):
            raise typer.Exit(1)
        return

    asyncio.run(_chat_loop(orchestrator))
