"""Main CLI application using Typer."""
import asyncio
from pathlib import Path

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape

from ..orchestrator import ChatOrchestrator
from ..ui.config import LogLevel
from ..ui.formatting import render_message_panel
from .providers import get_chat_model, get_image_model, require_ai_client

# Load environment variables
load_dotenv()

# Create Typer app
app = typer.Typer(
    name="gemtalk",
    help="Terminal chat and image editing with Gemini",
    no_args_is_help=True,
    add_completion=True,
)

# Console for rich output
console = Console()

EXIT_COMMANDS = ("exit", "quit", "q")
CLEAR_COMMAND = "/clear"


def _console_debug_callback(log_level: str | None):
    """Build a debug callback that prints entries at or above the level."""
    if log_level is None:
        return None
    threshold = LogLevel.from_string(log_level)

    def _callback(level: str, component: str, message: str) -> None:
        numeric = LogLevel.from_string(level)
        if numeric < threshold:
            return
        color = {"warning": "yellow", "error": "red"}.get(level, "dim")
        console.print(f"[{color}]{LogLevel.name(numeric):<5} \\[{component}] {escape(message)}[/{color}]")

    return _callback


@app.command(name="tui")
def tui_command(
    model: str | None = typer.Option(
        None,
        "--model",
        "-m",
        help="Chat model (default: $GEMINI_MODEL or gemini-2.5-flash)"
    ),
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Show log panel with level: debug (all), info, warning, or error"
    ),
):
    """Launch the interactive chat TUI."""
    async def _tui():
        from ..ui import run_chat_tui

        client = require_ai_client(console)
        try:
            await run_chat_tui(client, model=model or get_chat_model(), log_level=log_level)
        finally:
            await client.close()

    asyncio.run(_tui())


@app.command()
def edit(
    image: Path | None = typer.Argument(
        None,
        exists=True,
        file_okay=True,
        dir_okay=False,
        help="Image to load at start"
    ),
    model: str | None = typer.Option(
        None,
        "--model",
        "-m",
        help="Image model (default: $GEMINI_IMAGE_MODEL or gemini-2.5-flash-image)"
    ),
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Show log panel with level: debug (all), info, warning, or error"
    ),
):
    """Launch the image-edit TUI."""
    async def _edit():
        from ..ui import run_image_tui

        client = require_ai_client(console)
        try:
            await run_image_tui(
                client,
                model=model or get_image_model(),
                image_path=image,
                log_level=log_level,
            )
        finally:
            await client.close()

    asyncio.run(_edit())


@app.command()
def chat(
    model: str | None = typer.Option(
        None,
        "--model",
        "-m",
        help="Chat model (default: $GEMINI_MODEL or gemini-2.5-flash)"
    ),
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Print log entries at this level or above: debug, info, warning, error"
    ),
):
    """Interactive line-oriented chat in the console."""
    async def _chat():
        client = require_ai_client(console)
        orchestrator = ChatOrchestrator(client, model=model or get_chat_model())
        orchestrator.set_debug_callback(_console_debug_callback(log_level))

        shown = 0

        def _show_new_messages() -> None:
            nonlocal shown
            messages = orchestrator.conversation.messages
            for message in messages[shown:]:
                console.print(render_message_panel(message))
            shown = len(messages)

        try:
            await orchestrator.start()
            console.print("[bold cyan]Gemini AI Chatbot[/bold cyan]")
            console.print(f"[dim]Type {', '.join(repr(c) for c in EXIT_COMMANDS)} to leave, "
                          f"'{CLEAR_COMMAND}' to clear the chat[/dim]\n")
            _show_new_messages()

            while True:
                try:
                    user_input = console.input("[bold yellow]You:[/bold yellow] ")
                except (KeyboardInterrupt, EOFError):
                    console.print("\n[dim]Goodbye![/dim]")
                    break

                command = user_input.strip().lower()
                if not command:
                    continue
                if command in EXIT_COMMANDS:
                    console.print("[dim]Goodbye![/dim]")
                    break
                if command == CLEAR_COMMAND:
                    if typer.confirm("Are you sure you want to clear the entire chat history?"):
                        await orchestrator.reset()
                        shown = 0
                        console.clear()
                        _show_new_messages()
                    continue

                # The user's line is already on screen
                shown += 1
                with console.status("[dim]Gemini is typing...[/dim]"):
                    accepted = await orchestrator.submit(user_input)
                if not accepted:
                    shown -= 1
                    console.print("[yellow]The AI session is not available.[/yellow]")
                _show_new_messages()
        finally:
            await client.close()

    asyncio.run(_chat())


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
