"""Provider factory functions for CLI.

Centralizes creation of the AI client from environment variables.
Hides configuration details from command implementations.
"""

import os

from rich.console import Console

from ..llm import AIClient, create_ai_client
from ..llm.providers.gemini import DEFAULT_CHAT_MODEL, DEFAULT_IMAGE_MODEL

# Default console for output
_console = Console()


def get_api_key() -> str | None:
    """Read the Gemini API key; GEMINI_API_KEY wins over API_KEY."""
    return os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY")


def get_chat_model() -> str:
    return os.getenv("GEMINI_MODEL", DEFAULT_CHAT_MODEL)


def get_image_model() -> str:
    return os.getenv("GEMINI_IMAGE_MODEL", DEFAULT_IMAGE_MODEL)


def get_ai_client(console: Console | None = None) -> AIClient | None:
    """Create the AI client from environment variables.

    Args:
        console: Optional Rich console for output

    Returns:
        AI client instance, or None if not configured

    Environment variables:
        GEMINI_API_KEY: Gemini API key (API_KEY is accepted as a fallback)
        GEMINI_MODEL: Chat model (default: gemini-2.5-flash)
        GEMINI_IMAGE_MODEL: Image model (default: gemini-2.5-flash-image)
    """
    con = console or _console
    api_key = get_api_key()
    if not api_key:
        con.print("[yellow]Warning: GEMINI_API_KEY not set[/yellow]")
        return None

    try:
        return create_ai_client(
            "gemini",
            api_key=api_key,
            model=get_chat_model(),
            image_model=get_image_model(),
        )
    except Exception as e:
        con.print(f"[red]Error: Could not create Gemini client: {e}[/red]")
        return None


def require_ai_client(console: Console | None = None) -> AIClient:
    """Get the AI client, raising error if not configured.

    Args:
        console: Optional Rich console for output

    Returns:
        AI client instance

    Raises:
        SystemExit: If the client is not configured
    """
    import typer

    con = console or _console
    client = get_ai_client(con)
    if not client:
        con.print("[red]Error: Could not initialize the AI model. Please check your API key configuration.[/red]")
        raise typer.Exit(code=1)
    return client
