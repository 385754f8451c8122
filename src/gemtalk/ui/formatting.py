"""Text formatting utilities for the UI.

Hides the details of how prose and code spans turn into Rich renderables.
Both the Textual widgets and the console chat render through here.
"""

from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.syntax import Syntax
from rich.text import Text

from ..conversation import Message, Span, SpanKind, segment

CODE_THEME = "monokai"


def render_prose(span: Span) -> Text:
    """Render prose verbatim; newlines and indentation are significant."""
    return Text(span.content, overflow="fold")


def render_code(span: Span) -> Syntax:
    """Render a code span with syntax highlighting when the language is known."""
    return Syntax(
        span.content,
        span.language or "text",
        theme=CODE_THEME,
        word_wrap=False,
        background_color="default",
    )


def render_span(span: Span) -> RenderableType:
    if span.kind is SpanKind.CODE:
        return render_code(span)
    return render_prose(span)


def render_message_body(text: str) -> Group:
    """Render a whole message body as a group of span renderables."""
    return Group(*(render_span(span) for span in segment(text)))


def render_message_panel(message: Message) -> Panel:
    """Render a message for the console chat."""
    if message.is_bot:
        title, style = "[bold green]Gemini[/]", "green"
    else:
        title, style = "[bold yellow]You[/]", "yellow"
    return Panel(
        render_message_body(message.text),
        title=title,
        title_align="left",
        border_style=style,
    )
