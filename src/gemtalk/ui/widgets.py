"""Custom Textual widgets for the TUI.

Hides widget implementation details:
- Message rendering (prose and code spans)
- Code block copy feedback
- Input history and busy state
- Log rendering and level filtering
- Image display
"""

from datetime import datetime
from pathlib import Path

# Import textual_image before the app starts so it can detect terminal graphics support
import textual_image.renderable  # noqa: F401
from rich.markup import escape
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.events import Click
from textual.message import Message as TextualMessage
from textual.widgets import Button, Input, LoadingIndicator, RichLog, Static
from textual_image.widget import Image as TextualImageWidget

from ..conversation import Conversation, Message, Span, SpanKind, segment
from .config import (
    CHAT_PLACEHOLDER,
    COPY_FEEDBACK_SECONDS,
    LOG_MAX_MESSAGE_LENGTH,
    LOG_TIMESTAMP_FORMAT,
    UPLOAD_PLACEHOLDER,
    LogLevel,
)
from .formatting import render_code, render_prose


class CodeBlock(Vertical):
    """A highlighted code span with a copy button.

    The button reads "Copied!" for a couple of seconds after a copy.
    """

    def __init__(self, span: Span, **kwargs) -> None:
        super().__init__(classes="code-block", **kwargs)
        self._span = span
        self._is_copied = False

    @property
    def code(self) -> str:
        return self._span.content

    @property
    def is_copied(self) -> bool:
        return self._is_copied

    def compose(self):
        yield Button("Copy", classes="copy-btn").with_tooltip("Copy code")
        yield Static(render_code(self._span), classes="code-content")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        self.app.copy_to_clipboard(self.code)
        self._is_copied = True
        event.button.label = "Copied!"
        event.button.add_class("-copied")
        self.set_timer(COPY_FEEDBACK_SECONDS, self._reset_copy_state)

    def _reset_copy_state(self) -> None:
        self._is_copied = False
        button = self.query_one(".copy-btn", Button)
        button.label = "Copy"
        button.remove_class("-copied")


class MessageView(Vertical):
    """One chat message: a sender header followed by its spans."""

    def __init__(self, message: Message, **kwargs) -> None:
        sender_class = "bot-message" if message.is_bot else "user-message"
        super().__init__(classes=f"chat-message {sender_class}", **kwargs)
        self.message = message

    def compose(self):
        header = "< Gemini" if self.message.is_bot else "> You"
        yield Static(header, classes="message-header")
        for span in segment(self.message.text):
            if span.kind is SpanKind.CODE:
                yield CodeBlock(span)
            else:
                yield Static(render_prose(span), classes="message-content")


class TypingIndicator(LoadingIndicator):
    """Shown below the last message while a reply is pending."""


class ChatHistoryWidget(VerticalScroll):
    """Scrollable message list kept in sync with a Conversation."""

    BORDER_TITLE = "Chat"
    BORDER_SUBTITLE = "Conversation history"
    ALLOW_MAXIMIZE = True

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._rendered_ids: list[str] = []
        self._typing = TypingIndicator(id="typing-indicator")

    def compose(self):
        yield self._typing

    def on_mount(self) -> None:
        self._typing.display = False

    @property
    def rendered_ids(self) -> list[str]:
        return list(self._rendered_ids)

    def sync(self, conversation: Conversation, pending: bool) -> None:
        """Render messages not shown yet and the typing indicator.

        A conversation that no longer starts with the rendered messages
        (after a reset) is re-rendered from scratch.
        """
        ids = [message.id for message in conversation.messages]
        if ids[:len(self._rendered_ids)] != self._rendered_ids:
            self.query(MessageView).remove()
            self._rendered_ids = []

        for message in conversation.messages[len(self._rendered_ids):]:
            self.mount(MessageView(message), before=self._typing)
            self._rendered_ids.append(message.id)

        self._typing.display = pending
        self.border_subtitle = f"{len(self._rendered_ids)} messages"
        self.scroll_end(animate=False)


class HistoryInput(Input):
    """Input widget with command history support.

    Use Up/Down arrow keys to navigate through history.
    """

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._history: list[str] = []
        self._history_index: int = -1
        self._current_input: str = ""

    def _on_key(self, event) -> None:
        """Handle key events for history navigation."""
        if event.key == "up":
            if self._history:
                if self._history_index == -1:
                    self._current_input = self.value
                    self._history_index = len(self._history) - 1
                elif self._history_index > 0:
                    self._history_index -= 1
                self.value = self._history[self._history_index]
                self.cursor_position = len(self.value)
            event.prevent_default()
            event.stop()
        elif event.key == "down":
            if self._history_index != -1:
                if self._history_index < len(self._history) - 1:
                    self._history_index += 1
                    self.value = self._history[self._history_index]
                else:
                    self._history_index = -1
                    self.value = self._current_input
                self.cursor_position = len(self.value)
            event.prevent_default()
            event.stop()

    def add_to_history(self, command: str) -> None:
        """Add a command to history."""
        if command and (not self._history or self._history[-1] != command):
            self._history.append(command)
        self._history_index = -1
        self._current_input = ""


class ChatInputBar(Horizontal):
    """Single-line input with a Send button.

    Disabled while a request is pending; Send is disabled for blank input.
    """

    class Submitted(TextualMessage):
        """Message sent when user submits input."""

        def __init__(self, value: str) -> None:
            super().__init__()
            self.value = value

    def __init__(self, *args, placeholder: str = CHAT_PLACEHOLDER, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._placeholder = placeholder
        self._busy = False

    def compose(self):
        yield HistoryInput(placeholder=self._placeholder, id="chat-input")
        yield Button("Send", id="send-btn", variant="primary", disabled=True).with_tooltip(
            "Send message (Enter)"
        )

    @property
    def busy(self) -> bool:
        return self._busy

    def set_busy(self, busy: bool) -> None:
        """Enable or disable input while a request is pending."""
        self._busy = busy
        text_input = self.query_one("#chat-input", HistoryInput)
        text_input.disabled = busy
        self._update_send_button()
        if not busy:
            text_input.focus()

    def _update_send_button(self) -> None:
        value = self.query_one("#chat-input", HistoryInput).value
        self.query_one("#send-btn", Button).disabled = self._busy or not value.strip()

    def on_input_changed(self, event: Input.Changed) -> None:
        self._update_send_button()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        self._submit()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "send-btn":
            event.stop()
            self._submit()

    def _submit(self) -> None:
        text_input = self.query_one("#chat-input", HistoryInput)
        value = text_input.value
        if self._busy or not value.strip():
            return
        text_input.add_to_history(value)
        text_input.value = ""
        self.post_message(self.Submitted(value))

    def focus_input(self) -> None:
        """Focus the text input."""
        self.query_one("#chat-input", HistoryInput).focus()


class UploadBar(Vertical):
    """Path input with an Upload button and an inline error line."""

    class UploadRequested(TextualMessage):
        """Message sent when the user asks to load an image file."""

        def __init__(self, path: str) -> None:
            super().__init__()
            self.path = path

    def compose(self):
        with Horizontal(id="upload-row"):
            yield Input(placeholder=UPLOAD_PLACEHOLDER, id="upload-path")
            yield Button("Upload", id="upload-btn", variant="default")
        yield Static("", id="upload-notice")

    def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        self._request()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "upload-btn":
            event.stop()
            self._request()

    def _request(self) -> None:
        path = self.query_one("#upload-path", Input).value.strip()
        if path:
            self.post_message(self.UploadRequested(path))

    def show_notice(self, text: str) -> None:
        """Show an inline notice (empty string hides it)."""
        notice = self.query_one("#upload-notice", Static)
        notice.update(text)
        notice.display = bool(text)

    def set_disabled(self, disabled: bool) -> None:
        self.query_one("#upload-path", Input).disabled = disabled
        self.query_one("#upload-btn", Button).disabled = disabled


class ImagePanel(Vertical):
    """Panel showing the current working image.

    Uses textual_image.widget.Image which auto-detects the best rendering
    method: Sixel (iTerm2, xterm), TGP (Kitty), or halfcell fallback.
    The panel only points at the display handle's file; it never owns it.
    """

    BORDER_TITLE = "Image"
    BORDER_SUBTITLE = "No image loaded"

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._image_widget = TextualImageWidget(None, id="current-image")
        self._image_path: Path | None = None

    def compose(self):
        yield self._image_widget

    @property
    def image_path(self) -> Path | None:
        return self._image_path

    def show_image(self, image_path: str | Path, origin: str) -> None:
        """Display the image backed by the given file."""
        self._image_path = Path(image_path)
        self._image_widget.image = str(self._image_path)
        self.border_subtitle = Path(origin).name if origin != "edit" else "edited"

    def clear_image(self) -> None:
        self._image_widget.image = None
        self._image_path = None
        self.border_subtitle = "No image loaded"


class DebugPanel(RichLog):
    """Log panel for operational tracing with level filtering.

    Shows timestamped log messages from all components.
    Supports standard log levels: DEBUG < INFO < WARNING < ERROR.
    Hidden by default, shown with --log-level flag or toggled with Ctrl+D.
    """

    BORDER_TITLE = "Log"
    BORDER_SUBTITLE = "Trace log"

    def __init__(self, *args, log_level: int = LogLevel.DEBUG, **kwargs) -> None:
        super().__init__(
            *args,
            markup=True,
            highlight=False,
            auto_scroll=True,
            wrap=True,
            **kwargs
        )
        self._log_level = log_level

    @property
    def log_level(self) -> int:
        """Current log level threshold."""
        return self._log_level

    @log_level.setter
    def log_level(self, level: int) -> None:
        """Set log level threshold."""
        self._log_level = level
        self._update_subtitle()

    def _update_subtitle(self) -> None:
        if self.display:
            self.border_subtitle = f"Level: {LogLevel.name(self._log_level)}"
        else:
            self.border_subtitle = "Hidden"

    def on_mount(self) -> None:
        """Hide by default."""
        self.display = False

    def log_entry(
        self,
        component: str,
        message: str,
        level: int = LogLevel.DEBUG
    ) -> None:
        """Add a log entry if it meets the current level threshold.

        Args:
            component: Component name (TUI, Chat, ImageEdit, ...)
            message: Log message
            level: Log level (LogLevel.DEBUG, INFO, WARNING, ERROR)
        """
        if level < self._log_level:
            return

        timestamp = datetime.now().strftime(LOG_TIMESTAMP_FORMAT)
        if len(message) > LOG_MAX_MESSAGE_LENGTH:
            message = message[:LOG_MAX_MESSAGE_LENGTH] + "..."

        level_colors = {
            LogLevel.DEBUG: "dim white",
            LogLevel.INFO: "cyan",
            LogLevel.WARNING: "yellow",
            LogLevel.ERROR: "red",
        }
        component_colors = {
            "TUI": "cyan",
            "Chat": "green",
            "ImageEdit": "magenta",
        }
        level_color = level_colors.get(level, "white")
        comp_color = component_colors.get(component, "white")

        self.write(
            f"[dim]{timestamp}[/] "
            f"[{level_color}]{LogLevel.name(level):<5}[/] "
            f"[{comp_color}]\\[{component}][/] {escape(message)}"
        )

    def route(self, level: str, component: str, message: str) -> None:
        """Debug-callback adapter: (level name, component, message)."""
        self.log_entry(component, message, LogLevel.from_string(level))

    def show(self) -> None:
        """Show the log panel."""
        self.display = True
        self._update_subtitle()

    def hide(self) -> None:
        """Hide the log panel."""
        self.display = False
        self.border_subtitle = "Hidden"

    def toggle(self) -> bool:
        """Toggle visibility. Returns new state."""
        if self.display:
            self.hide()
            return False
        self.show()
        return True

    def on_click(self, event: Click) -> None:
        """Copy log content to clipboard when clicked."""
        event.stop()
        text = "\n".join(line.text for line in self.lines)
        if not text.strip():
            self.app.notify("Log is empty", timeout=2)
            return
        self.app.copy_to_clipboard(text)
        self.app.notify("Log copied", timeout=2)
