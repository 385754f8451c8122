"""Main Textual TUI applications.

Orchestrates the UI components and forwards user intents (submit, clear)
to a request orchestrator. The orchestrator owns all conversation state;
the app only renders it whenever it changes.
"""

import asyncio

from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Footer, Header

from ..llm import AIClient
from ..orchestrator import ChatOrchestrator, RequestOrchestrator
from .config import CHAT_TITLE, CLEAR_CHAT_PROMPT, LogLevel
from .screens import ConfirmationScreen
from .styles import CHAT_CSS
from .themes import GEMINI_NIGHT
from .widgets import ChatHistoryWidget, ChatInputBar, DebugPanel


class GemtalkApp(App):
    """Behavior shared by the chat and image-edit front-ends."""

    BINDINGS = [
        Binding("ctrl+c", "quit", "Quit"),
        Binding("ctrl+k", "clear", "Clear"),
        Binding("ctrl+r", "copy_last_response", "Copy Response"),
        Binding("ctrl+d", "toggle_debug", "Log"),
    ]

    CLEAR_PROMPT = CLEAR_CHAT_PROMPT

    def __init__(self, client: AIClient, log_level: str | None = None) -> None:
        super().__init__()
        self._client = client
        self._log_level = log_level

    @property
    def orchestrator(self) -> RequestOrchestrator:
        raise NotImplementedError

    def _setup(self) -> None:
        """Theme, log panel and orchestrator wiring. Call from on_mount."""
        self.register_theme(GEMINI_NIGHT)
        self.theme = "gemini-night"

        log_panel = self.query_one("#debug-panel", DebugPanel)
        if self._log_level is not None:
            log_panel.log_level = LogLevel.from_string(self._log_level)
            log_panel.show()
            log_panel.route("info", "TUI", f"Log panel enabled with level: {self._log_level.upper()}")

        self.orchestrator.set_debug_callback(log_panel.route)
        self.orchestrator.set_change_callback(self.refresh_view)

    def _log(self, level: str, message: str) -> None:
        self.query_one("#debug-panel", DebugPanel).route(level, "TUI", message)

    def refresh_view(self) -> None:
        """Render the orchestrator state into the widgets."""
        orchestrator = self.orchestrator
        chat = self.query_one("#chat-history", ChatHistoryWidget)
        chat.sync(orchestrator.conversation, orchestrator.is_pending)
        self.query_one("#chat-input-bar", ChatInputBar).set_busy(orchestrator.is_pending)

    def on_chat_input_bar_submitted(self, event: ChatInputBar.Submitted) -> None:
        """Handle user input submission."""
        self._submit(event.value)

    @work(group="requests")
    async def _submit(self, text: str) -> None:
        """Run one request cycle as a background async worker."""
        accepted = await self.orchestrator.submit(text)
        if not accepted:
            self._log("debug", "Submission ignored")

    def action_clear(self) -> None:
        """Ask for confirmation, then clear."""
        if self.orchestrator.is_pending:
            self.notify("Wait for the current reply to finish", severity="warning", timeout=2)
            return

        def _on_confirm(confirmed: bool | None) -> None:
            if confirmed:
                self._clear()

        self.push_screen(ConfirmationScreen(self.CLEAR_PROMPT), _on_confirm)

    @work(group="requests")
    async def _clear(self) -> None:
        await self._reset()
        self.notify("Cleared", timeout=2)

    async def _reset(self) -> None:
        raise NotImplementedError

    def action_toggle_debug(self) -> None:
        """Toggle the log panel visibility."""
        log_panel = self.query_one("#debug-panel", DebugPanel)
        is_visible = log_panel.toggle()
        self.notify(f"Log panel {'shown' if is_visible else 'hidden'}", timeout=2)

    def action_copy_last_response(self) -> None:
        """Copy last bot message to clipboard."""
        message = self.orchestrator.conversation.last_bot_message()
        if message:
            self.copy_to_clipboard(message.text)
            self.notify("Response copied")
        else:
            self.notify("No response to copy", severity="warning")


class ChatApp(GemtalkApp):
    """Textual TUI for chatting with Gemini."""

    CSS = CHAT_CSS
    TITLE = CHAT_TITLE

    def __init__(
        self,
        client: AIClient,
        model: str | None = None,
        log_level: str | None = None,
    ) -> None:
        super().__init__(client, log_level=log_level)
        self._chat = ChatOrchestrator(client, model=model)

    @property
    def orchestrator(self) -> ChatOrchestrator:
        return self._chat

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        yield ChatHistoryWidget(id="chat-history")
        yield DebugPanel(id="debug-panel")
        yield ChatInputBar(id="chat-input-bar")
        yield Footer()

    def on_mount(self) -> None:
        """Called when app is mounted."""
        self._setup()
        self.sub_title = self._chat.model or "default model"
        self.refresh_view()
        self.query_one("#chat-input-bar", ChatInputBar).focus_input()
        self._start_session()

    @work(group="requests")
    async def _start_session(self) -> None:
        if not await self._chat.start():
            self.notify("Could not initialize the AI model", severity="error", timeout=5)

    async def _reset(self) -> None:
        await self._chat.reset()


async def run_chat_tui(
    client: AIClient,
    model: str | None = None,
    log_level: str | None = None,
) -> None:
    """Run the chat TUI.

    Args:
        client: AI client instance
        model: Chat model name (None uses the client's default)
        log_level: Log level for panel (debug/info/warning/error), None to hide
    """
    app = ChatApp(client=client, model=model, log_level=log_level)
    try:
        await app.run_async()
    except (KeyboardInterrupt, asyncio.CancelledError):
        pass
