"""Image-edit Textual TUI.

One working image on the left, the status conversation on the right.
Uploads go through the orchestrator so invalid files never reach a
request; the image panel only points at the slot's display handle.
"""

import asyncio
from pathlib import Path

from textual.app import ComposeResult
from textual.containers import Horizontal
from textual.widgets import Footer, Header

from ..llm import AIClient
from ..orchestrator import DisplayResourcePool, ImageEditOrchestrator, InvalidImageError
from .app import GemtalkApp
from .config import CLEAR_IMAGE_PROMPT, EDIT_PLACEHOLDER, IMAGE_TITLE
from .styles import IMAGE_CSS
from .widgets import ChatHistoryWidget, ChatInputBar, DebugPanel, ImagePanel, UploadBar


class ImageEditApp(GemtalkApp):
    """Textual TUI for editing an image with Gemini."""

    CSS = IMAGE_CSS
    TITLE = IMAGE_TITLE
    CLEAR_PROMPT = CLEAR_IMAGE_PROMPT

    def __init__(
        self,
        client: AIClient,
        model: str | None = None,
        image_path: str | Path | None = None,
        log_level: str | None = None,
        pool: DisplayResourcePool | None = None,
    ) -> None:
        super().__init__(client, log_level=log_level)
        self._editor = ImageEditOrchestrator(client, model=model, pool=pool)
        self._initial_image = image_path

    @property
    def orchestrator(self) -> ImageEditOrchestrator:
        return self._editor

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Horizontal(id="workspace"):
            yield ImagePanel(id="image-panel")
            yield ChatHistoryWidget(id="chat-history")
        yield UploadBar(id="upload-bar")
        yield DebugPanel(id="debug-panel")
        yield ChatInputBar(id="chat-input-bar", placeholder=EDIT_PLACEHOLDER)
        yield Footer()

    def on_mount(self) -> None:
        """Called when app is mounted."""
        self._setup()
        self.sub_title = "no image"
        if self._initial_image is not None:
            self._upload(str(self._initial_image))
        self.refresh_view()
        self.query_one("#upload-path").focus()

    def on_unmount(self) -> None:
        """Release display resources when the app exits."""
        self._editor.close()

    def refresh_view(self) -> None:
        super().refresh_view()
        editor = self._editor
        panel = self.query_one("#image-panel", ImagePanel)
        handle, content = editor.slot.handle, editor.slot.content
        if handle is None or content is None:
            panel.clear_image()
            self.sub_title = "no image"
        elif panel.image_path != handle.path:
            panel.show_image(handle.path, content.origin)
            self.sub_title = f"{content.mime_type}, {content.size:,} bytes"
        self.query_one("#upload-bar", UploadBar).set_disabled(editor.is_pending)

    def on_upload_bar_upload_requested(self, event: UploadBar.UploadRequested) -> None:
        self._upload(event.path)

    def _upload(self, path: str) -> None:
        upload_bar = self.query_one("#upload-bar", UploadBar)
        try:
            self._editor.upload_file(path)
        except (InvalidImageError, RuntimeError) as e:
            self._log("warning", f"Upload rejected: {e}")
            upload_bar.show_notice(str(e))
            return
        upload_bar.show_notice("")
        self.query_one("#chat-input-bar", ChatInputBar).focus_input()

    async def _reset(self) -> None:
        self._editor.reset()


async def run_image_tui(
    client: AIClient,
    model: str | None = None,
    image_path: str | Path | None = None,
    log_level: str | None = None,
) -> None:
    """Run the image-edit TUI.

    Args:
        client: AI client instance
        model: Image model name (None uses the client's default)
        image_path: Image to load at start
        log_level: Log level for panel (debug/info/warning/error), None to hide
    """
    app = ImageEditApp(client=client, model=model, image_path=image_path, log_level=log_level)
    try:
        await app.run_async()
    except (KeyboardInterrupt, asyncio.CancelledError):
        pass
    finally:
        app.orchestrator.close()
