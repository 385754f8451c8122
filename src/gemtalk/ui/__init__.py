"""Terminal UI module for gemtalk.

Provides Textual-based TUIs for chatting and image editing.

Module structure (Parnas principle - each module hides a design decision):
- formatting.py: Rich renderables for prose and code spans
- widgets.py: Custom widgets (message list, code blocks, input bars, log, image)
- styles.py: CSS styling (layout decisions)
- themes.py: Color palettes and theme configuration
- screens.py: Modal dialogs (confirmation screens)
- app.py: Chat application (user interaction flow)
- image_app.py: Image-edit application
"""

from .app import ChatApp, GemtalkApp, run_chat_tui
from .config import LogLevel
from .image_app import ImageEditApp, run_image_tui
from .screens import ConfirmationScreen
from .widgets import ChatHistoryWidget, ChatInputBar, CodeBlock, DebugPanel, ImagePanel, UploadBar

__all__ = [
    "ChatApp",
    "ChatHistoryWidget",
    "ChatInputBar",
    "CodeBlock",
    "ConfirmationScreen",
    "DebugPanel",
    "GemtalkApp",
    "ImageEditApp",
    "ImagePanel",
    "LogLevel",
    "UploadBar",
    "run_chat_tui",
    "run_image_tui",
]
