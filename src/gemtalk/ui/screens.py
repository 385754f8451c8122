"""Modal screens for the TUI.

This module hides the design decisions about:
- Confirmation dialog appearance (CSS, layout)
- Button styling and variants
- Keyboard shortcuts for dialogs

To change how confirmations look, modify only this file.
"""

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Static


class ConfirmationScreen(ModalScreen[bool]):
    """Modal Yes/No dialog. Dismisses with True for yes, False otherwise."""

    CSS = """
    ConfirmationScreen {
        align: center middle;
        background: $background 70%;
    }

    #confirmation-dialog {
        width: 60;
        height: auto;
        max-height: 20;
        border: tall $accent;
        background: $surface;
        padding: 1 2;
    }

    #confirmation-title {
        width: 100%;
        height: auto;
        text-align: center;
        text-style: bold;
        color: $accent;
        padding: 0 0 1 0;
        border-bottom: solid $border;
        margin-bottom: 1;
    }

    #confirmation-prompt {
        width: 100%;
        height: auto;
        text-align: center;
        padding: 1 2;
        color: $foreground;
        margin-bottom: 1;
    }

    #confirmation-buttons {
        width: 100%;
        height: 3;
        align: center middle;
    }

    #confirmation-buttons Button {
        margin: 0 1;
        min-width: 10;
    }
    """

    BINDINGS = [
        Binding("y", "confirm_yes", "Yes", show=False),
        Binding("n", "confirm_no", "No", show=False),
        Binding("escape", "confirm_no", "Cancel", show=False),
    ]

    def __init__(self, prompt: str, title: str = "Please Confirm") -> None:
        super().__init__()
        self._prompt = prompt
        self._title = title

    def compose(self) -> ComposeResult:
        with Vertical(id="confirmation-dialog"):
            yield Static(self._title, id="confirmation-title")
            yield Static(self._prompt, id="confirmation-prompt")
            with Horizontal(id="confirmation-buttons"):
                yield Button("Yes", id="btn-yes", variant="error")
                yield Button("No", id="btn-no", variant="primary")

    def on_mount(self) -> None:
        self.query_one("#btn-no", Button).focus()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss(event.button.id == "btn-yes")

    def action_confirm_yes(self) -> None:
        """Keyboard shortcut for Yes."""
        self.dismiss(True)

    def action_confirm_no(self) -> None:
        """Keyboard shortcut for No."""
        self.dismiss(False)
