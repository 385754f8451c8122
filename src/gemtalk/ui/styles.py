"""CSS styles for the TUI.

Hides layout and styling decisions from the application logic.
Uses Textual CSS features: nesting, pseudo-classes, variables.

Design Philosophy:
- A single message column, bot messages on the left, user on the right
- Code blocks set apart with their own copy button
- Input docked at the bottom, disabled while a reply is pending
"""

BASE_CSS = """
Screen {
    layout: vertical;
    background: $background;
}

/* ============================================
   Chat History - Message Column
   ============================================ */
#chat-history {
    height: 1fr;
    background: $background;
    border: round $primary 60%;
    border-title-color: $primary;
    border-title-style: bold;
    border-title-align: left;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
    padding: 0 1;
    scrollbar-gutter: stable;

    &:focus-within {
        border: round $primary;
    }
}

.chat-message {
    width: 85%;
    height: auto;
    margin: 1 0 0 0;
    padding: 0 2 1 2;
}

/* Bot messages - left aligned, gray bubble */
.bot-message {
    background: $panel;
    border-left: tall $primary;

    & .message-header {
        color: $accent;
        text-style: bold;
    }
}

/* User messages - right aligned, blue bubble */
.user-message {
    background: $secondary 70%;
    border-right: tall $secondary;
    offset-x: 17%;

    & .message-header {
        color: $foreground;
        text-style: bold;
        text-align: right;
    }
}

.message-header {
    height: 1;
}

.message-content {
    height: auto;
    color: $foreground;
}

/* ============================================
   Code Blocks
   ============================================ */
.code-block {
    height: auto;
    margin: 1 0;
    padding: 0 1;
    background: $surface;
    border: round $border;

    & .code-content {
        height: auto;
        overflow-x: auto;
    }

    & .copy-btn {
        dock: right;
        height: 1;
        min-width: 9;
        border: none;
        background: $panel;
        color: $text-muted;

        &:hover {
            color: $foreground;
        }

        &.-copied {
            color: $success;
            text-style: bold;
        }
    }
}

#typing-indicator {
    height: 3;
    width: 16;
    color: $primary;
}

/* ============================================
   Input Bars
   ============================================ */
ChatInputBar, UploadBar {
    height: auto;
    padding: 0 1;
    background: $surface;
    border-top: solid $border;
}

#upload-row {
    height: auto;
}

#chat-input, #upload-path {
    width: 1fr;
}

#send-btn, #upload-btn {
    min-width: 10;
    margin: 0 0 0 1;
}

#upload-notice {
    width: 100%;
    height: auto;
    color: $error;
    display: none;
}

/* ============================================
   Debug/Log Panel
   ============================================ */
#debug-panel {
    height: auto;
    min-height: 6;
    max-height: 12;
    background: $surface;
    border: round $warning 60%;
    border-title-color: $warning;
    border-title-style: bold;
    border-title-align: left;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
    padding: 0 1;
    scrollbar-gutter: stable;
}

Header {
    background: $surface;
    color: $foreground;
}

HeaderTitle {
    color: $foreground;
    text-style: bold;
}

Toast {
    background: $surface;
    border: tall $border;
    padding: 0 1;

    &.-error {
        border: tall $error;
    }
}
"""

CHAT_CSS = BASE_CSS

IMAGE_CSS = BASE_CSS + """
/* ============================================
   Image Editor - Image beside the status log
   ============================================ */
#workspace {
    height: 1fr;
}

#image-panel {
    width: 3fr;
    height: 100%;
    background: $surface;
    border: round $accent 60%;
    border-title-color: $accent;
    border-title-style: bold;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
    align: center middle;
}

#current-image {
    width: auto;
    height: auto;
}

#workspace #chat-history {
    width: 2fr;
    height: 100%;
}

#workspace #chat-history .chat-message {
    width: 100%;
}

#workspace #chat-history .user-message {
    offset-x: 0;
}
"""
