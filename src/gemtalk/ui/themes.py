"""Theme definitions for the TUI.

This module hides the design decisions about:
- Color palettes and visual appearance
- Theme variables (borders, scrollbars, etc.)

To add a new theme, define it here and register in the app.
"""

from textual.theme import Theme

# Slate and indigo palette; user bubbles blue, bot bubbles gray
GEMINI_NIGHT = Theme(
    name="gemini-night",
    primary="#6366f1",      # Indigo 500 - main accent
    secondary="#2563eb",    # Blue 600 - user messages
    accent="#818cf8",       # Indigo 400 - highlights
    foreground="#e5e7eb",   # Gray 200 - text
    background="#111827",   # Gray 900 - deepest background
    success="#4ade80",      # Green 400 - "Copied!" feedback
    warning="#facc15",      # Yellow 400
    error="#f87171",        # Red 400
    surface="#1f2937",      # Gray 800 - bars and panels
    panel="#374151",        # Gray 700 - bot message background
    dark=True,
    variables={
        "block-cursor-foreground": "#111827",
        "block-cursor-background": "#a5b4fc",
        "block-cursor-text-style": "bold",
        "input-cursor-background": "#e5e7eb",
        "input-selection-background": "#6366f1 30%",

        "border": "#374151",
        "border-blurred": "#1f2937",

        "scrollbar": "#374151",
        "scrollbar-hover": "#4b5563",
        "scrollbar-active": "#6366f1",
        "scrollbar-background": "#111827",

        "footer-foreground": "#d1d5db",
        "footer-background": "#1f2937",
        "footer-key-foreground": "#a5b4fc",
        "footer-key-background": "#111827",
        "footer-description-foreground": "#9ca3af",

        "text-muted": "#9ca3af",
        "text-disabled": "#4b5563",

        "button-foreground": "#e5e7eb",
        "button-color-foreground": "#ffffff",
        "button-focus-text-style": "bold",
    },
)
