"""UI configuration constants.

Centralizes magic numbers and configuration values for the UI module.
"""


class LogLevel:
    """Log level constants with numeric values for comparison.

    Standard logging hierarchy: DEBUG < INFO < WARNING < ERROR
    Lower numeric value = more verbose (shows more messages).
    """

    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40

    _names = {
        DEBUG: "DEBUG",
        INFO: "INFO",
        WARNING: "WARNING",
        ERROR: "ERROR",
    }

    _from_string = {
        "debug": DEBUG,
        "info": INFO,
        "warning": WARNING,
        "error": ERROR,
    }

    @classmethod
    def name(cls, level: int) -> str:
        """Get the name for a log level."""
        return cls._names.get(level, "UNKNOWN")

    @classmethod
    def from_string(cls, level_str: str) -> int:
        """Convert string to log level. Returns DEBUG if invalid."""
        return cls._from_string.get(level_str.lower(), cls.DEBUG)


# Titles
CHAT_TITLE = "Gemini AI Chatbot"
IMAGE_TITLE = "Gemini Image Editor"

# Input configuration
CHAT_PLACEHOLDER = "Ask Gemini anything..."
EDIT_PLACEHOLDER = "Describe the edit..."
UPLOAD_PLACEHOLDER = "Path to an image file..."

# Code block copy button feedback
COPY_FEEDBACK_SECONDS = 2.0

# Confirmation prompts
CLEAR_CHAT_PROMPT = "Are you sure you want to clear the entire chat history?"
CLEAR_IMAGE_PROMPT = "Are you sure you want to clear the image and history?"

# Log panel configuration
LOG_TIMESTAMP_FORMAT = "%H:%M:%S"
LOG_MAX_MESSAGE_LENGTH = 500  # Characters before truncating log messages
