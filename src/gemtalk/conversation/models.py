"""Data models for conversations.

These models define the structure of messages and conversations,
independent of how they are rendered or where the replies come from.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_GREETING = "Hello! I am Gemini. How can I assist you today?"
SEED_MESSAGE_ID = "init"


class DuplicateMessageIdError(ValueError):
    """Raised when a message id is already present in a conversation."""


class Sender(str, Enum):
    """Who authored a message."""

    USER = "user"
    BOT = "bot"


class Message(BaseModel):
    """A single chat message.

    Messages are immutable once created; the UI replaces, never edits.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Identifier, unique within a conversation")
    text: str = Field(description="Message body, may contain fenced code blocks")
    sender: Sender = Field(description="Author of the message")

    @property
    def is_bot(self) -> bool:
        return self.sender is Sender.BOT


class Conversation(BaseModel):
    """Ordered, append-only message log.

    Insertion order is display order. Every operation returns a new
    Conversation; the seed message is kept so that reset() can return
    to the initial state.
    """

    model_config = ConfigDict(frozen=True)

    messages: tuple[Message, ...] = Field(default_factory=tuple)
    seed: Message = Field(description="Greeting the conversation started with")

    @classmethod
    def initial(cls, greeting: str = DEFAULT_GREETING) -> "Conversation":
        """Create a conversation seeded with a single bot greeting."""
        seed = Message(id=SEED_MESSAGE_ID, text=greeting, sender=Sender.BOT)
        return cls(messages=(seed,), seed=seed)

    def append(self, message: Message) -> "Conversation":
        """Return a new conversation with the message added at the end.

        Raises:
            DuplicateMessageIdError: If a message with the same id exists
        """
        if any(existing.id == message.id for existing in self.messages):
            raise DuplicateMessageIdError(f"Duplicate message id: {message.id}")
        return self.model_copy(update={"messages": (*self.messages, message)})

    def reset(self) -> "Conversation":
        """Return the conversation truncated back to its seed message."""
        return self.model_copy(update={"messages": (self.seed,)})

    def last_bot_message(self) -> Message | None:
        for message in reversed(self.messages):
            if message.is_bot:
                return message
        return None

    def __len__(self) -> int:
        return len(self.messages)


def init_conversation(greeting: str = DEFAULT_GREETING) -> Conversation:
    """Start a conversation holding only the bot greeting."""
    return Conversation.initial(greeting)
