"""Conversation module for gemtalk.

Provides the message log and the formatter that splits message text
into prose and code spans.
"""

from .ids import MessageIdGenerator
from .models import (
    DEFAULT_GREETING,
    SEED_MESSAGE_ID,
    Conversation,
    DuplicateMessageIdError,
    Message,
    Sender,
    init_conversation,
)
from .segmenter import Span, SpanKind, has_code, join_spans, segment

__all__ = [
    "DEFAULT_GREETING",
    "SEED_MESSAGE_ID",
    "Conversation",
    "DuplicateMessageIdError",
    "Message",
    "MessageIdGenerator",
    "Sender",
    "Span",
    "SpanKind",
    "has_code",
    "init_conversation",
    "join_spans",
    "segment",
]
