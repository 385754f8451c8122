"""
Gemtalk: terminal chat and image-editing front-ends for Gemini.

This package follows Parnas's information hiding principles,
where each module hides a specific design decision.
"""

__version__ = "0.1.0"

from .conversation import Conversation, Message, Sender, Span, SpanKind, segment
from .orchestrator import ChatOrchestrator, ImageEditOrchestrator, RequestState

__all__ = [
    "ChatOrchestrator",
    "Conversation",
    "ImageEditOrchestrator",
    "Message",
    "RequestState",
    "Sender",
    "Span",
    "SpanKind",
    "segment",
]
