from .base import AIClient, ChatSession
from .factory import create_ai_client
from .models import ChatMessage, ImageEditResult
from .providers import GeminiChatSession, GeminiClient

__all__ = [
    "AIClient",
    "ChatSession",
    "create_ai_client",
    "ChatMessage",
    "ImageEditResult",
    "GeminiChatSession",
    "GeminiClient",
]
