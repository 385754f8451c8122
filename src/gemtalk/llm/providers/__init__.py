from .gemini import GeminiChatSession, GeminiClient

__all__ = ["GeminiChatSession", "GeminiClient"]
