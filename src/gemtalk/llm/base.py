from abc import ABC, abstractmethod
from typing import Any

from .models import ChatMessage, ImageEditResult


class ChatSession(ABC):
    """A provider-side conversation that accumulates turn history."""

    @abstractmethod
    async def send_message(self, text: str) -> str:
        """Send a user turn and return the model's reply text.

        Raises:
            Exception: Provider-specific errors; callers treat any error as a failed turn
        """
        pass


class AIClient(ABC):
    """Abstract base class for hosted model clients.

    This module hides the design decision of which provider answers chat
    turns and image edits. Implementations must handle:
    - API client setup and authentication
    - Request/response format conversion
    - Extracting text and image parts from responses

    Supports async context manager protocol for proper resource cleanup:
        async with client:
            session = await client.create_session()
            reply = await session.send_message("hi")
    """

    @abstractmethod
    async def create_session(
        self,
        model: str | None = None,
        history: list[ChatMessage] | None = None,
    ) -> ChatSession:
        """Open a chat session.

        Args:
            model: Model to use (None uses the client's default)
            history: Prior turns to seed the session with

        Returns:
            A ChatSession bound to the model

        Raises:
            Exception: If the session cannot be established
        """
        pass

    @abstractmethod
    async def generate_edit(
        self,
        image: bytes,
        mime_type: str,
        prompt: str,
        model: str | None = None,
    ) -> ImageEditResult:
        """Ask the model to edit an image.

        Stateless: every call carries the full image and instruction.

        Args:
            image: Source image bytes
            mime_type: MIME type of the source image
            prompt: Edit instruction
            model: Model to use (None uses the client's default image model)

        Returns:
            ImageEditResult, rejected when the model returned no image

        Raises:
            Exception: Provider-specific errors during generation
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections or resources."""
        pass

    async def __aenter__(self) -> "AIClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit with automatic cleanup.

        Note: Suppresses "Event loop is closed" errors during cleanup.
        This is a known harmless race condition in httpx/anyio cleanup:
        https://github.com/encode/httpx/issues/914
        """
        try:
            await self.close()
        except RuntimeError as e:
            if "Event loop is closed" not in str(e):
                raise
