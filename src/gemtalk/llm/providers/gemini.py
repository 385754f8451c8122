"""Google Gemini client implementation.

Uses the official Google GenAI SDK for async chat sessions and image edits.
Reference: https://github.com/googleapis/python-genai

Note: Gemini can return empty candidates due to safety filtering. Text
extraction tolerates that and image edits report it as a rejected result.
"""

from typing import Any

from google import genai
from google.genai import types

from ..base import AIClient, ChatSession
from ..models import ChatMessage, ImageEditResult

DEFAULT_CHAT_MODEL = "gemini-2.5-flash"
DEFAULT_IMAGE_MODEL = "gemini-2.5-flash-image"

# Default safety settings - relaxed to avoid blocking code-related content
DEFAULT_SAFETY_SETTINGS = [
    types.SafetySetting(category="HARM_CATEGORY_HARASSMENT", threshold="BLOCK_ONLY_HIGH"),
    types.SafetySetting(category="HARM_CATEGORY_HATE_SPEECH", threshold="BLOCK_ONLY_HIGH"),
    types.SafetySetting(category="HARM_CATEGORY_SEXUALLY_EXPLICIT", threshold="BLOCK_ONLY_HIGH"),
    types.SafetySetting(category="HARM_CATEGORY_DANGEROUS_CONTENT", threshold="BLOCK_ONLY_HIGH"),
]


def extract_text(response: Any) -> str:
    """Extract text content from a Gemini response, handling empty responses.

    Args:
        response: Gemini GenerateContentResponse

    Returns:
        Text content or empty string
    """
    if response.candidates:
        candidate = response.candidates[0]
        if candidate.content and candidate.content.parts:
            texts = [part.text for part in candidate.content.parts if getattr(part, "text", None)]
            if texts:
                return "".join(texts)

    # Fallback to response.text (may raise or return None)
    try:
        return response.text or ""
    except (ValueError, AttributeError):
        return ""


def extract_image(response: Any) -> tuple[bytes, str] | None:
    """Return the first inline image of a response as (bytes, mime type)."""
    if not response.candidates:
        return None
    candidate = response.candidates[0]
    if not candidate.content or not candidate.content.parts:
        return None
    for part in candidate.content.parts:
        inline = getattr(part, "inline_data", None)
        if inline is not None and inline.data:
            return inline.data, inline.mime_type or "image/png"
    return None


class GeminiChatSession(ChatSession):
    """Wraps a google-genai async chat; Gemini keeps the turn history."""

    def __init__(self, chat: Any, model: str) -> None:
        self._chat = chat
        self._model = model

    @property
    def model(self) -> str:
        return self._model

    async def send_message(self, text: str) -> str:
        response = await self._chat.send_message(text)
        return extract_text(response)


class GeminiClient(AIClient):
    """Google Gemini client implementation.

    Hidden design decisions:
    - Google GenAI client initialization
    - History conversion to Gemini content objects
    - Response modalities for image editing
    - Relaxed safety settings to avoid blocking code content
    """

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_CHAT_MODEL,
        image_model: str = DEFAULT_IMAGE_MODEL,
        **client_kwargs: Any
    ):
        """Initialize Gemini client.

        Args:
            api_key: Google AI API key
            model: Default chat model (gemini-2.5-flash, gemini-2.5-pro, ...)
            image_model: Default image editing model
            **client_kwargs: Additional kwargs for Client
        """
        self._model = model
        self._image_model = image_model
        self._client = genai.Client(api_key=api_key, **client_kwargs)

    @property
    def model(self) -> str:
        """Get the default chat model name."""
        return self._model

    @property
    def image_model(self) -> str:
        """Get the default image model name."""
        return self._image_model

    def _convert_history(self, history: list[ChatMessage]) -> list[types.Content]:
        contents = []
        for msg in history:
            role = "model" if msg.role in ("model", "assistant", "bot") else "user"
            contents.append(types.Content(role=role, parts=[types.Part(text=msg.content)]))
        return contents

    async def create_session(
        self,
        model: str | None = None,
        history: list[ChatMessage] | None = None,
    ) -> GeminiChatSession:
        """Open a Gemini chat session.

        Args:
            model: Model to use (overrides default)
            history: Prior turns to seed the session with

        Returns:
            GeminiChatSession
        """
        model_to_use = model or self._model
        chat = self._client.aio.chats.create(
            model=model_to_use,
            history=self._convert_history(history or []),
            config=types.GenerateContentConfig(safety_settings=DEFAULT_SAFETY_SETTINGS),
        )
        return GeminiChatSession(chat, model_to_use)

    async def generate_edit(
        self,
        image: bytes,
        mime_type: str,
        prompt: str,
        model: str | None = None,
    ) -> ImageEditResult:
        """Edit an image with a Gemini image model.

        Args:
            image: Source image bytes
            mime_type: MIME type of the source image
            prompt: Edit instruction
            model: Model to use (overrides default image model)

        Returns:
            ImageEditResult; rejected if no image part came back
        """
        model_to_use = model or self._image_model
        config = types.GenerateContentConfig(
            response_modalities=[types.Modality.TEXT, types.Modality.IMAGE],
            safety_settings=DEFAULT_SAFETY_SETTINGS,
        )
        response = await self._client.aio.models.generate_content(
            model=model_to_use,
            contents=[types.Part.from_bytes(data=image, mime_type=mime_type), prompt],
            config=config,
        )

        found = extract_image(response)
        text = extract_text(response)
        if found is None:
            return ImageEditResult(text=text, model=model_to_use)

        data, out_mime = found
        return ImageEditResult(image=data, mime_type=out_mime, text=text, model=model_to_use)

    async def close(self) -> None:
        """Close the Gemini client.

        Note: The Google GenAI client doesn't require explicit closing,
        but we implement this for interface consistency.
        """
        pass
