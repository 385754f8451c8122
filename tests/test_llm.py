"""Unit tests for the llm module."""
from types import SimpleNamespace

import pytest

from gemtalk.llm import (
    AIClient,
    ChatMessage,
    ChatSession,
    GeminiClient,
    ImageEditResult,
    create_ai_client,
)
from gemtalk.llm.providers.gemini import (
    DEFAULT_CHAT_MODEL,
    DEFAULT_IMAGE_MODEL,
    extract_image,
    extract_text,
)


def _response(*parts, text=None):
    content = SimpleNamespace(parts=list(parts))
    return SimpleNamespace(candidates=[SimpleNamespace(content=content)], text=text)


def _inline(data: bytes, mime_type: str | None = "image/png"):
    return SimpleNamespace(text=None, inline_data=SimpleNamespace(data=data, mime_type=mime_type))


class TestAIClient:
    """Tests for the abstract interfaces."""

    def test_ai_client_is_abstract(self):
        with pytest.raises(TypeError):
            AIClient()  # type: ignore

    def test_chat_session_is_abstract(self):
        with pytest.raises(TypeError):
            ChatSession()  # type: ignore

    @pytest.mark.asyncio
    async def test_async_context_manager_closes(self, fake_client):
        async with fake_client as client:
            assert client is fake_client

        assert fake_client.closed


class TestModels:
    """Tests for llm data models."""

    def test_chat_message(self):
        message = ChatMessage(role="user", content="hi")

        assert message.role == "user"
        assert message.content == "hi"

    def test_edit_result_rejected_without_image(self):
        assert ImageEditResult(model="m").rejected
        assert ImageEditResult(image=b"", model="m").rejected
        assert not ImageEditResult(image=b"\x89PNG", model="m").rejected

    def test_edit_result_defaults(self):
        result = ImageEditResult(image=b"x", model="m")

        assert result.mime_type == "image/png"
        assert result.text == ""


class TestFactory:
    """Tests for create_ai_client."""

    def test_unsupported_provider(self):
        with pytest.raises(ValueError, match="Unsupported provider"):
            create_ai_client("openai", api_key="x")

    def test_missing_api_key(self):
        with pytest.raises(TypeError):
            create_ai_client("gemini")

    @pytest.mark.parametrize("provider", ["gemini", "Gemini", "google"])
    def test_creates_gemini_client(self, provider):
        client = create_ai_client(provider, api_key="test-key")

        assert isinstance(client, GeminiClient)
        assert client.model == DEFAULT_CHAT_MODEL
        assert client.image_model == DEFAULT_IMAGE_MODEL

    def test_model_overrides(self):
        client = create_ai_client("gemini", api_key="k", model="gemini-2.5-pro", image_model="img")

        assert client.model == "gemini-2.5-pro"
        assert client.image_model == "img"


class TestResponseExtraction:
    """Tests for Gemini response parsing."""

    def test_extract_text_joins_parts(self):
        response = _response(SimpleNamespace(text="Hello, "), SimpleNamespace(text="world"))

        assert extract_text(response) == "Hello, world"

    def test_extract_text_falls_back_to_text(self):
        response = SimpleNamespace(candidates=[], text="fallback")

        assert extract_text(response) == "fallback"

    def test_extract_text_empty(self):
        assert extract_text(SimpleNamespace(candidates=None, text=None)) == ""

    def test_extract_image(self):
        response = _response(SimpleNamespace(text="Here you go", inline_data=None), _inline(b"img", "image/jpeg"))

        assert extract_image(response) == (b"img", "image/jpeg")

    def test_extract_image_default_mime(self):
        assert extract_image(_response(_inline(b"img", None))) == (b"img", "image/png")

    def test_extract_image_none(self):
        assert extract_image(_response(SimpleNamespace(text="no image"))) is None
        assert extract_image(SimpleNamespace(candidates=[])) is None
        assert extract_image(_response(_inline(b""))) is None


class TestGeminiClient:
    """Tests for GeminiClient with the SDK transport stubbed out."""

    @pytest.mark.asyncio
    async def test_generate_edit_builds_request(self):
        client = GeminiClient(api_key="test-key")
        calls = {}

        async def fake_generate_content(**kwargs):
            calls.update(kwargs)
            return _response(SimpleNamespace(text="Done", inline_data=None), _inline(b"edited"))

        client._client = SimpleNamespace(
            aio=SimpleNamespace(models=SimpleNamespace(generate_content=fake_generate_content))
        )

        result = await client.generate_edit(b"source", "image/png", "add a hat")

        assert calls["model"] == DEFAULT_IMAGE_MODEL
        assert calls["contents"][1] == "add a hat"
        assert not result.rejected
        assert result.image == b"edited"
        assert result.text == "Done"

    @pytest.mark.asyncio
    async def test_generate_edit_rejected(self):
        client = GeminiClient(api_key="test-key")

        async def fake_generate_content(**kwargs):
            return _response(SimpleNamespace(text="I cannot edit that.", inline_data=None))

        client._client = SimpleNamespace(
            aio=SimpleNamespace(models=SimpleNamespace(generate_content=fake_generate_content))
        )

        result = await client.generate_edit(b"source", "image/png", "x", model="custom")

        assert result.rejected
        assert result.model == "custom"
        assert result.text == "I cannot edit that."

    @pytest.mark.asyncio
    async def test_session_sends_through_chat(self):
        client = GeminiClient(api_key="test-key")
        created = {}

        class _Chat:
            async def send_message(self, text):
                return _response(SimpleNamespace(text=f"re: {text}"))

        def fake_create(**kwargs):
            created.update(kwargs)
            return _Chat()

        client._client = SimpleNamespace(aio=SimpleNamespace(chats=SimpleNamespace(create=fake_create)))

        session = await client.create_session(history=[ChatMessage(role="assistant", content="hi")])

        assert session.model == DEFAULT_CHAT_MODEL
        assert created["history"][0].role == "model"
        assert await session.send_message("ping") == "re: ping"
