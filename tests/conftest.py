"""Pytest configuration and shared fixtures."""
import asyncio
import io
import os

import pytest
from PIL import Image

from gemtalk.llm import AIClient, ChatMessage, ChatSession, ImageEditResult
from gemtalk.orchestrator import DisplayResourcePool


def make_png(color: str = "red", size: tuple[int, int] = (4, 4)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


class FakeChatSession(ChatSession):
    """Replies with a canned answer, or raises, per call."""

    def __init__(self, replies: list[str | Exception] | None = None, gate: asyncio.Event | None = None):
        self.replies = list(replies or [])
        self.gate = gate
        self.sent: list[str] = []

    async def send_message(self, text: str) -> str:
        self.sent.append(text)
        if self.gate is not None:
            await self.gate.wait()
        reply = self.replies.pop(0) if self.replies else f"echo: {text}"
        if isinstance(reply, Exception):
            raise reply
        return reply


class FakeAIClient(AIClient):
    """In-memory AI client recording every call."""

    def __init__(
        self,
        session: FakeChatSession | None = None,
        edits: list[ImageEditResult | Exception] | None = None,
        session_error: Exception | None = None,
        gate: asyncio.Event | None = None,
    ):
        self.session = session or FakeChatSession()
        self.edits = list(edits or [])
        self.session_error = session_error
        self.gate = gate
        self.sessions_created = 0
        self.edit_calls: list[tuple[bytes, str, str, str | None]] = []
        self.closed = False

    async def create_session(
        self,
        model: str | None = None,
        history: list[ChatMessage] | None = None,
    ) -> ChatSession:
        if self.session_error is not None:
            raise self.session_error
        self.sessions_created += 1
        return self.session

    async def generate_edit(
        self,
        image: bytes,
        mime_type: str,
        prompt: str,
        model: str | None = None,
    ) -> ImageEditResult:
        self.edit_calls.append((image, mime_type, prompt, model))
        if self.gate is not None:
            await self.gate.wait()
        result = self.edits.pop(0) if self.edits else ImageEditResult(
            image=make_png("blue"), text="", model=model or "fake-image"
        )
        if isinstance(result, Exception):
            raise result
        return result

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def png_bytes():
    """Return a small valid PNG image."""
    return make_png()


@pytest.fixture
def png_file(tmp_path, png_bytes):
    """Return the path of a PNG image on disk."""
    path = tmp_path / "photo.png"
    path.write_bytes(png_bytes)
    return path


@pytest.fixture
def display_dir(tmp_path):
    directory = tmp_path / "display"
    directory.mkdir()
    return directory


@pytest.fixture
def pool(display_dir):
    """Return a display pool writing into a private directory."""
    pool = DisplayResourcePool(directory=display_dir)
    yield pool
    pool.close()


@pytest.fixture
def fake_client():
    return FakeAIClient()


@pytest.fixture
def debug_log():
    """Collect (level, component, message) entries from a debug callback."""
    entries: list[tuple[str, str, str]] = []

    def _callback(level: str, component: str, message: str) -> None:
        entries.append((level, component, message))

    _callback.entries = entries
    return _callback


@pytest.fixture(scope="session")
def gemini_api_key():
    """Return the Gemini API key from environment."""
    return os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY")
