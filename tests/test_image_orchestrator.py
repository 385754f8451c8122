"""Unit tests for the image-edit request cycle and display resources."""
import asyncio

import pytest
from conftest import FakeAIClient, make_png

from gemtalk.llm import ImageEditResult
from gemtalk.orchestrator import (
    FAILURE_TEXT,
    IMAGE_REJECTED_TEXT,
    DisplayResourcePool,
    ImageContent,
    ImageEditOrchestrator,
    InvalidImageError,
    RequestState,
    load_image_file,
    validate_image,
)
from gemtalk.orchestrator.models import IMAGE_EDITED_TEXT, IMAGE_GREETING


def _edit(color: str, text: str = "") -> ImageEditResult:
    return ImageEditResult(image=make_png(color), text=text, model="fake-image")


class TestValidateImage:
    """Tests for image validation."""

    def test_valid_png(self, png_bytes):
        assert validate_image(png_bytes) == "image/png"

    def test_declared_type_kept(self, png_bytes):
        assert validate_image(png_bytes, "image/x-custom") == "image/x-custom"

    def test_non_image_type_rejected(self, png_bytes):
        with pytest.raises(InvalidImageError):
            validate_image(png_bytes, "text/plain")

    def test_empty_rejected(self):
        with pytest.raises(InvalidImageError):
            validate_image(b"")

    def test_garbage_rejected(self):
        with pytest.raises(InvalidImageError):
            validate_image(b"definitely not an image", "image/png")

    def test_load_missing_file(self, tmp_path):
        with pytest.raises(InvalidImageError):
            load_image_file(tmp_path / "missing.png")

    def test_load_file(self, png_file, png_bytes):
        content = load_image_file(png_file)

        assert content.data == png_bytes
        assert content.mime_type == "image/png"
        assert content.origin == str(png_file)

    def test_load_text_file_rejected(self, tmp_path):
        path = tmp_path / "notes.txt"
        path.write_text("hello")

        with pytest.raises(InvalidImageError):
            load_image_file(path)


class TestDisplayResourcePool:
    """Tests for DisplayResourcePool."""

    def test_acquire_writes_file(self, pool, png_bytes):
        handle = pool.acquire(ImageContent(data=png_bytes, mime_type="image/png", origin="x"))

        assert handle.path.exists()
        assert handle.path.read_bytes() == png_bytes
        assert handle.path.suffix == ".png"
        assert pool.live_count == 1

    def test_release_deletes_file(self, pool, png_bytes):
        handle = pool.acquire(ImageContent(data=png_bytes, mime_type="image/png", origin="x"))
        pool.release(handle)

        assert not handle.path.exists()
        assert handle.released
        assert pool.live_count == 0

    def test_release_twice_is_noop(self, pool, png_bytes):
        handle = pool.acquire(ImageContent(data=png_bytes, mime_type="image/png", origin="x"))
        pool.release(handle)
        pool.release(handle)
        pool.release(None)

        assert pool.live_count == 0

    def test_close_releases_all(self, display_dir, png_bytes):
        pool = DisplayResourcePool(directory=display_dir)
        for _ in range(3):
            pool.acquire(ImageContent(data=png_bytes, mime_type="image/png", origin="x"))

        pool.close()

        assert pool.live_count == 0
        assert list(display_dir.iterdir()) == []


class TestImageEditOrchestrator:
    """Tests for ImageEditOrchestrator."""

    def test_starts_with_greeting_and_empty_slot(self, fake_client, pool):
        editor = ImageEditOrchestrator(fake_client, pool=pool)

        assert [m.text for m in editor.conversation.messages] == [IMAGE_GREETING]
        assert editor.slot.is_empty
        assert not editor.ready

    def test_upload(self, fake_client, pool, png_bytes):
        editor = ImageEditOrchestrator(fake_client, pool=pool)
        content = editor.upload_image(png_bytes, "image/png", "cat.png")

        assert editor.ready
        assert editor.slot.content == content
        assert editor.slot.handle.path.read_bytes() == png_bytes
        assert pool.live_count == 1

    def test_invalid_upload_keeps_previous_image(self, fake_client, pool, png_bytes):
        editor = ImageEditOrchestrator(fake_client, pool=pool)
        editor.upload_image(png_bytes, "image/png", "cat.png")

        with pytest.raises(InvalidImageError):
            editor.upload_image(b"%PDF-1.4", "application/pdf", "doc.pdf")

        assert editor.slot.content.origin == "cat.png"
        assert pool.live_count == 1

    def test_upload_replaces_and_releases(self, fake_client, pool, png_bytes):
        editor = ImageEditOrchestrator(fake_client, pool=pool)
        editor.upload_image(png_bytes, "image/png", "one.png")
        first = editor.slot.handle

        editor.upload_image(make_png("green"), "image/png", "two.png")

        assert not first.path.exists()
        assert pool.live_count == 1

    @pytest.mark.asyncio
    async def test_submit_without_image_ignored(self, fake_client, pool):
        editor = ImageEditOrchestrator(fake_client, pool=pool)

        assert not await editor.submit("make it blue")
        assert fake_client.edit_calls == []
        assert len(editor.conversation) == 1

    @pytest.mark.asyncio
    async def test_successful_edit_replaces_image(self, pool, png_bytes):
        client = FakeAIClient(edits=[_edit("blue", "  Made it blue.  ")])
        editor = ImageEditOrchestrator(client, model="img-model", pool=pool)
        editor.upload_image(png_bytes, "image/png", "cat.png")

        assert await editor.submit("make it blue")

        assert client.edit_calls == [(png_bytes, "image/png", "make it blue", "img-model")]
        assert editor.slot.content.data == make_png("blue")
        assert editor.slot.content.origin == "edit"
        assert editor.conversation.messages[-1].text == "Made it blue."
        assert editor.state is RequestState.IDLE

    @pytest.mark.asyncio
    async def test_edit_without_text_uses_default_reply(self, pool, png_bytes):
        editor = ImageEditOrchestrator(FakeAIClient(edits=[_edit("blue")]), pool=pool)
        editor.upload_image(png_bytes, "image/png", "cat.png")

        await editor.submit("blue please")

        assert editor.conversation.messages[-1].text == IMAGE_EDITED_TEXT

    @pytest.mark.asyncio
    async def test_sequential_edits_keep_one_live_handle(self, pool, display_dir, png_bytes):
        """Test that every replaced display resource is released."""
        colors = ["blue", "green", "yellow", "white", "black"]
        editor = ImageEditOrchestrator(FakeAIClient(edits=[_edit(c) for c in colors]), pool=pool)
        editor.upload_image(png_bytes, "image/png", "cat.png")

        for color in colors:
            await editor.submit(f"make it {color}")
            assert pool.live_count == 1

        assert len(list(display_dir.iterdir())) == 1
        assert editor.slot.content.data == make_png("black")

    @pytest.mark.asyncio
    async def test_rejected_edit_keeps_image(self, pool, png_bytes):
        client = FakeAIClient(edits=[ImageEditResult(image=None, text="I can't do that.", model="m")])
        editor = ImageEditOrchestrator(client, pool=pool)
        editor.upload_image(png_bytes, "image/png", "cat.png")
        handle = editor.slot.handle

        assert await editor.submit("do something odd")

        assert editor.conversation.messages[-1].text == IMAGE_REJECTED_TEXT
        assert editor.slot.handle is handle
        assert handle.path.exists()

    @pytest.mark.asyncio
    async def test_failed_edit(self, pool, png_bytes, debug_log):
        client = FakeAIClient(edits=[TimeoutError("slow")])
        editor = ImageEditOrchestrator(client, pool=pool)
        editor.set_debug_callback(debug_log)
        editor.upload_image(png_bytes, "image/png", "cat.png")

        assert await editor.submit("edit")

        assert len(editor.conversation) == 3
        assert editor.conversation.messages[-1].text == FAILURE_TEXT
        assert editor.slot.content.data == png_bytes
        assert editor.state is RequestState.IDLE
        assert any(level == "error" and component == "ImageEdit" for level, component, _ in debug_log.entries)

    @pytest.mark.asyncio
    async def test_upload_rejected_while_pending(self, pool, png_bytes):
        gate = asyncio.Event()
        editor = ImageEditOrchestrator(FakeAIClient(gate=gate), pool=pool)
        editor.upload_image(png_bytes, "image/png", "cat.png")

        task = asyncio.create_task(editor.submit("edit"))
        await asyncio.sleep(0)
        assert editor.is_pending

        with pytest.raises(RuntimeError):
            editor.upload_image(make_png("green"), "image/png", "other.png")
        assert not await editor.submit("second")
        assert not editor.reset()

        gate.set()
        await task
        assert pool.live_count == 1

    def test_reset_clears_image(self, fake_client, pool, png_bytes):
        editor = ImageEditOrchestrator(fake_client, pool=pool)
        editor.upload_image(png_bytes, "image/png", "cat.png")
        path = editor.slot.handle.path

        assert editor.reset()

        assert editor.slot.is_empty
        assert not path.exists()
        assert pool.live_count == 0
        assert [m.text for m in editor.conversation.messages] == [IMAGE_GREETING]

    def test_close_releases_everything(self, fake_client, display_dir, png_bytes):
        pool = DisplayResourcePool(directory=display_dir)
        editor = ImageEditOrchestrator(fake_client, pool=pool)
        editor.upload_image(png_bytes, "image/png", "cat.png")

        editor.close()

        assert pool.live_count == 0
        assert list(display_dir.iterdir()) == []

    def test_upload_file(self, fake_client, pool, png_file):
        editor = ImageEditOrchestrator(fake_client, pool=pool)
        content = editor.upload_file(png_file)

        assert content.origin == str(png_file)
        assert editor.ready
