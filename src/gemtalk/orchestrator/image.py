"""Image-edit variant of the request cycle.

Instead of a growing log of results there is a single current-image
slot. Each successful edit replaces the slot; the replaced display
encoding is released on the spot.
"""

import io
import mimetypes
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from ..conversation import Conversation, MessageIdGenerator, Sender
from ..llm import AIClient, ImageEditResult
from .base import RequestOrchestrator
from .display import DisplayHandle, DisplayResourcePool
from .models import (
    IMAGE_EDITED_TEXT,
    IMAGE_GREETING,
    IMAGE_REJECTED_TEXT,
    ImageContent,
    InvalidImageError,
)


def validate_image(data: bytes, mime_type: str | None = None) -> str:
    """Check that the bytes are an image Pillow can identify.

    Args:
        data: Raw file content
        mime_type: Declared MIME type, if known

    Returns:
        The MIME type to use for the image

    Raises:
        InvalidImageError: If the declared type is not image/* or the
            bytes are not a readable image
    """
    if mime_type is not None and not mime_type.startswith("image/"):
        raise InvalidImageError(f"Not an image file: {mime_type}")
    if not data:
        raise InvalidImageError("Image file is empty")

    try:
        with Image.open(io.BytesIO(data)) as img:
            image_format = img.format
            img.verify()
    except (UnidentifiedImageError, OSError, SyntaxError) as e:
        raise InvalidImageError(f"Unreadable image: {e}") from e

    return mime_type or Image.MIME.get(image_format or "", "image/png")


def load_image_file(path: str | Path) -> ImageContent:
    """Read and validate an image file from disk.

    Raises:
        InvalidImageError: If the file is missing or not an image
    """
    file_path = Path(path).expanduser()
    if not file_path.is_file():
        raise InvalidImageError(f"File not found: {file_path}")

    guessed, _ = mimetypes.guess_type(file_path.name)
    data = file_path.read_bytes()
    mime_type = validate_image(data, guessed)
    return ImageContent(data=data, mime_type=mime_type, origin=str(file_path))


class ImageSlot:
    """The single current image and its display encoding."""

    def __init__(self, pool: DisplayResourcePool) -> None:
        self._pool = pool
        self._content: ImageContent | None = None
        self._handle: DisplayHandle | None = None

    @property
    def content(self) -> ImageContent | None:
        return self._content

    @property
    def handle(self) -> DisplayHandle | None:
        return self._handle

    @property
    def is_empty(self) -> bool:
        return self._content is None

    def replace(self, content: ImageContent) -> DisplayHandle:
        """Swap in new content, releasing the previous display encoding."""
        handle = self._pool.acquire(content)
        previous = self._handle
        self._content = content
        self._handle = handle
        self._pool.release(previous)
        return handle

    def clear(self) -> None:
        self._pool.release(self._handle)
        self._content = None
        self._handle = None


class ImageEditOrchestrator(RequestOrchestrator):
    """Edit one image at a time with a hosted image model.

    Example:
        editor = ImageEditOrchestrator(client)
        editor.upload_image(png_bytes, "image/png", "cat.png")
        await editor.submit("Give the cat a hat")
        path = editor.slot.handle.path
    """

    component = "ImageEdit"

    def __init__(
        self,
        client: AIClient,
        model: str | None = None,
        pool: DisplayResourcePool | None = None,
        greeting: str = IMAGE_GREETING,
        id_generator: MessageIdGenerator | None = None,
    ) -> None:
        super().__init__(Conversation.initial(greeting), id_generator)
        self._client = client
        self._model = model
        self._pool = pool or DisplayResourcePool()
        self._slot = ImageSlot(self._pool)

    @property
    def ready(self) -> bool:
        return not self._slot.is_empty

    @property
    def slot(self) -> ImageSlot:
        return self._slot

    @property
    def pool(self) -> DisplayResourcePool:
        return self._pool

    def upload_image(self, data: bytes, mime_type: str | None, origin: str) -> ImageContent:
        """Load a new working image, replacing any current one.

        Raises:
            InvalidImageError: If the content is not an image
            RuntimeError: If a request is pending
        """
        if self.is_pending:
            raise RuntimeError("Cannot replace the image while an edit is pending")

        resolved = validate_image(data, mime_type)
        content = ImageContent(data=data, mime_type=resolved, origin=origin)
        self._slot.replace(content)
        self._debug("info", f"Image loaded from {origin} ({content.size} bytes, {resolved})")
        self._changed()
        return content

    def upload_file(self, path: str | Path) -> ImageContent:
        """Load a working image from disk."""
        content = load_image_file(path)
        return self.upload_image(content.data, content.mime_type, content.origin)

    def reset(self) -> bool:
        """Clear the image slot and the conversation.

        Ignored while a request is pending.

        Returns:
            True if the state was cleared
        """
        if self.is_pending:
            return False

        self._slot.clear()
        self._conversation = self._conversation.reset()
        self._debug("info", "Image and conversation cleared")
        self._changed()
        return True

    def close(self) -> None:
        """Release every display resource."""
        self._slot.clear()
        self._pool.close()

    async def _dispatch(self, text: str) -> ImageEditResult:
        content = self._slot.content
        assert content is not None
        return await self._client.generate_edit(
            content.data, content.mime_type, text, model=self._model
        )

    def _on_success(self, result: ImageEditResult) -> None:
        if result.rejected:
            self._debug("warning", f"No image returned: {result.text[:100]!r}")
            self._append(IMAGE_REJECTED_TEXT, Sender.BOT)
            return

        assert result.image is not None
        self._slot.replace(ImageContent(data=result.image, mime_type=result.mime_type, origin="edit"))
        self._debug("info", f"Edited image received ({len(result.image)} bytes)")
        self._append(result.text.strip() or IMAGE_EDITED_TEXT, Sender.BOT)
