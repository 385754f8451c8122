"""Display-backing resources for images.

Hidden design decisions:
- Terminal image widgets render from files, so the display encoding
  of an image is a temporary file
- File suffix derived from the MIME type
- Which handles are still live

Every acquired handle must be released when the image it backs is
replaced or cleared; `live_count` makes leaks observable.
"""

import mimetypes
import os
import tempfile
from dataclasses import dataclass, field
from itertools import count
from pathlib import Path

from .models import ImageContent

_handle_ids = count(1)


@dataclass(eq=False)
class DisplayHandle:
    """A live display encoding of an image."""

    path: Path
    mime_type: str
    handle_id: int = field(default_factory=lambda: next(_handle_ids))
    released: bool = False


class DisplayResourcePool:
    """Creates and releases display handles, tracking the live ones."""

    def __init__(self, directory: str | Path | None = None, prefix: str = "gemtalk-") -> None:
        self._directory = str(directory) if directory is not None else None
        self._prefix = prefix
        self._live: dict[int, DisplayHandle] = {}

    @property
    def live_count(self) -> int:
        return len(self._live)

    def acquire(self, content: ImageContent) -> DisplayHandle:
        """Write the image to a new temporary file and track it."""
        suffix = mimetypes.guess_extension(content.mime_type) or ".img"
        fd, name = tempfile.mkstemp(suffix=suffix, prefix=self._prefix, dir=self._directory)
        with os.fdopen(fd, "wb") as f:
            f.write(content.data)

        handle = DisplayHandle(path=Path(name), mime_type=content.mime_type)
        self._live[handle.handle_id] = handle
        return handle

    def release(self, handle: DisplayHandle | None) -> None:
        """Delete the handle's backing file. Releasing twice is a no-op."""
        if handle is None or handle.released:
            return
        handle.released = True
        self._live.pop(handle.handle_id, None)
        handle.path.unlink(missing_ok=True)

    def close(self) -> None:
        """Release every live handle."""
        for handle in list(self._live.values()):
            self.release(handle)
