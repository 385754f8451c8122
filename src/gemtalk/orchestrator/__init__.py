"""Request orchestration module for gemtalk.

Drives the single-flight request cycle for the chat and image-edit
front-ends and owns the state they render.
"""

from .base import RequestOrchestrator
from .chat import ChatOrchestrator
from .display import DisplayHandle, DisplayResourcePool
from .image import ImageEditOrchestrator, ImageSlot, load_image_file, validate_image
from .models import (
    FAILURE_TEXT,
    IMAGE_REJECTED_TEXT,
    INIT_ERROR_ID,
    INIT_ERROR_TEXT,
    ImageContent,
    InvalidImageError,
    RequestState,
)

__all__ = [
    "FAILURE_TEXT",
    "IMAGE_REJECTED_TEXT",
    "INIT_ERROR_ID",
    "INIT_ERROR_TEXT",
    "ChatOrchestrator",
    "DisplayHandle",
    "DisplayResourcePool",
    "ImageContent",
    "ImageEditOrchestrator",
    "ImageSlot",
    "InvalidImageError",
    "RequestOrchestrator",
    "RequestState",
    "load_image_file",
    "validate_image",
]
