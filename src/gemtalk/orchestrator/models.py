"""Data models and fixed user-facing texts for the request cycle."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

FAILURE_TEXT = "I'm sorry, but I encountered an error. Please try again."

INIT_ERROR_ID = "error-init"
INIT_ERROR_TEXT = (
    "Error: Could not initialize the AI model. "
    "Please check your API key configuration."
)

IMAGE_GREETING = "Upload an image and describe the edit you'd like me to make."
IMAGE_EDITED_TEXT = "Here is your edited image."
IMAGE_REJECTED_TEXT = (
    "The model did not return an edited image. Try rephrasing your request."
)


class RequestState(str, Enum):
    """State of the single-flight request cycle."""

    IDLE = "idle"
    PENDING = "pending"


class InvalidImageError(ValueError):
    """Raised when uploaded content is not a usable image."""


class ImageContent(BaseModel):
    """Image bytes together with where they came from."""

    model_config = ConfigDict(frozen=True)

    data: bytes = Field(repr=False)
    mime_type: str = Field(description="MIME type, e.g. image/png")
    origin: str = Field(description="Where the image came from: a path or 'edit'")

    @property
    def size(self) -> int:
        return len(self.data)
