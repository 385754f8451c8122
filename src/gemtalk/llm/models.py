from pydantic import BaseModel, ConfigDict, Field


class ChatMessage(BaseModel):
    """A prior conversation turn handed to a new session as history."""

    model_config = ConfigDict(frozen=True)

    role: str = Field(description="Role of the message sender: 'user' or 'model'")
    content: str = Field(description="Content of the message")


class ImageEditResult(BaseModel):
    """Result of an image edit request.

    The model may decline to produce an image and answer with text only;
    such a result is `rejected`.
    """

    model_config = ConfigDict(frozen=True)

    image: bytes | None = Field(default=None, description="Edited image bytes")
    mime_type: str = Field(default="image/png", description="MIME type of the edited image")
    text: str = Field(default="", description="Any text the model returned alongside")
    model: str = Field(description="Model that handled the edit")

    @property
    def rejected(self) -> bool:
        return not self.image
